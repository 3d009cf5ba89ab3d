import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, NamedTuple

log = logging.getLogger(__name__)


class QueryKey(NamedTuple):
    """Identifies one cached query.

    Attributes:
        resource (str): The route path the data was loaded from.
        resource_id (int | None): The resource id for single-item queries.

    """

    resource: str
    resource_id: int | None = None


@dataclass
class _CacheEntry:
    data: Any
    stale: bool = False


@dataclass
class QueryCache:
    """Keyed store of query results with explicit invalidation.

    An entry is fresh from the moment it is stored until `invalidate` marks it
    stale. Stale entries keep their data so callers can still peek at it, but
    the next `fetch` reloads.

    """

    _entries: dict[QueryKey, _CacheEntry] = field(default_factory=dict)

    def fetch(self, key: QueryKey, loader: Callable[[], Any]) -> Any:
        """Return fresh cached data for `key`, loading it when missing or stale.

        Args:
            key (QueryKey): The query to resolve.
            loader (Callable[[], Any]): Called with no arguments to load the data.

        Returns:
            Any: The cached or freshly loaded data.

        Notes:
            1. If the loader raises, the cache is left as it was.

        """
        entry = self._entries.get(key)
        if entry is not None and not entry.stale:
            _msg = f"Cache hit for {key}"
            log.debug(_msg)
            return entry.data

        _msg = f"Cache miss for {key}, loading"
        log.debug(_msg)
        data = loader()
        self.set_data(key, data)
        return data

    def get_data(self, key: QueryKey) -> Any:
        """Peek at the data stored for `key`, stale or not; None if absent."""
        entry = self._entries.get(key)
        return entry.data if entry is not None else None

    def set_data(self, key: QueryKey, data: Any) -> None:
        self._entries[key] = _CacheEntry(data=data)

    def invalidate(self, key: QueryKey) -> None:
        """Mark `key` stale so the next fetch reloads it. Unknown keys are ignored."""
        entry = self._entries.get(key)
        if entry is None:
            return
        entry.stale = True
        _msg = f"Invalidated cache entry {key}"
        log.debug(_msg)

    def is_stale(self, key: QueryKey) -> bool:
        """True when `key` must be reloaded, including when it was never loaded."""
        entry = self._entries.get(key)
        return entry is None or entry.stale
