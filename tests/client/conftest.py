import pytest

from resume_builder.client.notifications import Notifier
from resume_builder.client.query_cache import QueryCache
from resume_builder.client.resume_hooks import ResumeHooks


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def hooks(auth_client, cache, notifier) -> ResumeHooks:
    """Hooks talking to the real app as `test_user`."""
    return ResumeHooks(auth_client, cache, notifier)


@pytest.fixture
def anonymous_hooks(client, cache, notifier) -> ResumeHooks:
    return ResumeHooks(client, cache, notifier)
