import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

log = logging.getLogger(__name__)


class ResponseDecodeError(Exception):
    """Raised when a server response does not match the expected shape."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


def decode_strict(model: Any, data: Any) -> Any:
    """
    Decode response data into `model`, failing on any mismatch.

    Args:
        model (Any): A pydantic model class or any type a `TypeAdapter` accepts,
            such as `list[ResumeResponse]`.
        data (Any): The decoded JSON body.

    Returns:
        Any: The validated value.

    Raises:
        ResponseDecodeError: If `data` does not validate against `model`.

    """
    try:
        return TypeAdapter(model).validate_python(data)
    except ValidationError as e:
        raise ResponseDecodeError(
            f"Response did not match {model}: {e.error_count()} error(s)",
            errors=e.errors(include_url=False),
        ) from e


def decode_best_effort(model: Any, data: Any) -> Any:
    """
    Decode response data into `model`, passing it through raw on mismatch.

    Args:
        model (Any): A pydantic model class or any type a `TypeAdapter` accepts.
        data (Any): The decoded JSON body.

    Returns:
        Any: The validated value, or `data` unchanged if validation failed.

    Notes:
        1. The validation failure is logged, never raised.

    """
    try:
        return decode_strict(model, data)
    except ResponseDecodeError as e:
        _msg = f"Passing through undecodable response: {e}"
        log.error(_msg)
        return data
