"""Type definitions for the raw Lambda entry contract."""

from typing import Protocol


class LambdaContext(Protocol):
    """AWS Lambda context object interface.

    Only ``get_remaining_time_in_millis`` and ``function_name`` are read by
    the dispatch core; the other attributes feed the logging context when
    present.
    """

    function_name: str
    function_version: str
    aws_request_id: str

    def get_remaining_time_in_millis(self) -> int:
        """Return remaining execution time in milliseconds."""
        ...


class ReadableStream(Protocol):
    """Binary source holding one serialized request."""

    def read(self, size: int = -1, /) -> bytes:
        """Read up to ``size`` bytes, or everything when negative."""
        ...


class WritableStream(Protocol):
    """Binary sink receiving one serialized response."""

    def write(self, data: bytes, /) -> int:
        """Write ``data`` and return the number of bytes written."""
        ...


# Decoded JSON before it reaches a codec
JSONValue = dict[str, object] | list[object] | str | int | float | bool | None
