"""Context variables for invocation-scoped logging data.

Uses Python's contextvars so values set while handling one invocation do
not leak into threads or tasks started outside it.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

_extra_context: ContextVar[dict[str, Any] | None] = ContextVar("extra_context", default=None)


def get_correlation_id() -> str:
    """Get the correlation ID of the current invocation."""
    return correlation_id.get()


def set_correlation_id(value: str) -> None:
    """Set the correlation ID for the current context.

    Args:
        value: The correlation ID, usually the Lambda request ID.
    """
    correlation_id.set(value)


def get_extra_context() -> dict[str, Any]:
    """Get a copy of the extra fields attached to every log line."""
    context = _extra_context.get()
    if context is None:
        return {}
    return context.copy()


def set_extra_context(**kwargs: Any) -> None:
    """Add fields to include in all log messages of the current context.

    Args:
        **kwargs: Key-value pairs to include in log messages.
    """
    current = _extra_context.get()
    current = {} if current is None else current.copy()
    current.update(kwargs)
    _extra_context.set(current)


def clear_context() -> None:
    """Clear all context (correlation ID and extra context)."""
    correlation_id.set("")
    _extra_context.set(None)


@contextmanager
def invocation_scope() -> Iterator[None]:
    """Restore the logging context that was active before one invocation."""
    correlation_token = correlation_id.set(correlation_id.get())
    extra_token = _extra_context.set(_extra_context.get())
    try:
        yield
    finally:
        _extra_context.reset(extra_token)
        correlation_id.reset(correlation_token)
