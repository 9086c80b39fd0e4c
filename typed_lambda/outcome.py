"""Success/failure result of one handler invocation.

Handlers report their result as an ``Outcome``:

    def handle(ping: Ping) -> Outcome[Pong]:
        if not ping.input_msg:
            return failure(ValueError("empty message"))
        return success(Pong(output_msg=ping.input_msg[::-1]))

The success value may be a pending task (``concurrent.futures.Future`` or
an awaitable); the dispatch core resolves it before encoding.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Success[T]:
    """Handler produced a value."""

    value: T

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Handler reported an error without raising it."""

    error: BaseException

    @property
    def is_success(self) -> bool:
        return False

    def __post_init__(self) -> None:
        if not isinstance(self.error, BaseException):
            error_message = f"Failure requires an exception, got {type(self.error).__name__}"
            raise TypeError(error_message)


type Outcome[T] = Success[T] | Failure


def success[T](value: T) -> Success[T]:
    """Wrap a value as a successful outcome."""
    return Success(value)


def failure(error: BaseException) -> Failure:
    """Wrap an error as a failed outcome."""
    return Failure(error)


def attempt[T](func: Callable[..., T], *args: Any, **kwargs: Any) -> Success[T] | Failure:
    """Call ``func`` and capture a raised ``Exception`` as a ``Failure``.

    Args:
        func: Callable producing the success value.
        *args: Positional arguments for ``func``.
        **kwargs: Keyword arguments for ``func``.

    Returns:
        ``Success`` with the return value, or ``Failure`` with the exception.
    """
    try:
        return Success(func(*args, **kwargs))
    except Exception as error:
        return Failure(error)


def is_outcome(value: object) -> bool:
    """Return whether ``value`` is a ``Success`` or a ``Failure``."""
    return isinstance(value, Success | Failure)
