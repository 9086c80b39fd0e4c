"""Collapse a handler outcome, possibly holding a pending task, against a deadline.

A ``Success`` may carry a ``concurrent.futures.Future`` or an awaitable.
Resolution blocks the invoking thread exactly once with a bounded wait:

- the task produces a value: ``Success(value)``
- the task raises: ``Failure(original exception)``
- the deadline passes first: ``typed_lambda.exceptions.TimeoutError``

A future that overruns the deadline is abandoned, not cancelled; its owner
is responsible for stopping it. An awaitable runs on a private event loop in
the invoking thread, so it is cancelled when that loop shuts down.
"""

import asyncio
import builtins
import concurrent.futures
import inspect
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from typed_lambda.exceptions.adapter_errors import ConfigurationError, TimeoutError
from typed_lambda.logging.logger import get_logger
from typed_lambda.outcome import Failure, Success
from typed_lambda.types import LambdaContext

logger = get_logger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class Deadline:
    """Point in monotonic time after which pending results are abandoned.

    Attributes:
        expires_at: Monotonic clock reading at which the deadline passes.
        budget_millis: Wait budget the deadline was computed from.
    """

    expires_at: float
    budget_millis: int

    @classmethod
    def after(cls, millis: int, *, clock: Clock = time.monotonic) -> "Deadline":
        """Create a deadline ``millis`` milliseconds from now."""
        budget = max(millis, 0)
        return cls(expires_at=clock() + budget / 1000, budget_millis=budget)

    @classmethod
    def from_context(
        cls,
        context: LambdaContext,
        *,
        margin_millis: int = 0,
        default_remaining_millis: int = 0,
        clock: Clock = time.monotonic,
    ) -> "Deadline":
        """Compute the deadline from the context's remaining execution time.

        Args:
            context: Invocation context.
            margin_millis: Time kept back for encoding and writing the response.
            default_remaining_millis: Used when the context does not report an
                integer remaining time.
            clock: Monotonic clock, replaceable in tests.

        Returns:
            The deadline for this invocation.
        """
        remaining = default_remaining_millis
        get_remaining = getattr(context, "get_remaining_time_in_millis", None)
        if callable(get_remaining):
            reported = get_remaining()
            if isinstance(reported, int) and not isinstance(reported, bool):
                remaining = reported
            else:
                logger.debug(
                    "Context reported non-integer remaining time, using default",
                    extra={"default_remaining_millis": default_remaining_millis},
                )
        return cls.after(remaining - margin_millis, clock=clock)

    def remaining_seconds(self, *, clock: Clock = time.monotonic) -> float:
        """Seconds left before the deadline, never negative."""
        return max(self.expires_at - clock(), 0.0)


def _timeout(deadline: Deadline) -> TimeoutError:
    return TimeoutError(
        f"Result was not ready within {deadline.budget_millis} ms",
        timeout_millis=deadline.budget_millis,
    )


def _join_future(future: concurrent.futures.Future[Any], deadline: Deadline) -> Success[Any] | Failure:
    # wait() never reports a future cancelled before it started running
    if not future.done():
        # wait() reports completion without raising, so a task that itself
        # raised TimeoutError is never mistaken for the deadline passing
        concurrent.futures.wait([future], timeout=deadline.remaining_seconds())
        if not future.done():
            raise _timeout(deadline)
    if future.cancelled():
        return Failure(concurrent.futures.CancelledError())
    error = future.exception()
    if error is not None:
        return Failure(error)
    return Success(future.result())


async def _await_within(awaitable: Awaitable[Any], seconds: float) -> tuple[bool, Any]:
    scope = asyncio.timeout(seconds)
    try:
        async with scope:
            return True, await awaitable
    except builtins.TimeoutError:
        if scope.expired():
            return False, None
        raise


def _join_awaitable(awaitable: Awaitable[Any], deadline: Deadline) -> Success[Any] | Failure:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise ConfigurationError("Awaitable results cannot be resolved from inside a running event loop")

    try:
        completed, value = asyncio.run(_await_within(awaitable, deadline.remaining_seconds()))
    except Exception as error:
        return Failure(error)
    if not completed:
        raise _timeout(deadline)
    return Success(value)


def resolve_outcome(outcome: Success[Any] | Failure, deadline: Deadline) -> Success[Any] | Failure:
    """Resolve a handler outcome to a terminal one.

    Args:
        outcome: Outcome returned by the handler.
        deadline: Deadline bounding the wait for a pending task.

    Returns:
        The outcome unchanged when it holds no pending task, otherwise the
        task's result as ``Success`` or ``Failure``.

    Raises:
        TimeoutError: If the task did not settle before the deadline.
        ConfigurationError: If an awaitable is returned while an event loop
            is already running in the invoking thread.
    """
    if isinstance(outcome, Failure):
        return outcome

    value = outcome.value
    if isinstance(value, concurrent.futures.Future):
        logger.debug("Waiting for future result", extra={"budget_millis": deadline.budget_millis})
        return _join_future(value, deadline)
    if inspect.isawaitable(value):
        logger.debug("Awaiting result", extra={"budget_millis": deadline.budget_millis})
        return _join_awaitable(value, deadline)
    return outcome
