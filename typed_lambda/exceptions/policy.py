"""Failure visibility policy for the dispatch core.

Failures raised by handler code are logged before propagating because the
author did not surface them on purpose. Failures the handler returned as a
``Failure`` outcome are propagated silently. Adapter-originated failures
(decode, timeout, encode, invalid outcome) are always logged once.
"""

import logging
from enum import StrEnum

from typed_lambda.exceptions.base import LambdaAdapterError


class FailureOrigin(StrEnum):
    """Where a failure came from during one invocation."""

    HANDLER_RAISED = "handler_raised"
    HANDLER_RETURNED = "handler_returned"
    TASK_FAILED = "task_failed"
    DECODE = "decode"
    TIMEOUT = "timeout"
    ENCODE = "encode"
    INVALID_OUTCOME = "invalid_outcome"


_SILENT_ORIGINS: frozenset[FailureOrigin] = frozenset(
    {
        FailureOrigin.HANDLER_RETURNED,
        FailureOrigin.TASK_FAILED,
    }
)


def should_log(origin: FailureOrigin) -> bool:
    """Return whether a failure of the given origin gets an error log entry."""
    return origin not in _SILENT_ORIGINS


def report_failure(
    logger: logging.Logger,
    origin: FailureOrigin,
    error: BaseException,
) -> None:
    """Emit at most one error-severity entry for a failure.

    Args:
        logger: Logger injected into the dispatch core.
        origin: Failure origin deciding whether anything is logged.
        error: The failure about to be propagated.
    """
    if not should_log(origin):
        return

    extra: dict[str, object] = {"failure_origin": origin.value}
    if isinstance(error, LambdaAdapterError):
        # "message" is reserved on LogRecord
        log_dict = error.to_log_dict()
        extra["error_code"] = log_dict["error_code"]
        extra["error_context"] = log_dict["context"]
        extra["exception_type"] = log_dict["exception_type"]
        logger.error("Invocation failed: %s", error, extra=extra)
        return

    extra["exception_type"] = type(error).__name__
    logger.error(
        "Handler raised %s: %s",
        type(error).__name__,
        error,
        exc_info=error,
        extra=extra,
    )
