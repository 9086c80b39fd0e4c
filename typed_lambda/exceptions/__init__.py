"""Typed Lambda adapter exception hierarchy.

Architecture:
    LambdaAdapterError (base)
    ├── DecodeError
    ├── EncodeError
    ├── TimeoutError
    ├── ConfigurationError
    └── InvalidOutcomeError

Errors raised or returned by handler code are not part of this hierarchy;
they propagate unchanged. ``report_failure`` decides which failures are
logged on the way out.

Usage:
    from typed_lambda.exceptions import DecodeError

    try:
        handler.handle(input_stream, output_stream, context)
    except DecodeError as error:
        print(error.to_dict())
"""

from typed_lambda.exceptions.adapter_errors import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    InvalidOutcomeError,
    TimeoutError,
)
from typed_lambda.exceptions.base import LambdaAdapterError
from typed_lambda.exceptions.policy import FailureOrigin, report_failure, should_log

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "FailureOrigin",
    "InvalidOutcomeError",
    "LambdaAdapterError",
    "TimeoutError",
    "report_failure",
    "should_log",
]
