"""Errors produced by the adapter while decoding, resolving or encoding."""

from typing import Any, ClassVar

from typed_lambda.exceptions.base import LambdaAdapterError


class DecodeError(LambdaAdapterError):
    """Input bytes are malformed or do not match the declared input type."""

    error_code: ClassVar[str] = "DECODE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        target: str | None = None,
        path: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize decode error with optional location info.

        Args:
            message: Description of the decode failure.
            target: Name of the type that was being decoded.
            path: Location inside the payload, e.g. ``[3]`` for a sequence element.
            context: Additional context information.
        """
        context_dict = context or {}
        if target is not None:
            context_dict["target"] = target
        if path is not None:
            context_dict["path"] = path
        super().__init__(message, context=context_dict)


class EncodeError(LambdaAdapterError):
    """Handler output could not be serialized."""

    error_code: ClassVar[str] = "ENCODE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        target: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize encode error.

        Args:
            message: Description of the encode failure.
            target: Name of the type that was being encoded.
            context: Additional context information.
        """
        context_dict = context or {}
        if target is not None:
            context_dict["target"] = target
        super().__init__(message, context=context_dict)


class TimeoutError(LambdaAdapterError):
    """Asynchronous result did not settle before the invocation deadline."""

    error_code: ClassVar[str] = "TIMEOUT"

    def __init__(
        self,
        message: str,
        *,
        timeout_millis: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize timeout error.

        Args:
            message: Description of the timeout.
            timeout_millis: Wait budget that was exhausted.
            context: Additional context information.
        """
        context_dict = context or {}
        if timeout_millis is not None:
            context_dict["timeout_millis"] = timeout_millis
        super().__init__(message, context=context_dict)


class ConfigurationError(LambdaAdapterError):
    """Adapter construction or settings are invalid."""

    error_code: ClassVar[str] = "CONFIGURATION_ERROR"


class InvalidOutcomeError(LambdaAdapterError):
    """Handler returned something other than a Success or Failure."""

    error_code: ClassVar[str] = "INVALID_OUTCOME"
