"""Dispatch core: decode, invoke, resolve, encode, write.

Usage:
    from typed_lambda import Outcome, lambda_handler, success

    @lambda_handler(Ping, Pong)
    def handler(ping: Ping) -> Outcome[Pong]:
        return success(Pong(output_msg=ping.input_msg[::-1]))

    # host runtime entry point
    handler.handle(input_stream, output_stream, context)
"""

import io
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from typed_lambda.codec import Codec, codec_for
from typed_lambda.config import AdapterSettings, get_settings
from typed_lambda.exceptions.adapter_errors import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    InvalidOutcomeError,
    TimeoutError,
)
from typed_lambda.exceptions.base import LambdaAdapterError
from typed_lambda.exceptions.policy import FailureOrigin, report_failure
from typed_lambda.logging.adapters.lambda_adapter import bind_lambda_context
from typed_lambda.logging.context import invocation_scope
from typed_lambda.logging.logger import get_logger
from typed_lambda.outcome import Failure, Outcome, Success, is_outcome
from typed_lambda.resolution import Deadline, resolve_outcome
from typed_lambda.types import LambdaContext, ReadableStream, WritableStream


@dataclass(frozen=True)
class InputOnly[I, O]:
    """Handler called with the decoded input only."""

    function: Callable[[I], Outcome[O]]

    def invoke(self, value: I, context: LambdaContext) -> Any:
        return self.function(value)


@dataclass(frozen=True)
class WithContext[I, O]:
    """Handler called with the decoded input and the invocation context."""

    function: Callable[[I, LambdaContext], Outcome[O]]

    def invoke(self, value: I, context: LambdaContext) -> Any:
        return self.function(value, context)


type HandlerShape[I, O] = InputOnly[I, O] | WithContext[I, O]


class Lambda[I, O]:
    """Typed handler bound to the raw ``(input, output, context)`` entry contract.

    Codecs, call shape, logger and settings are fixed at construction, so one
    instance can serve any number of sequential invocations.
    """

    def __init__(
        self,
        shape: HandlerShape[I, O],
        input_codec: Codec[I],
        output_codec: Codec[O],
        *,
        logger: logging.Logger | None = None,
        settings: AdapterSettings | None = None,
    ) -> None:
        """Bind a handler to its codecs.

        Args:
            shape: ``InputOnly`` or ``WithContext`` wrapping the handler function.
            input_codec: Codec for the request payload.
            output_codec: Codec for the response payload.
            logger: Logger receiving failure reports. Defaults to this module's logger.
            settings: Adapter settings. Loaded from the environment if not provided.

        Raises:
            ConfigurationError: If ``shape`` is not a known handler shape.
        """
        if not isinstance(shape, InputOnly | WithContext):
            raise ConfigurationError(
                f"Handler shape must be InputOnly or WithContext, got {type(shape).__name__}"
            )
        self._shape = shape
        self._input_codec = input_codec
        self._output_codec = output_codec
        self._logger = logger or get_logger(__name__)
        self._settings = settings or get_settings()

    @classmethod
    def instance(
        cls,
        function: Callable[..., Outcome[O]],
        input_type: Any,
        output_type: Any,
        *,
        with_context: bool = False,
        logger: logging.Logger | None = None,
        settings: AdapterSettings | None = None,
    ) -> "Lambda[I, O]":
        """Build a handler from a function and its declared types.

        Args:
            function: ``(input) -> Outcome`` or, with ``with_context``,
                ``(input, context) -> Outcome``.
            input_type: Declared input type or an explicit ``Codec``.
            output_type: Declared output type or an explicit ``Codec``.
            with_context: Whether the function takes the invocation context.
            logger: Logger receiving failure reports.
            settings: Adapter settings.

        Returns:
            The bound handler.

        Raises:
            ConfigurationError: If a declared type has no codec.
        """
        settings = settings or get_settings()
        shape: HandlerShape[I, O] = WithContext(function) if with_context else InputOnly(function)
        return cls(
            shape,
            codec_for(input_type, text_encoding=settings.text_encoding),
            codec_for(output_type, text_encoding=settings.text_encoding),
            logger=logger,
            settings=settings,
        )

    @property
    def function(self) -> Callable[..., Outcome[O]]:
        """The wrapped handler function, for calling it directly."""
        return self._shape.function

    @property
    def accepts_context(self) -> bool:
        return isinstance(self._shape, WithContext)

    def handle(
        self,
        input_stream: ReadableStream,
        output_stream: WritableStream,
        context: LambdaContext,
    ) -> None:
        """Run one invocation.

        Reads the whole request, calls the handler and writes the encoded
        result in a single write. Nothing is written when any step fails.

        Args:
            input_stream: Binary source with the serialized request.
            output_stream: Binary sink for the serialized response.
            context: Invocation context supplied by the host runtime.

        Raises:
            DecodeError: If the request does not match the input type.
            TimeoutError: If an asynchronous result missed the deadline.
            EncodeError: If the result cannot be serialized.
            InvalidOutcomeError: If the handler did not return an Outcome.
            Exception: Whatever the handler raised or returned as a Failure.
        """
        with invocation_scope():
            bind_lambda_context(context)
            payload = self._process(input_stream.read(), context)
            output_stream.write(payload)
            flush = getattr(output_stream, "flush", None)
            if callable(flush):
                flush()
            self._logger.debug("Response written", extra={"response_bytes": len(payload)})

    def __call__(
        self,
        input_stream: ReadableStream,
        output_stream: WritableStream,
        context: LambdaContext,
    ) -> None:
        self.handle(input_stream, output_stream, context)

    def invoke_bytes(self, data: bytes, context: LambdaContext) -> bytes:
        """Run one invocation on in-memory bytes and return the response bytes."""
        output = io.BytesIO()
        self.handle(io.BytesIO(data), output, context)
        return output.getvalue()

    def _process(self, data: bytes, context: LambdaContext) -> bytes:
        try:
            value = self._input_codec.decode(data)
        except DecodeError as error:
            report_failure(self._logger, FailureOrigin.DECODE, error)
            raise
        self._logger.debug(
            "Decoded input",
            extra={"input_type": self._input_codec.name, "request_bytes": len(data)},
        )

        deadline = Deadline.from_context(
            context,
            margin_millis=self._settings.timeout_margin_millis,
            default_remaining_millis=self._settings.default_remaining_time_millis,
        )

        try:
            returned = self._shape.invoke(value, context)
        except Exception as error:
            report_failure(self._logger, FailureOrigin.HANDLER_RAISED, error)
            raise

        if not is_outcome(returned):
            invalid = InvalidOutcomeError(
                f"Handler must return Success or Failure, got {type(returned).__name__}",
                context={"returned_type": type(returned).__name__},
            )
            report_failure(self._logger, FailureOrigin.INVALID_OUTCOME, invalid)
            raise invalid

        try:
            outcome = resolve_outcome(returned, deadline)
        except TimeoutError as error:
            report_failure(self._logger, FailureOrigin.TIMEOUT, error)
            raise
        except LambdaAdapterError as error:
            report_failure(self._logger, FailureOrigin.INVALID_OUTCOME, error)
            raise

        if isinstance(outcome, Failure):
            origin = FailureOrigin.HANDLER_RETURNED if outcome is returned else FailureOrigin.TASK_FAILED
            report_failure(self._logger, origin, outcome.error)
            raise outcome.error

        return self._encode(outcome)

    def _encode(self, outcome: Success[Any]) -> bytes:
        try:
            payload = self._output_codec.encode(outcome.value)
        except EncodeError as error:
            report_failure(self._logger, FailureOrigin.ENCODE, error)
            raise
        self._logger.debug("Encoded output", extra={"output_type": self._output_codec.name})
        return payload

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"shape={type(self._shape).__name__}, "
            f"input={self._input_codec.name}, "
            f"output={self._output_codec.name})"
        )


def lambda_handler(
    input_type: Any,
    output_type: Any,
    *,
    with_context: bool = False,
    logger: logging.Logger | None = None,
    settings: AdapterSettings | None = None,
) -> Callable[[Callable[..., Any]], Lambda[Any, Any]]:
    """Decorator turning a typed function into a ``Lambda``.

    Args:
        input_type: Declared input type or an explicit ``Codec``.
        output_type: Declared output type or an explicit ``Codec``.
        with_context: Whether the function takes the invocation context.
        logger: Logger receiving failure reports.
        settings: Adapter settings.

    Returns:
        Decorator producing the bound handler.
    """

    def decorate(function: Callable[..., Any]) -> Lambda[Any, Any]:
        return Lambda.instance(
            function,
            input_type,
            output_type,
            with_context=with_context,
            logger=logger,
            settings=settings,
        )

    return decorate
