"""Typed handlers for the raw byte-stream AWS Lambda entry contract.

Usage:
    from pydantic import BaseModel

    from typed_lambda import Outcome, lambda_handler, success

    class Ping(BaseModel):
        inputMsg: str

    class Pong(BaseModel):
        outputMsg: str

    @lambda_handler(Ping, Pong)
    def handler(ping: Ping) -> Outcome[Pong]:
        return success(Pong(outputMsg=ping.inputMsg[::-1]))
"""

from typed_lambda.codec import (
    Codec,
    NoneCodec,
    OptionalCodec,
    RecordCodec,
    ScalarCodec,
    SequenceCodec,
    TextCodec,
    codec_for,
)
from typed_lambda.config import AdapterSettings, get_settings
from typed_lambda.dispatch import HandlerShape, InputOnly, Lambda, WithContext, lambda_handler
from typed_lambda.outcome import Failure, Outcome, Success, attempt, failure, success
from typed_lambda.resolution import Deadline, resolve_outcome
from typed_lambda.types import LambdaContext

__all__ = [
    "AdapterSettings",
    "Codec",
    "Deadline",
    "Failure",
    "HandlerShape",
    "InputOnly",
    "Lambda",
    "LambdaContext",
    "NoneCodec",
    "OptionalCodec",
    "Outcome",
    "RecordCodec",
    "ScalarCodec",
    "SequenceCodec",
    "Success",
    "TextCodec",
    "WithContext",
    "attempt",
    "codec_for",
    "failure",
    "get_settings",
    "lambda_handler",
    "resolve_outcome",
    "success",
]
