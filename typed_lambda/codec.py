"""Codecs turning request bytes into typed values and typed values into bytes.

A codec is chosen once, when a handler is constructed, from the declared
input or output type:

    - ``str``: TextCodec, raw bytes without JSON quoting
    - ``None``: NoneCodec, accepts anything and writes null
    - ``int``, ``float``, ``bool``: ScalarCodec, strict JSON scalars
    - pydantic models, dataclasses, TypedDicts: RecordCodec, JSON objects
    - ``list[T]``, ``tuple[T, ...]``, ``Sequence[T]``: SequenceCodec of ``codec_for(T)``
    - ``T | None``: OptionalCodec of ``codec_for(T)``

Every codec works on two levels. ``decode``/``encode`` handle the complete
payload; ``decode_value``/``encode_value`` handle an already parsed JSON
value so container codecs can delegate to their element codec. Only the
text codec behaves differently on the two levels: a top-level string is
raw text, a nested one is a JSON string.
"""

import dataclasses
import json
import types
import typing
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, get_args, get_origin, is_typeddict

from pydantic import BaseModel, PydanticUserError, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from typed_lambda.exceptions.adapter_errors import ConfigurationError, DecodeError, EncodeError
from typed_lambda.types import JSONValue

NULL_LITERAL = b"null"

_SCALAR_TYPES: tuple[type, ...] = (bool, int, float)
_SEQUENCE_ORIGINS: frozenset[Any] = frozenset({list, tuple, Sequence})


def _reject_constant(literal: str) -> float:
    error_message = f"{literal} is not a JSON value"
    raise ValueError(error_message)


def _parse_json(data: bytes, target: str) -> JSONValue:
    try:
        return json.loads(data, parse_constant=_reject_constant)
    except ValueError as error:
        raise DecodeError(f"Input is not valid JSON for {target}: {error}", target=target) from error


def _dump_json(value: JSONValue, target: str) -> bytes:
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as error:
        raise EncodeError(f"Cannot serialize {target}: {error}", target=target) from error
    return text.encode("utf-8")


class Codec[T](ABC):
    """Decode/encode capability for one declared type."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable name of the handled type, used in error messages."""

    @abstractmethod
    def decode_value(self, value: Any) -> T:
        """Convert a parsed JSON value into ``T``.

        Raises:
            DecodeError: If the value does not match the declared type.
        """

    @abstractmethod
    def encode_value(self, value: T) -> Any:
        """Convert ``T`` into a JSON-serializable value.

        Raises:
            EncodeError: If the value cannot be represented.
        """

    def decode(self, data: bytes) -> T:
        """Decode a complete payload."""
        return self.decode_value(_parse_json(data, self.name))

    def encode(self, value: T) -> bytes:
        """Encode a complete payload as compact JSON."""
        return _dump_json(self.encode_value(value), self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"


class TextCodec(Codec[str]):
    """Raw text payloads, copied without JSON quoting."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    @property
    def name(self) -> str:
        return "str"

    def decode(self, data: bytes) -> str:
        try:
            return data.decode(self._encoding)
        except UnicodeDecodeError as error:
            raise DecodeError(
                f"Input is not valid {self._encoding} text: {error}",
                target=self.name,
            ) from error

    def encode(self, value: str) -> bytes:
        if not isinstance(value, str):
            raise EncodeError(f"Expected str, got {type(value).__name__}", target=self.name)
        try:
            return value.encode(self._encoding)
        except UnicodeEncodeError as error:
            raise EncodeError(f"Cannot encode text as {self._encoding}: {error}", target=self.name) from error

    def decode_value(self, value: Any) -> str:
        if not isinstance(value, str):
            raise DecodeError(f"Expected JSON string, got {type(value).__name__}", target=self.name)
        return value

    def encode_value(self, value: str) -> Any:
        if not isinstance(value, str):
            raise EncodeError(f"Expected str, got {type(value).__name__}", target=self.name)
        return value


class NoneCodec(Codec[None]):
    """Absent input or output: any payload decodes to None, None encodes to null."""

    @property
    def name(self) -> str:
        return "None"

    def decode(self, data: bytes) -> None:
        return None

    def encode(self, value: None) -> bytes:
        self.encode_value(value)
        return NULL_LITERAL

    def decode_value(self, value: Any) -> None:
        return None

    def encode_value(self, value: None) -> Any:
        if value is not None:
            raise EncodeError(f"Expected None, got {type(value).__name__}", target=self.name)
        return None


class ScalarCodec[T](Codec[T]):
    """JSON numbers and booleans, validated strictly so ``"1"`` is not an int."""

    def __init__(self, scalar_type: type[T]) -> None:
        if scalar_type not in _SCALAR_TYPES:
            raise ConfigurationError(f"{scalar_type!r} is not a supported scalar type")
        self._type = scalar_type
        self._adapter: TypeAdapter[T] = TypeAdapter(scalar_type)

    @property
    def name(self) -> str:
        return self._type.__name__

    def decode_value(self, value: Any) -> T:
        try:
            return self._adapter.validate_python(value, strict=True)
        except PydanticValidationError as error:
            raise DecodeError(
                f"Expected JSON {self.name}, got {type(value).__name__}",
                target=self.name,
            ) from error

    def encode_value(self, value: T) -> Any:
        accepted = (int, float) if self._type is float else (self._type,)
        # bool is an int subclass; only accept it where bool was declared
        if not isinstance(value, accepted) or (isinstance(value, bool) and self._type is not bool):
            raise EncodeError(f"Expected {self.name}, got {type(value).__name__}", target=self.name)
        return value


class RecordCodec[T](Codec[T]):
    """Structured records validated and serialized by pydantic.

    Accepts pydantic models, dataclasses and TypedDicts. Fields are written in
    declaration order using their aliases, so a model declared with a camel
    case alias generator reads and writes camel case keys.
    """

    def __init__(self, record_type: type[T]) -> None:
        self._type = record_type
        try:
            self._adapter: TypeAdapter[T] = TypeAdapter(record_type)
        except PydanticUserError as error:
            raise ConfigurationError(
                f"Cannot build a record codec for {record_type!r}: {error}",
                context={"declared": repr(record_type)},
            ) from error
        self._check_instance = not is_typeddict(record_type)

    @property
    def name(self) -> str:
        return getattr(self._type, "__name__", repr(self._type))

    def decode_value(self, value: Any) -> T:
        if not isinstance(value, dict):
            raise DecodeError(f"Expected JSON object for {self.name}, got {type(value).__name__}", target=self.name)
        try:
            # strict JSON mode: no "5" for int, ISO strings still accepted for dates
            return self._adapter.validate_json(json.dumps(value), strict=True)
        except PydanticValidationError as error:
            details = [
                {"loc": ".".join(str(part) for part in item["loc"]), "msg": item["msg"], "type": item["type"]}
                for item in error.errors(include_url=False)
            ]
            raise DecodeError(
                f"Invalid {self.name}: {error.error_count()} validation error(s)",
                target=self.name,
                context={"errors": details},
            ) from error

    def encode_value(self, value: T) -> Any:
        if self._check_instance and not isinstance(value, self._type):
            raise EncodeError(f"Expected {self.name}, got {type(value).__name__}", target=self.name)
        try:
            return self._adapter.dump_python(value, mode="json", by_alias=True, warnings="error")
        except PydanticSerializationError as error:
            raise EncodeError(f"Cannot serialize {self.name}: {error}", target=self.name) from error


class SequenceCodec[T](Codec[Sequence[T]]):
    """JSON arrays whose elements share one codec; decoding is all-or-nothing."""

    def __init__(self, element: Codec[T], container: type = list) -> None:
        self._element = element
        self._container = container

    @property
    def name(self) -> str:
        return f"{self._container.__name__}[{self._element.name}]"

    def decode_value(self, value: Any) -> Sequence[T]:
        if not isinstance(value, list):
            raise DecodeError(f"Expected JSON array for {self.name}, got {type(value).__name__}", target=self.name)
        items: list[T] = []
        for index, item in enumerate(value):
            try:
                items.append(self._element.decode_value(item))
            except DecodeError as error:
                raise DecodeError(
                    f"Element {index} of {self.name}: {error.message}",
                    target=self.name,
                    path=f"[{index}]",
                    context={"element_error": error.to_dict()},
                ) from error
        return self._container(items)

    def encode_value(self, value: Sequence[T]) -> Any:
        if isinstance(value, str | bytes) or not isinstance(value, Sequence):
            raise EncodeError(f"Expected a sequence for {self.name}, got {type(value).__name__}", target=self.name)
        return [self._element.encode_value(item) for item in value]


class OptionalCodec[T](Codec[T | None]):
    """The null literal maps to None; anything else goes to the inner codec."""

    def __init__(self, inner: Codec[T]) -> None:
        self._inner = inner

    @property
    def name(self) -> str:
        return f"{self._inner.name} | None"

    def decode(self, data: bytes) -> T | None:
        if data.strip() == NULL_LITERAL:
            return None
        return self._inner.decode(data)

    def encode(self, value: T | None) -> bytes:
        if value is None:
            return NULL_LITERAL
        return self._inner.encode(value)

    def decode_value(self, value: Any) -> T | None:
        if value is None:
            return None
        return self._inner.decode_value(value)

    def encode_value(self, value: T | None) -> Any:
        if value is None:
            return None
        return self._inner.encode_value(value)


def _is_record_type(declared: Any) -> bool:
    if is_typeddict(declared):
        return True
    if not isinstance(declared, type):
        return False
    return issubclass(declared, BaseModel) or dataclasses.is_dataclass(declared)


def codec_for(declared: Any, *, text_encoding: str = "utf-8") -> Codec[Any]:
    """Build the codec for a declared handler input or output type.

    Args:
        declared: A type expression, or a ready ``Codec`` which is returned as is.
        text_encoding: Encoding used for raw text payloads.

    Returns:
        The codec, composed from element codecs for containers.

    Raises:
        ConfigurationError: If the type is not one of the supported shapes.
    """
    if isinstance(declared, Codec):
        return declared
    if declared is None or declared is type(None):
        return NoneCodec()
    if declared is str:
        return TextCodec(text_encoding)
    if declared in _SCALAR_TYPES:
        return ScalarCodec(declared)

    origin = get_origin(declared)
    arguments = get_args(declared)

    if origin is None and _is_record_type(declared):
        return RecordCodec(declared)

    if origin is typing.Union or origin is types.UnionType:
        present = [argument for argument in arguments if argument is not type(None)]
        if len(present) != 1 or len(present) == len(arguments):
            raise ConfigurationError(
                f"Only optional unions (T | None) are supported, got {declared!r}",
                context={"declared": repr(declared)},
            )
        return OptionalCodec(codec_for(present[0], text_encoding=text_encoding))

    if origin in _SEQUENCE_ORIGINS:
        if origin is tuple:
            if len(arguments) != 2 or arguments[1] is not Ellipsis:
                raise ConfigurationError(
                    f"Only homogeneous tuples (tuple[T, ...]) are supported, got {declared!r}",
                    context={"declared": repr(declared)},
                )
            return SequenceCodec(codec_for(arguments[0], text_encoding=text_encoding), container=tuple)
        return SequenceCodec(codec_for(arguments[0], text_encoding=text_encoding))

    raise ConfigurationError(
        f"No codec for declared type {declared!r}",
        context={"declared": repr(declared)},
    )
