"""Tests for codec selection and the built-in codecs."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Optional, TypedDict

import pytest
from pydantic import BaseModel

from typed_lambda.codec import (
    NULL_LITERAL,
    NoneCodec,
    OptionalCodec,
    RecordCodec,
    ScalarCodec,
    SequenceCodec,
    TextCodec,
    codec_for,
)
from typed_lambda.exceptions.adapter_errors import ConfigurationError, DecodeError, EncodeError


class Point(BaseModel):
    y: int
    x: int


@dataclass
class Label:
    text: str
    weight: float = 1.0


class Tag(TypedDict):
    key: str
    value: str


class Counter(BaseModel):
    count: int
    enabled: bool


class Event(BaseModel):
    at: datetime


class Opaque:
    pass


@dataclass
class Holder:
    item: Opaque


class TestCodecFor:
    def test_text(self):
        assert isinstance(codec_for(str), TextCodec)

    def test_none(self):
        assert isinstance(codec_for(None), NoneCodec)
        assert isinstance(codec_for(type(None)), NoneCodec)

    def test_scalars(self):
        for scalar in (int, float, bool):
            assert isinstance(codec_for(scalar), ScalarCodec)

    def test_records(self):
        for record in (Point, Label, Tag):
            assert isinstance(codec_for(record), RecordCodec)

    def test_sequences(self):
        for declared in (list[int], Sequence[str], tuple[Point, ...]):
            assert isinstance(codec_for(declared), SequenceCodec)

    def test_optionals(self):
        assert isinstance(codec_for(Point | None), OptionalCodec)
        assert isinstance(codec_for(Optional[str]), OptionalCodec)  # noqa: UP007

    def test_nested_name(self):
        assert codec_for(list[Point | None]).name == "list[Point | None]"

    def test_explicit_codec_returned_as_is(self):
        codec = TextCodec()
        assert codec_for(codec) is codec

    def test_rejects_bare_list(self):
        with pytest.raises(ConfigurationError):
            codec_for(list)

    def test_rejects_general_union(self):
        with pytest.raises(ConfigurationError):
            codec_for(int | str)

    def test_rejects_fixed_tuple(self):
        with pytest.raises(ConfigurationError):
            codec_for(tuple[int, str])

    def test_rejects_unknown_type(self):
        with pytest.raises(ConfigurationError) as exc_info:
            codec_for(bytes)
        assert "bytes" in exc_info.value.context["declared"]


class TestTextCodec:
    def test_decode_is_identity(self):
        assert TextCodec().decode(b'"quoted" stays quoted') == '"quoted" stays quoted'

    def test_encode_does_not_quote(self):
        assert TextCodec().encode("hello") == b"hello"

    def test_decode_invalid_utf8(self):
        with pytest.raises(DecodeError):
            TextCodec().decode(b"\xff\xfe")

    def test_nested_value_must_be_json_string(self):
        with pytest.raises(DecodeError):
            TextCodec().decode_value(5)

    def test_encode_rejects_non_string(self):
        with pytest.raises(EncodeError):
            TextCodec().encode(5)  # type: ignore[arg-type]

    def test_custom_encoding(self):
        assert TextCodec("latin-1").decode("café".encode("latin-1")) == "café"


class TestNoneCodec:
    def test_decodes_anything(self):
        codec = NoneCodec()
        for payload in (b"", b"null", b"{not json", b'{"a": 1}'):
            assert codec.decode(payload) is None

    def test_encodes_null(self):
        assert NoneCodec().encode(None) == NULL_LITERAL

    def test_rejects_value(self):
        with pytest.raises(EncodeError):
            NoneCodec().encode("something")  # type: ignore[arg-type]


class TestScalarCodec:
    def test_decode_int(self):
        assert codec_for(int).decode(b"42") == 42

    def test_int_rejects_string(self):
        with pytest.raises(DecodeError):
            codec_for(int).decode(b'"42"')

    def test_bool_rejects_number(self):
        with pytest.raises(DecodeError):
            codec_for(bool).decode(b"1")

    def test_float_accepts_int(self):
        assert codec_for(float).decode(b"2") == 2.0

    def test_encode_rejects_bool_for_int(self):
        with pytest.raises(EncodeError):
            codec_for(int).encode(True)

    def test_encode_rejects_nan(self):
        with pytest.raises(EncodeError):
            codec_for(float).encode(float("nan"))

    def test_rejects_unsupported_scalar(self):
        with pytest.raises(ConfigurationError):
            ScalarCodec(complex)

    def test_float_rejects_non_json_constants(self):
        for literal in (b"NaN", b"Infinity", b"-Infinity"):
            with pytest.raises(DecodeError):
                codec_for(float).decode(literal)


class TestRecordCodec:
    def test_decode(self):
        point = codec_for(Point).decode(b'{"x": 1, "y": 2}')
        assert point == Point(x=1, y=2)

    def test_encode_uses_declaration_order_without_whitespace(self):
        assert codec_for(Point).encode(Point(x=1, y=2)) == b'{"y":2,"x":1}'

    def test_missing_field(self):
        with pytest.raises(DecodeError) as exc_info:
            codec_for(Point).decode(b'{"x": 1}')
        assert exc_info.value.context["errors"][0]["loc"] == "y"

    def test_not_an_object(self):
        with pytest.raises(DecodeError):
            codec_for(Point).decode(b"[1, 2]")

    def test_invalid_json(self):
        with pytest.raises(DecodeError):
            codec_for(Point).decode(b"{")

    def test_dataclass(self):
        codec = codec_for(Label)
        label = codec.decode(b'{"text": "a"}')
        assert label == Label(text="a")
        assert codec.encode(label) == b'{"text":"a","weight":1.0}'

    def test_typed_dict(self):
        codec = codec_for(Tag)
        assert codec.decode(b'{"key": "k", "value": "v"}') == {"key": "k", "value": "v"}

    def test_encode_wrong_type(self):
        with pytest.raises(EncodeError):
            codec_for(Point).encode(Label(text="a"))

    def test_non_ascii_written_as_utf8(self):
        assert codec_for(Label).encode(Label(text="é")) == '{"text":"é","weight":1.0}'.encode()

    def test_mistyped_fields_are_not_coerced(self):
        with pytest.raises(DecodeError) as exc_info:
            codec_for(Counter).decode(b'{"count": "5", "enabled": "yes"}')
        failed = {error["loc"] for error in exc_info.value.context["errors"]}
        assert failed == {"count", "enabled"}

    def test_iso_strings_still_parse(self):
        event = codec_for(Event).decode(b'{"at": "2024-05-01T12:00:00Z"}')
        assert event.at == datetime(2024, 5, 1, 12, tzinfo=UTC)

    def test_unschemable_field_fails_at_construction(self):
        with pytest.raises(ConfigurationError) as exc_info:
            codec_for(Holder)
        assert "Holder" in exc_info.value.context["declared"]

    def test_rejects_nan_literal(self):
        with pytest.raises(DecodeError):
            codec_for(Label).decode(b'{"text": "a", "weight": NaN}')

    def test_text_encoding_does_not_apply_to_json(self):
        codec = codec_for(Label, text_encoding="latin-1")
        assert codec.encode(Label(text="é")) == '{"text":"é","weight":1.0}'.encode()


class TestSequenceCodec:
    def test_decode_elements_with_element_codec(self):
        assert codec_for(list[str]).decode(b'["1", "42"]') == ["1", "42"]

    def test_encode_in_order(self):
        assert codec_for(list[int]).encode([1, 42]) == b"[1,42]"

    def test_records(self):
        points = codec_for(list[Point]).decode(b'[{"x": 1, "y": 2}, {"x": 3, "y": 4}]')
        assert points == [Point(x=1, y=2), Point(x=3, y=4)]

    def test_element_failure_fails_whole_decode(self):
        with pytest.raises(DecodeError) as exc_info:
            codec_for(list[int]).decode(b"[1, 2, \"three\"]")
        assert exc_info.value.context["path"] == "[2]"

    def test_not_an_array(self):
        with pytest.raises(DecodeError):
            codec_for(list[int]).decode(b'{"a": 1}')

    def test_tuple_container(self):
        assert codec_for(tuple[int, ...]).decode(b"[1, 2]") == (1, 2)

    def test_encode_rejects_string(self):
        with pytest.raises(EncodeError):
            codec_for(list[str]).encode("abc")  # type: ignore[arg-type]

    def test_encode_rejects_dict(self):
        with pytest.raises(EncodeError):
            codec_for(list[str]).encode({"a": 1})  # type: ignore[arg-type]

    def test_encode_rejects_set(self):
        with pytest.raises(EncodeError):
            codec_for(list[int]).encode({1, 2})  # type: ignore[arg-type]

    def test_nested_text_is_json_string(self):
        assert codec_for(list[str]).encode(["a", "b"]) == b'["a","b"]'


class TestOptionalCodec:
    def test_null_decodes_to_none(self):
        assert codec_for(Point | None).decode(b"null") is None

    def test_null_with_whitespace(self):
        assert codec_for(Point | None).decode(b"  null\n") is None

    def test_present_value(self):
        assert codec_for(Point | None).decode(b'{"x": 1, "y": 2}') == Point(x=1, y=2)

    def test_none_encodes_to_null(self):
        assert codec_for(Point | None).encode(None) == b"null"

    def test_present_encodes_like_inner(self):
        assert codec_for(Point | None).encode(Point(x=1, y=2)) == b'{"y":2,"x":1}'

    def test_optional_elements(self):
        assert codec_for(list[int | None]).decode(b"[1, null]") == [1, None]
        assert codec_for(list[int | None]).encode([None, 3]) == b"[null,3]"

    def test_optional_text_present_is_raw(self):
        assert codec_for(str | None).decode(b"hello") == "hello"
