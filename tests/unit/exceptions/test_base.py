"""Tests for the base adapter exception."""

from typed_lambda.exceptions.adapter_errors import DecodeError
from typed_lambda.exceptions.base import LambdaAdapterError


class TestLambdaAdapterError:
    def test_default_error_code(self):
        error = LambdaAdapterError("something failed")
        assert error.error_code == "ADAPTER_ERROR"

    def test_message_attribute(self):
        error = LambdaAdapterError("test message")
        assert error.message == "test message"

    def test_empty_context_by_default(self):
        error = LambdaAdapterError("test")
        assert error.context == {}

    def test_custom_context(self):
        context = {"request_id": "123"}
        error = LambdaAdapterError("test", context=context)
        assert error.context == context

    def test_to_dict(self):
        error = LambdaAdapterError("test message", context={"key": "value"})
        result = error.to_dict()
        assert result == {
            "error_code": "ADAPTER_ERROR",
            "message": "test message",
            "context": {"key": "value"},
        }

    def test_to_log_dict(self):
        error = LambdaAdapterError("test message")
        result = error.to_log_dict()
        assert result["error_code"] == "ADAPTER_ERROR"
        assert result["exception_type"] == "LambdaAdapterError"

    def test_str_without_context(self):
        error = LambdaAdapterError("test message")
        assert str(error) == "test message"

    def test_str_with_context(self):
        error = LambdaAdapterError("test", context={"id": "123"})
        assert "context" in str(error)

    def test_repr(self):
        error = LambdaAdapterError("test")
        result = repr(error)
        assert "LambdaAdapterError" in result
        assert "test" in result

    def test_inherits_from_exception(self):
        assert isinstance(LambdaAdapterError("test"), Exception)


class TestRegistry:
    def test_subclass_registered(self):
        assert LambdaAdapterError.get_by_error_code("DECODE_ERROR") is DecodeError

    def test_unknown_code(self):
        assert LambdaAdapterError.get_by_error_code("NONEXISTENT") is None
