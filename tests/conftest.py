"""Shared test fixtures."""

from dataclasses import dataclass

import pytest

from typed_lambda.config import get_settings
from typed_lambda.logging.config import get_logging_config
from typed_lambda.logging.context import clear_context


@dataclass
class FakeLambdaContext:
    """Stand-in for the context object the Lambda runtime passes in."""

    remaining_time_in_millis: int = 3000
    function_name: str = "test-function"
    function_version: str = "$LATEST"
    aws_request_id: str = "test-request-id"

    def get_remaining_time_in_millis(self) -> int:
        return self.remaining_time_in_millis


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch):
    """Clear environment variables that affect settings."""
    env_vars_to_clear = [
        "SERVICE_NAME",
        "AWS_LAMBDA_FUNCTION_NAME",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "INCLUDE_TIMESTAMP",
        "INCLUDE_LOCATION",
        "TYPED_LAMBDA_TIMEOUT_MARGIN_MILLIS",
        "TYPED_LAMBDA_DEFAULT_REMAINING_TIME_MILLIS",
        "TYPED_LAMBDA_TEXT_ENCODING",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    get_logging_config.cache_clear()
    clear_context()
    yield
    get_settings.cache_clear()
    get_logging_config.cache_clear()
    clear_context()


@pytest.fixture()
def make_context():
    """Build a fake Lambda context."""

    def build(**overrides) -> FakeLambdaContext:
        return FakeLambdaContext(**overrides)

    return build
