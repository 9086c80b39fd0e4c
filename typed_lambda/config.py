"""Adapter configuration using Pydantic BaseSettings.

All settings are loaded from environment variables.
No .env files - Lambda functions receive configuration through their
environment.

Usage:
    from typed_lambda.config import get_settings

    settings = get_settings()
    print(settings.timeout_margin_millis)
"""

import codecs
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdapterSettings(BaseSettings):
    """Adapter settings loaded from environment variables.

    Attributes:
        timeout_margin_millis: Time reserved for encoding and writing the
            response, subtracted from the remaining invocation time before
            waiting on an asynchronous result.
        default_remaining_time_millis: Wait budget used when the context does
            not report an integer remaining time, e.g. local runners.
        text_encoding: Encoding of raw text payloads. JSON payloads are
            always UTF-8.
    """

    model_config = SettingsConfigDict(
        env_prefix="TYPED_LAMBDA_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",
        str_strip_whitespace=True,
    )

    timeout_margin_millis: int = Field(default=0, ge=0, le=60_000)
    default_remaining_time_millis: int = Field(default=0, ge=0, le=900_000)

    text_encoding: str = Field(default="utf-8", min_length=1)

    @field_validator("text_encoding")
    @classmethod
    def validate_text_encoding(cls, value: str) -> str:
        """Validate the encoding is known to the codecs registry."""
        try:
            return codecs.lookup(value).name
        except LookupError as error:
            error_message = f"unknown text_encoding '{value}'"
            raise ValueError(error_message) from error


@lru_cache
def get_settings() -> AdapterSettings:
    """Get cached settings instance.

    Returns:
        Cached AdapterSettings instance.
    """
    return AdapterSettings()
