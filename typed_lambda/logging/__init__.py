"""Structured logging for the typed Lambda adapter.

Usage:
    from typed_lambda.logging import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
    logger.info("Decoded input", extra={"input_type": "Ping"})
"""

from typed_lambda.logging.adapters.lambda_adapter import bind_lambda_context
from typed_lambda.logging.config import LoggingConfig
from typed_lambda.logging.context import (
    clear_context,
    correlation_id,
    get_correlation_id,
    get_extra_context,
    invocation_scope,
    set_correlation_id,
    set_extra_context,
)
from typed_lambda.logging.formatters import HumanFormatter, JSONFormatter
from typed_lambda.logging.logger import get_logger, reset_logging, setup_logging

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "LoggingConfig",
    "bind_lambda_context",
    "clear_context",
    "correlation_id",
    "get_correlation_id",
    "get_extra_context",
    "get_logger",
    "invocation_scope",
    "reset_logging",
    "set_correlation_id",
    "set_extra_context",
    "setup_logging",
]
