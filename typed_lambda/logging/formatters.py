"""Log formatters for Lambda invocation logs."""

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any, ClassVar

from typed_lambda.logging.context import get_correlation_id, get_extra_context

_STANDARD_LOG_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)

_MAX_LOGGER_NAME_LENGTH = 30


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Merge invocation context and ``extra=`` fields of a record."""
    fields = get_extra_context()
    fields.update(
        (key, value)
        for key, value in record.__dict__.items()
        if key not in _STANDARD_LOG_ATTRS and not key.startswith("_")
    )
    return fields


def _exception_fields(exc_info: Any) -> dict[str, Any]:
    """Describe an exception, including the adapter error code when present."""
    exc_type, exc_value, _ = exc_info
    fields: dict[str, Any] = {
        "type": exc_type.__name__ if exc_type else "Unknown",
        "message": str(exc_value) if exc_value else "",
        "traceback": traceback.format_exception(*exc_info),
    }
    error_code = getattr(exc_value, "error_code", None)
    if isinstance(error_code, str):
        fields["error_code"] = error_code
    return fields


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Lambda forwards stdout to CloudWatch Logs, where each line becomes a
    queryable event in Logs Insights.
    """

    def __init__(
        self,
        *,
        service_name: str = "typed-lambda",
        include_timestamp: bool = True,
        include_location: bool = True,
    ) -> None:
        """Initialize the JSON formatter.

        Args:
            service_name: Service identifier for log aggregation.
            include_timestamp: Whether to include timestamp field.
            include_location: Whether to include module/function/line fields.
        """
        super().__init__()
        self._service_name = service_name
        self._include_timestamp = include_timestamp
        self._include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_entry: dict[str, Any] = {}

        if self._include_timestamp:
            log_entry["timestamp"] = datetime.now(UTC).isoformat(timespec="milliseconds")

        log_entry["level"] = record.levelname
        log_entry["logger"] = record.name
        log_entry["message"] = record.getMessage()

        request_id = get_correlation_id()
        if request_id:
            log_entry["request_id"] = request_id

        log_entry["service"] = self._service_name

        if self._include_location:
            log_entry["module"] = record.module
            log_entry["function"] = record.funcName
            log_entry["line"] = record.lineno

        log_entry.update(_record_fields(record))

        if record.exc_info:
            log_entry["exception"] = _exception_fields(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanFormatter(logging.Formatter):
    """Format log records for reading in a terminal during local runs."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self, *, use_colors: bool = True) -> None:
        """Initialize the human formatter.

        Args:
            use_colors: Whether to use ANSI colors in output.
        """
        super().__init__()
        self._use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a pipe separated line."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        level = record.levelname
        if self._use_colors:
            color = self.COLORS.get(level, "")
            level_string = f"{color}{level:<8}{self.RESET}"
        else:
            level_string = f"{level:<8}"

        logger_name = record.name
        if len(logger_name) > _MAX_LOGGER_NAME_LENGTH:
            truncate_at = _MAX_LOGGER_NAME_LENGTH - 3
            logger_name = "..." + logger_name[-truncate_at:]

        context_parts: list[str] = []
        request_id = get_correlation_id()
        if request_id:
            context_parts.append(f"request_id={request_id}")
        context_parts.extend(f"{key}={value}" for key, value in _record_fields(record).items())

        parts = [timestamp, "|", level_string, "|", f"{logger_name:<30}", "|", record.getMessage()]
        if context_parts:
            parts.extend(["|", " ".join(context_parts)])

        result = " ".join(parts)

        if record.exc_info:
            result += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return result
