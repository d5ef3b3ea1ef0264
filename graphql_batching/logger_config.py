import datetime
import functools
import json
import logging
import os
import sys
import traceback
from enum import Enum
from logging.handlers import RotatingFileHandler
from typing import Any

# Attributes every LogRecord carries; anything else was passed through ``extra``.
_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class ErrorCategory(Enum):
    """Severity categories for structured error logging."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


_CATEGORY_LEVELS = {
    ErrorCategory.CRITICAL: logging.CRITICAL,
    ErrorCategory.ERROR: logging.ERROR,
    ErrorCategory.WARNING: logging.WARNING,
    ErrorCategory.INFO: logging.INFO,
}


class StructuredLogFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        return json.dumps(log_entry, default=str)


# --- Logging Setup ---
error_logger = logging.getLogger("error_logger")
error_logger.setLevel(logging.INFO)
error_logger.propagate = False

_console_handler = logging.StreamHandler(sys.stderr)
_console_handler.setFormatter(StructuredLogFormatter())
error_logger.addHandler(_console_handler)

request_logger = logging.getLogger("graphql_batching.requests")
request_logger.setLevel(logging.INFO)

# Optional rotating log file: 10MB per file, 5 backups
_log_file = os.environ.get("GRAPHQL_BATCH_LOG_FILE")
if _log_file:
    file_handler = RotatingFileHandler(_log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
    file_handler.setFormatter(StructuredLogFormatter())
    error_logger.addHandler(file_handler)
    request_logger.addHandler(file_handler)


def log_structured_error(
    category: ErrorCategory,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    operation: str | None = None,
    **kwargs: Any,
) -> None:
    """Log an error with a category, optional exception and flat context fields."""
    extra: dict[str, Any] = {"error_category": category.value}
    if operation:
        extra["operation"] = operation
    if context:
        extra.update(context)
    extra.update(kwargs)

    error_logger.log(
        _CATEGORY_LEVELS[category],
        message,
        exc_info=exception,
        extra=extra,
    )


# --- Decorator for Logging Gateway Calls ---
def log_gateway_call(func):
    """Log every request handled by the wrapped gateway method.

    The wrapped callable receives the request as its last positional argument.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        request = args[-1] if args else kwargs.get("request")
        method = getattr(request, "method", "unknown")
        content_type = getattr(request, "content_type", None)

        request_logger.info(f"Handling {method} request (content-type: {content_type})")
        try:
            response = func(*args, **kwargs)
        except Exception as e:
            request_logger.warning(
                f"{method} request rejected: {e}",
                extra={"error_type": type(e).__name__},
            )
            log_structured_error(
                category=ErrorCategory.WARNING,
                message=f"Request rejected: {e}",
                exception=e,
                operation="gateway_request",
                method=method,
            )
            raise

        request_logger.info(
            f"{method} request completed with status {getattr(response, 'status_code', 'n/a')}"
        )
        return response

    return wrapper
