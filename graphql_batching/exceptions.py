"""Exception hierarchy for the GraphQL batching gateway.

Request-level failures are raised as ``GatewayError`` subclasses and carry the
HTTP status the web layer should answer with. Operation-level failures never
surface as exceptions outside the executor.
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base class for all request-level gateway errors."""

    http_status: int = 500
    default_error_code: str = "UNKNOWN_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.user_message = user_message or message

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
            "http_status": self.http_status,
        }


class MissingQueryError(GatewayError):
    """The request did not contain any operation."""

    http_status = 400
    default_error_code = "MISSING_QUERY"

    def __init__(self, message: str = 'This endpoint requires a "query" parameter', **kwargs: Any):
        super().__init__(message, **kwargs)


class BatchLimitExceededError(GatewayError):
    """The request contained more operations than the configured ceiling."""

    http_status = 400
    default_error_code = "BATCH_LIMIT_EXCEEDED"

    def __init__(self, size: int, limit: int, message: str | None = None):
        super().__init__(
            message or "Maximum number of batched operations exceeded",
            details={"size": size, "limit": limit},
        )
        self.size = size
        self.limit = limit


class ConfigurationError(GatewayError):
    """The gateway was set up incorrectly."""

    default_error_code = "CONFIGURATION_ERROR"


class SchemaBuildError(GatewayError):
    """The schema could not be resolved or built."""

    default_error_code = "SCHEMA_BUILD_ERROR"

    def __init__(self, message: str, schema_key: str | None = None, **kwargs: Any):
        details = kwargs.pop("details", None) or {}
        if schema_key is not None:
            details["schema_key"] = schema_key
        super().__init__(message, details=details, **kwargs)
        self.schema_key = schema_key


class SchemaNotFoundError(SchemaBuildError):
    """No schema is registered under the requested key."""

    default_error_code = "SCHEMA_NOT_FOUND"
