"""
Shared error handling for the Sydney Events backend.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    code: str
    details: Any = None


class EventsLayerException(Exception):
    """Base exception for Sydney Events services."""

    status_code: int = 400

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Any] = None,
        status_code: Optional[int] = None,
    ):
        self.code = code
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            error=self.message,
            code=self.code,
            details=self.details
        )


class ValidationError(EventsLayerException):
    """Validation-related errors."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class NotFoundError(EventsLayerException):
    """Requested entity does not exist."""

    status_code = 404

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class ServiceError(EventsLayerException):
    """Service-related errors."""

    status_code = 500

    def __init__(self, message: str = "Server error", details: Optional[Any] = None):
        super().__init__("SERVICE_ERROR", message, details)


class PersistenceError(EventsLayerException):
    """Document store failures."""

    status_code = 500

    def __init__(self, message: str = "Server error", details: Optional[Any] = None):
        super().__init__("PERSISTENCE_ERROR", message, details)


class NotificationError(EventsLayerException):
    """Mail relay failures."""

    status_code = 500

    def __init__(self, message: str = "Server error", details: Optional[Any] = None):
        super().__init__("NOTIFICATION_ERROR", message, details)


class ExternalServiceError(EventsLayerException):
    """External service errors."""

    status_code = 500

    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", message, details)


class UpstreamRequestError(EventsLayerException):
    """Upstream rejected the request parameters."""

    status_code = 400

    def __init__(self, message: str = "Invalid request parameters", details: Optional[Any] = None):
        super().__init__("UPSTREAM_REQUEST_ERROR", message, details)


class UpstreamAuthError(EventsLayerException):
    """Upstream rejected our credentials."""

    status_code = 401

    def __init__(self, message: str = "API key is invalid or expired", details: Optional[Any] = None):
        super().__init__("UPSTREAM_AUTH_ERROR", message, details)


class RateLimitError(EventsLayerException):
    """Rate limiting errors."""

    status_code = 429

    def __init__(self, message: str = "Too many requests", details: Optional[Any] = None):
        super().__init__("RATE_LIMIT_ERROR", message, details)
