"""
Shared error handling for the address lookup access layer.

Every service classifies failures into one of six kinds. The kind travels
across internal RPC hops as ``ErrorResponse.code`` and is mapped back to the
matching exception class by :func:`error_from_code`.
"""

from typing import Dict, Any, Optional, Type

from opentelemetry import trace
from pydantic import BaseModel


INVALID_ARGUMENT = "INVALID_ARGUMENT"
UNAUTHENTICATED = "UNAUTHENTICATED"
NOT_FOUND = "NOT_FOUND"
ALREADY_EXISTS = "ALREADY_EXISTS"
INTERNAL = "INTERNAL"
UNAVAILABLE = "UNAVAILABLE"


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for access layer services."""

    status_code: int = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class InvalidArgumentError(AccessLayerException):
    """Request shape is wrong."""

    status_code = 400

    def __init__(self, message: str = "Invalid argument", details: Optional[Dict[str, Any]] = None):
        super().__init__(INVALID_ARGUMENT, message, details)


class AuthenticationError(AccessLayerException):
    """Missing, unparseable, expired or rejected credentials."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(UNAUTHENTICATED, message, details)


class NotFoundError(AccessLayerException):
    """Semantic absence."""

    status_code = 404

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(NOT_FOUND, message, details)


class AlreadyExistsError(AccessLayerException):
    """Unique constraint collision."""

    status_code = 409

    def __init__(self, message: str = "Already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__(ALREADY_EXISTS, message, details)


class ServiceError(AccessLayerException):
    """Internal failure, including external provider failures."""

    status_code = 500

    def __init__(self, message: str = "Service error", details: Optional[Dict[str, Any]] = None):
        super().__init__(INTERNAL, message, details)


class UnavailableError(AccessLayerException):
    """Downstream service unreachable or deadline exceeded."""

    status_code = 503

    def __init__(self, message: str = "Service unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(UNAVAILABLE, message, details)


_ERRORS_BY_CODE: Dict[str, Type[AccessLayerException]] = {
    INVALID_ARGUMENT: InvalidArgumentError,
    UNAUTHENTICATED: AuthenticationError,
    NOT_FOUND: NotFoundError,
    ALREADY_EXISTS: AlreadyExistsError,
    INTERNAL: ServiceError,
    UNAVAILABLE: UnavailableError,
}


def error_from_code(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> AccessLayerException:
    """Rebuild the exception for a code received over the wire.

    Unknown codes are treated as internal errors.
    """
    error_class = _ERRORS_BY_CODE.get(code, ServiceError)
    return error_class(message, details)
