"""
Base exception classes for the Varnaya backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to an HTTP status code, so a module
exception only has to pick the right parent.
"""

from typing import Optional, Any


class VarnayaError(Exception):
    """
    Base exception for all Varnaya errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.message,
            "code": self.code,
        }


class ValidationError(VarnayaError):
    """Input validation failed."""

    status_code = 400


class MissingParameterError(ValidationError):
    """A required request parameter was absent or blank."""

    def __init__(self, parameter: str, code: Optional[str] = None):
        super().__init__(
            f"{parameter} parameter is required",
            code=code or "MISSING_PARAMETER",
            details={"parameter": parameter},
        )


class NotFoundError(VarnayaError):
    """Resource not found."""

    status_code = 404


class AuthenticationError(VarnayaError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(VarnayaError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class InternalFailureError(VarnayaError):
    """
    Storage or infrastructure fault.

    The client-visible message is always the fixed redacted text; the
    underlying cause is kept in details for logging only.
    """

    status_code = 500
    public_message = "Internal server error"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.public_message,
            "code": self.code,
        }


class ExternalServiceError(InternalFailureError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
