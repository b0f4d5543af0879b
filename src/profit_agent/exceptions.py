"""
Custom exceptions for Pro Fit Agent.

Every exception carries:
- A descriptive message
- An error code for API responses
- HTTP status code mapping
- Optional details for debugging
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent API error responses."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Profile / plan errors
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    PLAN_NOT_FOUND = "PLAN_NOT_FOUND"

    # Session lifecycle errors
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # Advisory (coach) errors
    ADVISORY_UNAVAILABLE = "ADVISORY_UNAVAILABLE"
    ADVISORY_TIMEOUT = "ADVISORY_TIMEOUT"
    ADVISORY_ERROR = "ADVISORY_ERROR"

    # Messaging channel errors
    PAIRING_CODE_INVALID = "PAIRING_CODE_INVALID"
    PAIRING_CODE_EXPIRED = "PAIRING_CODE_EXPIRED"

    # Data/Database errors
    DATABASE_ERROR = "DATABASE_ERROR"


class ProFitAgentError(Exception):
    """
    Base exception for all Pro Fit Agent errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code for API responses
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors (400)
# ============================================================================

class ValidationError(ProFitAgentError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=error_details,
        )


class PairingCodeError(ProFitAgentError):
    """Raised when a pairing code is unknown, consumed or expired."""

    def __init__(self, message: str = "Invalid or expired code", expired: bool = False) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.PAIRING_CODE_EXPIRED if expired else ErrorCode.PAIRING_CODE_INVALID,
            status_code=400,
        )


# ============================================================================
# Not Found Errors (404)
# ============================================================================

class NotFoundError(ProFitAgentError):
    """Base for missing-resource errors; subclasses set a specific code."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} with ID '{resource_id}' not found"
        error_details = details or {}
        error_details["resource_type"] = resource_type
        error_details["resource_id"] = resource_id
        super().__init__(
            message=message,
            code=ErrorCode.NOT_FOUND,
            status_code=404,
            details=error_details,
        )


class ProfileNotFoundError(NotFoundError):
    """Raised when an athlete has no profile row."""

    def __init__(self, athlete_id: str) -> None:
        super().__init__(resource_type="Athlete profile", resource_id=athlete_id)
        self.code = ErrorCode.PROFILE_NOT_FOUND


class PlanNotFoundError(NotFoundError):
    """Raised when an athlete has no active training plan."""

    def __init__(self, athlete_id: str) -> None:
        super().__init__(resource_type="Training plan", resource_id=athlete_id)
        self.code = ErrorCode.PLAN_NOT_FOUND


class SessionNotFoundError(NotFoundError):
    """Raised when a planned session is not found."""

    def __init__(self, session_id: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            resource_type="Planned session",
            resource_id=session_id,
            details=details,
        )
        self.code = ErrorCode.SESSION_NOT_FOUND


# ============================================================================
# Conflict Errors (409)
# ============================================================================

class InvalidTransitionError(ProFitAgentError):
    """Raised when a planned session cannot move to the requested status."""

    def __init__(self, session_id: str, current: str, target: str) -> None:
        super().__init__(
            message=f"Cannot move session '{session_id}' from {current} to {target}",
            code=ErrorCode.INVALID_TRANSITION,
            status_code=409,
            details={"session_id": session_id, "from": current, "to": target},
        )


# ============================================================================
# Advisory Service Errors (5xx)
# ============================================================================

class AdvisoryError(ProFitAgentError):
    """Base class for advisory (coach) service errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ADVISORY_ERROR,
        status_code: int = 502,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            details=details,
        )


class AdvisoryUnavailableError(AdvisoryError):
    """Raised when the advisory service cannot be reached or is not configured."""

    def __init__(
        self,
        message: str = "Coach service is currently unavailable",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.ADVISORY_UNAVAILABLE,
            status_code=503,
            details=details,
        )


class AdvisoryTimeoutError(AdvisoryError):
    """Raised when the advisory call does not answer within the configured timeout."""

    def __init__(self, timeout_seconds: Optional[float] = None) -> None:
        details = {}
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(
            message="Coach request timed out",
            code=ErrorCode.ADVISORY_TIMEOUT,
            status_code=504,
            details=details,
        )


# ============================================================================
# Database Errors
# ============================================================================

class DatabaseError(ProFitAgentError):
    """Raised when a database operation fails."""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if operation:
            error_details["operation"] = operation
        super().__init__(
            message=message,
            code=ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=error_details,
        )
