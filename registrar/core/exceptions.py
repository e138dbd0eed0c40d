"""
Custom exceptions for the Registrar ledger.
"""

from typing import Optional, Any, Dict


class RegistrarError(Exception):
    """Base exception for all Registrar errors."""

    default_code = "REGISTRAR_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a response payload."""
        return {"code": self.error_code, "message": self.message}


class Unauthorized(RegistrarError):
    """Raised when the caller lacks the required role."""
    default_code = "UNAUTHORIZED"


class InvalidArgument(RegistrarError):
    """Raised when an input is malformed or out of range."""
    default_code = "INVALID_ARGUMENT"


class NotFound(RegistrarError):
    """Raised when a referenced record does not exist or is inactive."""
    default_code = "NOT_FOUND"


class AlreadyExists(RegistrarError):
    """Raised when attempting to create a duplicate entry."""
    default_code = "ALREADY_EXISTS"


class AlreadyEnrolled(AlreadyExists):
    """Raised when a student is already enrolled in a course."""
    default_code = "ALREADY_ENROLLED"


class CapacityExceeded(RegistrarError):
    """Raised when a course is full."""
    default_code = "CAPACITY_EXCEEDED"


class NotEnrolled(RegistrarError):
    """Raised when a grade operation targets a non-enrolled pair."""
    default_code = "NOT_ENROLLED"


class NotAssigned(RegistrarError):
    """Raised when no grade was ever assigned for a pair."""
    default_code = "NOT_ASSIGNED"


class PersistenceError(RegistrarError):
    """Raised when persistence operations fail."""
    default_code = "PERSISTENCE_ERROR"


class EventSourcingError(RegistrarError):
    """Raised when event store operations fail."""
    default_code = "EVENT_SOURCING_ERROR"


class ConfigurationError(RegistrarError):
    """Raised when configuration is invalid."""
    default_code = "CONFIGURATION_ERROR"
