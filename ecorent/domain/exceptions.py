"""
Exception hierarchy for the device marketplace.

Every error raised by the lifecycle service or its storage adapters derives
from DeviceServiceError. The HTTP layer maps each subclass to a status code:
NotFoundError -> 404, ForbiddenError -> 403, BadRequestError -> 400, anything
else (UnavailableError included) -> 500.
"""

# Standard library imports
from typing import Any, Dict, Optional


class DeviceServiceError(Exception):
    """Base exception for device lifecycle errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(DeviceServiceError):
    """Raised when the requested resource id does not exist."""
    pass


class ForbiddenError(DeviceServiceError):
    """Raised when the caller does not own the resource."""
    pass


class BadRequestError(DeviceServiceError):
    """Raised for malformed or inconsistent input."""
    pass


class UnavailableError(DeviceServiceError):
    """Raised when the document store or the object store call fails."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)
        self.operation = operation
