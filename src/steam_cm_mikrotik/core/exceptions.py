"""
Steam CM MikroTik Sync - Exception Hierarchy

This module contains all custom exceptions used throughout the project.
"""

from datetime import datetime, timezone
from typing import Any


class SyncError(Exception):
    """Base exception for all synchronization errors with enhanced context."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class ConfigurationError(SyncError):
    """Invalid or unreadable configuration."""


class AuthenticationError(SyncError):
    """Device rejected the supplied credentials."""


class AuthorizationError(SyncError):
    """Device user lacks permission for the requested operation."""


class APIError(SyncError):
    """API call returned a non-success status or an unusable body."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.status_code = status_code
        self.response_text = response_text


class NetworkError(SyncError):
    """Network communication error (DNS, refused connection, TLS)."""


class TimeoutError(SyncError):
    """Request timed out."""


class DirectoryError(SyncError):
    """Steam directory returned a body that is not valid JSON."""


class ServeError(SyncError):
    """Script server could not bind its listening socket."""
