"""
Steam CM MikroTik Sync - Error Handling Helpers

This module turns exceptions into operator-facing messages and structured
log records.
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from ..core.exceptions import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DirectoryError,
    NetworkError,
    ServeError,
    SyncError,
    TimeoutError,
)

logger = logging.getLogger("steam-cm-mikrotik")


class ErrorSeverity(str, Enum):
    """Enumeration for error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorResponse:
    """Structured error response with operator-friendly messaging."""

    def __init__(self, error: Exception, operation: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.error = error
        self.operation = operation
        self.severity = severity
        self.timestamp = datetime.now(timezone.utc)
        self.error_id = f"{operation}_{int(self.timestamp.timestamp())}"

    def get_user_message(self) -> str:
        """Get a human-readable error message.

        Credentials and response bodies are never included.
        """
        if isinstance(self.error, AuthenticationError):
            return "Authentication failed. Please check the RouterOS user and password."
        elif isinstance(self.error, AuthorizationError):
            return "Access denied. The RouterOS user needs the 'rest-api', 'read' and 'write' policies."
        elif isinstance(self.error, ConfigurationError):
            return f"Configuration error: {self.error.message}"
        elif isinstance(self.error, TimeoutError):
            return f"Request timed out: {self.error.message}"
        elif isinstance(self.error, NetworkError):
            return f"Network error: {self.error.message}"
        elif isinstance(self.error, DirectoryError):
            return "The Steam directory returned an unreadable response."
        elif isinstance(self.error, ServeError):
            return f"Cannot start the script server: {self.error.message}"
        elif isinstance(self.error, APIError):
            return f"RouterOS API error: {self.error.message}"
        else:
            return f"An unexpected error occurred during {self.operation}."

    def get_technical_details(self) -> Dict[str, Any]:
        """Get technical error details for logging."""
        details = {
            "error_id": self.error_id,
            "operation": self.operation,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "error_type": type(self.error).__name__,
            "message": str(self.error)
        }

        if isinstance(self.error, SyncError):
            details.update(self.error.to_dict())

        if isinstance(self.error, APIError):
            details["status_code"] = self.error.status_code
            details["response_text"] = self.error.response_text

        return details


def log_error(
    operation: str,
    error: Exception,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
) -> str:
    """Centralized error logging for top-level operations.

    Args:
        operation: Name of the operation that failed
        error: The exception that occurred
        severity: Severity level of the error

    Returns:
        Operator-facing error message
    """
    error_response = ErrorResponse(error, operation, severity)

    technical_details = error_response.get_technical_details()
    logger.debug(f"Error details for {operation}: {json.dumps(technical_details, default=str)}")

    user_message = error_response.get_user_message()
    logger.error(f"{operation} failed: {user_message}")
    return user_message
