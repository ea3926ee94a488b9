"""
Steam CM MikroTik Sync - Shared Utilities

This package contains shared utilities and constants used across the project.
"""

from . import constants
from .error_handlers import ErrorResponse, ErrorSeverity, log_error

__all__ = [
    "ErrorResponse",
    "ErrorSeverity",
    "constants",
    "log_error",
]
