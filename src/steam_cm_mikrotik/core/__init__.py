"""
Steam CM MikroTik Sync - Core Infrastructure

Fetching, normalization, script generation and reconciliation.
"""

from .client import MikroTikClient, RequestResponseLogger
from .config_loader import ConfigLoader
from .directory import DirectoryFetcher
from .exceptions import (
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
from .models import AddressListEntry, DirectoryResponse, ListItem, SyncConfig
from .normalizer import normalize, strip_port
from .reconciler import ItemResult, ListReconciler, ReconcileReport, reconcile
from .script import generate_script

__all__ = [
    # Exceptions
    "SyncError",
    "ConfigurationError",
    "AuthenticationError",
    "AuthorizationError",
    "APIError",
    "NetworkError",
    "TimeoutError",
    "DirectoryError",
    "ServeError",
    # Models
    "SyncConfig",
    "DirectoryResponse",
    "AddressListEntry",
    "ListItem",
    # Config
    "ConfigLoader",
    # Clients
    "DirectoryFetcher",
    "MikroTikClient",
    "RequestResponseLogger",
    # Pipeline
    "normalize",
    "strip_port",
    "generate_script",
    "ItemResult",
    "ListReconciler",
    "ReconcileReport",
    "reconcile",
]
