"""
Steam CM MikroTik Sync

Keeps a MikroTik RouterOS firewall address-list in sync with the Steam
directory's connection-manager server list, either by pushing the list over
the RouterOS REST API or by serving a ready-to-import RouterOS script.
"""

__version__ = "1.0.0"

from .core.client import MikroTikClient
from .core.directory import DirectoryFetcher
from .core.exceptions import (
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
from .core.models import SyncConfig
from .core.normalizer import normalize
from .core.reconciler import ListReconciler, ReconcileReport, reconcile
from .core.script import generate_script
from .dispatcher import DeliveryDispatcher

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
    # Core
    "SyncConfig",
    "DirectoryFetcher",
    "MikroTikClient",
    "ListReconciler",
    "ReconcileReport",
    "DeliveryDispatcher",
    "normalize",
    "generate_script",
    "reconcile",
]
