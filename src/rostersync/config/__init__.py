"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .firebase import FirebaseConfig, get_firebase_config
from .http_resilience import RateLimit, ResilienceConfig
from .logging import configure_logging
from .reconcile import ReconcileConfig, get_reconcile_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "ConfigurationError",
    "FirebaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ReconcileConfig",
    "ResilienceConfig",
    "StorageConfig",
    "configure_logging",
    "get_firebase_config",
    "get_reconcile_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
