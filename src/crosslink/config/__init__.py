"""Application configuration helpers."""

from __future__ import annotations

from .deezer import DeezerConfig, get_deezer_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, ProviderHttpConfig, RateLimit, RetryPolicy
from .logging import configure_logging
from .matching import get_discovery_policy
from .smart_links import SmartLinkConfig, get_smart_link_config
from .spotify import SpotifyConfig, get_spotify_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "DeezerConfig",
    "MissingConfigurationError",
    "ProviderHttpConfig",
    "RateLimit",
    "RetryPolicy",
    "SmartLinkConfig",
    "SpotifyConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_deezer_config",
    "get_discovery_policy",
    "get_smart_link_config",
    "get_spotify_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
