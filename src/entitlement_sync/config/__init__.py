"""Application configuration helpers."""

from __future__ import annotations

from .app import AppConfig, get_app_config
from .discord import DISCORD_BASE_URL, DiscordConfig, get_discord_config
from .env import parse_bool, parse_duration, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import LoggingConfig, get_logging_config
from .storage import get_database_uri
from .sync import SyncConfig, get_sync_config

__all__ = [
    "DISCORD_BASE_URL",
    "AppConfig",
    "ConfigurationError",
    "DiscordConfig",
    "LoggingConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "get_app_config",
    "get_database_uri",
    "get_discord_config",
    "get_logging_config",
    "get_sync_config",
    "parse_bool",
    "parse_duration",
    "require_env_var",
    "require_env_vars",
]
