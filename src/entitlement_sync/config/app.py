"""Process-wide configuration, read once at start-up."""

from __future__ import annotations

from dataclasses import dataclass

from .discord import DiscordConfig, get_discord_config
from .logging import LoggingConfig, get_logging_config
from .storage import get_database_uri
from .sync import SyncConfig, get_sync_config


@dataclass(frozen=True, slots=True)
class AppConfig:
    sync: SyncConfig
    discord: DiscordConfig
    database_uri: str
    logging: LoggingConfig


def get_app_config() -> AppConfig:
    return AppConfig(
        sync=get_sync_config(),
        discord=get_discord_config(),
        database_uri=get_database_uri(),
        logging=get_logging_config(),
    )
