"""Database location helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "entitlement-sync"
DEFAULT_DB_FILENAME: Final[str] = "entitlements.db"


def default_data_dir() -> Path:
    env_dir = os.getenv("ENTITLEMENT_SYNC_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_database_uri() -> str:
    """Return ``DATABASE_URI``, or a SQLite file under the data dir when unset."""

    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return env_uri
    data_dir = default_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{data_dir / DEFAULT_DB_FILENAME}"
