"""Where crosslink keeps its database and HTTP cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_flag, optional_env_var

APP_DIR_NAME: Final[str] = "crosslink"
DEFAULT_DB_FILENAME: Final[str] = "crosslink.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory; file paths below it are created on first access."""

    data_dir: Path

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def _file(self, filename: str) -> Path:
        directory = self.resolve_data_dir()
        directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    @property
    def database_path(self) -> Path:
        return self._file(DEFAULT_DB_FILENAME)

    @property
    def http_cache_path(self) -> Path:
        return self._file(HTTP_CACHE_FILENAME)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = optional_env_var("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = optional_env_var("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    """``CROSSLINK_DATA_DIR`` or the platform data directory."""
    explicit = optional_env_var("CROSSLINK_DATA_DIR")
    data_dir = Path(explicit) if explicit else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""
    echo = env_flag("CROSSLINK_SQL_ECHO")
    uri = optional_env_var("DATABASE_URI")
    if uri is None:
        uri = f"sqlite+pysqlite:///{(storage or get_storage_config()).database_path}"
    return DatabaseConfig(uri=uri, echo=echo)
