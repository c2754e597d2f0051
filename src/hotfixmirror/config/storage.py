"""Location of the SQLite database and the upstream HTTP cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "HOTFIXMIRROR_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def _file(self, name: str) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir / name

    def database_path(self) -> Path:
        return self._file("hotfixmirror.db")

    def http_cache_path(self) -> Path:
        return self._file("http_cache.db")


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv(DATA_DIR_ENV)
    if env_dir:
        data_dir = Path(env_dir)
    else:
        xdg_home = os.getenv("XDG_DATA_HOME")
        base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
        data_dir = base / "hotfixmirror"
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_uri(*, storage: StorageConfig | None = None) -> str:
    """``DATABASE_URI`` when set, otherwise a SQLite file in the data directory."""

    env_uri = os.getenv(DATABASE_URI_ENV)
    if env_uri:
        return env_uri
    storage_config = storage or get_storage_config()
    return f"sqlite+pysqlite:///{storage_config.database_path()}"
