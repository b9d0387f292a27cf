"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "apisource"
DOCUMENT_CACHE_FILENAME: Final[str] = "document_cache.db"
RAW_DOCUMENTS_DIRNAME: Final[str] = "raw"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    document_cache_filename: str = DOCUMENT_CACHE_FILENAME
    raw_documents_dirname: str = RAW_DOCUMENTS_DIRNAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def document_cache_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.document_cache_filename

    def raw_documents_dir(self) -> Path:
        return self.resolve_data_dir() / self.raw_documents_dirname

    def document_cache_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.document_cache_path()}"


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("APISOURCE_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)
