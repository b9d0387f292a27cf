from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from apisource.config import storage


def test_get_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("APISOURCE_DATA_DIR", str(custom))

    config = storage.get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()
    assert config.raw_documents_dir() == custom.resolve() / storage.RAW_DOCUMENTS_DIRNAME


def test_default_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("APISOURCE_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    config = storage.get_storage_config()

    assert config.resolve_data_dir() == (tmp_path / "xdg" / storage.APP_DIR_NAME).resolve()


def test_document_cache_uri_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("APISOURCE_DATA_DIR", str(tmp_path / "data-dir"))

    uri = storage.get_storage_config().document_cache_uri()

    expected_path = (tmp_path / "data-dir" / storage.DOCUMENT_CACHE_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()
