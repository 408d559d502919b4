from __future__ import annotations

from pathlib import Path

import pytest

import app_paths


def test_env_override_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(app_paths.DATA_DIR_ENV, str(tmp_path))
    assert app_paths.data_dir() == tmp_path.resolve()
    f = app_paths.data_file("preferences.json", subdir="cfg")
    assert f == (tmp_path / "cfg" / "preferences.json").resolve()
    assert f.parent.is_dir()
    assert app_paths.log_dir() == tmp_path.resolve() / "logs"


def test_dev_mode_uses_project_dir(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(app_paths.DATA_DIR_ENV, raising=False)
    monkeypatch.setattr(app_paths, "is_frozen", lambda: False)
    assert app_paths.data_dir() == Path(app_paths.__file__).resolve().parent


def test_frozen_uses_os_data_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(app_paths.DATA_DIR_ENV, raising=False)
    monkeypatch.setattr(app_paths, "is_frozen", lambda: True)
    monkeypatch.setattr(app_paths, "_default_data_root", lambda: tmp_path)
    assert app_paths.data_dir() == (tmp_path / app_paths.APP_NAME).resolve()
