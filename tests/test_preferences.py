from __future__ import annotations

import json
from pathlib import Path

import pytest

import preferences


@pytest.fixture()
def prefs_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(preferences.BASE_URL_ENV, raising=False)
    path = tmp_path / "preferences.json"
    preferences.reload(path)
    yield path
    preferences.reload(path)


def test_defaults_without_file(prefs_file: Path) -> None:
    assert preferences.api_base_url() == preferences.DEFAULT_BASE_URL
    assert preferences.api_timeout() == preferences.DEFAULT_TIMEOUT


def test_set_persists_dotted_keys(prefs_file: Path) -> None:
    preferences.set("api.base_url", "http://example.test:9000/api/")
    data = json.loads(prefs_file.read_text(encoding="utf-8"))
    assert data == {"api": {"base_url": "http://example.test:9000/api/"}}
    preferences.reload(prefs_file)
    assert preferences.api_base_url() == "http://example.test:9000/api"


def test_env_overrides_file(prefs_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    preferences.set("api.base_url", "http://file.test/api")
    monkeypatch.setenv(preferences.BASE_URL_ENV, "http://env.test/api")
    assert preferences.api_base_url() == "http://env.test/api"


def test_typed_getters(prefs_file: Path) -> None:
    preferences.set("api.timeout", "2.5")
    assert preferences.api_timeout() == 2.5
    preferences.set("api.other", "x")
    assert preferences.get_float("api.other", 7.0) == 7.0
    assert preferences.get("missing.key", "d") == "d"


def test_non_positive_timeout_falls_back(prefs_file: Path) -> None:
    preferences.set("api.timeout", 0)
    assert preferences.api_timeout() == preferences.DEFAULT_TIMEOUT


def test_corrupt_file_is_ignored(prefs_file: Path) -> None:
    prefs_file.write_text("{not json", encoding="utf-8")
    preferences.reload(prefs_file)
    assert preferences.get("api.base_url") is None
