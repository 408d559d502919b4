"""
preferences.py  - JSON-backed preferences for the student admin client.
API:
  - get(key, default=None) / set(key, value)   (dotted keys, e.g. "api.base_url")
  - get_float
  - api_base_url() / api_timeout()
  - reload(path=None)  -> re-read from disk (tests point this at a tmp file)
Storage:
  - 'preferences.json' in app_paths.data_dir().
"""
from __future__ import annotations
import os, json, threading
from pathlib import Path
from typing import Any, Dict, Optional

import app_paths

DEFAULT_BASE_URL = "http://localhost:8080/api"
DEFAULT_TIMEOUT = 10.0
BASE_URL_ENV = "STUDENT_ADMIN_API_URL"

_LOCK = threading.RLock()
_PREFS_PATH: Optional[Path] = None
_DATA: Dict[str, Any] = {}


def _path() -> Path:
    global _PREFS_PATH
    if _PREFS_PATH is None:
        _PREFS_PATH = app_paths.data_file("preferences.json")
    return _PREFS_PATH


def _deep_get(d: Dict[str, Any], dotted: str, default: Any = None) -> Any:
    cur = d
    for part in dotted.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default
    return cur


def _deep_set(d: Dict[str, Any], dotted: str, value: Any) -> None:
    cur = d
    parts = dotted.split(".")
    for p in parts[:-1]:
        nxt = cur.get(p)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[p] = nxt
        cur = nxt
    cur[parts[-1]] = value


def reload(path: Optional[Path] = None) -> None:
    global _PREFS_PATH
    with _LOCK:
        if path is not None:
            _PREFS_PATH = Path(path)
        _DATA.clear()
        p = _path()
        if not p.exists():
            return
        try:
            with open(p, "r", encoding="utf-8") as f:
                obj = json.load(f)
        except (OSError, ValueError):
            return
        if isinstance(obj, dict):
            _DATA.update(obj)


def _save() -> None:
    with _LOCK:
        p = _path()
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp = str(p) + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(_DATA, f, ensure_ascii=False, indent=2)
        os.replace(tmp, p)


def get(key: str, default: Any = None) -> Any:
    with _LOCK:
        return _deep_get(_DATA, key, default)


def set(key: str, value: Any) -> None:
    with _LOCK:
        _deep_set(_DATA, key, value)
        _save()


def get_float(key: str, default: float = 0.0) -> float:
    val = get(key, default)
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def api_base_url() -> str:
    """Base URL of the backend (env override > preferences > default), without trailing slash."""
    env = os.getenv(BASE_URL_ENV, "").strip()
    url = env or str(get("api.base_url", DEFAULT_BASE_URL) or DEFAULT_BASE_URL)
    return url.rstrip("/")


def api_timeout() -> float:
    t = get_float("api.timeout", DEFAULT_TIMEOUT)
    return t if t > 0 else DEFAULT_TIMEOUT


reload()
