"""app_paths.py

Shared file-path helpers for the student admin client.

Preferences and logs live in a stable per-user directory so they survive
reinstalls. In development (not frozen) the project directory is used, which
keeps a checkout self-contained.

Overrides
---------
- STUDENT_ADMIN_DATA_DIR: explicit data directory (tests/CI or custom setups).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional


APP_NAME = "StudentAdmin"
DATA_DIR_ENV = "STUDENT_ADMIN_DATA_DIR"


def is_frozen() -> bool:
    """True when running as a PyInstaller/"frozen" app."""
    return bool(getattr(sys, "frozen", False)) or hasattr(sys, "_MEIPASS")


def _default_data_root() -> Path:
    """OS-typical base for user data."""
    if sys.platform.startswith("win"):
        base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA")
        if base:
            return Path(base)
        return Path.home() / "AppData" / "Local"

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"

    xdg = os.getenv("XDG_DATA_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".local" / "share"


def data_dir(app_name: str = APP_NAME) -> Path:
    """Directory for user data.

    Rules:
      1) STUDENT_ADMIN_DATA_DIR (if set) always wins
      2) frozen: OS default (AppData/...)/app_name
      3) not frozen: the project directory
    """
    override = os.getenv(DATA_DIR_ENV)
    if override and override.strip():
        return Path(override).expanduser().resolve()

    if is_frozen():
        return (_default_data_root() / app_name).resolve()

    return Path(__file__).resolve().parent


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def data_file(filename: str, *, app_name: str = APP_NAME, subdir: Optional[str] = None) -> Path:
    """Full path to a file in the data directory (creating the directory if needed)."""
    base = data_dir(app_name=app_name)
    if subdir:
        base = base / subdir
    ensure_dir(base)
    return (base / filename).resolve()


def log_dir() -> Path:
    return data_dir() / "logs"
