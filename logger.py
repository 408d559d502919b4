from __future__ import annotations
import logging
import sys
import traceback
from collections import deque
from datetime import datetime
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional

LOGGER_NAME = "student_admin"

_buffer = deque(maxlen=5000)
_file_handler: Optional[RotatingFileHandler] = None


class _MemoryHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        _buffer.append({
            "time": datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S"),
            "level": record.levelname, "name": record.name, "message": record.getMessage(),
        })


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Application logger; ``name`` gives a child logger (``student_admin.<name>``)."""
    root = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, _MemoryHandler) for h in root.handlers):
        root.setLevel(logging.INFO); root.addHandler(_MemoryHandler())
    return root.getChild(name) if name else root


def get_buffer() -> List[Dict]: return list(_buffer)
def clear_buffer() -> None: _buffer.clear()


def configure_file_logging(log_dir: Path, filename: str = "student_admin.log") -> Path:
    """Attach a rotating file log (1 MB x 3) under ``log_dir``. Idempotent."""
    global _file_handler
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / filename
    root = get_logger()
    if _file_handler is not None:
        return Path(_file_handler.baseFilename)

    fh = RotatingFileHandler(logfile, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    root.addHandler(fh)
    _file_handler = fh
    return logfile


def log_exceptions(func):
    """Decorator for UI handlers: log unexpected exceptions instead of killing the main loop."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except Exception as e:
            get_logger().exception("Unexpected error in %s: %s", func.__name__, e)
            return None
    return wrapper


def install_excepthook() -> None:
    log = get_logger()

    def _hook(exc_type, exc, tb):
        log.error("Uncaught exception: %s", exc_type.__name__)
        log.error("Details: %s", exc)
        for line in traceback.format_tb(tb):
            log.error(line.rstrip())
    sys.excepthook = _hook
