from __future__ import annotations

from pathlib import Path

import logger


def test_child_loggers_reach_memory_buffer() -> None:
    logger.clear_buffer()
    logger.get_logger("controller").info("Loaded %s students", 4)
    entries = logger.get_buffer()
    assert entries[-1]["message"] == "Loaded 4 students"
    assert entries[-1]["name"] == "student_admin.controller"
    assert entries[-1]["level"] == "INFO"


def test_get_logger_does_not_duplicate_handlers() -> None:
    root = logger.get_logger()
    n = len(root.handlers)
    logger.get_logger()
    logger.get_logger("x")
    assert len(root.handlers) == n


def test_log_exceptions_swallows_and_logs() -> None:
    logger.clear_buffer()

    @logger.log_exceptions
    def boom() -> None:
        raise RuntimeError("kaboom")

    assert boom() is None
    assert any("kaboom" in e["message"] for e in logger.get_buffer())


def test_configure_file_logging_writes_file(tmp_path: Path) -> None:
    path = logger.configure_file_logging(tmp_path / "logs")
    logger.get_logger().warning("to file")
    for h in logger.get_logger().handlers:
        h.flush()
    assert path.exists()
    assert "to file" in path.read_text(encoding="utf-8")
