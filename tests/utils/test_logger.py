"""Tests for the application logger utility."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset the logger singleton and logging state between tests."""
    import chromatask_cli.utils.logger as logger_mod

    original = logger_mod._logger
    logger_mod._logger = None

    existing = logging.getLogger("chromatask_cli")
    saved_handlers = list(existing.handlers)
    saved_level = existing.level
    existing.handlers.clear()

    yield

    for handler in existing.handlers:
        handler.close()
    existing.handlers[:] = saved_handlers
    existing.setLevel(saved_level)
    logger_mod._logger = original


def test_get_logger_creates_log_file(tmp_path):
    """Logger creates the log file inside user_log_dir."""
    with patch("chromatask_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from chromatask_cli.utils.logger import get_logger

        logger = get_logger()

    assert (tmp_path / "chromatask.log").exists()
    assert isinstance(logger, logging.Logger)


def test_get_logger_returns_singleton(tmp_path):
    with patch("chromatask_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from chromatask_cli.utils.logger import get_logger

        assert get_logger() is get_logger()


def test_child_logger_writes_to_shared_file(tmp_path):
    """Child loggers share the one rotating file handler of the app logger."""
    with patch("chromatask_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from chromatask_cli.utils.logger import get_logger

        app_logger = get_logger()
        child = get_logger("tasks")

    assert child.name == "chromatask_cli.tasks"
    assert app_logger.propagate is False
    handlers = [h for h in app_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(handlers) == 1
    assert Path(handlers[0].baseFilename) == tmp_path / "chromatask.log"

    record = child.makeRecord(child.name, logging.INFO, __file__, 0, "hello from test", None, None)
    handlers[0].handle(record)
    handlers[0].flush()

    content = (tmp_path / "chromatask.log").read_text(encoding="utf-8")
    assert "hello from test" in content
    assert "[chromatask_cli.tasks]" in content


def test_log_level_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("CHROMATASK_LOG_LEVEL", "warning")
    with patch("chromatask_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from chromatask_cli.utils.logger import get_logger

        logger = get_logger()

    assert logger.level == logging.WARNING
