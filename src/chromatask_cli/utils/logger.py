"""Application-wide logger writing to platformdirs user_log_dir.

Every module logs through a child of the ``chromatask_cli`` logger, so the
single rotating file handler installed here sees all records.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "chromatask_cli"
_LOG_FILE = "chromatask.log"
_LEVEL_ENV = "CHROMATASK_LOG_LEVEL"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def _configure_root() -> logging.Logger:
    log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logger = logging.getLogger(_APP_NAME)
    level_name = os.environ.get(_LEVEL_ENV, "DEBUG").upper()
    logger.setLevel(getattr(logging, level_name, logging.DEBUG))
    if not logger.handlers:
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger, or one of its children.

    The file handler is installed on first call.

    Args:
        name: Optional child name (e.g. "tasks" -> ``chromatask_cli.tasks``)
    """
    global _logger
    if _logger is None:
        _logger = _configure_root()
    if name:
        return _logger.getChild(name)
    return _logger
