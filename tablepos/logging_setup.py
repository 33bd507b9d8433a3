"""Logging configuration for the terminal app."""

from __future__ import annotations

import logging
from pathlib import Path

from tablepos.config import DEBUG_LOG_PATH, LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(path: str | None = None, level: str | None = None) -> None:
    """Send all log records to a file; the terminal belongs to the UI."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level or LOG_LEVEL)

    log_path = Path(path or DEBUG_LOG_PATH)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        # Logging must never interfere with app flow.
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
