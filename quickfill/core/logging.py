"""Logging setup for applications that embed quickfill.

Library modules only call ``logging.getLogger(__name__)``; nothing here runs on
import. A host calls ``configure_logging`` once to get quickfill's records on
the console and in a rotating log file.
"""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from pathlib import Path

PACKAGE_LOGGER = "quickfill"
LOG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "quickfill" / "logs"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO, log_dir: Path | None = None) -> logging.Logger:
    """Attach console and rotating file handlers to the ``quickfill`` logger.

    Calling it again only updates the level.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if any(getattr(handler, "_quickfill", False) for handler in logger.handlers):
        return logger

    log_dir = log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    file_handler = RotatingFileHandler(log_dir / "quickfill.log", maxBytes=512_000, backupCount=5)
    for handler in (console_handler, file_handler):
        handler.setFormatter(formatter)
        handler._quickfill = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
