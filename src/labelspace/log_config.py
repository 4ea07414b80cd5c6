"""Logging configuration for the Labelspace CLI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from labelspace.config import LoggingSettings

PACKAGE_LOGGER = "labelspace"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    settings: LoggingSettings, *, console: Console | None = None
) -> logging.Logger:
    """Attach console and optional rotating file handlers to the package logger.

    Handlers installed by a previous call are replaced, so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        settings: Logging section of the effective configuration.
        console: Rich console for log output; defaults to stderr.

    Returns:
        logging.Logger: The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(console=console or Console(stderr=True), show_path=False, markup=False)
    )

    if settings.file:
        path = Path(settings.file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


__all__ = ["configure_logging", "PACKAGE_LOGGER"]
