"""Loguru sink configuration shared by the API server and the CLI."""
from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from config import Settings

CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


def configure_logging(settings: Settings, console_level: str | None = None) -> None:
    """
    Replace loguru's default sink with ours.

    Args:
        settings: Application settings (log level and optional log file)
        console_level: Override for the stderr sink, e.g. "WARNING" for the CLI
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=console_level or settings.log_level,
        format=CONSOLE_FORMAT,
    )

    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            settings.log_file,
            level=settings.log_level,
            format=FILE_FORMAT,
            rotation="5 MB",
            retention=5,
            encoding="utf-8",
        )
