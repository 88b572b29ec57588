"""
Logging setup for the ourjournal CLI.

Everything logs through loguru. litellm logs through the standard library,
so its records are forwarded into loguru and share the same sinks.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from ourjournal.core.config_schema import LoggingConfig

CONSOLE_FORMAT = "<level>{level: <7}</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}"
FORWARDED_LOGGERS = ("LiteLLM", "httpx")


class _LoguruForwarder(logging.Handler):
    """Re-emits standard-library log records through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, f"[{record.name}] {record.getMessage()}")


def setup_logging(
    settings: LoggingConfig | None = None,
    level: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Configure loguru from the ``logging`` config section.

    Args:
        settings: ``logging`` section (level and optional file).
        level: Overrides ``settings.level``, e.g. from ``--log-level``.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    level = (level or (settings.level if settings else "WARNING")).upper()
    log_file = settings.file if settings else None

    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=FILE_FORMAT, rotation=rotation, retention=retention)

    forwarder = _LoguruForwarder()
    for name in FORWARDED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [forwarder]
        std_logger.setLevel(level)
        std_logger.propagate = False
