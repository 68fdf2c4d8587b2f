"""
Logging configuration using loguru.

Hosts can call setup_logging() at startup, or just use loguru directly.
The library itself only emits through ``loguru.logger``.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from reflection.core.config import Config

_CONSOLE_FORMAT = "<level>[{level.name}]</level> {message}"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure loguru with stderr and optional rotating file output.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None, only logs to stderr.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT)

    if log_file:
        logger.add(log_file, level=level, format=_FILE_FORMAT, rotation=rotation, retention=retention)


def setup_logging_from_config(config: Config, verbose: bool = False) -> None:
    """Apply the ``logging`` section of *config*; *verbose* forces DEBUG."""
    level = "DEBUG" if verbose else str(config.get("logging.level", "WARNING"))
    setup_logging(level=level, log_file=config.get("logging.file"))
