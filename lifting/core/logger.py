"""Loguru sinks for the lifting CLI and services.

Service code logs with structured context (``logger.info("Set added",
workout_id=..., set_number=...)``). The formatters below append that context
as ``key=value`` pairs and print nothing extra when there is none.
"""

import sys
from pathlib import Path

from loguru import logger

_CONSOLE_PREFIX = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
_FILE_PREFIX = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def context_suffix(record: dict) -> str:
    """Format template for a record's bound context, e.g. ' | week_number={extra[week_number]}'."""
    if not record["extra"]:
        return ""
    return " | " + " ".join(f"{key}={{extra[{key}]}}" for key in record["extra"])


def _console_format(record: dict) -> str:
    return _CONSOLE_PREFIX + context_suffix(record) + "\n{exception}"


def _file_format(record: dict) -> str:
    return _FILE_PREFIX + context_suffix(record) + "\n{exception}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's default sink with the lifting console and file sinks.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path; parent directories are created
        rotation: When to rotate the log file (e.g. "10 MB", "1 day")
        retention: How long rotated files are kept (e.g. "7 days")
    """
    logger.remove()
    logger.add(sys.stderr, format=_console_format, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=_file_format,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )

    logger.debug("Logging configured", level=level, log_file=log_file)
