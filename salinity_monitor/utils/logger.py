"""
Logging utilities for the salinity monitor

Logging is configured once by the command-line entry point. Library code
only asks for a bound logger, so importing the package never touches the
global loguru handlers.
"""

import sys
from pathlib import Path
from loguru import logger
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{line} - {message}"


def normalize_level(level: str) -> str:
    """
    Uppercase a level name and check it is one the monitor supports

    Raises:
        ValueError: If the level is unknown
    """
    name = str(level).strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    return name


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    log_file: str = "salinity_monitor.log",
    rotation: str = "10 MB",
    retention: str = "30 days",
    serialize: bool = False
):
    """
    Configure the stderr sink and, when log_dir is set, a rotating file sink

    Args:
        log_level: One of LOG_LEVELS
        log_dir: Directory for the log file (no file sink when None)
        log_file: Name of the log file
        rotation: When to rotate the log file (e.g., "10 MB", "1 day")
        retention: How long to keep old log files
        serialize: Whether the file sink writes JSON records
    """
    level = normalize_level(log_level)

    logger.remove()
    logger.configure(extra={"name": "salinity_monitor"})
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if not log_dir:
        logger.debug(f"Console logging at {level}")
        return logger

    log_path = Path(log_dir) / log_file
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(log_path),
        format=FILE_FORMAT,
        level=level,
        rotation=rotation,
        retention=retention,
        compression="zip",
        serialize=serialize
    )
    logger.debug(f"Logging to {log_path} at {level}")
    return logger


def get_logger(name: Optional[str] = None):
    """Loguru logger bound to a module name"""
    return logger.bind(name=name or "salinity_monitor")
