"""
Logging utilities for MecaMaster Lab.

Provides consistent logging configuration across all modules.

Usage:
    from logging_utils import get_logger

    logger = get_logger(__name__)
    logger.info("Requirement added")
    logger.warning("Advisory call failed")
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "mecamaster"

# Default format for log messages
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Track if root logger has been configured
_root_configured = False


def parse_level(level: int | str) -> int:
    """
    Turn a level name ("debug", "INFO") or number into a logging level.

    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: int | str = logging.INFO,
    format_str: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    stream: Optional[object] = None,
) -> None:
    """
    Configure the root logger for MecaMaster Lab.

    Call this once at application startup to set up logging.
    Subsequent calls will be ignored.

    Args:
        level: Logging level or level name (default: INFO)
        format_str: Log message format
        date_format: Date format for timestamps
        stream: Output stream (default: sys.stderr)
    """
    global _root_configured
    if _root_configured:
        return

    level = parse_level(level)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(format_str, date_format))

    root.addHandler(handler)
    _root_configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance under the mecamaster hierarchy.
    """
    # Ensure root is configured with defaults
    configure_logging()

    # Strip src. prefix if present for cleaner names
    if name.startswith("src."):
        name = name[4:]

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_level(level: int | str) -> None:
    """Set the level of all MecaMaster loggers, configuring them if needed."""
    configure_logging()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(parse_level(level))


def set_verbose(verbose: bool) -> None:
    """
    Set verbose mode for all MecaMaster loggers.

    Args:
        verbose: If True, set level to DEBUG. If False, set to INFO.
    """
    set_level(logging.DEBUG if verbose else logging.INFO)
