"""
================================================================================
Common Utilities
================================================================================

Shared logging setup for the TUEL automation suite.

Exports:
    - init_logger: Initialize loguru with console (and optional file) sinks
    - mask_sensitive: Redact credentials from text before it is logged
    - ensure_directory: Create a directory if it does not exist

Usage:
    from tuel_autotest.common import init_logger, mask_sensitive

    init_logger()
    logger.info(mask_sensitive(f"Typing {password}", [password]))

================================================================================
"""

import os
import sys
from typing import Iterable, Optional

from loguru import logger


MASK = "***MASKED***"

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to. Defaults to config value.
        force: Re-initialize even if already configured

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/ui.log")
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    from tuel_autotest.ui_testing.framework.config_loader import ConfigLoader

    config = ConfigLoader()

    logger.remove()

    level = level or config.get("logging.level", "INFO")
    format_string = format_string or config.get("logging.format", DEFAULT_FORMAT)

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    log_file = log_file or config.get("logging.file")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            ensure_directory(log_dir)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=config.get("logging.rotation", "10 MB"),
            retention=config.get("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


def mask_sensitive(text: str, secrets: Iterable[Optional[str]]) -> str:
    """
    Replace every occurrence of each non-empty secret in text.

    Masking can be switched off with `logging.mask_sensitive: false`.
    """
    from tuel_autotest.ui_testing.framework.config_loader import ConfigLoader

    if not text or not ConfigLoader().get("logging.mask_sensitive", True):
        return text
    for secret in secrets:
        if secret:
            text = text.replace(secret, MASK)
    return text


def ensure_directory(path: str) -> str:
    """
    Ensures a directory exists, creating it if necessary.

    Returns:
        The path (for chaining)
    """
    os.makedirs(path, exist_ok=True)
    return path


__all__ = [
    "init_logger",
    "mask_sensitive",
    "ensure_directory",
    "MASK",
]
