"""
🔥 THINK ULTRA! Logging utilities for TABLEFORGE
Engine modules and the grid editor service share one console format.

    logger = get_logger(__name__)                        # engine module
    logger = get_editor_logger("table_editor_service")   # -> grid_editor.table_editor_service
"""

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
EDITOR_LOGGER_ROOT = "grid_editor"


def _to_level(level: Union[str, int, None]) -> int:
    """Level name or number -> logging level (unknown names fall back to INFO)"""
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def get_logger(name: str, level: Union[str, int, None] = None) -> logging.Logger:
    """
    Get a console logger.

    A logger is configured once; later calls return it unchanged. Records do not
    propagate to the root logger so nothing is printed twice.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    log_level = _to_level(level)
    logger.setLevel(log_level)
    logger.addHandler(_console_handler(log_level))
    logger.propagate = False
    return logger


def configure_logging(level: str = "INFO") -> None:
    """
    Set the root level and attach the console handler if the root has none.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level = _to_level(level)
    logging.root.setLevel(log_level)
    if not logging.root.handlers:
        logging.root.addHandler(_console_handler(log_level))


def get_editor_logger(name: str = EDITOR_LOGGER_ROOT) -> logging.Logger:
    """Grid editor service logger, namespaced under grid_editor."""
    if name == EDITOR_LOGGER_ROOT:
        return get_logger(EDITOR_LOGGER_ROOT)
    return get_logger(f"{EDITOR_LOGGER_ROOT}.{name}")
