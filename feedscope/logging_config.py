"""
Logging configuration.

Provides the package-wide logger factory and a one-shot initializer.
"""

import logging

from .config import settings

_ROOT_LOGGER = "feedscope"
_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


def init_logging(level: str | int | None = None) -> logging.Logger:
    """
    Configure the feedscope logger hierarchy.

    Safe to call more than once; the stream handler is only attached once.

    Args:
        level: Log level name or number. Defaults to the configured level.

    Returns:
        The package root logger.
    """
    level = level or settings.log_level
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the feedscope hierarchy."""
    if name != _ROOT_LOGGER and not name.startswith(_ROOT_LOGGER + "."):
        name = f"{_ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
