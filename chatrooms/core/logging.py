# chatrooms/core/logging.py

import logging
import sys

from chatrooms.core.config import settings


DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level_name: str | None = None) -> int:
    """
    Configure application-wide logging.

    - Root level from ``level_name``, else ``settings.LOG_LEVEL`` (LOG_LEVEL env var)
    - Sends logs to stdout so the process supervisor picks them up
    - Keeps Uvicorn error logs, tones down the access log

    Returns:
        The numeric level applied to the root logger
    """
    level_name = (level_name or settings.LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # If logging is already configured (e.g. by Uvicorn), don't re-add handlers
    if root_logger.handlers:
        return level

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return level


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Helper to get a logger with our app's configuration applied.

    Usage:
        from chatrooms.core.logging import get_logger

        logger = get_logger(__name__)
        logger.info("Hello from my module")
    """
    return logging.getLogger(name)
