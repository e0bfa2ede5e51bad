"""Logging setup shared by the API process and the health checker.

Modules log through ``logging.getLogger(__name__)``; everything under the
``app`` package ends up on the handler installed by :func:`configure_logging`.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
ROOT_LOGGER_NAME = "app"


def configure_logging(level: int | str = "INFO") -> logging.Logger:
    """(Re)configure the ``app`` logger with a single stdout handler."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
