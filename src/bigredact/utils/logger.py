"""
BigRedact - Logger Module

Provides the shared application logger.
"""

import logging
import sys

from bigredact import config


def setup_logger() -> logging.Logger:
    """Create the application logger with a single stderr handler.

    Returns:
        The configured logger instance.
    """
    app_logger = logging.getLogger(config.LOGGER_NAME)
    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(config.LOG_FORMAT, config.LOG_DATE_FORMAT))
        app_logger.addHandler(handler)
    app_logger.setLevel(config.LOG_LEVEL)
    app_logger.propagate = False
    return app_logger


logger = setup_logger()
