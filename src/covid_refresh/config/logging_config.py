"""
COVID-19 Country Refresh - Centralized Logging Configuration

This module provides centralized logging configuration for the entire project.
Ensures consistent log formatting, levels, and output across all modules.
"""

import logging
import os
import sys
from typing import Optional

from .constants import LOG_FORMAT, LOG_LEVEL, LOG_LEVEL_ENV_VAR

PACKAGE_LOGGER_PREFIX = "covid_refresh"


def setup_logger(
    name: Optional[str] = None, level: str = LOG_LEVEL, format_string: str = LOG_FORMAT, stream=None
) -> logging.Logger:
    """
    Set up a logger with consistent configuration.

    Args:
        name: Logger name (defaults to the package logger)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Log message format
        stream: Output stream (defaults to stdout)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or PACKAGE_LOGGER_PREFIX)

    # Avoid duplicate handlers if logger already configured
    if logger.handlers:
        return logger

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)

    # Records are emitted by this handler; do not repeat them through root
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a package logger.

    Module loggers are children of the package logger, so they share its
    handler and level.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    setup_logger(PACKAGE_LOGGER_PREFIX, level=os.getenv(LOG_LEVEL_ENV_VAR, LOG_LEVEL))
    return logging.getLogger(name or PACKAGE_LOGGER_PREFIX)


def configure_logging(
    level: str = LOG_LEVEL, format_string: str = LOG_FORMAT, suppress_external: bool = True
) -> None:
    """
    Configure logging for the entire application.

    Args:
        level: Global logging level
        format_string: Log message format
        suppress_external: Whether to suppress verbose external library logs
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format_string,
        stream=sys.stdout,
        force=True,
    )

    if suppress_external:
        external_loggers = [
            "urllib3.connectionpool",
            "requests.packages.urllib3",
            "sqlalchemy.engine",
            "plotly",
        ]

        for logger_name in external_loggers:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    set_log_level(level)


def set_log_level(level: str) -> None:
    """
    Change the logging level for all covid_refresh loggers.

    Args:
        level: New logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    for name in list(logging.root.manager.loggerDict):
        if isinstance(name, str) and name.startswith(PACKAGE_LOGGER_PREFIX):
            logger = logging.getLogger(name)
            logger.setLevel(numeric_level)
            for handler in logger.handlers:
                handler.setLevel(numeric_level)
