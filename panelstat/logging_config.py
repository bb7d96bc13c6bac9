# SPDX-License-Identifier: GPL-3.0-or-later
# Logging configuration

"""Logging configuration for Panelstat."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = 'panelstat'

SIMPLE_FORMAT = logging.Formatter(
    '%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s',
    datefmt='%H:%M:%S'
)


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Set up application-wide logging.

    Args:
        level: Logging level for the console handler.

    Returns:
        Root logger for the application.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(SIMPLE_FORMAT)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Module names already inside the package namespace are used as-is.
    """
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{LOGGER_NAME}.{name}')
