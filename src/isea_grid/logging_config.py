"""
Logging Configuration
=====================

Library modules only create loggers (logging.getLogger(__name__)); handlers
are installed here, by scripts or by the embedding application.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "isea_grid"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the 'isea_grid' logger namespace.

    Args:
        level: logging level (e.g. logging.DEBUG)
        log_file: optional path, overwritten on each call

    Returns:
        the package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Re-running setup replaces handlers instead of duplicating output
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialised at level %s", logging.getLevelName(level))
    return logger
