"""
Application-wide logger.
"""

import logging
import sys

from .config import settings


def setup_logger() -> logging.Logger:
    """Configure and return the application logger.

    The handler is attached only once so repeated imports (and the Flask
    reloader) do not duplicate output.
    """
    logger = logging.getLogger("facsched")
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "%(asctime)s - %(module)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(handler)

    return logger


# Single logger instance imported by other modules
log = setup_logger()
