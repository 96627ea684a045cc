"""Logger factory shared by the compiler, the CLI and the request handlers.

Usage:
    from simple_msf.log import get_logger
    logger = get_logger(__name__)
    logger.info("Something happened")
"""

import logging
import sys

from simple_msf.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """Return a named logger writing to stdout.

    If *level* is None the level is taken from ``MsfSettings.log_level``.
    """
    resolved_level = level if level is not None else get_settings().log_level
    logger = logging.getLogger(name)

    # Avoid adding duplicate handlers if the logger already exists
    if not logger.handlers:
        logger.setLevel(resolved_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(resolved_level)
        console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(console_handler)

        logger.propagate = False

    return logger
