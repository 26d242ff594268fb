"""Logging setup for the sysmon logger tree."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int | str = logging.INFO, name: str = "sysmon") -> logging.Logger:
    """
    Attach a stdout handler to the ``sysmon`` logger.

    Calling it again is a no-op apart from the level, so the handler is never
    duplicated.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
