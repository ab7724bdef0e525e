"""Log handler setup for the command line entry point.

Library modules only create loggers; handlers are attached here, once.
"""

import logging
import sys

__all__ = ["setup_logging"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a stderr handler to the ``essentials_time`` logger."""
    logger = logging.getLogger("essentials_time")
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    logger.setLevel(resolved)

    # Avoid adding duplicate handlers when invoked repeatedly in one process
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
