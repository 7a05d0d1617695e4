"""Logging configuration for the URL shortener."""

import logging
import sys


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the `shorturl` logger tree to write to stdout.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ...)

    Returns:
        The configured root `shorturl` logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("shorturl")
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
