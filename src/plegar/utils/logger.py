"""Minimal logging utilities for Plegar.

Provides a simple get_logger function that wraps the standard library logging.
The library never configures handlers; applications decide where records go.

Example:
    >>> from plegar.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Lexed %d tokens", 42)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "plegar." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("engine")
        >>> logger.name
        'plegar.engine'
    """
    if not (name == "plegar" or name.startswith("plegar.")):
        name = f"plegar.{name}"
    return logging.getLogger(name)
