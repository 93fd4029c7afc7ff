"""Logging helpers for huellas.

Every module logs through the standard library under the ``huellas.``
namespace. The library never installs handlers; hosts decide where
diagnostics go.

Example:
    >>> from huellas.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.warning("Snippet label %r not found", "setup")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under ``huellas``.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("snippet").name
        'huellas.snippet'
    """
    if not (name == "huellas" or name.startswith("huellas.")):
        name = f"huellas.{name}"
    return logging.getLogger(name)
