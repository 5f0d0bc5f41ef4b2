"""Centralised Loguru logger shared by the classification engine."""
from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    """Route log records to stderr at ``level``.

    Called once by the command-line entry points. Library code only imports
    ``logger`` and never touches the sinks.
    """

    logger.remove()
    logger.add(sys.stderr, level=level.upper())


__all__ = ["configure_logging", "logger"]
