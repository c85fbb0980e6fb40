"""Logging configuration for the gift compliment package."""

from __future__ import annotations

import logging
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(
    level: int = logging.INFO,
    handler: Optional[logging.Handler] = None,
    logger_name: Optional[str] = None,
) -> logging.Logger:
    """Configure root logging with a consistent format and return a logger."""
    logging.basicConfig(level=level, format=_DEFAULT_FORMAT, handlers=[handler] if handler else None)
    return logging.getLogger(logger_name)


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured for the given ``name``."""
    return logging.getLogger(name)
