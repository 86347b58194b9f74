"""Logging setup for command-line runs."""

from __future__ import annotations

import logging
import os
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    *,
    level: Optional[str] = None,
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
) -> logging.Logger:
    """Configure root logging and the package logger.

    Args:
        level: Optional explicit log level. Falls back to the
            ``FOREST_LOG_LEVEL`` env var, then INFO.
        format: Log format string.
        datefmt: Date format string.

    Returns:
        The package logger (``forest_ecosim``).
    """
    raw_level = level if level is not None else os.getenv("FOREST_LOG_LEVEL")
    resolved_level = (raw_level or "INFO").upper()
    logging.basicConfig(level=resolved_level, format=format, datefmt=datefmt)

    pkg_logger = logging.getLogger("forest_ecosim")
    pkg_logger.setLevel(resolved_level)
    pkg_logger.debug("Logging configured at %s", resolved_level)
    return pkg_logger
