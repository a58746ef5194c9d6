# reelview/core/log.py
"""
Logging setup for the `reelview` logger hierarchy.

Library modules only call `logging.getLogger(__name__)`; handlers are
installed here, once, by entry points.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "reelview"
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DATEFMT = "(%Y-%m-%d %H:%M:%S)"

_CONFIGURED = False


def debug_enabled() -> bool:
    return os.getenv("REELVIEW_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(level: int | str | None = None, log_path: str | Path | None = None) -> logging.Logger:
    """
    Install a stderr handler and, optionally, a rotating file handler on the
    `reelview` logger. Safe to call more than once; only the first call adds
    handlers.
    """
    global _CONFIGURED
    logger = logging.getLogger(ROOT_LOGGER)

    if debug_enabled():
        logger.setLevel(logging.DEBUG)
    elif level is not None:
        logger.setLevel(level)
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    if _CONFIGURED:
        return logger

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_path is not None:
        path = Path(log_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        except OSError as e:
            logger.warning("file logging disabled (%s): %s", path, e)

    logger.propagate = False
    _CONFIGURED = True
    return logger


__all__ = ["ROOT_LOGGER", "configure_logging", "debug_enabled"]
