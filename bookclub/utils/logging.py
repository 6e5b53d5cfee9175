"""Loggers for the `bookclub.*` modules.

Each module asks for its own dotted name (`bookclub.collection_sync`,
`bookclub.routes`, ...). A logger is configured once, on first request, with
the level from BOOKCLUB_LOG_LEVEL and a single stream handler.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict

from bookclub import config as app_config

LOG_FORMAT = "[bookclub] %(asctime)s %(levelname)s %(name)s %(message)s"

_LOCK = threading.Lock()
_CONFIGURED: Dict[str, logging.Logger] = {}


def _configure(logger: logging.Logger) -> None:
    logger.setLevel(getattr(logging, app_config.log_level_name(), logging.INFO))
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    # Sync failures are reported here only; keep them out of the root logger.
    logger.propagate = False


def get_logger(name: str = "bookclub") -> logging.Logger:
    logger = _CONFIGURED.get(name)
    if logger is not None:
        return logger
    with _LOCK:
        if name not in _CONFIGURED:
            logger = logging.getLogger(name)
            _configure(logger)
            _CONFIGURED[name] = logger
        return _CONFIGURED[name]


__all__ = ["get_logger", "LOG_FORMAT"]
