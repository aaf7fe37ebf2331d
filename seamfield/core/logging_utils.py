"""
Logging helpers.

The solver itself never writes to stdout/stderr. Every diagnostic goes through
a `logging.Logger`, either the module logger or one injected by the caller so
that concurrent solves can keep their output apart. Handler and level setup is
left to the application.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

_LOG_ONCE_KEYS: set[str] = set()
_LOG_ONCE_LOCK = threading.Lock()


def resolve_logger(logger: Optional[logging.Logger], default: logging.Logger) -> logging.Logger:
    """Return the caller-supplied logger, or `default` when none was injected."""
    return logger if logger is not None else default


def log_once(
    logger: logging.Logger,
    key: str,
    level: int,
    msg: str,
    *args,
    exc_info: bool | BaseException | None = None,
) -> bool:
    """
    Logs at most once per process for the given key.

    Used for conditions that are worth one warning but would flood the log
    when a caller re-solves the same mesh many times.
    """
    k = str(key)
    with _LOG_ONCE_LOCK:
        if k in _LOG_ONCE_KEYS:
            return False
        _LOG_ONCE_KEYS.add(k)

    logger.log(level, msg, *args, exc_info=exc_info)
    return True
