"""
Logging utilities for the Collections UI.

Every module asks for its logger with ``logs.logger(__file__)`` so log
lines carry the short module name instead of the full path.
"""

import logging
import os
from pathlib import Path

_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def logger(name: str) -> logging.Logger:
    """
    Return a configured logger for a module.

    Args:
        name: Logger name or a ``__file__`` path, reduced to the file stem.

    Returns:
        Logger with a single stream handler attached.
    """
    if "/" in name or "\\" in name:
        name = Path(name).stem

    log = logging.getLogger(f"collections_ui.{name}")

    if not log.handlers:
        log.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        log.addHandler(handler)

    return log
