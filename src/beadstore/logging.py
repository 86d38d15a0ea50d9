"""Logging setup for applications embedding beadstore.

Library modules only create loggers under the ``beadstore`` namespace;
nothing is emitted until an application attaches a handler.
"""

from __future__ import annotations

import logging
import threading

_setup_lock = threading.Lock()
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the ``beadstore`` logger.

    Calling it again only adjusts the level.
    """
    logger = logging.getLogger("beadstore")
    with _setup_lock:
        if not any(getattr(h, "_beadstore", False) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(_FORMAT))
            handler._beadstore = True  # type: ignore[attr-defined]
            logger.addHandler(handler)
        logger.setLevel(level)
    return logger
