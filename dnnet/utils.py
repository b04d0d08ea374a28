"""Logging helpers."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def enable_console_logging(level: int | str = logging.INFO) -> logging.Handler:
    """Attach a stream handler to the ``dnnet`` logger and return it.

    The library never configures logging on import; applications that want
    training progress on stderr call this once.
    """

    logger = logging.getLogger("dnnet")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
