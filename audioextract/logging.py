"""
audioextract.logging - Centralized logging configuration.

Rows are written from pool threads, so every record carries the name of
the thread that emitted it. pyarrow chatter is held at WARNING even
in verbose mode.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("audioextract")

LOG_FORMAT = "%(levelname)s [%(threadName)s]: %(message)s"
QUIET_LOGGERS = ("pyarrow",)


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the audioextract package.

    Args:
        verbose: If True, enable DEBUG level logging for audioextract;
            otherwise WARNING level
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
