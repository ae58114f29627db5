"""
Purpose: Route dispatcher diagnostics to stderr through the stdlib logging tree.
Key Exports: setup_logging(), LOG_FORMAT.
Role: One handler on the `bunb` logger, configured from BUNB_LOG_LEVEL by the entry point.
Invariants: Repeated setup never stacks handlers; unknown level names fall back to WARNING.
"""

from __future__ import annotations

import logging
import sys

_configured = False

LOG_FORMAT = "bunb: %(levelname)s: %(message)s"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a single stderr handler to the ``bunb`` logger.

    Repeated calls only adjust the level, so tests and nested entry points do
    not stack handlers.
    """
    global _configured
    logger = logging.getLogger("bunb")
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logger.setLevel(numeric)
    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True
    return logger
