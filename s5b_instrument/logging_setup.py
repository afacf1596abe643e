"""Logging configuration for the command-line tool."""

from __future__ import annotations

import logging
import sys

from s5b_instrument.config import LOG_LEVEL


def configure_logging(level_name: str | None = None) -> int:
    """Configure process-wide logging and return the resolved level.

    The level comes from ``level_name`` or, when omitted, from ``LOG_LEVEL``.
    Log output goes to stderr so JSON on stdout stays pipeable.
    """
    requested = (level_name or LOG_LEVEL).upper()
    level = getattr(logging, requested, None)
    invalid_level = None
    if not isinstance(level, int):
        level = logging.WARNING
        invalid_level = requested

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    if invalid_level is not None:
        logging.getLogger(__name__).warning(
            "Invalid LOG_LEVEL '%s'; using %s", invalid_level, logging.getLevelName(level)
        )

    return level
