"""Configuration constants and .env loading.

WHY: Pool capacity, item limits, label format and the exchange version the
tool writes are plain data. Keeping them in one module makes them easy to
find and override without touching codec logic.

HOW: python-dotenv loads the .env file on import. Fixed format constants are
plain module-level values; the overridable ones read os.getenv with a
default. load_exchange_version() validates the override.

RULES:
- SEQUENCE_COUNT is fixed at 5 and is part of both wire formats
- MAX_SEQUENCES bounds pool indices (project load rejects index >= capacity)
- LEGACY_MAX_RUNS is the size of the pre-v20 run arrays
- All overridable defaults come from environment variables, never hardcoded paths
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Fixed format constants
# ---------------------------------------------------------------------------

SEQUENCE_COUNT = 5
"""Number of sequence slots on an S5B instrument."""

MAX_SEQUENCE_ITEMS = 252
"""Largest item count a single sequence may hold."""

LEGACY_MAX_RUNS = 64
"""Run-length pairs a pre-v20 exchange payload may carry."""

NO_LOOP = -1
"""Loop point sentinel meaning 'the sequence does not loop'."""

NO_RELEASE = -1
"""Release point sentinel meaning 'no release section'."""

# ---------------------------------------------------------------------------
# Overridable defaults
# ---------------------------------------------------------------------------

MAX_SEQUENCES = int(os.getenv("S5B_MAX_SEQUENCES", "128"))
"""Pool capacity per sequence type."""

SEQUENCE_LABEL_FORMAT = os.getenv("S5B_SEQUENCE_LABEL_FORMAT", "ft_seq_s5b_{}")
"""Label template for compiled sequence references."""

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

DEFAULT_EXCHANGE_VERSION = 25


def load_exchange_version() -> int:
    """Return the exchange version the CLI writes and assumes by default.

    WHY: Exchange payloads are version-gated. Users converting old files in
    bulk may want to pin the assumed input version without a flag on every
    call.

    HOW: Reads S5B_EXCHANGE_VERSION, falling back to DEFAULT_EXCHANGE_VERSION.

    RULES:
    - Raises ValueError if the override is not a non-negative integer
    """
    raw = os.getenv("S5B_EXCHANGE_VERSION", "").strip()
    if not raw:
        return DEFAULT_EXCHANGE_VERSION
    try:
        version = int(raw)
    except ValueError:
        raise ValueError(
            "S5B_EXCHANGE_VERSION must be an integer, got {!r}".format(raw)
        ) from None
    if version < 0:
        raise ValueError("S5B_EXCHANGE_VERSION must not be negative")
    return version
