"""Shared test fixtures for the s5b_instrument test suite.

WHY: Most test modules need the same starting point: a pool, an
instrument bound into it, and a few sequences with known contents.
Centralizing them keeps the expected values in one place.

HOW: Pytest fixtures build a fresh SequencePool per test and a sample
instrument whose VOLUME, PITCH and DUTYCYCLE slots are enabled and bound
to non-empty sequences; ARPEGGIO and HIPITCH stay disabled.

RULES:
- Every fixture builds new objects; no state is shared between tests
- Sample sequence contents are the values listed in SAMPLE_SEQUENCES
"""

from typing import Dict, List

import pytest

from s5b_instrument.core.instrument import Instrument
from s5b_instrument.core.pool import SequencePool
from s5b_instrument.core.sequence import Sequence, SequenceType


# ---------------------------------------------------------------------------
# Sample sequences bound by the sample instrument
# ---------------------------------------------------------------------------

SAMPLE_SEQUENCES: Dict[SequenceType, Dict] = {
    SequenceType.VOLUME: {
        "index": 3,
        "items": [15, 14, 12, 10, 8, 6, 4, 2, 0],
        "loop_point": -1,
        "release_point": 6,
        "setting": 0,
    },
    SequenceType.PITCH: {
        "index": 0,
        "items": [0, 2, -2, 2, -2],
        "loop_point": 1,
        "release_point": -1,
        "setting": 1,
    },
    SequenceType.DUTYCYCLE: {
        "index": 7,
        "items": [0, 16, 31],
        "loop_point": 0,
        "release_point": -1,
        "setting": 0,
    },
}


def fill_sequence(sequence: Sequence, items: List[int], loop_point: int = -1,
                  release_point: int = -1, setting: int = 0) -> Sequence:
    """Overwrite ``sequence`` with the given contents."""
    sequence.set_item_count(len(items))
    for i, value in enumerate(items):
        sequence.set_item(i, value)
    sequence.set_loop_point(loop_point)
    sequence.set_release_point(release_point)
    sequence.set_setting(setting)
    return sequence


@pytest.fixture
def pool():
    """An empty pool with the default capacity."""
    return SequencePool()


@pytest.fixture
def sample_instrument(pool):
    """Instrument named 'Lead' with VOLUME, PITCH and DUTYCYCLE bound."""
    instrument = Instrument(pool, name="Lead")
    for seq_type, entry in SAMPLE_SEQUENCES.items():
        pool.reserve(seq_type, entry["index"])
        fill_sequence(
            pool.lookup(entry["index"], seq_type),
            entry["items"],
            loop_point=entry["loop_point"],
            release_point=entry["release_point"],
            setting=entry["setting"],
        )
        instrument.set_slot_enabled(seq_type, True)
        instrument.set_slot_index(seq_type, entry["index"])
    return instrument


@pytest.fixture
def fill():
    """The fill_sequence helper, for tests that build their own sequences."""
    return fill_sequence
