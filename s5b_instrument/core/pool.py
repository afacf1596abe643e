"""Shared registry of S5B sequences addressed by (type, index).

WHY: Sequences are owned by the document, not by any one instrument.
Several instruments may bind the same pool entry, and an entry outlives
every instrument that points at it. The codecs and the compiler need a
small, well-defined surface to allocate and look up entries.

HOW: Entries live in a dict keyed by (SequenceType, index) and are created
lazily on first access, so an untouched pool costs nothing. find_free()
reports the lowest index that is neither claimed nor holding data, and
allocate_free() does the same scan and claims the result. Each
entry also carries a generation counter that release() bumps, which lets a
SequenceHandle detect that the entry it captured has been recycled.

RULES:
- Indices are 0 <= index < capacity; anything else raises BoundsError
- allocate_free returns None on exhaustion (never raises)
- A claimed index is never handed out again until released or unclaimed
- unclaim() keeps the data; release() clears the sequence and invalidates outstanding handles
- No internal locking; the owning document serializes access
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from s5b_instrument.config import MAX_SEQUENCES
from s5b_instrument.core.sequence import Sequence, SequenceType
from s5b_instrument.errors import BoundsError, StaleHandleError

logger = logging.getLogger(__name__)


class SequenceHandle(NamedTuple):
    """A generation-checked reference to one pool entry."""

    seq_type: SequenceType
    index: int
    generation: int


class SequencePool:
    """In-memory sequence pool with per-type capacity.

    Args:
        capacity: Number of entries available per sequence type. A capacity
                  of zero makes every allocation fail, which is how tests
                  exercise the exhausted-pool path.
    """

    def __init__(self, capacity: int = MAX_SEQUENCES) -> None:
        if capacity < 0:
            raise ValueError("Pool capacity must not be negative")
        self.capacity = capacity
        self._sequences: dict[tuple[SequenceType, int], Sequence] = {}
        self._claimed: set[tuple[SequenceType, int]] = set()
        self._generations: dict[tuple[SequenceType, int], int] = {}

    def _key(self, index: int, seq_type: int) -> tuple[SequenceType, int]:
        if not 0 <= index < self.capacity:
            raise BoundsError(
                "Sequence index {} outside pool capacity {}".format(index, self.capacity)
            )
        return SequenceType(seq_type), index

    def lookup(self, index: int, seq_type: int) -> Sequence:
        """Return the sequence at (index, type), creating an empty one if unused."""
        key = self._key(index, seq_type)
        sequence = self._sequences.get(key)
        if sequence is None:
            sequence = self._sequences[key] = Sequence()
        return sequence

    def find_free(self, seq_type: int) -> int | None:
        """Return the lowest free index for a type without claiming it.

        RULES:
        - Free means: not claimed and the stored sequence (if any) is empty
        - Returns None when every index is taken
        """
        seq_type = SequenceType(seq_type)
        for index in range(self.capacity):
            key = (seq_type, index)
            if key in self._claimed:
                continue
            existing = self._sequences.get(key)
            if existing is not None and not existing.is_empty:
                continue
            return index
        logger.debug("No free %s sequence in pool of %d", seq_type.name, self.capacity)
        return None

    def allocate_free(self, seq_type: int) -> int | None:
        """Claim and return the lowest free index for a type, or None."""
        index = self.find_free(seq_type)
        if index is not None:
            self._claimed.add((SequenceType(seq_type), index))
        return index

    def reserve(self, seq_type: int, index: int) -> None:
        """Mark an index as claimed without allocating through the scan."""
        self._claimed.add(self._key(index, seq_type))

    def unclaim(self, seq_type: int, index: int) -> None:
        """Drop the claim on an index but keep its data and handles valid.

        A non-empty entry still is not free; it only becomes allocatable
        again once its sequence is emptied.
        """
        self._claimed.discard(self._key(index, seq_type))

    def release(self, seq_type: int, index: int) -> None:
        """Give an index back to the pool and invalidate its handles."""
        key = self._key(index, seq_type)
        self._claimed.discard(key)
        sequence = self._sequences.get(key)
        if sequence is not None:
            sequence.clear()
        self._generations[key] = self._generations.get(key, 0) + 1

    def is_claimed(self, seq_type: int, index: int) -> bool:
        return self._key(index, seq_type) in self._claimed

    def handle(self, seq_type: int, index: int) -> SequenceHandle:
        key = self._key(index, seq_type)
        return SequenceHandle(key[0], index, self._generations.get(key, 0))

    def resolve(self, handle: SequenceHandle) -> Sequence:
        """Return the sequence a handle points at.

        Raises:
            StaleHandleError: The entry was released after the handle was taken.
        """
        key = self._key(handle.index, handle.seq_type)
        current = self._generations.get(key, 0)
        if current != handle.generation:
            raise StaleHandleError(
                "{} sequence {} was released (generation {} != {})".format(
                    key[0].name, handle.index, handle.generation, current
                )
            )
        return self.lookup(handle.index, handle.seq_type)
