"""Sequence types and the Sequence container.

WHY: Every slot on an S5B instrument is addressed by a sequence type, and
the order of those types drives array indices, file layout and the bit
positions of the compiled enable mask. The Sequence itself is the payload
the exchange format carries and the compiler inspects.

HOW: SequenceType is an IntEnum so a type doubles as its array index.
Sequence is a mutable dataclass with bounds-checked setters, mirroring the
way pool entries are edited in place by the codecs.

RULES:
- Canonical order: VOLUME, ARPEGGIO, PITCH, HIPITCH, DUTYCYCLE (0..4)
- Items are signed bytes (-128..127)
- item_count never exceeds MAX_SEQUENCE_ITEMS
- loop_point and release_point use -1 for "none"
- setting is an opaque integer code; 0 is the default for every type
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from s5b_instrument.config import MAX_SEQUENCE_ITEMS, NO_LOOP, NO_RELEASE
from s5b_instrument.errors import BoundsError


class SequenceType(enum.IntEnum):
    """The five S5B sequence types in canonical order."""

    VOLUME = 0
    ARPEGGIO = 1
    PITCH = 2
    HIPITCH = 3
    DUTYCYCLE = 4


SEQUENCE_TYPES = tuple(SequenceType)
"""All sequence types in canonical order."""

SETTING_DEFAULT = 0


def _check_item(value: int) -> int:
    if not -128 <= value <= 127:
        raise BoundsError("Sequence item {} does not fit a signed byte".format(value))
    return value


@dataclass
class Sequence:
    """One envelope sequence stored in the pool.

    RULES:
    - len(items) == item_count at all times
    - Shrinking item_count drops trailing items; growing pads with zeros
    """

    item_count: int = 0
    loop_point: int = NO_LOOP
    release_point: int = NO_RELEASE
    setting: int = SETTING_DEFAULT
    items: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Sequence(items=[...]) infers the count from the list
        if self.items and self.item_count == 0:
            self.item_count = len(self.items)
        for value in self.items:
            _check_item(value)
        self.set_item_count(self.item_count)

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0

    def set_item_count(self, count: int) -> None:
        if not 0 <= count <= MAX_SEQUENCE_ITEMS:
            raise BoundsError(
                "Item count {} outside 0..{}".format(count, MAX_SEQUENCE_ITEMS)
            )
        if count < len(self.items):
            del self.items[count:]
        else:
            self.items.extend([0] * (count - len(self.items)))
        self.item_count = count

    def get_item(self, index: int) -> int:
        return self.items[index]

    def set_item(self, index: int, value: int) -> None:
        """Set one item, growing the sequence when index is past the end."""
        if not 0 <= index < MAX_SEQUENCE_ITEMS:
            raise BoundsError(
                "Item index {} outside 0..{}".format(index, MAX_SEQUENCE_ITEMS - 1)
            )
        if index >= len(self.items):
            self.set_item_count(index + 1)
        self.items[index] = _check_item(value)

    def set_loop_point(self, point: int) -> None:
        self.loop_point = point

    def set_release_point(self, point: int) -> None:
        self.release_point = point

    def set_setting(self, setting: int) -> None:
        self.setting = setting

    def clear(self) -> None:
        self.item_count = 0
        self.items = []
        self.loop_point = NO_LOOP
        self.release_point = NO_RELEASE
        self.setting = SETTING_DEFAULT

    def copy_from(self, other: Sequence) -> None:
        self.item_count = other.item_count
        self.items = list(other.items)
        self.loop_point = other.loop_point
        self.release_point = other.release_point
        self.setting = other.setting
