"""Project-file codec for S5B slot bindings.

WHY: Inside a project file the sequences themselves are saved elsewhere
in the document, so an instrument only needs to record which pool entries
it binds. This is the compact, index-only format.

HOW: Wire layout is ``[count:int32][5 x (enabled:uint8, index:uint8)]``.
read() decodes and validates all five pairs before the first setter runs,
so a rejected file leaves the slot set exactly as it was.

RULES:
- write() always declares count = 5
- read() rejects a declared count above 5 with FatalFormatError
- read() always decodes exactly 5 pairs whatever count was declared
  (older writers declared 5 too; the count is checked, not used)
- An index >= pool capacity raises BoundsError
- Any non-zero enabled byte means enabled
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from s5b_instrument.config import SEQUENCE_COUNT
from s5b_instrument.core.sequence import SEQUENCE_TYPES
from s5b_instrument.errors import BoundsError, FatalFormatError
from s5b_instrument.formats.stream import BinaryReader, BinaryWriter

if TYPE_CHECKING:
    from s5b_instrument.core.instrument import SlotSet

logger = logging.getLogger(__name__)


class ProjectCodec:
    """Reads and writes the index-only project representation."""

    def write(self, slots: SlotSet, writer: BinaryWriter) -> None:
        writer.write_int32(SEQUENCE_COUNT)
        for seq_type in SEQUENCE_TYPES:
            writer.write_uint8(1 if slots.get_enabled(seq_type) else 0)
            writer.write_uint8(slots.get_index(seq_type))

    def read(self, slots: SlotSet, reader: BinaryReader, capacity: int) -> None:
        """Decode five bindings into ``slots``.

        Args:
            slots: Slot set to update through its setters.
            reader: Positioned at the start of the record.
            capacity: Pool capacity; decoded indices must be below it.

        Raises:
            FatalFormatError: Declared count above 5, or the record is cut short.
            BoundsError: A decoded index is not below ``capacity``.
        """
        declared = reader.read_int32()
        if declared > SEQUENCE_COUNT:
            raise FatalFormatError(
                "Declared sequence count {} exceeds {}".format(declared, SEQUENCE_COUNT)
            )

        decoded: list[tuple[bool, int]] = []
        for seq_type in SEQUENCE_TYPES:
            enabled = reader.read_uint8() != 0
            # Unsigned on purpose: bytes 0x80-0xFF become 128..255 and fail the
            # capacity check below, where a signed read would let a negative
            # index through to the pool
            index = reader.read_uint8()
            if index >= capacity:
                raise BoundsError(
                    "{} sequence index {} exceeds pool capacity {}".format(
                        seq_type.name, index, capacity
                    )
                )
            decoded.append((enabled, index))

        for seq_type, (enabled, index) in zip(SEQUENCE_TYPES, decoded):
            slots.set_enabled(seq_type, enabled)
            slots.set_index(seq_type, index)
            logger.debug("Loaded %s slot: enabled=%s index=%d", seq_type.name, enabled, index)
