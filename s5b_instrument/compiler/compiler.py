"""Compile S5B slot bindings into the driver's instrument record.

WHY: The sound driver reads an instrument as one enable-mask byte followed
by a pointer for every active sequence. The mask layout is fixed by the
driver, so the packing below has to be bit-exact.

HOW: The mask is built as a right-shifting accumulator: for each type in
canonical order the mask is shifted right by one and 0x10 is OR-ed in when
the slot contributes. After five steps the VOLUME bit has been shifted
four times (bit 0) and DUTYCYCLE sits at bit 4. References follow in the
same order, one per contributing slot.

RULES:
- A slot contributes when it is enabled AND its sequence is non-empty
- Exactly one shift-then-insert per type, in canonical order
- Returned size is 1 + 2 x contributing slots
- can_release() consults the VOLUME sequence only
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from s5b_instrument.compiler.chunk import REFERENCE_SIZE, ChunkSink, sequence_label
from s5b_instrument.config import NO_RELEASE
from s5b_instrument.core.sequence import SEQUENCE_TYPES, SequenceType

if TYPE_CHECKING:
    from s5b_instrument.core.instrument import SlotSet
    from s5b_instrument.core.pool import SequencePool

_INSERT_BIT = 0x10


class ChunkCompiler:
    def contributing(self, slots: SlotSet, pool: SequencePool) -> list[SequenceType]:
        """Types whose slot is enabled and bound to a non-empty sequence."""
        return [
            seq_type for seq_type in SEQUENCE_TYPES
            if slots.get_enabled(seq_type)
            and pool.lookup(slots.get_index(seq_type), seq_type).item_count > 0
        ]

    def enable_mask(self, slots: SlotSet, pool: SequencePool) -> int:
        active = set(self.contributing(slots, pool))
        mask = 0
        for seq_type in SEQUENCE_TYPES:
            mask = (mask >> 1) | (_INSERT_BIT if seq_type in active else 0)
        return mask

    def compile(self, slots: SlotSet, pool: SequencePool, sink: ChunkSink) -> int:
        """Write the mask byte and sequence references; return bytes written."""
        active = self.contributing(slots, pool)
        sink.write_byte(self.enable_mask(slots, pool))
        stored = 1

        for seq_type in active:
            sink.write_reference(sequence_label(slots.get_index(seq_type), seq_type))
            stored += REFERENCE_SIZE

        return stored

    def can_release(self, slots: SlotSet, pool: SequencePool) -> bool:
        if not slots.get_enabled(SequenceType.VOLUME):
            return False
        volume = pool.lookup(slots.get_index(SequenceType.VOLUME), SequenceType.VOLUME)
        return volume.release_point != NO_RELEASE
