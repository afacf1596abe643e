"""Exchange-file codec: slot bindings plus full sequence payload.

WHY: Instrument files are shared between documents, so the receiving pool
is not the pool the instrument was saved from. Bare indices would point at
unrelated sequences. The exchange format therefore carries every enabled
sequence in full, and loading allocates fresh pool entries for them. The
format has changed over the years, and files from every generation are
still in circulation.

HOW: Wire layout is ``[count:uint8][count x record]``. A record is a
presence byte, followed (when 1) by either the legacy run-length payload
(version < 20) or the item-list payload. Which optional fields the
item-list payload carries is looked up in VERSION_CAPABILITIES instead of
being scattered across conditionals:

  version < 20   legacy runs, handed to the LegacyConverter
  version 20     item_count, loop_point, items
  version 21     + release_point
  version >= 22  + setting

RULES:
- The declared count bounds the loop; types past it are left untouched
- A declared count above 5 raises FatalFormatError
- Presence other than 1 disables the slot and resets its index to 0
- Presence 1 always takes a fresh index from the pool
- Rebinding or disabling a slot gives back the claim on its old index;
  the old entry's data is left alone
- Pool exhausted: the payload is consumed and dropped, the slot is left
  as it was, and loading continues with the next slot (logged, and listed
  in ExchangeLoadResult.dropped)
- Fields a version does not carry keep the pool entry's existing value
- write() emits the newest layout unless given a version (20 or later)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from s5b_instrument.config import LEGACY_MAX_RUNS, MAX_SEQUENCE_ITEMS, SEQUENCE_COUNT
from s5b_instrument.core.legacy import LegacyConverter
from s5b_instrument.core.sequence import SEQUENCE_TYPES, Sequence, SequenceType
from s5b_instrument.errors import BoundsError, FatalFormatError, InstrumentFormatError
from s5b_instrument.formats.stream import BinaryReader, BinaryWriter

if TYPE_CHECKING:
    from s5b_instrument.core.instrument import SlotSet
    from s5b_instrument.core.pool import SequencePool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayloadFields:
    """Which parts of a sequence payload a given version stores."""

    legacy_runs: bool
    release_point: bool
    setting: bool


VERSION_CAPABILITIES: tuple[tuple[int, PayloadFields], ...] = (
    (0, PayloadFields(legacy_runs=True, release_point=False, setting=False)),
    (20, PayloadFields(legacy_runs=False, release_point=False, setting=False)),
    (21, PayloadFields(legacy_runs=False, release_point=True, setting=False)),
    (22, PayloadFields(legacy_runs=False, release_point=True, setting=True)),
)
"""(first version, fields) rows in ascending version order."""


def capabilities_for(version: int) -> PayloadFields:
    fields = VERSION_CAPABILITIES[0][1]
    for first_version, row in VERSION_CAPABILITIES:
        if version >= first_version:
            fields = row
    return fields


@dataclass
class ExchangeLoadResult:
    """What happened to each slot during an exchange load.

    RULES:
    - loaded: slots enabled with a freshly allocated index
    - disabled: slots the file marked absent
    - dropped: slots whose payload was discarded because the pool was full
    - Types past the declared count appear in none of the lists
    """

    version: int
    loaded: list[SequenceType] = field(default_factory=list)
    disabled: list[SequenceType] = field(default_factory=list)
    dropped: list[SequenceType] = field(default_factory=list)


class ExchangeCodec:
    """Reads and writes the portable, version-aware representation.

    Args:
        legacy_converter: Transcoder for pre-v20 run-length payloads.
    """

    def __init__(self, legacy_converter: LegacyConverter | None = None) -> None:
        self.legacy_converter = legacy_converter or LegacyConverter()

    # -- writing ------------------------------------------------------------

    def write(
        self,
        slots: SlotSet,
        pool: SequencePool,
        writer: BinaryWriter,
        version: int | None = None,
    ) -> None:
        """Encode the enabled sequences in the layout of ``version``.

        None means the newest layout. Fields the target version does not
        carry are left out, so the file reads back at that version.

        Raises:
            ValueError: ``version`` predates item-list payloads (< 20).
        """
        if version is None:
            fields = VERSION_CAPABILITIES[-1][1]
        else:
            fields = capabilities_for(version)
        if fields.legacy_runs:
            raise ValueError(
                "Cannot write exchange version {}; the oldest writable layout is 20".format(
                    version
                )
            )

        writer.write_uint8(SEQUENCE_COUNT)
        for seq_type in SEQUENCE_TYPES:
            if not slots.get_enabled(seq_type):
                writer.write_uint8(0)
                continue
            sequence = pool.lookup(slots.get_index(seq_type), seq_type)
            writer.write_uint8(1)
            writer.write_int32(sequence.item_count)
            writer.write_int32(sequence.loop_point)
            if fields.release_point:
                writer.write_int32(sequence.release_point)
            if fields.setting:
                writer.write_int32(sequence.setting)
            for item in sequence.items:
                writer.write_int8(item)

    # -- reading ------------------------------------------------------------

    def read(
        self,
        slots: SlotSet,
        pool: SequencePool,
        reader: BinaryReader,
        version: int,
    ) -> ExchangeLoadResult:
        """Decode an exchange record written by format ``version``.

        Raises:
            FatalFormatError: Declared count above 5, or the record is cut short.
            BoundsError: A run or item count is out of range.
        """
        declared = reader.read_uint8()
        if declared > SEQUENCE_COUNT:
            raise FatalFormatError(
                "Declared sequence count {} exceeds {}".format(declared, SEQUENCE_COUNT)
            )

        fields = capabilities_for(version)
        result = ExchangeLoadResult(version=version)

        for seq_type in SEQUENCE_TYPES[:declared]:
            if reader.read_uint8() != 1:
                self._unclaim_previous(slots, pool, seq_type)
                slots.set_enabled(seq_type, False)
                slots.set_index(seq_type, 0)
                result.disabled.append(seq_type)
                continue

            index = pool.allocate_free(seq_type)
            if index is None:
                # Keep the stream aligned for the slots that follow
                self._read_payload(reader, Sequence(), seq_type, fields, convert=False)
                logger.warning(
                    "No free %s sequence; dropped slot from exchange file",
                    seq_type.name,
                )
                result.dropped.append(seq_type)
                continue

            try:
                self._read_payload(
                    reader, pool.lookup(index, seq_type), seq_type, fields, convert=True
                )
            except InstrumentFormatError:
                pool.release(seq_type, index)
                raise

            self._unclaim_previous(slots, pool, seq_type, keep=index)
            slots.set_enabled(seq_type, True)
            slots.set_index(seq_type, index)
            result.loaded.append(seq_type)
            logger.debug("Loaded %s sequence into index %d", seq_type.name, index)

        return result

    @staticmethod
    def _unclaim_previous(
        slots: SlotSet,
        pool: SequencePool,
        seq_type: SequenceType,
        keep: int | None = None,
    ) -> None:
        # The old entry keeps its data; other instruments may still bind it
        previous = slots.get_index(seq_type)
        if not slots.get_enabled(seq_type) or previous == keep:
            return
        if 0 <= previous < pool.capacity:
            pool.unclaim(seq_type, previous)

    def _read_payload(
        self,
        reader: BinaryReader,
        target: Sequence,
        seq_type: SequenceType,
        fields: PayloadFields,
        convert: bool,
    ) -> None:
        if fields.legacy_runs:
            runs = self._read_legacy_runs(reader)
            if convert:
                self.legacy_converter.convert(runs, target, seq_type)
            return

        count = reader.read_int32()
        if not 0 <= count <= MAX_SEQUENCE_ITEMS:
            raise BoundsError(
                "{} item count {} outside 0..{}".format(
                    seq_type.name, count, MAX_SEQUENCE_ITEMS
                )
            )
        target.set_item_count(count)
        target.set_loop_point(reader.read_int32())
        if fields.release_point:
            target.set_release_point(reader.read_int32())
        if fields.setting:
            target.set_setting(reader.read_int32())
        for i in range(count):
            target.set_item(i, reader.read_int8())

    def _read_legacy_runs(self, reader: BinaryReader) -> list[tuple[int, int]]:
        count = reader.read_int32()
        if not 0 <= count <= LEGACY_MAX_RUNS:
            raise BoundsError(
                "Legacy run count {} outside 0..{}".format(count, LEGACY_MAX_RUNS)
            )
        runs = []
        for _ in range(count):
            length = reader.read_int8()
            value = reader.read_int8()
            runs.append((length, value))
        return runs
