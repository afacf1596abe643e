"""Slot bindings and the S5B instrument that owns them.

WHY: An S5B instrument is little more than five (enabled, pool index)
bindings plus a name. Everything interesting about it (persistence,
compilation, release gating) is a function of those bindings and the
shared pool they point into.

HOW: SlotSet holds exactly five immutable Slot values, one per
SequenceType, and is the only mutation path for them. Its setters report
changes through an explicit on_change callback (called before the new
value is committed) and return whether anything changed. Instrument wraps
a SlotSet together with a reference to the shared SequencePool and exposes
the persistence and compile operations the owning document calls.

RULES:
- A SlotSet always has exactly five slots, in canonical type order
- Setting an identical value is a no-op: no callback, returns False
- A disabled slot's index is conventionally 0; it is not a valid reference
- The pool is shared, never owned: clone() aliases pool entries, and
  discarding an instrument never touches the pool
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace

from s5b_instrument.compiler.chunk import ChunkSink
from s5b_instrument.compiler.compiler import ChunkCompiler
from s5b_instrument.config import SEQUENCE_COUNT
from s5b_instrument.core.legacy import LegacyConverter
from s5b_instrument.core.pool import SequenceHandle, SequencePool
from s5b_instrument.core.sequence import SEQUENCE_TYPES, Sequence, SequenceType
from s5b_instrument.formats.exchange import ExchangeCodec, ExchangeLoadResult
from s5b_instrument.formats.project import ProjectCodec
from s5b_instrument.formats.stream import BinaryReader, BinaryWriter

ChangeCallback = Callable[[], None]


@dataclass(frozen=True)
class Slot:
    """One sequence binding."""

    enabled: bool = False
    index: int = 0


class SlotSet:
    """Five sequence bindings indexed by SequenceType.

    Args:
        on_change: Called with no arguments whenever a setter is about to
                   change a value. Typically marks the owning document
                   modified.
    """

    def __init__(self, on_change: ChangeCallback | None = None) -> None:
        self.on_change = on_change
        self._slots = [Slot() for _ in range(SEQUENCE_COUNT)]

    def __len__(self) -> int:
        return SEQUENCE_COUNT

    def __iter__(self) -> Iterator[Slot]:
        return iter(list(self._slots))

    def __getitem__(self, seq_type: int) -> Slot:
        return self._slots[SequenceType(seq_type)]

    def get_enabled(self, seq_type: int) -> bool:
        return self[seq_type].enabled

    def get_index(self, seq_type: int) -> int:
        return self[seq_type].index

    def set_enabled(self, seq_type: int, enabled: bool) -> bool:
        return self._update(seq_type, enabled=bool(enabled))

    def set_index(self, seq_type: int, index: int) -> bool:
        return self._update(seq_type, index=int(index))

    def _update(self, seq_type: int, **changes) -> bool:
        position = SequenceType(seq_type)
        current = self._slots[position]
        updated = replace(current, **changes)
        if updated == current:
            return False
        if self.on_change is not None:
            self.on_change()
        self._slots[position] = updated
        return True


class Instrument:
    """An S5B instrument: a name and five bindings into a shared pool.

    WHY: The owning document talks to instruments, not to codecs. This
    class is the single surface it uses to set up, copy, persist and
    compile one instrument.

    HOW: Holds a SlotSet and the pool reference; every persistence or
    compile call delegates to the matching codec or compiler with the
    instrument's own slots and pool.

    RULES:
    - The pool reference is shared with every clone
    - load() and load_exchange() mutate slots only through SlotSet setters
    """

    def __init__(
        self,
        pool: SequencePool,
        name: str = "",
        on_change: ChangeCallback | None = None,
        legacy_converter: LegacyConverter | None = None,
    ) -> None:
        self.pool = pool
        self.name = name
        self.slots = SlotSet(on_change)
        self.legacy_converter = legacy_converter or LegacyConverter()

    def __repr__(self) -> str:
        bound = ", ".join(
            "{}={}".format(t.name.lower(), self.slots.get_index(t))
            for t in SEQUENCE_TYPES if self.slots.get_enabled(t)
        )
        return "Instrument({!r}, {})".format(self.name, bound or "no sequences")

    # -- bindings -----------------------------------------------------------

    def get_slot_enabled(self, seq_type: int) -> bool:
        return self.slots.get_enabled(seq_type)

    def get_slot_index(self, seq_type: int) -> int:
        return self.slots.get_index(seq_type)

    def set_slot_enabled(self, seq_type: int, enabled: bool) -> bool:
        return self.slots.set_enabled(seq_type, enabled)

    def set_slot_index(self, seq_type: int, index: int) -> bool:
        return self.slots.set_index(seq_type, index)

    def sequence(self, seq_type: int) -> Sequence | None:
        """Return the bound sequence, or None when the slot is disabled."""
        if not self.slots.get_enabled(seq_type):
            return None
        return self.pool.lookup(self.slots.get_index(seq_type), seq_type)

    def handle(self, seq_type: int) -> SequenceHandle | None:
        """Return a generation-checked handle for an enabled slot."""
        if not self.slots.get_enabled(seq_type):
            return None
        return self.pool.handle(seq_type, self.slots.get_index(seq_type))

    # -- lifecycle ----------------------------------------------------------

    def setup(self) -> None:
        """Disable every slot and pre-assign a free pool index to each.

        RULES:
        - Slots stay disabled; only the index is prepared
        - Nothing is claimed: a disabled slot holds no pool entry, so
          several fresh instruments may be handed the same index
        - On pool exhaustion the slot keeps its previous index
        """
        for seq_type in SEQUENCE_TYPES:
            self.slots.set_enabled(seq_type, False)
            index = self.pool.find_free(seq_type)
            if index is not None:
                self.slots.set_index(seq_type, index)

    def clone(self, on_change: ChangeCallback | None = None) -> Instrument:
        """Copy name and bindings into a new instrument on the same pool.

        The copy is shallow: both instruments point at the same pool
        entries, so editing a sequence through one is visible through the
        other.
        """
        copy = Instrument(
            self.pool,
            on_change=on_change,
            legacy_converter=self.legacy_converter,
        )
        for seq_type in SEQUENCE_TYPES:
            copy.slots.set_enabled(seq_type, self.slots.get_enabled(seq_type))
            copy.slots.set_index(seq_type, self.slots.get_index(seq_type))
        copy.name = self.name
        return copy

    # -- persistence --------------------------------------------------------

    def store(self, writer: BinaryWriter) -> None:
        ProjectCodec().write(self.slots, writer)

    def load(self, reader: BinaryReader) -> None:
        ProjectCodec().read(self.slots, reader, self.pool.capacity)

    def save_exchange(self, writer: BinaryWriter, version: int | None = None) -> None:
        ExchangeCodec(self.legacy_converter).write(
            self.slots, self.pool, writer, version
        )

    def load_exchange(self, reader: BinaryReader, version: int) -> ExchangeLoadResult:
        return ExchangeCodec(self.legacy_converter).read(
            self.slots, self.pool, reader, version
        )

    def to_bytes(self) -> bytes:
        """Project-format bytes for this instrument's bindings."""
        writer = BinaryWriter()
        self.store(writer)
        return writer.getvalue()

    # -- compilation --------------------------------------------------------

    def compile(self, sink: ChunkSink) -> int:
        return ChunkCompiler().compile(self.slots, self.pool, sink)

    def can_release(self) -> bool:
        return ChunkCompiler().can_release(self.slots, self.pool)
