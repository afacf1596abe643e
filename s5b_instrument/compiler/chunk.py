"""Chunk sink interface and an in-memory chunk.

WHY: The compiler must not know how the final binary is laid out. It only
emits bytes and symbolic references; the linker resolves those references
into addresses later. ChunkSink is that narrow contract, and Chunk is the
recording implementation the CLI and tests use.

HOW: Chunk keeps an ordered list of items. A byte item accounts for one
byte of output, a reference item for two (a little-endian address once
linked).

RULES:
- Item order is output order
- References are labels only; resolving them is the linker's job
- sequence_label() encodes ``index * 5 + type``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Union

from s5b_instrument.config import SEQUENCE_COUNT, SEQUENCE_LABEL_FORMAT

REFERENCE_SIZE = 2


class ChunkSink(Protocol):
    def write_byte(self, value: int) -> None: ...

    def write_reference(self, label: str) -> None: ...


@dataclass(frozen=True)
class ChunkByte:
    value: int
    size = 1


@dataclass(frozen=True)
class ChunkReference:
    label: str
    size = REFERENCE_SIZE


ChunkItem = Union[ChunkByte, ChunkReference]


@dataclass
class Chunk:
    """Ordered compile output for one instrument."""

    label: str = ""
    items: list[ChunkItem] = field(default_factory=list)

    def write_byte(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError("Chunk byte {} out of range".format(value))
        self.items.append(ChunkByte(value))

    def write_reference(self, label: str) -> None:
        self.items.append(ChunkReference(label))

    @property
    def size(self) -> int:
        return sum(item.size for item in self.items)

    def references(self) -> list[str]:
        return [item.label for item in self.items if isinstance(item, ChunkReference)]


def sequence_label(index: int, seq_type: int) -> str:
    return SEQUENCE_LABEL_FORMAT.format(index * SEQUENCE_COUNT + int(seq_type))
