"""Binary codecs for S5B slot bindings.

WHY: An instrument is persisted in two places: inside a project file
(indices only) and as a standalone exchange file (full sequence payload,
several historical versions). Each has its own codec.

HOW: stream.py provides little-endian readers and writers; project.py and
exchange.py implement the two layouts on top of them.

RULES:
- Codecs read and write SlotSet-shaped data only
- Document framing (headers, names, chunk ids) belongs to the caller
"""

from s5b_instrument.formats.exchange import ExchangeCodec, ExchangeLoadResult
from s5b_instrument.formats.project import ProjectCodec
from s5b_instrument.formats.stream import BinaryReader, BinaryWriter

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "ExchangeCodec",
    "ExchangeLoadResult",
    "ProjectCodec",
]
