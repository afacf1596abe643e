"""Little-endian binary reader and writer used by both codecs.

WHY: The project and exchange formats are sequences of fixed-width
integers. Both codecs need the same primitives, and both need a short read
to fail loudly instead of yielding garbage.

HOW: Thin wrappers over a binary file object and struct. A writer without
a file object buffers into io.BytesIO so tests and callers can grab the
bytes with getvalue().

RULES:
- All multi-byte integers are little-endian
- int8 is signed (sequence items, legacy runs); uint8 is unsigned
  (counts, flags, pool indices)
- A short read raises TruncatedDataError with the wanted/got sizes
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

from s5b_instrument.errors import TruncatedDataError

_INT32 = struct.Struct("<i")
_INT8 = struct.Struct("<b")
_UINT8 = struct.Struct("<B")


class BinaryWriter:
    def __init__(self, fp: BinaryIO | None = None) -> None:
        self.fp = fp if fp is not None else io.BytesIO()

    def write_int32(self, value: int) -> None:
        self.fp.write(_INT32.pack(value))

    def write_int8(self, value: int) -> None:
        self.fp.write(_INT8.pack(value))

    def write_uint8(self, value: int) -> None:
        self.fp.write(_UINT8.pack(value))

    def getvalue(self) -> bytes:
        """Return everything written so far (BytesIO-backed writers only)."""
        return self.fp.getvalue()


class BinaryReader:
    def __init__(self, fp: BinaryIO) -> None:
        self.fp = fp

    @classmethod
    def from_bytes(cls, data: bytes) -> BinaryReader:
        return cls(io.BytesIO(data))

    def _read(self, fmt: struct.Struct) -> int:
        raw = self.fp.read(fmt.size)
        if len(raw) != fmt.size:
            raise TruncatedDataError(fmt.size, len(raw))
        return fmt.unpack(raw)[0]

    def read_int32(self) -> int:
        return self._read(_INT32)

    def read_int8(self) -> int:
        return self._read(_INT8)

    def read_uint8(self) -> int:
        return self._read(_UINT8)
