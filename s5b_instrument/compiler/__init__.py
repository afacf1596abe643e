"""Code generation for S5B instruments.

WHY: The driver needs each instrument as an enable mask plus sequence
pointers. This package produces that record against an abstract sink so
the linker stays free to place it anywhere.

HOW: chunk.py defines the ChunkSink contract and an in-memory Chunk;
compiler.py packs the mask and emits the references.

RULES:
- Output is symbolic; addresses are resolved downstream
"""

from s5b_instrument.compiler.chunk import Chunk, ChunkSink, sequence_label
from s5b_instrument.compiler.compiler import ChunkCompiler

__all__ = ["Chunk", "ChunkCompiler", "ChunkSink", "sequence_label"]
