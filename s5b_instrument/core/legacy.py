"""Conversion of pre-v20 run-length sequences into item lists.

WHY: Exchange files older than version 20 stored each sequence as up to 64
(length, value) runs instead of a flat item list, and marked the loop with
a negative run length. Current code only understands item lists, so old
payloads are transcoded once at load time.

HOW: Walk the runs in order. A non-negative run emits length + 1 items. A
negative run is a loop marker: the loop spans the items produced by the
-length runs that precede the final run. The loop point is then measured
from the end of the emitted items.

RULES:
- Run order is preserved exactly
- PITCH and HIPITCH runs emit the value once followed by zeros, because
  those sequences are relative (each item is a delta)
- Other types repeat the value for the whole run
- Empty input, or input with MAX_SEQUENCE_ITEMS runs or more, leaves the
  target sequence untouched
- Emitted items stop at MAX_SEQUENCE_ITEMS
"""

from __future__ import annotations

from collections.abc import Sequence as RunList

from s5b_instrument.config import MAX_SEQUENCE_ITEMS, NO_LOOP
from s5b_instrument.core.sequence import Sequence, SequenceType

_RELATIVE_TYPES = frozenset({SequenceType.PITCH, SequenceType.HIPITCH})


def _loop_length(runs: RunList[tuple[int, int]], marker: int) -> int:
    count = len(runs)
    start = max(count + marker - 1, 0)
    return sum(runs[i][0] + 1 for i in range(start, count - 1))


def convert_runs(
    runs: RunList[tuple[int, int]],
    target: Sequence,
    seq_type: int,
) -> None:
    """Transcode legacy (length, value) runs into ``target`` in place.

    Args:
        runs: Run pairs exactly as read from the file, in file order.
        target: Pool sequence to fill.
        seq_type: Sequence type of the slot being loaded.
    """
    count = len(runs)
    if not 0 < count < MAX_SEQUENCE_ITEMS:
        return

    relative = SequenceType(seq_type) in _RELATIVE_TYPES
    items: list[int] = []
    loop_point = NO_LOOP

    for length, value in runs:
        if length < 0:
            loop_point = _loop_length(runs, length)
            continue
        for repeat in range(length + 1):
            if len(items) >= MAX_SEQUENCE_ITEMS:
                break
            items.append(0 if relative and repeat > 0 else value)

    if loop_point != NO_LOOP:
        loop_point = len(items) - min(loop_point, len(items))

    target.set_item_count(len(items))
    for i, value in enumerate(items):
        target.set_item(i, value)
    target.set_loop_point(loop_point)


class LegacyConverter:
    """Callable wrapper the exchange codec uses for old payloads.

    The codec takes a converter object rather than the bare function so a
    document (or a test) can substitute its own conversion rules.
    """

    def convert(
        self,
        runs: RunList[tuple[int, int]],
        target: Sequence,
        seq_type: int,
    ) -> None:
        convert_runs(runs, target, seq_type)
