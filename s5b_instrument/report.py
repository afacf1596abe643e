"""JSON report of an instrument's bindings and bound sequences.

WHY: Binary slot records are opaque. When a file loads wrong, the quickest
way to see why is a readable dump of what each slot ended up bound to and
what the compiler would make of it.

HOW: Walks the five slots in canonical order, attaches the bound sequence
for enabled slots, adds the compiled enable mask and release flag, and
validates the result against the packaged JSON schema before returning.

RULES:
- Slots appear in canonical order, one entry per type
- "sequence" is present only for enabled slots
- Validate output against the schema before returning; raise on failure
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import jsonschema

from s5b_instrument.compiler.compiler import ChunkCompiler
from s5b_instrument.core.sequence import SEQUENCE_TYPES, Sequence

if TYPE_CHECKING:
    from s5b_instrument.core.instrument import Instrument

_SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "instrument_report.schema.json"

_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def _sequence_dict(sequence: Sequence) -> dict[str, Any]:
    return {
        "item_count": sequence.item_count,
        "loop_point": sequence.loop_point,
        "release_point": sequence.release_point,
        "setting": sequence.setting,
        "items": list(sequence.items),
    }


def instrument_report(instrument: Instrument) -> dict[str, Any]:
    """Build a schema-validated dict describing ``instrument``.

    Raises:
        jsonschema.ValidationError: If the report does not match the schema.
    """
    slots = []
    for seq_type in SEQUENCE_TYPES:
        entry: dict[str, Any] = {
            "type": seq_type.name.lower(),
            "enabled": instrument.get_slot_enabled(seq_type),
            "index": instrument.get_slot_index(seq_type),
        }
        sequence = instrument.sequence(seq_type)
        if sequence is not None:
            entry["sequence"] = _sequence_dict(sequence)
        slots.append(entry)

    compiler = ChunkCompiler()
    report = {
        "name": instrument.name,
        "slots": slots,
        "enable_mask": compiler.enable_mask(instrument.slots, instrument.pool),
        "can_release": instrument.can_release(),
    }

    jsonschema.validate(instance=report, schema=_get_schema())
    return report
