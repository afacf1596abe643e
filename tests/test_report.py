"""Unit tests for the JSON instrument report.

WHY: The report is what people read when a file loads wrong. It has to
describe every slot faithfully and always satisfy its schema.

HOW: Builds the report for the sample instrument and for a bare one, and
checks both the content and that schema validation is enforced.

RULES:
- Schema violations surface as jsonschema.ValidationError
"""

import jsonschema
import pytest

from s5b_instrument import report
from s5b_instrument.core.instrument import Instrument
from s5b_instrument.report import instrument_report


class TestInstrumentReport:
    def test_sample_instrument(self, sample_instrument):
        data = instrument_report(sample_instrument)
        assert data["name"] == "Lead"
        assert data["enable_mask"] == 0x15
        assert data["can_release"] is True
        assert [slot["type"] for slot in data["slots"]] == [
            "volume", "arpeggio", "pitch", "hipitch", "dutycycle",
        ]

    def test_sequence_only_on_enabled_slots(self, sample_instrument):
        slots = instrument_report(sample_instrument)["slots"]
        assert slots[0]["sequence"] == {
            "item_count": 9,
            "loop_point": -1,
            "release_point": 6,
            "setting": 0,
            "items": [15, 14, 12, 10, 8, 6, 4, 2, 0],
        }
        assert "sequence" not in slots[1]

    def test_bare_instrument(self, pool):
        data = instrument_report(Instrument(pool))
        assert data["enable_mask"] == 0
        assert data["can_release"] is False
        assert all(not slot["enabled"] for slot in data["slots"])

    def test_schema_is_enforced(self, pool, monkeypatch):
        schema = dict(report._get_schema())
        schema["properties"] = dict(schema["properties"], name={"type": "integer"})
        monkeypatch.setattr(report, "_CACHED_SCHEMA", schema)
        with pytest.raises(jsonschema.ValidationError):
            instrument_report(Instrument(pool, name="x"))
