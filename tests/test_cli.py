"""Tests for the command-line interface.

WHY: The CLI is how slot records get inspected and upgraded outside the
editor. Wrong exit codes or output on stdout that is not pure JSON break
the scripts built around it.

HOW: Writes records to tmp_path, runs main() with an explicit argv, and
reads stdout/stderr through capsys.

RULES:
- All file I/O uses tmp_path
- JSON goes to stdout; status and errors go to stderr
"""

import json
import struct

import pytest

from s5b_instrument.cli import _resolve_output_path, build_parser, main
from s5b_instrument.core.instrument import Instrument
from s5b_instrument.core.pool import SequencePool
from s5b_instrument.core.sequence import SequenceType
from s5b_instrument.formats.stream import BinaryReader, BinaryWriter


def _exchange_bytes(instrument):
    writer = BinaryWriter()
    instrument.save_exchange(writer)
    return writer.getvalue()


@pytest.fixture
def exchange_file(tmp_path, sample_instrument):
    path = tmp_path / "lead.bin"
    path.write_bytes(_exchange_bytes(sample_instrument))
    return path


class TestParser:
    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_inspect_defaults(self):
        args = build_parser().parse_args(["inspect", "x.bin"])
        assert args.format == "exchange"
        assert args.version is None


class TestInspect:
    def test_exchange_report(self, exchange_file, capsys):
        main(["inspect", str(exchange_file), "--version", "25"])
        data = json.loads(capsys.readouterr().out)
        assert data["name"] == "lead"
        assert data["enable_mask"] == 0x15
        assert data["slots"][2]["sequence"]["items"] == [0, 2, -2, 2, -2]

    def test_project_report(self, tmp_path, sample_instrument, capsys):
        path = tmp_path / "lead.prj"
        path.write_bytes(sample_instrument.to_bytes())
        main(["inspect", str(path), "--format", "project"])
        data = json.loads(capsys.readouterr().out)
        assert [slot["index"] for slot in data["slots"]] == [3, 0, 0, 0, 7]
        # Sequences live elsewhere in a project; a fresh pool has them empty
        assert data["enable_mask"] == 0

    def test_version_from_environment(self, tmp_path, monkeypatch, capsys):
        record = b"\x01\x01" + struct.pack("<iib", 1, -1, 9)
        path = tmp_path / "old.bin"
        path.write_bytes(record)
        monkeypatch.setenv("S5B_EXCHANGE_VERSION", "20")
        main(["inspect", str(path)])
        data = json.loads(capsys.readouterr().out)
        assert data["slots"][0]["sequence"]["items"] == [9]

    def test_corrupt_file_exits_1(self, tmp_path, capsys):
        path = tmp_path / "bad.bin"
        path.write_bytes(b"\x06")
        with pytest.raises(SystemExit) as exc:
            main(["inspect", str(path), "--version", "25"])
        assert exc.value.code == 1
        captured = capsys.readouterr()
        assert captured.err.startswith("Error:")
        assert captured.out == ""

    def test_missing_file_exits_1(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["inspect", str(tmp_path / "nope.bin"), "--version", "25"])
        assert exc.value.code == 1
        assert "File not found" in capsys.readouterr().err


class TestCompile:
    def test_chunk_json(self, exchange_file, capsys):
        main(["compile", str(exchange_file), "--version", "25"])
        data = json.loads(capsys.readouterr().out)
        # Fresh pool: every type allocates index 0
        assert data == {
            "label": "lead",
            "enable_mask": 0x15,
            "references": ["ft_seq_s5b_0", "ft_seq_s5b_2", "ft_seq_s5b_4"],
            "size": 7,
        }


class TestConvert:
    def test_upgrades_legacy_record(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("S5B_EXCHANGE_VERSION", raising=False)
        legacy = b"\x01\x01" + struct.pack("<i", 2) + struct.pack("<bbbb", 1, 5, 0, 2)
        source = tmp_path / "old.bin"
        source.write_bytes(legacy)
        output = tmp_path / "new.bin"

        main(["convert", str(source), "--from-version", "19", "--output", str(output)])
        assert "Saved" in capsys.readouterr().err

        instrument = Instrument(SequencePool())
        with open(output, "rb") as fp:
            instrument.load_exchange(BinaryReader(fp), 25)
        assert instrument.sequence(SequenceType.VOLUME).items == [5, 5, 2]

    def test_default_output_name(self, exchange_file, monkeypatch):
        monkeypatch.delenv("S5B_EXCHANGE_VERSION", raising=False)
        main(["convert", str(exchange_file), "--from-version", "25"])
        assert (exchange_file.parent / "lead-v25.bin").is_file()

    def test_output_reads_back_at_named_version(self, tmp_path, monkeypatch):
        source = tmp_path / "a.bin"
        source.write_bytes(b"\x01\x01" + struct.pack("<iiiib", 1, -1, 0, 0, 5))
        monkeypatch.setenv("S5B_EXCHANGE_VERSION", "20")

        main(["convert", str(source), "--from-version", "25"])

        output = tmp_path / "a-v20.bin"
        assert output.read_bytes() == b"\x05\x01" + struct.pack("<iib", 1, -1, 5) + b"\x00" * 4
        instrument = Instrument(SequencePool())
        with open(output, "rb") as fp:
            instrument.load_exchange(BinaryReader(fp), 20)
        assert instrument.sequence(SequenceType.VOLUME).items == [5]

    def test_unwritable_version_exits_1(self, exchange_file, monkeypatch, capsys):
        monkeypatch.setenv("S5B_EXCHANGE_VERSION", "19")
        with pytest.raises(SystemExit) as exc:
            main(["convert", str(exchange_file), "--from-version", "25"])
        assert exc.value.code == 1
        assert capsys.readouterr().err.startswith("Error:")
        assert not (exchange_file.parent / "lead-v19.bin").exists()

    def test_never_overwrites(self, tmp_path):
        taken = tmp_path / "out.bin"
        taken.write_bytes(b"")
        (tmp_path / "out-2.bin").write_bytes(b"")
        assert _resolve_output_path(taken) == tmp_path / "out-3.bin"
        assert _resolve_output_path(tmp_path / "free.bin") == tmp_path / "free.bin"
