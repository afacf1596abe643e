"""Command-line interface for inspecting, compiling and upgrading S5B records.

WHY: Slot records turn up in bug reports and in old instrument libraries.
A small CLI makes it possible to look inside one, see what the driver
would get, and re-save old exchange payloads in the current layout
without opening the full editor.

HOW: argparse with three subcommands. Each one decodes the input file into
a fresh Instrument on an empty SequencePool, then prints JSON to stdout
(inspect, compile) or writes a new exchange file (convert). Status
messages and log output go to stderr.

RULES:
- inspect FILE --format {project,exchange} [--version N]
- compile FILE [--version N]  (exchange input)
- convert FILE --from-version N [--output OUT]  (writes the layout of
  S5B_EXCHANGE_VERSION, 20 or later)
- --version defaults to S5B_EXCHANGE_VERSION (see config)
- Output naming: {stem}-v{version}.bin next to the input, numeric suffix on
  conflict ({stem}-v25-2.bin); existing files are never overwritten
- Decode errors print "Error: ..." to stderr and exit with status 1
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from s5b_instrument.compiler.chunk import Chunk
from s5b_instrument.config import load_exchange_version
from s5b_instrument.core.instrument import Instrument
from s5b_instrument.core.pool import SequencePool
from s5b_instrument.errors import InstrumentFormatError
from s5b_instrument.formats.stream import BinaryReader, BinaryWriter
from s5b_instrument.logging_setup import configure_logging
from s5b_instrument.report import instrument_report

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, flushing immediately."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(path: Path) -> Path:
    """Return ``path``, or ``{stem}-N{suffix}`` for the first N >= 2 that is free."""
    if not path.exists():
        return path
    counter = 2
    while True:
        candidate = path.with_name("{}-{}{}".format(path.stem, counter, path.suffix))
        if not candidate.exists():
            return candidate
        counter += 1


def _load_instrument(path: Path, fmt: str, version: int) -> Instrument:
    instrument = Instrument(SequencePool(), name=path.stem)
    with open(path, "rb") as fp:
        reader = BinaryReader(fp)
        if fmt == "project":
            instrument.load(reader)
        else:
            result = instrument.load_exchange(reader, version)
            for seq_type in result.dropped:
                _status("  Dropped {} sequence (pool full)".format(seq_type.name.lower()))
    return instrument


def _cmd_inspect(args: argparse.Namespace) -> None:
    instrument = _load_instrument(Path(args.input_file), args.format, args.version)
    print(json.dumps(instrument_report(instrument), indent=2))


def _cmd_compile(args: argparse.Namespace) -> None:
    instrument = _load_instrument(Path(args.input_file), "exchange", args.version)
    chunk = Chunk(label=instrument.name)
    stored = instrument.compile(chunk)
    mask = chunk.items[0].value
    print(json.dumps({
        "label": chunk.label,
        "enable_mask": mask,
        "references": chunk.references(),
        "size": stored,
    }, indent=2))


def _cmd_convert(args: argparse.Namespace) -> None:
    input_path = Path(args.input_file)
    target_version = load_exchange_version()
    instrument = _load_instrument(input_path, "exchange", args.from_version)

    if args.output:
        output_path = _resolve_output_path(Path(args.output))
    else:
        output_path = _resolve_output_path(
            input_path.with_name("{}-v{}.bin".format(input_path.stem, target_version))
        )

    # Encode first so an unwritable version leaves no empty file behind
    writer = BinaryWriter()
    instrument.save_exchange(writer, target_version)
    output_path.write_bytes(writer.getvalue())
    _status("Saved: {}".format(output_path))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s5b_instrument",
        description="Inspect, compile and upgrade Sunsoft 5B instrument slot records.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL from the environment, else WARNING).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    inspect_p = sub.add_parser("inspect", help="Print a JSON report of a slot record.")
    inspect_p.add_argument("input_file", help="Path to the binary slot record.")
    inspect_p.add_argument(
        "--format",
        choices=("project", "exchange"),
        default="exchange",
        help="Record layout (default: %(default)s).",
    )
    inspect_p.add_argument(
        "--version", type=int, default=None,
        help="Exchange format version of the input.",
    )
    inspect_p.set_defaults(func=_cmd_inspect)

    compile_p = sub.add_parser("compile", help="Print the compiled chunk for an exchange record.")
    compile_p.add_argument("input_file", help="Path to the exchange record.")
    compile_p.add_argument(
        "--version", type=int, default=None,
        help="Exchange format version of the input.",
    )
    compile_p.set_defaults(func=_cmd_compile)

    convert_p = sub.add_parser(
        "convert",
        help="Re-save an exchange record in the S5B_EXCHANGE_VERSION layout.",
    )
    convert_p.add_argument("input_file", help="Path to the exchange record.")
    convert_p.add_argument(
        "--from-version", type=int, required=True,
        help="Exchange format version of the input.",
    )
    convert_p.add_argument("--output", default=None, help="Output file path.")
    convert_p.set_defaults(func=_cmd_convert)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m s5b_instrument``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        if getattr(args, "version", 0) is None:
            args.version = load_exchange_version()
        args.func(args)
    except FileNotFoundError as e:
        _fail("File not found: {}".format(e.filename))
    except InstrumentFormatError as e:
        logger.debug("Decode failed", exc_info=True)
        _fail(str(e))
    except ValueError as e:
        # Config errors (bad or unwritable S5B_EXCHANGE_VERSION)
        _fail(str(e))


if __name__ == "__main__":
    main()
