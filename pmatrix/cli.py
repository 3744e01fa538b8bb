"""
P-MATRIX -- Reference Encoder CLI

Schema conformance tool, not an execution engine.

Usage:
    pmatrix emit --baseline 0.25 --norm 0.70 --stability 0.30 --meta-control 0.20
    pmatrix validate < record.json
    pmatrix validate record.json --format json
    pmatrix validate-stream records.jsonl

Exit codes:
    0  success (record emitted, or every invariant passed)
    1  rejected emitter input, unreadable input, or invariant violation(s)
    3  input could not be decoded as a record (no validation attempted)
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

import structlog

from pmatrix.config import load_config
from pmatrix.primitives.record import RuntimeStateRecord
from pmatrix.systems.conformance.codec import decode_record, decode_stream, encode_record
from pmatrix.systems.conformance.errors import ConformanceError, DecodeError
from pmatrix.systems.conformance.invariants import check_stream_t1, validate_all
from pmatrix.systems.conformance.types import InvariantResult
from pmatrix.systems.emitter.emitter import emit_demo_record
from pmatrix.telemetry.logging import setup_logging

logger = structlog.get_logger()

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_DECODE_ERROR = 3

VERDICT_PASS = "Result: ALL INVARIANTS SATISFIED -- record is conforming."
VERDICT_FAIL = "Result: INVARIANT VIOLATION(S) DETECTED -- record is malformed."
STREAM_VERDICT_PASS = "Result: ALL INVARIANTS SATISFIED -- stream is conforming."
STREAM_VERDICT_FAIL = "Result: INVARIANT VIOLATION(S) DETECTED -- stream is malformed."


def _read_input(source: str) -> str:
    try:
        if source == "-":
            return sys.stdin.read()
        return Path(source).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"input is not valid UTF-8: {e}") from e


def _format_line(result: InvariantResult) -> str:
    return f"[{result.status}] {result.id}: {result.detail}"


def _cmd_emit(args: argparse.Namespace, indent: int) -> int:
    try:
        record = emit_demo_record(
            args.baseline,
            args.norm,
            args.stability,
            args.meta_control,
            timestamp=args.timestamp,
        )
    except ConformanceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(encode_record(record, indent=indent or None))
    return EXIT_OK


def _cmd_validate(args: argparse.Namespace, report_format: str) -> int:
    try:
        record = decode_record(_read_input(args.input))
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except DecodeError as e:
        print(f"JSON parse error: {e}", file=sys.stderr)
        print("The input must be a valid P-MATRIX runtime state record.", file=sys.stderr)
        return EXIT_DECODE_ERROR

    results = validate_all(record)
    conforming = all(r.passed for r in results)

    if report_format == "json":
        print(json.dumps(
            {"conforming": conforming, "results": [r.model_dump() for r in results]},
            indent=2,
        ))
    else:
        for r in results:
            print(_format_line(r))
        print()
        print(VERDICT_PASS if conforming else VERDICT_FAIL)

    return EXIT_OK if conforming else EXIT_FAILURE


def _cmd_validate_stream(args: argparse.Namespace, report_format: str) -> int:
    try:
        records = decode_stream(_read_input(args.input))
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except DecodeError as e:
        print(f"JSON parse error: {e}", file=sys.stderr)
        print("Each line must be a valid P-MATRIX runtime state record.", file=sys.stderr)
        return EXIT_DECODE_ERROR

    per_record: list[tuple[RuntimeStateRecord, list[InvariantResult]]] = [
        (record, validate_all(record)) for record in records
    ]
    stream_result = check_stream_t1(records)
    conforming = stream_result.passed and all(
        r.passed for _, results in per_record for r in results
    )

    if report_format == "json":
        print(json.dumps(
            {
                "conforming": conforming,
                "records": [
                    {
                        "index": i,
                        "timestamp": record.timestamp,
                        "results": [r.model_dump() for r in results],
                    }
                    for i, (record, results) in enumerate(per_record)
                ],
                "stream": stream_result.model_dump(),
            },
            indent=2,
        ))
    else:
        for i, (record, results) in enumerate(per_record):
            print(f"Record {i} (timestamp={record.timestamp}):")
            for r in results:
                print(f"  {_format_line(r)}")
        print(f"Stream: {_format_line(stream_result)}")
        print()
        print(STREAM_VERDICT_PASS if conforming else STREAM_VERDICT_FAIL)

    return EXIT_OK if conforming else EXIT_FAILURE


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pmatrix",
        description=(
            "P-MATRIX Runtime State Reference Encoder -- schema conformance tool, "
            "not an execution engine."
        ),
    )
    parser.add_argument("--config", default=None, help="Path to a YAML configuration file")
    sub = parser.add_subparsers(dest="command", required=True)

    emit = sub.add_parser(
        "emit", help="Emit a demonstration runtime state record from four function values."
    )
    emit.add_argument("--baseline", type=float, required=True)
    emit.add_argument("--norm", type=float, required=True)
    emit.add_argument("--stability", type=float, required=True)
    emit.add_argument("--meta-control", dest="meta_control", type=float, required=True)
    emit.add_argument(
        "--timestamp", type=int, default=None,
        help="Unix timestamp in seconds (defaults to current time)",
    )

    for name, help_text in (
        ("validate", "Validate one record (JSON) against all 12 invariants."),
        ("validate-stream", "Validate a JSON Lines stream of records, including timestamp order."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("input", nargs="?", default="-", help="Input file ('-' for stdin)")
        cmd.add_argument(
            "--format", dest="report_format", choices=("text", "json"), default=None,
            help="Report format (defaults to the configured output.report_format)",
        )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.logging)
    logger.debug("cli_command", command=args.command)

    if args.command == "emit":
        return _cmd_emit(args, config.output.indent)

    report_format = args.report_format or config.output.report_format
    if args.command == "validate":
        return _cmd_validate(args, report_format)
    return _cmd_validate_stream(args, report_format)


if __name__ == "__main__":
    sys.exit(main())
