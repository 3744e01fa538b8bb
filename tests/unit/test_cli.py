"""Tests for the pmatrix command-line interface."""

from __future__ import annotations

import io
import json

import pytest

from pmatrix.cli import EXIT_DECODE_ERROR, EXIT_FAILURE, EXIT_OK, main
from pmatrix.systems.conformance.codec import encode_record
from pmatrix.systems.emitter.emitter import emit_demo_record

EMIT_ARGS = [
    "emit", "--baseline", "0.25", "--norm", "0.70",
    "--stability", "0.30", "--meta-control", "0.20",
]


def _record_json(timestamp: int = 1707500000, **changes) -> str:
    payload = json.loads(encode_record(emit_demo_record(0.25, 0.70, 0.30, 0.20, timestamp=timestamp)))
    payload.update(changes)
    return json.dumps(payload)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for var in ("PMATRIX_LOG_LEVEL", "PMATRIX_LOG_FORMAT", "PMATRIX_OUTPUT__INDENT",
                "PMATRIX_OUTPUT__REPORT_FORMAT"):
        monkeypatch.delenv(var, raising=False)


class TestEmitCommand:
    def test_prints_pretty_record(self, capsys):
        code = main([*EMIT_ARGS, "--timestamp", "1707500000"])
        out = capsys.readouterr().out
        assert code == EXIT_OK
        record = json.loads(out)
        assert record["mode"] == "Alert"
        assert record["risk_level"] == "L4"
        assert record["timestamp"] == 1707500000
        assert '\n  "spec_version"' in out

    def test_rejected_input_exits_with_failure(self, capsys):
        code = main(["emit", "--baseline", "0.25", "--norm", "1.5",
                     "--stability", "0.3", "--meta-control", "0.2"])
        captured = capsys.readouterr()
        assert code == EXIT_FAILURE
        assert captured.out == ""
        assert "norm" in captured.err
        assert "1.5" in captured.err

    def test_compact_output_from_config(self, capsys, tmp_path):
        config = tmp_path / "pmatrix.yaml"
        config.write_text("output:\n  indent: 0\n")
        code = main(["--config", str(config), *EMIT_ARGS, "--timestamp", "5"])
        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert out.count("\n") == 1


class TestValidateCommand:
    def test_valid_record_from_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(_record_json()))
        code = main(["validate"])
        lines = capsys.readouterr().out.strip().splitlines()
        assert code == EXIT_OK
        assert len([line for line in lines if line.startswith("[PASS]")]) == 12
        assert lines[-1].startswith("Result: ALL INVARIANTS SATISFIED")

    def test_violation_from_file(self, capsys, tmp_path):
        path = tmp_path / "record.json"
        path.write_text(_record_json(mode="Caution", risk_level="L3"))
        code = main(["validate", str(path)])
        out = capsys.readouterr().out
        assert code == EXIT_FAILURE
        assert "[FAIL] INV-C1" in out
        assert "[PASS] INV-C2" in out
        assert "[FAIL] INV-C3" in out
        assert "INVARIANT VIOLATION(S) DETECTED" in out

    def test_extra_field_is_decode_failure(self, capsys, tmp_path):
        path = tmp_path / "record.json"
        path.write_text(_record_json(unexpected=True))
        code = main(["validate", str(path)])
        captured = capsys.readouterr()
        assert code == EXIT_DECODE_ERROR
        assert captured.out == ""
        assert "unexpected" in captured.err

    def test_bad_json_is_decode_failure(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("{not json"))
        assert main(["validate", "-"]) == EXIT_DECODE_ERROR

    def test_missing_file(self, capsys, tmp_path):
        code = main(["validate", str(tmp_path / "absent.json")])
        assert code == EXIT_FAILURE
        assert "Error reading input" in capsys.readouterr().err

    def test_json_report(self, capsys, tmp_path):
        path = tmp_path / "record.json"
        path.write_text(_record_json(timestamp=0))
        code = main(["validate", str(path), "--format", "json"])
        report = json.loads(capsys.readouterr().out)
        assert code == EXIT_FAILURE
        assert report["conforming"] is False
        failed = [r["id"] for r in report["results"] if not r["passed"]]
        assert failed == ["INV-R4"]


class TestValidateStreamCommand:
    def test_ordered_stream_passes(self, capsys, tmp_path):
        path = tmp_path / "records.jsonl"
        path.write_text("\n".join(_record_json(timestamp=t) for t in (1000, 1000, 1001)))
        code = main(["validate-stream", str(path)])
        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "Stream: [PASS] INV-T1" in out

    def test_out_of_order_stream_fails(self, capsys, tmp_path):
        path = tmp_path / "records.jsonl"
        path.write_text("\n".join(_record_json(timestamp=t) for t in (1001, 1000)))
        code = main(["validate-stream", str(path), "--format", "json"])
        report = json.loads(capsys.readouterr().out)
        assert code == EXIT_FAILURE
        assert report["stream"]["passed"] is False
        assert len(report["records"]) == 2

    def test_malformed_line(self, capsys, tmp_path):
        path = tmp_path / "records.jsonl"
        path.write_text(_record_json() + "\n{}\n")
        code = main(["validate-stream", str(path)])
        assert code == EXIT_DECODE_ERROR
        assert "line 2" in capsys.readouterr().err
