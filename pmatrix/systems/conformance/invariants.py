"""
P-MATRIX -- Runtime State Invariant Catalog

Twelve independent correctness checks that together define conformance.
A record violating any of them is malformed.

  Range        INV-R1..R4  bounded values, positive timestamp
  Consistency  INV-C1..C3  mode / risk_level agree with risk_score
  Structural   INV-S1..S4  non-empty strings, canonical shape, versions
  Temporal     INV-T1      non-decreasing timestamps across a stream

Every check runs on every call; there is no short-circuiting, so callers
always see the full diagnostic picture. INV-T1 needs an ordered sequence of
records and is evaluated by ``validate_stream_t1``; the single-record path
reports it as an informational pass.

The scores are range-checked only. Nothing here ties stability_score or
risk_score to the Functions values by any formula.
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Callable, Sequence

import structlog

from pmatrix.primitives.record import (
    FUNCTION_FIELDS,
    RECORD_FIELDS,
    SPEC_VERSION,
    RuntimeStateRecord,
)
from pmatrix.systems.conformance.partition import map_mode_to_level, map_risk_to_mode
from pmatrix.systems.conformance.types import (
    InvariantCategory,
    InvariantDef,
    InvariantResult,
)

logger = structlog.get_logger()

_SEMVER_PART = re.compile(r"[0-9]+")


def _in_unit_range(value: float) -> bool:
    return not math.isnan(value) and 0.0 <= value <= 1.0


def _text(value: object) -> str:
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


# ─── Range Invariants ─────────────────────────────────────────────


def _check_r1(r: RuntimeStateRecord) -> InvariantResult:
    """INV-R1: all four function values in [0.0, 1.0]."""
    values = r.functions.as_mapping()
    ok = all(_in_unit_range(v) for v in values.values())
    if ok:
        detail = "All function values in [0.0, 1.0]."
    else:
        listed = ", ".join(f"{name}={value}" for name, value in values.items())
        detail = f"Function value(s) out of range: {listed}"
    return InvariantResult(id="INV-R1", passed=ok, detail=detail)


def _check_r2(r: RuntimeStateRecord) -> InvariantResult:
    """INV-R2: stability_score in [0.0, 1.0]."""
    return InvariantResult(
        id="INV-R2",
        passed=_in_unit_range(r.stability_score),
        detail=f"stability_score={r.stability_score}, expected in [0.0, 1.0]",
    )


def _check_r3(r: RuntimeStateRecord) -> InvariantResult:
    """INV-R3: risk_score in [0.0, 1.0]."""
    return InvariantResult(
        id="INV-R3",
        passed=_in_unit_range(r.risk_score),
        detail=f"risk_score={r.risk_score}, expected in [0.0, 1.0]",
    )


def _check_r4(r: RuntimeStateRecord) -> InvariantResult:
    """INV-R4: timestamp > 0."""
    return InvariantResult(
        id="INV-R4",
        passed=r.timestamp > 0,
        detail=f"timestamp={r.timestamp}, expected > 0",
    )


# ─── Consistency Invariants ───────────────────────────────────────


def _check_c1(r: RuntimeStateRecord) -> InvariantResult:
    """INV-C1: mode is the partition image of risk_score."""
    expected = map_risk_to_mode(r.risk_score)
    return InvariantResult(
        id="INV-C1",
        passed=expected is not None and expected == r.mode,
        detail=(
            f"risk_score={r.risk_score} -> expected mode={_text(expected)}, "
            f"actual mode={_text(r.mode)}"
        ),
    )


def _check_c2(r: RuntimeStateRecord) -> InvariantResult:
    """INV-C2: risk_level is the image of mode."""
    expected = map_mode_to_level(r.mode)
    return InvariantResult(
        id="INV-C2",
        passed=expected is not None and expected == r.risk_level,
        detail=(
            f"mode={_text(r.mode)} -> expected risk_level={_text(expected)}, "
            f"actual risk_level={_text(r.risk_level)}"
        ),
    )


def _check_c3(r: RuntimeStateRecord) -> InvariantResult:
    """INV-C3: C1 and C2 together, so risk_level is determined by risk_score."""
    ok = _check_c1(r).passed and _check_c2(r).passed
    if ok:
        detail = "mode and risk_level are mutually consistent with risk_score."
    else:
        detail = "Mutual consistency violation: mode/risk_level not determined by risk_score."
    return InvariantResult(id="INV-C3", passed=ok, detail=detail)


# ─── Structural Invariants ────────────────────────────────────────


def _check_s1(r: RuntimeStateRecord) -> InvariantResult:
    """INV-S1: no required string field is empty."""
    empty = [
        name
        for name in ("spec_version", "schema_version", "mode", "risk_level")
        if _text(getattr(r, name)) == ""
    ]
    if empty:
        detail = f"Empty string field(s): {', '.join(empty)}"
    else:
        detail = "All eight required fields present and non-empty."
    return InvariantResult(id="INV-S1", passed=not empty, detail=detail)


def _check_s2(r: RuntimeStateRecord) -> InvariantResult:
    """
    INV-S2: no fields beyond the canonical eight.

    The decoder already rejects unknown keys, so a decoded record passes
    trivially; the comparison is still made against the live field set.
    """
    extra = sorted(set(r.model_dump()) - set(RECORD_FIELDS))
    extra += sorted(
        f"functions.{name}"
        for name in set(r.functions.model_dump()) - set(FUNCTION_FIELDS)
    )
    if extra:
        detail = f"Unexpected field(s): {', '.join(extra)}"
    else:
        detail = "No additional fields (unknown keys are rejected at decode)."
    return InvariantResult(id="INV-S2", passed=not extra, detail=detail)


def _check_s3(r: RuntimeStateRecord) -> InvariantResult:
    """INV-S3: spec_version is exactly the current constant."""
    return InvariantResult(
        id="INV-S3",
        passed=r.spec_version == SPEC_VERSION,
        detail=f"spec_version={r.spec_version}, expected={SPEC_VERSION}",
    )


def _check_s4(r: RuntimeStateRecord) -> InvariantResult:
    """INV-S4: schema_version is MAJOR.MINOR.PATCH of non-negative integers."""
    parts = r.schema_version.split(".")
    ok = len(parts) == 3 and all(_SEMVER_PART.fullmatch(p) for p in parts)
    return InvariantResult(
        id="INV-S4",
        passed=ok,
        detail=f"schema_version={r.schema_version}, expected MAJOR.MINOR.PATCH",
    )


# ─── Temporal Invariant ───────────────────────────────────────────


def _check_t1_note(_r: RuntimeStateRecord) -> InvariantResult:
    """INV-T1 cannot be judged on one record."""
    return InvariantResult(
        id="INV-T1",
        passed=True,
        detail=(
            "Stream-level invariant. Not checkable on a single record. "
            "Use validate_stream_t1() for sequential validation."
        ),
    )


def validate_stream_t1(records: Sequence[RuntimeStateRecord]) -> int | None:
    """
    Check non-decreasing timestamps across records from one emitter.

    Returns the index of the first record whose timestamp is strictly less
    than its predecessor's, or None. Equal timestamps are allowed.
    """
    for i in range(1, len(records)):
        if records[i].timestamp < records[i - 1].timestamp:
            logger.debug(
                "stream_order_violation",
                index=i,
                timestamp=records[i].timestamp,
                previous=records[i - 1].timestamp,
            )
            return i
    return None


def check_stream_t1(records: Sequence[RuntimeStateRecord]) -> InvariantResult:
    """Evaluate INV-T1 over an ordered batch and report it as a result."""
    index = validate_stream_t1(records)
    if index is None:
        detail = f"{len(records)} record(s) with non-decreasing timestamps."
    else:
        detail = (
            f"record {index} timestamp={records[index].timestamp} precedes "
            f"record {index - 1} timestamp={records[index - 1].timestamp}"
        )
    return InvariantResult(id="INV-T1", passed=index is None, detail=detail)


# ─── The Catalog ──────────────────────────────────────────────────

CheckFn = Callable[[RuntimeStateRecord], InvariantResult]

INVARIANT_CATALOG: tuple[tuple[InvariantDef, CheckFn], ...] = (
    (
        InvariantDef(id="INV-R1", name="Function Range", category=InvariantCategory.RANGE,
                     description="baseline, norm, stability and meta_control lie in [0.0, 1.0]."),
        _check_r1,
    ),
    (
        InvariantDef(id="INV-R2", name="Stability Score Range", category=InvariantCategory.RANGE,
                     description="stability_score lies in [0.0, 1.0]."),
        _check_r2,
    ),
    (
        InvariantDef(id="INV-R3", name="Risk Score Range", category=InvariantCategory.RANGE,
                     description="risk_score lies in [0.0, 1.0]."),
        _check_r3,
    ),
    (
        InvariantDef(id="INV-R4", name="Positive Timestamp", category=InvariantCategory.RANGE,
                     description="timestamp is greater than zero."),
        _check_r4,
    ),
    (
        InvariantDef(id="INV-C1", name="Mode Partition", category=InvariantCategory.CONSISTENCY,
                     description="mode is the partition image of risk_score."),
        _check_c1,
    ),
    (
        InvariantDef(id="INV-C2", name="Risk Level Mapping", category=InvariantCategory.CONSISTENCY,
                     description="risk_level is the image of mode under the fixed table."),
        _check_c2,
    ),
    (
        InvariantDef(id="INV-C3", name="Mutual Consistency", category=InvariantCategory.CONSISTENCY,
                     description="INV-C1 and INV-C2 both hold."),
        _check_c3,
    ),
    (
        InvariantDef(id="INV-S1", name="Non-Empty Strings", category=InvariantCategory.STRUCTURAL,
                     description="spec_version, schema_version, mode and risk_level are non-empty."),
        _check_s1,
    ),
    (
        InvariantDef(id="INV-S2", name="No Additional Fields", category=InvariantCategory.STRUCTURAL,
                     description="Only the eight canonical fields are present."),
        _check_s2,
    ),
    (
        InvariantDef(id="INV-S3", name="Spec Version", category=InvariantCategory.STRUCTURAL,
                     description="spec_version equals the current spec version exactly."),
        _check_s3,
    ),
    (
        InvariantDef(id="INV-S4", name="Schema Version Format", category=InvariantCategory.STRUCTURAL,
                     description="schema_version is three dot-separated non-negative integers."),
        _check_s4,
    ),
    (
        InvariantDef(id="INV-T1", name="Monotonic Timestamps", category=InvariantCategory.TEMPORAL,
                     description="Timestamps never decrease across a stream from one emitter."),
        _check_t1_note,
    ),
)

INVARIANT_IDS: tuple[str, ...] = tuple(d.id for d, _ in INVARIANT_CATALOG)


# ─── Validator ────────────────────────────────────────────────────


def validate_all(record: RuntimeStateRecord) -> list[InvariantResult]:
    """
    Run every invariant against a record. One result per invariant, in
    catalog order. The record is never modified.
    """
    results: list[InvariantResult] = []

    for invariant_def, check_fn in INVARIANT_CATALOG:
        try:
            results.append(check_fn(record))
        except Exception as e:
            # A check that cannot be evaluated counts as a violation
            logger.error("invariant_check_error", invariant=invariant_def.id, error=str(e))
            results.append(InvariantResult(
                id=invariant_def.id,
                passed=False,
                detail=f"Invariant check failed with error: {e}",
            ))

    failed = [r.id for r in results if not r.passed]
    logger.debug("record_validated", timestamp=record.timestamp, failed=failed)
    return results


def is_valid(record: RuntimeStateRecord) -> bool:
    """True only if every invariant passes."""
    return all(r.passed for r in validate_all(record))
