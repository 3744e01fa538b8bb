"""
P-MATRIX -- Reference Record Emitter

Builds a runtime state record from four raw function values. Inputs are
screened before anything is constructed: a rejected input never yields a
partial record.

Scores come from the demonstration aggregation in ``aggregation``; mode and
risk_level come from the partition mapping, so an emitted record satisfies
every single-record invariant by construction.
"""

from __future__ import annotations

import math

import structlog

from pmatrix.primitives.common import unix_now
from pmatrix.primitives.record import (
    FUNCTION_FIELDS,
    SCHEMA_VERSION,
    SPEC_VERSION,
    TIMESTAMP_MAX,
    Functions,
    RuntimeStateRecord,
)
from pmatrix.systems.conformance.errors import InputRejectedError, PartitionError
from pmatrix.systems.conformance.partition import map_mode_to_level, map_risk_to_mode
from pmatrix.systems.emitter.aggregation import demo_risk_score, demo_stability_score

logger = structlog.get_logger()


def _screen_input(name: str, value: float) -> None:
    if math.isnan(value) or math.isinf(value):
        raise InputRejectedError(name, value, "is NaN or infinite")
    if not 0.0 <= value <= 1.0:
        raise InputRejectedError(name, value, "is outside [0.0, 1.0]")


def _screen_timestamp(timestamp: int) -> None:
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise InputRejectedError("timestamp", timestamp, "is not an integer")
    if timestamp < 0:
        raise InputRejectedError("timestamp", timestamp, "is negative")
    if timestamp > TIMESTAMP_MAX:
        raise InputRejectedError("timestamp", timestamp, "exceeds the unsigned 64-bit range")


def emit_demo_record(
    baseline: float,
    norm: float,
    stability: float,
    meta_control: float,
    timestamp: int | None = None,
) -> RuntimeStateRecord:
    """
    Emit a demonstration runtime state record.

    ``timestamp`` defaults to the current wall-clock time in whole seconds.
    Raises InputRejectedError naming the first offending input.
    """
    raw = dict(zip(FUNCTION_FIELDS, (baseline, norm, stability, meta_control)))
    for name, value in raw.items():
        _screen_input(name, value)
    if timestamp is not None:
        _screen_timestamp(timestamp)

    functions = Functions(**{name: float(value) for name, value in raw.items()})
    stability_score = demo_stability_score(functions)
    risk_score = demo_risk_score(stability_score)

    mode = map_risk_to_mode(risk_score)
    if mode is None:
        raise PartitionError(f"risk_score {risk_score} out of range")
    risk_level = map_mode_to_level(mode)
    if risk_level is None:
        raise PartitionError(f"unknown mode {mode.value}")

    ts = unix_now() if timestamp is None else timestamp

    record = RuntimeStateRecord(
        spec_version=SPEC_VERSION,
        schema_version=SCHEMA_VERSION,
        timestamp=ts,
        functions=functions,
        stability_score=stability_score,
        risk_score=risk_score,
        mode=mode,
        risk_level=risk_level,
    )
    logger.debug(
        "record_emitted",
        timestamp=ts,
        risk_score=risk_score,
        mode=mode.value,
        risk_level=risk_level.value,
    )
    return record
