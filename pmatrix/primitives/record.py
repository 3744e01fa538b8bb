"""
P-MATRIX -- Runtime State Record Schema

The canonical runtime state record: one immutable snapshot of an autonomous
agent's operational posture at a single instant.

Four bounded evaluation inputs (``Functions``), two derived scores, and a
discrete mode / risk-level pair. Field names and the closed enumerations
below are the wire contract; the decode boundary converts raw strings into
``Mode`` / ``RiskLevel`` immediately and rejects anything else.
"""

from __future__ import annotations

import enum
from typing import Final

from pydantic import Field

from pmatrix.primitives.common import PMBaseModel


# ─── Version Constants ────────────────────────────────────────────

SPEC_VERSION: Final[str] = "pmatrix-3.5"
SCHEMA_VERSION: Final[str] = "1.0.0"

# Timestamps are unsigned 64-bit seconds
TIMESTAMP_MAX: Final[int] = 2**64 - 1


# ─── Enums ────────────────────────────────────────────────────────


class Mode(str, enum.Enum):
    """The five discrete operating modes, ordered from least to most risk."""

    OPTIMAL = "Optimal"
    NORMAL = "Normal"
    CAUTION = "Caution"
    ALERT = "Alert"
    HALT = "Halt"


class RiskLevel(str, enum.Enum):
    """Risk classification labels, in bijection with ``Mode``."""

    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"
    L5 = "L5"


MODES: Final[tuple[Mode, ...]] = tuple(Mode)
RISK_LEVELS: Final[tuple[RiskLevel, ...]] = tuple(RiskLevel)


# ─── Canonical Shape ──────────────────────────────────────────────
# Used by the decoder (via extra="forbid") and the structural checks.

FUNCTION_FIELDS: Final[tuple[str, ...]] = (
    "baseline",
    "norm",
    "stability",
    "meta_control",
)

RECORD_FIELDS: Final[tuple[str, ...]] = (
    "spec_version",
    "schema_version",
    "timestamp",
    "functions",
    "stability_score",
    "risk_score",
    "mode",
    "risk_level",
)


# ─── Models ───────────────────────────────────────────────────────


class Functions(PMBaseModel):
    """The four evaluation functions. Each is a normalised scalar in [0.0, 1.0]."""

    baseline: float
    norm: float
    stability: float
    meta_control: float

    def as_mapping(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in FUNCTION_FIELDS}


class RuntimeStateRecord(PMBaseModel):
    """
    A single P-MATRIX runtime state record.

    Range membership of the floats is deliberately not enforced here: an
    out-of-range record must still decode so the invariant validator can
    report exactly which checks it violates. Only the wire shape is
    enforced at this layer.
    """

    spec_version: str
    schema_version: str
    timestamp: int = Field(ge=0, le=TIMESTAMP_MAX)
    functions: Functions
    stability_score: float
    risk_score: float
    mode: Mode
    risk_level: RiskLevel
