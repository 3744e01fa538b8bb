"""
P-MATRIX -- Conformance Type Definitions

Invariant definitions and per-check results.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict


class InvariantCategory(str, enum.Enum):
    RANGE = "range"
    CONSISTENCY = "consistency"
    STRUCTURAL = "structural"
    TEMPORAL = "temporal"


class InvariantDef(BaseModel):
    """Definition of one invariant in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: InvariantCategory
    description: str


class InvariantResult(BaseModel):
    """Outcome of evaluating a single invariant."""

    model_config = ConfigDict(frozen=True)

    id: str
    passed: bool
    detail: str

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"
