"""
P-MATRIX -- Common Primitives

Shared base classes and clock helpers used by every record type.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(timezone.utc)


def unix_now() -> int:
    """Current wall-clock time in whole seconds since the Unix epoch."""
    return int(utc_now().timestamp())


# ─── Base Models ──────────────────────────────────────────────────


class PMBaseModel(BaseModel):
    """
    Base model for all wire-level P-MATRIX primitives.

    Instances are immutable snapshots. Unknown keys are rejected at
    construction and decode time, and no lax coercion is applied
    (a JSON string never becomes a number, a float never becomes an int).
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)
