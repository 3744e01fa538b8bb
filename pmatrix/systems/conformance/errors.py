"""
P-MATRIX -- Conformance Error Hierarchy

All exceptions raised while building or decoding runtime state records.

Namespace: pmatrix.systems.conformance.errors

Invariant violations are NOT exceptions. A decoded record that breaks one
or more invariants is reported as a list of InvariantResult values so that
every failure is visible at once.

Error classes:
  InputRejectedError  -- raw emitter input is NaN, infinite or outside [0, 1];
                         no record is built
  DecodeError         -- bytes do not satisfy the wire contract; validation
                         is never attempted
  PartitionError      -- the emitter could not map its own in-range
                         risk_score; internal inconsistency
"""

from __future__ import annotations


class ConformanceError(RuntimeError):
    """Base for all record construction and decode failures."""


class InputRejectedError(ConformanceError):
    """
    A raw input to the emitter is not a finite value in [0.0, 1.0].

    Carries the offending field name and value.
    """

    def __init__(self, field: str, value: float, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} = {value!r} {reason}")


class DecodeError(ConformanceError):
    """
    External input is not a well-formed record: bad JSON, wrong field types,
    missing required fields, non-canonical enum strings or forbidden extra
    fields.

    ``line`` is the 1-based line number when decoding a JSON Lines stream.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class PartitionError(ConformanceError):
    """
    The partition mapping produced no mode or level for a value the emitter
    computed itself.
    """
