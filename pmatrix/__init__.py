"""
P-MATRIX -- Runtime State Reference Encoder

Reference encoder for schema conformance. Not an execution engine.
"""

from pmatrix.primitives.record import (
    SCHEMA_VERSION,
    SPEC_VERSION,
    Functions,
    Mode,
    RiskLevel,
    RuntimeStateRecord,
)
from pmatrix.systems.conformance import (
    DecodeError,
    InputRejectedError,
    InvariantResult,
    PartitionError,
    decode_record,
    encode_record,
    is_valid,
    validate_all,
    validate_stream_t1,
)
from pmatrix.systems.emitter import emit_demo_record
from pmatrix.telemetry.logging import configure_library_logging

configure_library_logging()


def validate_record(record: RuntimeStateRecord) -> list[InvariantResult]:
    """Validate a runtime state record against all 12 invariants."""
    return validate_all(record)


def is_record_valid(record: RuntimeStateRecord) -> bool:
    """True if the record satisfies all invariants."""
    return is_valid(record)


__all__ = [
    "SCHEMA_VERSION",
    "SPEC_VERSION",
    "DecodeError",
    "Functions",
    "InputRejectedError",
    "InvariantResult",
    "Mode",
    "PartitionError",
    "RiskLevel",
    "RuntimeStateRecord",
    "decode_record",
    "emit_demo_record",
    "encode_record",
    "is_record_valid",
    "validate_record",
    "validate_stream_t1",
]
