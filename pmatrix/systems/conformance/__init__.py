"""
P-MATRIX -- Conformance: partition mapping, invariant validation and the
wire decode boundary.
"""

from pmatrix.systems.conformance.codec import decode_record, decode_stream, encode_record
from pmatrix.systems.conformance.errors import (
    ConformanceError,
    DecodeError,
    InputRejectedError,
    PartitionError,
)
from pmatrix.systems.conformance.invariants import (
    INVARIANT_CATALOG,
    INVARIANT_IDS,
    check_stream_t1,
    is_valid,
    validate_all,
    validate_stream_t1,
)
from pmatrix.systems.conformance.partition import (
    map_level_to_mode,
    map_mode_to_level,
    map_risk_to_mode,
)
from pmatrix.systems.conformance.types import (
    InvariantCategory,
    InvariantDef,
    InvariantResult,
)

__all__ = [
    "INVARIANT_CATALOG",
    "INVARIANT_IDS",
    "ConformanceError",
    "DecodeError",
    "InputRejectedError",
    "InvariantCategory",
    "InvariantDef",
    "InvariantResult",
    "PartitionError",
    "check_stream_t1",
    "decode_record",
    "decode_stream",
    "encode_record",
    "is_valid",
    "map_level_to_mode",
    "map_mode_to_level",
    "map_risk_to_mode",
    "validate_all",
    "validate_stream_t1",
]
