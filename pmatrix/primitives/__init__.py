"""P-MATRIX -- Shared primitives: base models and the runtime state record schema."""

from pmatrix.primitives.common import PMBaseModel, unix_now, utc_now
from pmatrix.primitives.record import (
    FUNCTION_FIELDS,
    MODES,
    RECORD_FIELDS,
    RISK_LEVELS,
    SCHEMA_VERSION,
    SPEC_VERSION,
    TIMESTAMP_MAX,
    Functions,
    Mode,
    RiskLevel,
    RuntimeStateRecord,
)

__all__ = [
    "FUNCTION_FIELDS",
    "MODES",
    "RECORD_FIELDS",
    "RISK_LEVELS",
    "SCHEMA_VERSION",
    "SPEC_VERSION",
    "TIMESTAMP_MAX",
    "Functions",
    "Mode",
    "PMBaseModel",
    "RiskLevel",
    "RuntimeStateRecord",
    "unix_now",
    "utc_now",
]
