"""
P-MATRIX -- 5-Mode Partition Mapping

risk_score -> mode -> risk_level.

Bands are lower-inclusive, upper-exclusive, except Halt which is closed at
both ends: [0.8, 1.0]. Values outside [0.0, 1.0] and NaN map to nothing.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Final, Mapping

from pmatrix.primitives.record import Mode, RiskLevel

# (exclusive upper bound, mode) in ascending order. Anything in range that
# clears every bound falls through to Halt.
MODE_THRESHOLDS: Final[tuple[tuple[float, Mode], ...]] = (
    (0.2, Mode.OPTIMAL),
    (0.4, Mode.NORMAL),
    (0.6, Mode.CAUTION),
    (0.8, Mode.ALERT),
)

MODE_TO_LEVEL: Final[Mapping[Mode, RiskLevel]] = MappingProxyType({
    Mode.OPTIMAL: RiskLevel.L1,
    Mode.NORMAL: RiskLevel.L2,
    Mode.CAUTION: RiskLevel.L3,
    Mode.ALERT: RiskLevel.L4,
    Mode.HALT: RiskLevel.L5,
})

LEVEL_TO_MODE: Final[Mapping[RiskLevel, Mode]] = MappingProxyType(
    {level: mode for mode, level in MODE_TO_LEVEL.items()}
)


def map_risk_to_mode(risk_score: float) -> Mode | None:
    """Map a risk_score to its operating mode. None if NaN or outside [0.0, 1.0]."""
    if math.isnan(risk_score) or risk_score < 0.0 or risk_score > 1.0:
        return None
    for upper, mode in MODE_THRESHOLDS:
        if risk_score < upper:
            return mode
    return Mode.HALT


def map_mode_to_level(mode: Mode | str) -> RiskLevel | None:
    """Map a mode (or its canonical name) to its risk level. None for unknown names."""
    try:
        return MODE_TO_LEVEL[Mode(mode)]
    except ValueError:
        return None


def map_level_to_mode(level: RiskLevel | str) -> Mode | None:
    """Inverse of ``map_mode_to_level``."""
    try:
        return LEVEL_TO_MODE[RiskLevel(level)]
    except ValueError:
        return None
