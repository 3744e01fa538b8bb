"""
P-MATRIX -- Emitter (reference path)

Assembles demonstration runtime state records from four raw function values.
"""

from pmatrix.systems.emitter.aggregation import demo_risk_score, demo_stability_score
from pmatrix.systems.emitter.emitter import emit_demo_record

__all__ = [
    "demo_risk_score",
    "demo_stability_score",
    "emit_demo_record",
]
