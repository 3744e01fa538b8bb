"""
P-MATRIX -- Demonstration Score Aggregation

WARNING: schema conformance demonstration only. These formulas do NOT
reflect any production or normative P-MATRIX evaluation logic; they exist
solely to populate the required score fields of an emitted record.
"""

from __future__ import annotations

from pmatrix.primitives.record import Functions


def demo_stability_score(functions: Functions) -> float:
    """Arithmetic mean of the four function values."""
    return (
        functions.baseline + functions.norm + functions.stability + functions.meta_control
    ) / 4.0


def demo_risk_score(stability_score: float) -> float:
    """Complement of the stability score."""
    return 1.0 - stability_score
