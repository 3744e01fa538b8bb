"""Tests for the 5-mode partition mapping."""

from __future__ import annotations

import math

import pytest

from pmatrix.primitives.record import MODES, RISK_LEVELS, Mode, RiskLevel
from pmatrix.systems.conformance.partition import (
    LEVEL_TO_MODE,
    MODE_TO_LEVEL,
    map_level_to_mode,
    map_mode_to_level,
    map_risk_to_mode,
)


class TestMapRiskToMode:
    @pytest.mark.parametrize(
        ("risk_score", "expected"),
        [
            (0.0, Mode.OPTIMAL),
            (0.19999999, Mode.OPTIMAL),
            (0.2, Mode.NORMAL),
            (0.39, Mode.NORMAL),
            (0.4, Mode.CAUTION),
            (0.6, Mode.ALERT),
            (0.6375, Mode.ALERT),
            (0.8, Mode.HALT),
            (1.0, Mode.HALT),
        ],
    )
    def test_band_boundaries(self, risk_score, expected):
        assert map_risk_to_mode(risk_score) == expected

    @pytest.mark.parametrize("risk_score", [-0.001, 1.001, -1.0, 2.0, math.nan, math.inf, -math.inf])
    def test_unmappable_scores_return_none(self, risk_score):
        assert map_risk_to_mode(risk_score) is None

    def test_every_in_range_score_maps_to_exactly_one_mode(self):
        for i in range(1001):
            mode = map_risk_to_mode(i / 1000)
            assert mode in MODES

    def test_mapping_is_monotone(self):
        order = {mode: i for i, mode in enumerate(MODES)}
        previous = -1
        for i in range(1001):
            rank = order[map_risk_to_mode(i / 1000)]
            assert rank >= previous
            previous = rank

    def test_deterministic(self):
        assert map_risk_to_mode(0.55) == map_risk_to_mode(0.55) == Mode.CAUTION


class TestMapModeToLevel:
    def test_bijection_over_canonical_modes(self):
        levels = [map_mode_to_level(mode) for mode in MODES]
        assert levels == list(RISK_LEVELS)
        assert len(set(levels)) == 5

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Optimal", RiskLevel.L1),
            ("Normal", RiskLevel.L2),
            ("Caution", RiskLevel.L3),
            ("Alert", RiskLevel.L4),
            ("Halt", RiskLevel.L5),
        ],
    )
    def test_accepts_canonical_names(self, name, expected):
        assert map_mode_to_level(name) == expected

    @pytest.mark.parametrize("name", ["", "optimal", "HALT", "Unknown", "L1", " Alert"])
    def test_unknown_names_return_none(self, name):
        assert map_mode_to_level(name) is None

    def test_inverse_table(self):
        for mode in MODES:
            level = map_mode_to_level(mode)
            assert map_level_to_mode(level) == mode
        assert map_level_to_mode("L6") is None

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            MODE_TO_LEVEL[Mode.HALT] = RiskLevel.L1  # type: ignore[index]
        with pytest.raises(TypeError):
            LEVEL_TO_MODE[RiskLevel.L1] = Mode.HALT  # type: ignore[index]
