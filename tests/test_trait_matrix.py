"""Tests for travelmatch/engine/trait_matrix.py."""

import pytest

from travelmatch.engine.trait_matrix import (
    adventure_type_weight,
    score_trait,
    trait_compatibility,
)


class TestSocialCurve:
    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            (50, 50, 1.0),
            (0, 15, 0.85),
            (0, 35, 0.65),
            (0, 55, 0.4),
            (0, 85, 0.2),
        ],
    )
    def test_bands(self, a, b, expected):
        assert trait_compatibility("social", a, b) == pytest.approx(expected)

    def test_band_edges_inclusive(self):
        assert trait_compatibility("social", 0, 10) == pytest.approx(1.0)
        assert trait_compatibility("social", 0, 10.5) == pytest.approx(0.85)

    def test_symmetric(self):
        assert trait_compatibility("social", 12, 70) == trait_compatibility("social", 70, 12)


class TestComplementaryCurves:
    def test_adventure_moderate_difference_beats_identical(self):
        """Some variety in adventure style scores above near-identical tastes."""
        moderate = trait_compatibility("adventure", 45, 55)
        near_identical = trait_compatibility("adventure", 50, 52)
        assert moderate == pytest.approx(0.9)
        assert near_identical == pytest.approx(0.85)
        assert moderate > near_identical

    def test_adventure_extremes(self):
        assert trait_compatibility("adventure", 0, 40) == pytest.approx(0.5)
        assert trait_compatibility("adventure", 0, 90) == pytest.approx(0.25)

    def test_planning_peak(self):
        assert trait_compatibility("planning", 50, 55) == pytest.approx(0.8)
        assert trait_compatibility("planning", 50, 62) == pytest.approx(0.9)
        assert trait_compatibility("planning", 50, 80) == pytest.approx(0.7)
        assert trait_compatibility("planning", 0, 50) == pytest.approx(0.45)
        assert trait_compatibility("planning", 0, 100) == pytest.approx(0.2)


class TestRiskCurve:
    def test_unweighted_base(self):
        assert trait_compatibility("risk", 80, 85) == pytest.approx(0.95)
        assert trait_compatibility("risk", 0, 90) == pytest.approx(0.15)

    def test_extreme_sports_boosts(self):
        base = trait_compatibility("risk", 80, 85)
        boosted = trait_compatibility("risk", 80, 85, "extreme-sports")
        # 0.95 × 1.3
        assert boosted == pytest.approx(1.235)
        assert boosted > base
        assert score_trait("risk", 80, 85, "extreme-sports") > score_trait("risk", 80, 85)

    def test_wellness_retreat_dampens(self):
        base = trait_compatibility("risk", 80, 85)
        dampened = trait_compatibility("risk", 80, 85, "wellness-retreat")
        assert dampened == pytest.approx(0.475)
        assert dampened < base
        assert score_trait("risk", 80, 85, "wellness-retreat") < score_trait("risk", 80, 85)

    def test_unknown_adventure_type_is_neutral(self):
        assert trait_compatibility("risk", 80, 85, "space-tourism") == pytest.approx(0.95)


class TestDispatch:
    def test_unknown_trait_neutral(self):
        assert trait_compatibility("humour", 10, 90) == 0.5
        assert score_trait("humour", 10, 90) == pytest.approx(50.0)

    def test_score_trait_scaled(self):
        assert score_trait("social", 0, 15) == pytest.approx(85.0)

    def test_score_trait_clamped(self):
        assert score_trait("risk", 80, 85, "extreme-sports") == pytest.approx(100.0)

    def test_adventure_type_weight_table(self):
        assert adventure_type_weight("family-friendly", "risk") == pytest.approx(0.6)
        assert adventure_type_weight("luxury-travel", "planning") == pytest.approx(1.3)
        assert adventure_type_weight(None, "risk") == 1.0
        assert adventure_type_weight("extreme-sports", "energy") == 1.0
