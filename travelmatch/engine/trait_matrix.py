"""Trait compatibility matrix — per-trait scoring curves.

Each trait maps ``|a - b|`` to a compatibility fraction with its own curve.
Social and risk reward similarity; adventure and planning peak at a moderate
difference. All functions are *pure*.
"""

from __future__ import annotations

from collections.abc import Callable

from travelmatch.engine import constants as c
from travelmatch.personality_types import TraitName


Bands = tuple[tuple[float, float], ...]


def _banded(diff: float, bands: Bands, floor: float) -> float:
    for max_diff, score in bands:
        if diff <= max_diff:
            return score
    return floor


# ---------------------------------------------------------------------------
# Curves
# ---------------------------------------------------------------------------
def social_compatibility(a: float, b: float) -> float:
    return _banded(abs(a - b), c.SOCIAL_BANDS, c.SOCIAL_FLOOR)


def adventure_compatibility(a: float, b: float) -> float:
    return _banded(abs(a - b), c.ADVENTURE_BANDS, c.ADVENTURE_FLOOR)


def planning_compatibility(a: float, b: float) -> float:
    return _banded(abs(a - b), c.PLANNING_BANDS, c.PLANNING_FLOOR)


def risk_compatibility(a: float, b: float, adventure_type: str | None = None) -> float:
    """Risk curve scaled by the adventure-type weight for ``risk``."""
    base = _banded(abs(a - b), c.RISK_BANDS, c.RISK_FLOOR)
    return base * adventure_type_weight(adventure_type, "risk")


def high_energy_compatibility(a: float, b: float) -> float:
    """Stricter energy curve used for high-intensity adventure types."""
    return _banded(abs(a - b), c.HIGH_ENERGY_BANDS, c.HIGH_ENERGY_FLOOR)


def adventure_type_weight(adventure_type: str | None, dimension: str) -> float:
    """Weight for ``(adventure_type, dimension)``; 1.0 when either is unknown."""
    if not adventure_type:
        return c.NEUTRAL_ADVENTURE_WEIGHT
    return c.ADVENTURE_TYPE_WEIGHTS.get(adventure_type, {}).get(
        dimension, c.NEUTRAL_ADVENTURE_WEIGHT
    )


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
_CURVES: dict[str, Callable[[float, float], float]] = {
    "social": social_compatibility,
    "adventure": adventure_compatibility,
    "planning": planning_compatibility,
}


def trait_compatibility(
    trait: TraitName,
    a: float,
    b: float,
    adventure_type: str | None = None,
) -> float:
    """Return the raw curve value for *trait* (a fraction, may exceed 1.0 for
    boosted risk). Unknown trait names score a neutral 0.5."""
    if trait == "risk":
        return risk_compatibility(a, b, adventure_type)
    curve = _CURVES.get(trait)
    if curve is None:
        return c.NEUTRAL_TRAIT_SCORE
    return curve(a, b)


def score_trait(
    trait: TraitName,
    a: float,
    b: float,
    adventure_type: str | None = None,
) -> float:
    """Return the trait compatibility on the 0-100 scale (clamped)."""
    raw = trait_compatibility(trait, a, b, adventure_type) * 100
    return max(0.0, min(100.0, raw))
