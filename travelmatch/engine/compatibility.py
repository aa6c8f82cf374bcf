"""Pairwise compatibility scoring between two travelers.

Two scoring modes coexist:

- a *linear* mode (``score_dimension``) used by the weighted scorers and the
  group aggregator, and
- a *curved* mode built on the trait compatibility matrix
  (``score_pair_by_traits``), aware of the adventure type.

All functions are *pure*: no side-effects, no I/O.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from travelmatch.engine import constants as c
from travelmatch.engine.trait_matrix import (
    adventure_compatibility,
    high_energy_compatibility,
    planning_compatibility,
    risk_compatibility,
    social_compatibility,
)
from travelmatch.personality_types import CORE_TRAITS, Participant, PersonalityVector


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------
class PairwiseScore(BaseModel):
    """Score for one unordered pair of travelers."""

    participant_a_id: str = ""
    participant_b_id: str = ""
    score: int = Field(ge=0, le=100)
    breakdown: dict[str, float] = Field(default_factory=dict)
    modifiers: dict[str, float] = Field(default_factory=dict)


class TraitMatrixScore(BaseModel):
    """Curved, adventure-aware score for a pair."""

    score: int = Field(ge=0, le=100)
    adventure_type: str
    breakdown: dict[str, float] = Field(default_factory=dict)
    adjusted_weights: dict[str, float] = Field(default_factory=dict)
    conflicts: list[str] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0, default=1.0)


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _or_default(value: float | None, default: float) -> float:
    return default if value is None else value


# ---------------------------------------------------------------------------
# Linear scoring
# ---------------------------------------------------------------------------
def score_dimension(a: float, b: float) -> float:
    """Linear similarity on the 0-100 scale: 100 for equal values."""
    # Whole points per dimension, before weighting.
    return _clamp(round((100 - abs(a - b)) / 100 * 100))


def weighted_dimension_score(
    a: PersonalityVector,
    b: PersonalityVector,
    weights: dict[str, float],
) -> tuple[float, dict[str, float]]:
    """Weighted mean of ``score_dimension`` over dimensions both sides carry.

    Returns ``(score, breakdown)``. Weights of missing dimensions are dropped
    and the rest renormalised.
    """
    total = 0.0
    total_weight = 0.0
    breakdown: dict[str, float] = {}
    for dimension, weight in weights.items():
        va, vb = a.trait(dimension), b.trait(dimension)
        if va is None or vb is None:
            continue
        dim_score = score_dimension(va, vb)
        breakdown[dimension] = dim_score
        total += dim_score * weight
        total_weight += weight
    return (total / total_weight if total_weight > 0 else 0.0), breakdown


def score_pair_basic(
    a: PersonalityVector,
    b: PersonalityVector,
    ids: tuple[str, str] = ("", ""),
) -> PairwiseScore:
    """Equal-weight linear score over the four core traits."""
    base, breakdown = weighted_dimension_score(a, b, c.BASIC_WEIGHTS)
    return PairwiseScore(
        participant_a_id=ids[0],
        participant_b_id=ids[1],
        score=round(_clamp(base)),
        breakdown=breakdown,
    )


# ---------------------------------------------------------------------------
# Secondary modifiers
# ---------------------------------------------------------------------------
def experience_modifier(a: PersonalityVector, b: PersonalityVector) -> float:
    gap = abs(
        _or_default(a.experience_level, c.NEUTRAL_TRAIT_VALUE)
        - _or_default(b.experience_level, c.NEUTRAL_TRAIT_VALUE)
    )
    for max_gap, modifier in c.EXPERIENCE_BANDS:
        if gap <= max_gap:
            return modifier
    return c.EXPERIENCE_WIDE_GAP


def age_modifier(a: PersonalityVector, b: PersonalityVector) -> float:
    """Age-gap modifier; younger pairs get a tighter tolerance band."""
    age_a = _or_default(a.age, c.NEUTRAL_AGE)
    age_b = _or_default(b.age, c.NEUTRAL_AGE)
    gap = abs(age_a - age_b)
    avg_age = (age_a + age_b) / 2

    tolerance = c.AGE_TOLERANCE_SENIOR
    for below, band_tolerance in c.AGE_TOLERANCE_BANDS:
        if avg_age < below:
            tolerance = band_tolerance
            break

    if gap <= tolerance:
        return c.AGE_WITHIN_TOLERANCE
    if gap <= tolerance * 2:
        return c.AGE_WITHIN_DOUBLE
    return c.AGE_BEYOND


def leadership_modifier(a: PersonalityVector, b: PersonalityVector) -> float:
    la = _or_default(a.leadership_style, c.NEUTRAL_TRAIT_VALUE)
    lb = _or_default(b.leadership_style, c.NEUTRAL_TRAIT_VALUE)
    if la > c.LEADERS_HIGH and lb > c.LEADERS_HIGH:
        return c.TOO_MANY_LEADERS
    if la < c.LEADERS_LOW and lb < c.LEADERS_LOW:
        return c.NO_LEADERSHIP
    if abs(la - lb) > c.LEADERS_COMPLEMENT_GAP:
        return c.LEADERSHIP_COMPLEMENT
    return 0


# ---------------------------------------------------------------------------
# Advanced (weighted) scoring
# ---------------------------------------------------------------------------
def resolve_weights(weights: dict[str, float] | None = None) -> dict[str, float]:
    """Merge caller overrides over the default dimension weights.

    Raises:
        ValueError: If any weight is negative.
    """
    merged = {**c.DEFAULT_WEIGHTS, **(weights or {})}
    negative = [name for name, w in merged.items() if w < 0]
    if negative:
        raise ValueError(f"Dimension weights must be non-negative: {', '.join(negative)}")
    return merged


def score_pair_advanced(
    a: PersonalityVector,
    b: PersonalityVector,
    weights: dict[str, float] | None = None,
    ids: tuple[str, str] = ("", ""),
) -> PairwiseScore:
    """Weighted linear score plus experience / age / leadership modifiers."""
    base, breakdown = weighted_dimension_score(a, b, resolve_weights(weights))

    modifiers = {
        "experience": experience_modifier(a, b),
        "age": age_modifier(a, b),
        "leadership": leadership_modifier(a, b),
    }
    final = (
        base
        + modifiers["experience"] * c.EXPERIENCE_INFLUENCE
        + modifiers["age"] * c.AGE_INFLUENCE
        + modifiers["leadership"] * c.LEADERSHIP_INFLUENCE
    )

    return PairwiseScore(
        participant_a_id=ids[0],
        participant_b_id=ids[1],
        score=round(_clamp(final)),
        breakdown=breakdown,
        modifiers=modifiers,
    )


# ---------------------------------------------------------------------------
# Curved (trait matrix) scoring
# ---------------------------------------------------------------------------
def detect_adventure_type(a: PersonalityVector, b: PersonalityVector) -> str:
    """Infer the adventure type that suits a pair from risk / adventure."""
    avg_risk = (a.risk_tolerance + b.risk_tolerance) / 2
    avg_adventure = (a.adventure_style + b.adventure_style) / 2

    if avg_risk > 80 and avg_adventure > 80:
        return "extreme-sports"
    if avg_risk < 30 and avg_adventure < 40:
        return "family-friendly"
    if avg_adventure < 30:
        return "wellness-retreat"
    return "cultural-immersion"


def detect_trait_conflicts(a: PersonalityVector, b: PersonalityVector) -> list[str]:
    """Hard incompatibilities that override the curved score."""
    flags: list[str] = []

    sa, sb = a.social_preference, b.social_preference
    if (sa < 20 and sb > 80) or (sa > 80 and sb < 20):
        flags.append("extreme_social_mismatch")

    ra, rb = a.risk_tolerance, b.risk_tolerance
    if (ra < 25 and rb > 75) or (ra > 75 and rb < 25):
        if a.adventure_style > 60 or b.adventure_style > 60:
            flags.append("risk_adventure_conflict")

    return flags


def _trait_confidence(a: PersonalityVector, b: PersonalityVector) -> float:
    confidence = 1.0
    for value in [*a.core_values(), *b.core_values()]:
        if value < c.EXTREME_TRAIT_LOW or value > c.EXTREME_TRAIT_HIGH:
            confidence *= c.EXTREME_TRAIT_CONFIDENCE
    return max(c.MIN_CONFIDENCE, confidence)


def score_pair_by_traits(
    a: PersonalityVector,
    b: PersonalityVector,
    adventure_type: str | None = None,
    weights: dict[str, float] | None = None,
) -> TraitMatrixScore:
    """Score a pair with the trait matrix curves.

    Args:
        a: First traveler's vector.
        b: Second traveler's vector.
        adventure_type: Context tag; detected from the pair when omitted.
        weights: Base dimension weights (defaults to ``DEFAULT_WEIGHTS``);
            ``communication_style`` is not part of the curved score.

    Returns:
        TraitMatrixScore on the 0-100 scale.
    """
    kind = adventure_type or detect_adventure_type(a, b)
    confidence = _trait_confidence(a, b)

    conflicts = detect_trait_conflicts(a, b)
    if conflicts:
        return TraitMatrixScore(
            score=c.TRAIT_CONFLICT_SCORE,
            adventure_type=kind,
            conflicts=conflicts,
            confidence=confidence,
        )

    base = resolve_weights(weights)
    adjustment = c.ADJUSTED_WEIGHTS.get(kind, {})
    adjusted = {
        dim: base[dim] * adjustment.get(dim, 1.0)
        for dim in (*CORE_TRAITS, "planning_style")
        if dim in base
    }

    if kind in c.HIGH_ENERGY_TYPES:
        energy = high_energy_compatibility(a.energy_level, b.energy_level)
    else:
        energy = social_compatibility(a.energy_level, b.energy_level)

    curves: dict[str, float] = {
        "energy_level": energy,
        "social_preference": social_compatibility(a.social_preference, b.social_preference),
        "adventure_style": adventure_compatibility(a.adventure_style, b.adventure_style),
        "risk_tolerance": risk_compatibility(a.risk_tolerance, b.risk_tolerance, kind),
    }
    if a.planning_style is not None and b.planning_style is not None:
        planning = planning_compatibility(a.planning_style, b.planning_style)
        if kind in c.PLANNING_CRITICAL_TYPES:
            planning *= c.PLANNING_CRITICAL_BOOST
        curves["planning_style"] = planning

    used = {dim: w for dim, w in adjusted.items() if dim in curves}
    total_weight = sum(used.values())
    raw = sum(curves[dim] * w for dim, w in used.items()) / total_weight if total_weight else 0.0

    return TraitMatrixScore(
        score=round(_clamp(raw * 100)),
        adventure_type=kind,
        breakdown={dim: round(_clamp(value * 100), 1) for dim, value in curves.items()},
        adjusted_weights=used,
        confidence=confidence,
    )


def score_participants_by_traits(
    a: Participant,
    b: Participant,
    weights: dict[str, float] | None = None,
) -> TraitMatrixScore:
    """Curved score for two travelers.

    An ``adventure_type`` tag shared by both travelers sets the context;
    otherwise the type is detected from their traits.

    Raises:
        ValueError: If either traveler has no trait data.
    """
    if a.personality is None or b.personality is None:
        raise ValueError(f"Travelers {a.id!r} and {b.id!r} both need trait data to be scored")
    shared = a.adventure_type if a.adventure_type == b.adventure_type else None
    return score_pair_by_traits(a.personality, b.personality, shared, weights)
