"""Group aggregation — pairwise averages, trait balance and diversity.

All functions are *pure*.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal

import numpy as np
from pydantic import BaseModel, Field

from travelmatch.engine import constants as c
from travelmatch.engine.compatibility import PairwiseScore, score_pair_basic
from travelmatch.personality_types import (
    CORE_TRAITS,
    Participant,
    PersonalityVector,
    personalities_of,
)


PairScorer = Callable[[PersonalityVector, PersonalityVector, tuple[str, str]], PairwiseScore]


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------
class TraitSummary(BaseModel):
    """Group average for one trait with its level label."""

    trait: str
    value: int
    level: str


class GroupRecommendation(BaseModel):
    """A size / compatibility / balance suggestion for a group."""

    type: Literal["size", "compatibility", "balance"]
    priority: Literal["high", "medium", "low"]
    message: str


class GroupDynamics(BaseModel):
    """Composition analysis of one group."""

    average_traits: dict[str, float]
    traits: list[TraitSummary]
    conflicts: list[PairwiseScore] = Field(default_factory=list)
    recommendations: list[GroupRecommendation] = Field(default_factory=list)
    group_size: int = Field(ge=0)
    diversity_score: int = Field(ge=0, le=100)


class GroupMetrics(BaseModel):
    """Aggregated compatibility of one group."""

    average_score: int = Field(ge=0, le=100, default=0)
    pairwise_scores: list[PairwiseScore] = Field(default_factory=list)
    group_dynamics: GroupDynamics | None = None


class PoolCharacteristics(BaseModel):
    """Spread of a participant pool, used to pick a clustering strategy."""

    diversity_score: int = Field(ge=0, le=100)
    density_score: int = Field(ge=0, le=100)


# ---------------------------------------------------------------------------
# Trait statistics
# ---------------------------------------------------------------------------
def _core_matrix(personalities: list[PersonalityVector]) -> np.ndarray:
    return np.array([p.core_values() for p in personalities], dtype=float)


def trait_level(value: float) -> str:
    """Label a 0-100 value using 20-point bands."""
    for minimum, label in c.TRAIT_LEVELS:
        if value >= minimum:
            return label
    return c.LOWEST_TRAIT_LEVEL


def average_traits(personalities: list[PersonalityVector]) -> dict[str, float]:
    if not personalities:
        return {}
    means = _core_matrix(personalities).mean(axis=0)
    return {name: float(value) for name, value in zip(CORE_TRAITS, means)}


def calculate_diversity_score(personalities: list[PersonalityVector]) -> int:
    """Average population variance of the core traits, scaled to 0-100."""
    if len(personalities) < 2:
        return 0
    variance = float(_core_matrix(personalities).var(axis=0).mean())
    return round(min(100.0, variance / c.DIVERSITY_DIVISOR))


def calculate_density_score(personalities: list[PersonalityVector]) -> int:
    """How tightly clustered the traits are: 100 minus the mean spread."""
    if len(personalities) < 2:
        return c.NEUTRAL_POOL_SCORE
    spread = _core_matrix(personalities).std(axis=0)
    density = np.clip(100.0 - spread, 0.0, 100.0)
    return round(float(density.mean()))


def analyze_pool(participants: list[Participant]) -> PoolCharacteristics:
    """Diversity and density of a pool; neutral when no trait data exists."""
    personalities = personalities_of(participants)
    if not personalities:
        return PoolCharacteristics(
            diversity_score=c.NEUTRAL_POOL_SCORE,
            density_score=c.NEUTRAL_POOL_SCORE,
        )
    return PoolCharacteristics(
        diversity_score=calculate_diversity_score(personalities),
        density_score=calculate_density_score(personalities),
    )


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------
def generate_group_recommendations(
    avg_traits: dict[str, float],
    conflicts: list[PairwiseScore],
    group_size: int,
) -> list[GroupRecommendation]:
    recs: list[GroupRecommendation] = []

    if group_size < c.SMALL_GROUP:
        recs.append(GroupRecommendation(
            type="size",
            priority="medium",
            message="Consider adding more participants for better group dynamics",
        ))
    elif group_size > c.LARGE_GROUP:
        recs.append(GroupRecommendation(
            type="size",
            priority="high",
            message="Large groups may be difficult to manage. Consider splitting into smaller groups",
        ))

    if conflicts:
        recs.append(GroupRecommendation(
            type="compatibility",
            priority="high",
            message=f"{len(conflicts)} potential personality conflicts detected. Review participant pairings",
        ))

    energy = avg_traits.get("energy_level")
    if energy is not None and energy > c.HIGH_ENERGY_GROUP:
        recs.append(GroupRecommendation(
            type="balance",
            priority="medium",
            message="High-energy group. Ensure activities match the energy level",
        ))
    elif energy is not None and energy < c.LOW_ENERGY_GROUP:
        recs.append(GroupRecommendation(
            type="balance",
            priority="medium",
            message="Low-energy group. Consider more relaxed activities",
        ))

    return recs


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def analyze_group_dynamics(
    participants: list[Participant],
    pairwise_scores: list[PairwiseScore],
) -> GroupDynamics | None:
    """Return the composition analysis, or ``None`` without any trait data."""
    personalities = personalities_of(participants)
    if not personalities:
        return None

    avg = average_traits(personalities)
    conflicts = [s for s in pairwise_scores if s.score < c.LOW_PAIR_SCORE]

    return GroupDynamics(
        average_traits=avg,
        traits=[
            TraitSummary(trait=name, value=round(value), level=trait_level(value))
            for name, value in avg.items()
        ],
        conflicts=conflicts,
        recommendations=generate_group_recommendations(avg, conflicts, len(participants)),
        group_size=len(participants),
        diversity_score=calculate_diversity_score(personalities),
    )


def pairwise_scores(
    participants: list[Participant],
    scorer: PairScorer = score_pair_basic,
) -> list[PairwiseScore]:
    """Score every unordered pair, skipping pairs missing trait data."""
    scores: list[PairwiseScore] = []
    for i, pa in enumerate(participants):
        if pa.personality is None:
            continue
        for pb in participants[i + 1:]:
            if pb.personality is None:
                continue
            scores.append(scorer(pa.personality, pb.personality, (pa.id, pb.id)))
    return scores


def score_group(
    participants: list[Participant],
    scorer: PairScorer = score_pair_basic,
) -> GroupMetrics:
    """Average pairwise compatibility plus group dynamics.

    Groups of fewer than two participants get an empty ``GroupMetrics``.
    """
    if len(participants) < 2:
        return GroupMetrics()

    scores = pairwise_scores(participants, scorer)
    average = round(sum(s.score for s in scores) / len(scores)) if scores else 0

    return GroupMetrics(
        average_score=average,
        pairwise_scores=scores,
        group_dynamics=analyze_group_dynamics(participants, scores),
    )
