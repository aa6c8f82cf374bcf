"""Group success prediction.

Baseline minus conflict penalties plus diversity / size bonuses.
All functions are *pure*.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from travelmatch.engine import constants as c
from travelmatch.engine.conflicts import ConflictReport, SeverityBreakdown, detect_conflicts
from travelmatch.engine.group_dynamics import GroupMetrics, calculate_diversity_score, score_group
from travelmatch.engine.recommendations import ResolutionSuggestion, suggest_resolutions
from travelmatch.personality_types import Participant, personalities_of
from travelmatch.settings import EngineSettings


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------
SuccessLabel = Literal["excellent", "good", "fair", "challenging", "high_risk"]


class SuccessFactors(BaseModel):
    """Inputs the prediction was computed from."""

    conflicts: SeverityBreakdown
    group_size: int = Field(ge=0)
    personality_diversity: int = Field(ge=0, le=100)


class SuccessPrediction(BaseModel):
    success_score: int = Field(ge=0, le=100)
    prediction: SuccessLabel
    confidence: Literal["high", "medium"]
    factors: SuccessFactors


class GroupAssessment(BaseModel):
    """Everything known about one proposed group."""

    metrics: GroupMetrics
    conflicts: ConflictReport
    success: SuccessPrediction
    suggestions: list[ResolutionSuggestion] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _success_label(score: float) -> SuccessLabel:
    for minimum, label in c.SUCCESS_LABELS:
        if score >= minimum:
            return label
    return c.LOWEST_SUCCESS_LABEL


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def predict_success(
    participants: list[Participant],
    report: ConflictReport,
    diversity_score: int | None = None,
) -> SuccessPrediction:
    """Predict how well a group will travel together.

    Args:
        participants: The proposed group.
        report: Conflict report for the same group.
        diversity_score: Overrides the diversity computed from *participants*.

    Returns:
        SuccessPrediction with score, label, confidence and factors.
    """
    breakdown = report.severity_breakdown
    score = float(c.SUCCESS_BASELINE)
    score -= breakdown.critical * c.CRITICAL_PENALTY
    score -= breakdown.major * c.MAJOR_PENALTY
    score -= breakdown.minor * c.MINOR_PENALTY

    personalities = personalities_of(participants)
    if diversity_score is None:
        diversity_score = calculate_diversity_score(personalities)

    if personalities:
        low, high = c.DIVERSITY_SWEET_SPOT
        if low < diversity_score < high:
            score += c.DIVERSITY_BONUS
        min_size, max_size = c.OPTIMAL_SIZE
        if min_size <= len(participants) <= max_size:
            score += c.SIZE_BONUS

    success = round(max(0.0, min(100.0, score)))
    return SuccessPrediction(
        success_score=success,
        prediction=_success_label(success),
        confidence="high" if breakdown.critical == 0 else "medium",
        factors=SuccessFactors(
            conflicts=breakdown,
            group_size=len(participants),
            personality_diversity=diversity_score,
        ),
    )


def assess_group(
    participants: list[Participant],
    include_minor_conflicts: bool | None = None,
    settings: EngineSettings | None = None,
) -> GroupAssessment:
    """Score, conflict-check and predict success for one group.

    An explicit *include_minor_conflicts* wins over the value in *settings*.
    """
    if include_minor_conflicts is None:
        include_minor_conflicts = (settings or EngineSettings()).include_minor_conflicts
    report = detect_conflicts(participants, include_minor_conflicts)
    return GroupAssessment(
        metrics=score_group(participants),
        conflicts=report,
        success=predict_success(participants, report),
        suggestions=suggest_resolutions(report),
    )
