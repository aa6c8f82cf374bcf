"""Pairwise conflict detection for a proposed travel group.

Seven detectors run on every pair; each returns a record or ``None``.
All functions are *pure*.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Literal

from pydantic import BaseModel, Field

from travelmatch.engine import constants as c
from travelmatch.personality_types import Participant

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------
Severity = Literal["critical", "major", "minor"]
RiskLevel = Literal["low", "medium", "high", "critical"]
ConflictCategory = Literal[
    "energy", "social", "risk", "experience", "age", "leadership", "communication"
]

CATEGORIES: tuple[str, ...] = (
    "energy", "social", "risk", "experience", "age", "leadership", "communication"
)


class ConflictRecord(BaseModel):
    """One detected incompatibility between two travelers."""

    type: str
    category: ConflictCategory
    participants: tuple[str, str]
    participant_names: tuple[str, str] = ("", "")
    severity: Severity
    description: str
    recommendation: str
    values: dict[str, float] = Field(default_factory=dict)


class SeverityBreakdown(BaseModel):
    critical: int = Field(default=0, ge=0)
    major: int = Field(default=0, ge=0)
    minor: int = Field(default=0, ge=0)


class ConflictReport(BaseModel):
    """All conflicts of a group, bucketed by category."""

    conflicts: dict[str, list[ConflictRecord]] = Field(
        default_factory=lambda: {category: [] for category in CATEGORIES}
    )
    severity_breakdown: SeverityBreakdown = Field(default_factory=SeverityBreakdown)
    overall_risk: RiskLevel = "low"

    @property
    def all_conflicts(self) -> list[ConflictRecord]:
        return [record for category in CATEGORIES for record in self.conflicts.get(category, [])]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _trait(p: Participant, name: str, default: float = c.NEUTRAL_TRAIT_VALUE) -> float:
    value = p.personality.trait(name)
    return default if value is None else value


def _record(
    a: Participant,
    b: Participant,
    conflict_type: str,
    category: str,
    severity: Severity,
    description: str,
    recommendation: str,
    va: float,
    vb: float,
) -> ConflictRecord:
    return ConflictRecord(
        type=conflict_type,
        category=category,
        participants=(a.id, b.id),
        participant_names=(a.name, b.name),
        severity=severity,
        description=description,
        recommendation=recommendation,
        values={"participant_a": va, "participant_b": vb},
    )


# ---------------------------------------------------------------------------
# Detectors
# ---------------------------------------------------------------------------
def detect_energy_conflict(a: Participant, b: Participant) -> ConflictRecord | None:
    ea, eb = _trait(a, "energy_level"), _trait(b, "energy_level")
    diff = abs(ea - eb)
    if diff <= c.ENERGY_MAJOR_DIFF:
        return None
    return _record(
        a, b, "energy_mismatch", "energy",
        "critical" if diff > c.ENERGY_CRITICAL_DIFF else "major",
        f"Significant energy level mismatch ({round(diff)} point difference)",
        "Consider separate activity groups or energy-balancing activities",
        ea, eb,
    )


def detect_social_conflict(a: Participant, b: Participant) -> ConflictRecord | None:
    sa, sb = _trait(a, "social_preference"), _trait(b, "social_preference")
    low, high = c.SOCIAL_INTROVERT, c.SOCIAL_EXTROVERT
    if not ((sa < low and sb > high) or (sa > high and sb < low)):
        return None
    return _record(
        a, b, "social_preference_conflict", "social", "major",
        "Extreme introvert-extrovert mismatch",
        "Plan mixed individual and group activities",
        sa, sb,
    )


def detect_risk_conflict(a: Participant, b: Participant) -> ConflictRecord | None:
    ra, rb = _trait(a, "risk_tolerance"), _trait(b, "risk_tolerance")
    diff = abs(ra - rb)
    if diff <= c.RISK_MAJOR_DIFF:
        return None
    return _record(
        a, b, "risk_tolerance_conflict", "risk",
        "critical" if diff > c.RISK_CRITICAL_DIFF else "major",
        f"Major risk tolerance difference ({round(diff)} points)",
        "Offer multiple activity difficulty levels",
        ra, rb,
    )


def detect_experience_conflict(a: Participant, b: Participant) -> ConflictRecord | None:
    xa, xb = _trait(a, "experience_level"), _trait(b, "experience_level")
    diff = abs(xa - xb)
    if diff <= c.EXPERIENCE_MINOR_DIFF:
        return None
    return _record(
        a, b, "experience_gap", "experience",
        "major" if diff > c.EXPERIENCE_MAJOR_DIFF else "minor",
        f"Significant experience gap ({round(diff)} points)",
        "Pair experienced with inexperienced for mentoring opportunities",
        xa, xb,
    )


def age_gap_threshold(avg_age: float) -> float:
    for below, threshold in c.AGE_GAP_BANDS:
        if avg_age < below:
            return threshold
    return c.AGE_GAP_SENIOR


def detect_age_conflict(a: Participant, b: Participant) -> ConflictRecord | None:
    age_a, age_b = _trait(a, "age", c.NEUTRAL_AGE), _trait(b, "age", c.NEUTRAL_AGE)
    diff = abs(age_a - age_b)
    threshold = age_gap_threshold((age_a + age_b) / 2)
    if diff <= threshold:
        return None
    return _record(
        a, b, "age_gap", "age",
        "major" if diff > threshold * c.AGE_GAP_MAJOR_FACTOR else "minor",
        f"Age gap of {round(diff)} years",
        "Consider age-appropriate activity modifications",
        age_a, age_b,
    )


def detect_leadership_conflict(
    a: Participant,
    b: Participant,
    group: list[Participant] | None = None,
) -> ConflictRecord | None:
    """Two strong leaders clash; two weak ones leave a void unless someone
    else in *group* can lead."""
    la, lb = _trait(a, "leadership_style"), _trait(b, "leadership_style")

    if la > c.STRONG_LEADERSHIP and lb > c.STRONG_LEADERSHIP:
        return _record(
            a, b, "leadership_conflict", "leadership", "major",
            "Multiple strong leaders may compete for control",
            "Assign complementary leadership roles or separate responsibilities",
            la, lb,
        )

    if la < c.WEAK_LEADERSHIP and lb < c.WEAK_LEADERSHIP:
        others = [p for p in (group or []) if p is not a and p is not b and p.personality is not None]
        if any(_trait(p, "leadership_style") > c.LEADER_PRESENT for p in others):
            return None
        return _record(
            a, b, "leadership_void", "leadership", "minor",
            "Group may lack leadership direction",
            "Assign a guide or encourage leadership development",
            la, lb,
        )

    return None


def detect_communication_conflict(a: Participant, b: Participant) -> ConflictRecord | None:
    ca, cb = _trait(a, "communication_style"), _trait(b, "communication_style")
    if abs(ca - cb) <= c.COMMUNICATION_DIFF:
        return None
    return _record(
        a, b, "communication_style_conflict", "communication", "minor",
        "Significantly different communication styles",
        "Facilitate communication awareness and adaptation",
        ca, cb,
    )


_PAIR_DETECTORS: tuple[Callable[[Participant, Participant], ConflictRecord | None], ...] = (
    detect_energy_conflict,
    detect_social_conflict,
    detect_risk_conflict,
    detect_experience_conflict,
    detect_age_conflict,
    detect_communication_conflict,
)

# Minor records of these categories are dropped unless minor conflicts are requested.
_FILTERABLE_MINOR: frozenset[str] = frozenset({"age", "communication"})


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def overall_risk(breakdown: SeverityBreakdown) -> RiskLevel:
    if breakdown.critical > 0:
        return "critical"
    if breakdown.major > c.MAJOR_FOR_HIGH_RISK:
        return "high"
    if breakdown.major > 0 or breakdown.minor > c.MINOR_FOR_MEDIUM_RISK:
        return "medium"
    return "low"


def detect_conflicts(
    participants: list[Participant],
    include_minor_conflicts: bool = True,
) -> ConflictReport:
    """Scan every pair of *participants* for conflicts.

    Pairs where either side lacks trait data are skipped.

    Args:
        participants: The proposed group.
        include_minor_conflicts: Keep minor age-gap and communication records.

    Returns:
        ConflictReport with per-category records, severity counts and risk.
    """
    buckets: dict[str, list[ConflictRecord]] = {category: [] for category in CATEGORIES}

    for i, a in enumerate(participants):
        if a.personality is None:
            continue
        for b in participants[i + 1:]:
            if b.personality is None:
                continue
            found = [detector(a, b) for detector in _PAIR_DETECTORS]
            found.append(detect_leadership_conflict(a, b, participants))
            for record in found:
                if record is None:
                    continue
                if (
                    not include_minor_conflicts
                    and record.severity == "minor"
                    and record.category in _FILTERABLE_MINOR
                ):
                    continue
                buckets[record.category].append(record)

    counts = {"critical": 0, "major": 0, "minor": 0}
    for records in buckets.values():
        for record in records:
            counts[record.severity] += 1
    breakdown = SeverityBreakdown(**counts)
    report = ConflictReport(
        conflicts=buckets,
        severity_breakdown=breakdown,
        overall_risk=overall_risk(breakdown),
    )

    logger.debug(
        "Detected conflicts for %d participants: %s (risk=%s)",
        len(participants),
        counts,
        report.overall_risk,
    )
    return report
