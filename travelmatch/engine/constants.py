"""Named scoring constants for the compatibility engine.

Curves are ``(max_diff, score)`` bands checked in order; the first band whose
``max_diff`` is >= the absolute difference wins, otherwise the fallback applies.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Trait compatibility curves (fraction 0-1)
# ---------------------------------------------------------------------------
SOCIAL_BANDS: tuple[tuple[float, float], ...] = ((10, 1.0), (25, 0.85), (40, 0.65), (60, 0.4))
SOCIAL_FLOOR = 0.2

ADVENTURE_BANDS: tuple[tuple[float, float], ...] = ((5, 0.85), (15, 0.9), (30, 0.75), (50, 0.5))
ADVENTURE_FLOOR = 0.25

PLANNING_BANDS: tuple[tuple[float, float], ...] = ((8, 0.8), (20, 0.9), (35, 0.7), (55, 0.45))
PLANNING_FLOOR = 0.2

RISK_BANDS: tuple[tuple[float, float], ...] = ((10, 0.95), (25, 0.8), (40, 0.6), (60, 0.35))
RISK_FLOOR = 0.15

HIGH_ENERGY_BANDS: tuple[tuple[float, float], ...] = ((15, 0.95), (30, 0.75))
HIGH_ENERGY_FLOOR = 0.4

NEUTRAL_TRAIT_SCORE = 0.5
NEUTRAL_ADVENTURE_WEIGHT = 1.0

# (adventure_type, dimension) -> multiplier
ADVENTURE_TYPE_WEIGHTS: dict[str, dict[str, float]] = {
    "extreme-sports": {"risk": 1.3, "adventure": 1.2, "planning": 0.9, "social": 1.0},
    "cultural-immersion": {"risk": 0.8, "adventure": 0.9, "planning": 1.2, "social": 1.1},
    "luxury-travel": {"risk": 0.7, "adventure": 0.8, "planning": 1.3, "social": 1.0},
    "budget-backpacking": {"risk": 1.1, "adventure": 1.1, "planning": 0.8, "social": 1.2},
    "family-friendly": {"risk": 0.6, "adventure": 0.7, "planning": 1.4, "social": 1.0},
    "wellness-retreat": {"risk": 0.5, "adventure": 0.6, "planning": 1.1, "social": 0.9},
}


# ---------------------------------------------------------------------------
# Pairwise scorer
# ---------------------------------------------------------------------------
DEFAULT_WEIGHTS: dict[str, float] = {
    "energy_level": 0.25,
    "social_preference": 0.25,
    "adventure_style": 0.20,
    "risk_tolerance": 0.15,
    "planning_style": 0.10,
    "communication_style": 0.05,
}

BASIC_WEIGHTS: dict[str, float] = {
    "energy_level": 0.25,
    "social_preference": 0.25,
    "adventure_style": 0.25,
    "risk_tolerance": 0.25,
}

EXPERIENCE_INFLUENCE = 0.10
AGE_INFLUENCE = 0.05
LEADERSHIP_INFLUENCE = 0.05

# (max_gap, modifier); larger gaps fall through to EXPERIENCE_WIDE_GAP
EXPERIENCE_BANDS: tuple[tuple[float, float], ...] = ((10, 10), (20, 5), (30, 0))
EXPERIENCE_WIDE_GAP = -5

# (avg_age_below, tolerance); older pairs use AGE_TOLERANCE_SENIOR
AGE_TOLERANCE_BANDS: tuple[tuple[float, float], ...] = ((25, 5), (40, 10))
AGE_TOLERANCE_SENIOR = 15
AGE_WITHIN_TOLERANCE = 5
AGE_WITHIN_DOUBLE = 0
AGE_BEYOND = -3

LEADERS_HIGH = 70
LEADERS_LOW = 30
LEADERS_COMPLEMENT_GAP = 40
TOO_MANY_LEADERS = -5
NO_LEADERSHIP = -3
LEADERSHIP_COMPLEMENT = 5

NEUTRAL_TRAIT_VALUE = 50.0
NEUTRAL_AGE = 30.0

# Curved (trait matrix) scorer
ADJUSTED_WEIGHTS: dict[str, dict[str, float]] = {
    "extreme-sports": {
        "risk_tolerance": 1.5,
        "adventure_style": 1.3,
        "energy_level": 1.2,
        "social_preference": 1.0,
        "planning_style": 0.8,
    },
    "cultural-immersion": {
        "social_preference": 1.3,
        "planning_style": 1.2,
        "adventure_style": 1.0,
        "energy_level": 1.0,
        "risk_tolerance": 0.8,
    },
    "luxury-travel": {
        "planning_style": 1.4,
        "risk_tolerance": 0.7,
        "social_preference": 1.1,
        "energy_level": 0.9,
        "adventure_style": 0.8,
    },
}
HIGH_ENERGY_TYPES: frozenset[str] = frozenset({"extreme-sports", "budget-backpacking"})
PLANNING_CRITICAL_TYPES: frozenset[str] = frozenset({"luxury-travel", "family-friendly"})
PLANNING_CRITICAL_BOOST = 1.2
TRAIT_CONFLICT_SCORE = 15
EXTREME_TRAIT_LOW = 5
EXTREME_TRAIT_HIGH = 95
EXTREME_TRAIT_CONFIDENCE = 0.95
MIN_CONFIDENCE = 0.5


# ---------------------------------------------------------------------------
# Group dynamics
# ---------------------------------------------------------------------------
LOW_PAIR_SCORE = 60
SMALL_GROUP = 3
LARGE_GROUP = 8
HIGH_ENERGY_GROUP = 80
LOW_ENERGY_GROUP = 30
DIVERSITY_DIVISOR = 10
NEUTRAL_POOL_SCORE = 50

# (min_value, label) checked top-down
TRAIT_LEVELS: tuple[tuple[float, str], ...] = (
    (80, "Very High"),
    (60, "High"),
    (40, "Moderate"),
    (20, "Low"),
)
LOWEST_TRAIT_LEVEL = "Very Low"


# ---------------------------------------------------------------------------
# Clustering
# ---------------------------------------------------------------------------
HYBRID_DIVERSITY_CUTOFF = 70
HYBRID_DENSITY_CUTOFF = 60


# ---------------------------------------------------------------------------
# Conflict detection
# ---------------------------------------------------------------------------
ENERGY_MAJOR_DIFF = 40
ENERGY_CRITICAL_DIFF = 60
SOCIAL_INTROVERT = 20
SOCIAL_EXTROVERT = 80
RISK_MAJOR_DIFF = 50
RISK_CRITICAL_DIFF = 70
EXPERIENCE_MINOR_DIFF = 40
EXPERIENCE_MAJOR_DIFF = 60
# (avg_age_below, threshold); older pairs use AGE_GAP_SENIOR
AGE_GAP_BANDS: tuple[tuple[float, float], ...] = ((30, 15), (50, 25))
AGE_GAP_SENIOR = 30
AGE_GAP_MAJOR_FACTOR = 1.5
STRONG_LEADERSHIP = 75
WEAK_LEADERSHIP = 30
LEADER_PRESENT = 60
COMMUNICATION_DIFF = 60

MAJOR_FOR_HIGH_RISK = 2
MINOR_FOR_MEDIUM_RISK = 3


# ---------------------------------------------------------------------------
# Success prediction
# ---------------------------------------------------------------------------
SUCCESS_BASELINE = 85
CRITICAL_PENALTY = 15
MAJOR_PENALTY = 8
MINOR_PENALTY = 3
DIVERSITY_SWEET_SPOT = (60, 85)
DIVERSITY_BONUS = 5
OPTIMAL_SIZE = (4, 8)
SIZE_BONUS = 3

# (min_score, label) checked top-down
SUCCESS_LABELS: tuple[tuple[float, str], ...] = (
    (80, "excellent"),
    (70, "good"),
    (60, "fair"),
    (50, "challenging"),
)
LOWEST_SUCCESS_LABEL = "high_risk"
