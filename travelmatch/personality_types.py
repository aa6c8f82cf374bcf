"""Traveler personality definitions consumed by the compatibility engine.

A traveler carries one personality vector: eight 0-100 trait scores plus age.
The engine never validates trait ranges. Out-of-range values are used as
given and only the final scores are clamped.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Trait names
# ---------------------------------------------------------------------------
TraitName = Literal["social", "adventure", "planning", "risk"]

CORE_TRAITS: tuple[str, ...] = (
    "energy_level",
    "social_preference",
    "adventure_style",
    "risk_tolerance",
)

ADVENTURE_TYPES: tuple[str, ...] = (
    "extreme-sports",
    "cultural-immersion",
    "luxury-travel",
    "budget-backpacking",
    "family-friendly",
    "wellness-retreat",
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class PersonalityVector(BaseModel):
    """Assessment output for one traveler (immutable once built)."""

    model_config = ConfigDict(frozen=True)

    energy_level: float
    social_preference: float
    adventure_style: float
    risk_tolerance: float
    planning_style: float | None = None
    communication_style: float | None = None
    experience_level: float | None = None
    leadership_style: float | None = None
    age: float | None = None

    def trait(self, name: str) -> float | None:
        """Return the value of trait *name*, or ``None`` if unknown / unset."""
        value = getattr(self, name, None)
        return value if isinstance(value, (int, float)) else None

    def core_values(self) -> list[float]:
        return [float(getattr(self, name)) for name in CORE_TRAITS]


class Participant(BaseModel):
    """A traveler in the pool. ``profile`` is opaque to the engine."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    avatar: str = ""
    profile: dict[str, Any] = Field(default_factory=dict)
    personality: PersonalityVector | None = None
    adventure_type: str | None = None

    @property
    def has_traits(self) -> bool:
        return self.personality is not None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def with_traits(participants: list[Participant]) -> list[Participant]:
    """Participants that carry a personality vector, in input order."""
    return [p for p in participants if p.personality is not None]


def personalities_of(participants: list[Participant]) -> list[PersonalityVector]:
    """Personality vectors of *participants*, skipping those without data."""
    return [p.personality for p in participants if p.personality is not None]
