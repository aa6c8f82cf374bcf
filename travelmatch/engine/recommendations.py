"""Conflict-resolution suggestions for a group's conflict report.

All functions are *pure*.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from travelmatch.engine.conflicts import ConflictReport


class ResolutionSuggestion(BaseModel):
    """An actionable way to defuse one category of conflict."""

    type: str
    priority: Literal["high", "medium", "low"]
    title: str
    description: str
    actions: list[str] = Field(default_factory=list)
    conflict_count: int = Field(default=0, ge=0)


_SUGGESTIONS: dict[str, dict] = {
    "energy": {
        "type": "energy_management",
        "priority": "high",
        "title": "Energy Level Management",
        "description": "Implement varied activity pacing to accommodate different energy levels",
        "actions": [
            "Plan alternating high and low-intensity activities",
            "Create optional challenging add-ons for high-energy participants",
            "Schedule adequate rest periods",
            "Consider splitting groups for certain activities",
        ],
    },
    "social": {
        "type": "social_balance",
        "priority": "medium",
        "title": "Social Preference Balance",
        "description": "Design activities that work for both introverts and extroverts",
        "actions": [
            "Mix group and individual reflection time",
            "Provide quiet spaces during breaks",
            "Use small group discussions before large group sharing",
            "Offer optional social activities",
        ],
    },
    "risk": {
        "type": "risk_accommodation",
        "priority": "high",
        "title": "Risk Level Accommodation",
        "description": "Provide multiple difficulty options for activities",
        "actions": [
            "Create beginner, intermediate, and advanced options",
            "Ensure proper safety briefings and equipment",
            "Allow participants to choose their comfort level",
            "Pair risk-averse with experienced participants",
        ],
    },
    "leadership": {
        "type": "leadership_management",
        "priority": "medium",
        "title": "Leadership Structure",
        "description": "Establish clear leadership roles and responsibilities",
        "actions": [
            "Assign specific leadership domains to different participants",
            "Rotate leadership responsibilities",
            "Establish clear decision-making processes",
            "Encourage collaborative leadership approaches",
        ],
    },
}


def suggest_resolutions(report: ConflictReport) -> list[ResolutionSuggestion]:
    """Return suggestions for every conflict category that has records,
    high priority first."""
    suggestions = [
        ResolutionSuggestion(**template, conflict_count=len(report.conflicts.get(category, [])))
        for category, template in _SUGGESTIONS.items()
        if report.conflicts.get(category)
    ]
    priority_order = {"high": 0, "medium": 1, "low": 2}
    return sorted(suggestions, key=lambda s: priority_order[s.priority])
