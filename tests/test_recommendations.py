"""Tests for travelmatch/engine/recommendations.py."""

from travelmatch.engine.conflicts import ConflictReport, detect_conflicts
from travelmatch.engine.recommendations import suggest_resolutions
from travelmatch.personality_types import Participant, PersonalityVector


def _person(pid: str, **traits) -> Participant:
    base = {
        "energy_level": 50,
        "social_preference": 50,
        "adventure_style": 50,
        "risk_tolerance": 50,
    }
    return Participant(id=pid, personality=PersonalityVector(**{**base, **traits}))


class TestSuggestResolutions:
    def test_no_conflicts(self):
        assert suggest_resolutions(ConflictReport()) == []

    def test_high_priority_first(self):
        report = detect_conflicts([
            _person("a", energy_level=10, social_preference=10, leadership_style=80),
            _person("b", energy_level=90, social_preference=90, leadership_style=90),
        ])
        suggestions = suggest_resolutions(report)
        assert [s.type for s in suggestions] == [
            "energy_management",
            "social_balance",
            "leadership_management",
        ]
        assert all(s.conflict_count == 1 for s in suggestions)
        assert suggestions[0].actions

    def test_categories_without_template_ignored(self):
        report = detect_conflicts([
            _person("a", experience_level=0, communication_style=0),
            _person("b", experience_level=90, communication_style=90),
        ])
        assert report.all_conflicts
        assert suggest_resolutions(report) == []
