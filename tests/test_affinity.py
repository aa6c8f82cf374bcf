"""Tests for travelmatch/engine/affinity.py."""

import numpy as np
import pytest

from travelmatch.engine.affinity import (
    affinity_grouping,
    create_affinity_matrix,
    similarity_groups,
)
from travelmatch.personality_types import Participant, PersonalityVector


def _person(pid: str, value: float) -> Participant:
    return Participant(
        id=pid,
        personality=PersonalityVector(
            energy_level=value,
            social_preference=value,
            adventure_style=value,
            risk_tolerance=value,
        ),
    )


class TestAffinityMatrix:
    def test_properties(self):
        matrix = create_affinity_matrix([_person("a", 10), _person("b", 60), _person("c", 62)])
        assert np.allclose(matrix, matrix.T)
        assert np.allclose(np.diag(matrix), 1.0)
        assert np.all((matrix > 0) & (matrix <= 1))
        assert matrix[1, 2] > matrix[0, 1]

    def test_identical_participants(self):
        matrix = create_affinity_matrix([_person("a", 50), _person("b", 50)])
        assert matrix[0, 1] == pytest.approx(1.0)

    def test_sigma_must_be_positive(self):
        with pytest.raises(ValueError, match="sigma"):
            create_affinity_matrix([_person("a", 50)], sigma=0)


class TestSimilarityGroups:
    def test_balanced_sizes(self):
        affinity = create_affinity_matrix([_person(f"p{i}", i * 14) for i in range(7)])
        groups = similarity_groups(affinity, 3)
        assert sorted(len(g) for g in groups) == [2, 2, 3]
        assert sorted(i for g in groups for i in g) == list(range(7))


class TestAffinityGrouping:
    def test_separates_clusters(self):
        low = [_person(f"low{i}", 20 + i) for i in range(3)]
        high = [_person(f"high{i}", 80 + i) for i in range(3)]
        groups = affinity_grouping(low + high, num_groups=2)
        assert {frozenset(g.participant_ids) for g in groups} == {
            frozenset(p.id for p in low),
            frozenset(p.id for p in high),
        }
        assert all(g.id.startswith("spectral-group-") for g in groups)

    def test_k_at_least_pool_size(self):
        groups = affinity_grouping([_person("a", 1), _person("b", 99)], num_groups=5)
        assert len(groups) == 1

    def test_skips_participants_without_traits(self):
        pool = [_person("a", 10), _person("b", 12), _person("c", 90), Participant(id="d")]
        groups = affinity_grouping(pool, num_groups=2)
        assert sorted(pid for g in groups for pid in g.participant_ids) == ["a", "b", "c"]

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            affinity_grouping([], num_groups=0)
        with pytest.raises(ValueError):
            affinity_grouping([], sigma=-1)
