"""Tests for travelmatch/engine/hierarchical.py."""

import numpy as np
import pytest

from travelmatch.engine.hierarchical import (
    build_dendrogram,
    create_distance_matrix,
    cut_dendrogram,
    hierarchical_grouping,
)
from travelmatch.personality_types import Participant, PersonalityVector


def _person(pid: str, value: float | None) -> Participant:
    if value is None:
        return Participant(id=pid)
    return Participant(
        id=pid,
        personality=PersonalityVector(
            energy_level=value,
            social_preference=value,
            adventure_style=value,
            risk_tolerance=value,
        ),
    )


DISTANCES = np.array([[0, 1, 5], [1, 0, 4], [5, 4, 0]], dtype=float)


def _child_of_size(node, count):
    return next(c for c in (node.get_left(), node.get_right()) if c.get_count() == count)


class TestDendrogram:
    @pytest.mark.parametrize(("linkage", "height"), [("single", 4), ("complete", 5), ("average", 4.5)])
    def test_linkage_heights(self, linkage, height):
        root = build_dendrogram(DISTANCES, linkage)
        assert sorted(root.pre_order()) == [0, 1, 2]
        assert root.dist == pytest.approx(height)
        pair = _child_of_size(root, 2)
        assert sorted(pair.pre_order()) == [0, 1]
        assert pair.dist == pytest.approx(1)

    def test_cut(self):
        root = build_dendrogram(DISTANCES)
        assert cut_dendrogram(root, 2) == [[0, 1], [2]]
        assert cut_dendrogram(root, 3) == [[0, 1, 2]]
        assert cut_dendrogram(root, 1) == [[0], [1], [2]]

    def test_single_leaf(self):
        root = build_dendrogram(np.zeros((1, 1)))
        assert root.is_leaf()
        assert cut_dendrogram(root, 6) == [[0]]

    def test_unknown_linkage(self):
        with pytest.raises(ValueError, match="linkage"):
            build_dendrogram(DISTANCES, "ward")

    def test_empty_matrix(self):
        with pytest.raises(ValueError):
            build_dendrogram(np.zeros((0, 0)))


class TestDistanceMatrix:
    def test_symmetric_zero_diagonal(self):
        matrix = create_distance_matrix([_person("a", 10), _person("b", 40), _person("c", 50)])
        assert np.allclose(matrix, matrix.T)
        assert np.all(np.diag(matrix) == 0)
        assert matrix[0, 1] > matrix[1, 2]


class TestHierarchicalGrouping:
    def test_small_pool_single_group(self):
        pool = [_person("a", 10), _person("b", 90), _person("c", None)]
        groups = hierarchical_grouping(pool, target_group_size=6)
        assert len(groups) == 1
        assert groups[0].participant_ids == ["a", "b", "c"]

    def test_splits_clusters(self):
        low = [_person(f"low{i}", 15 + i) for i in range(4)]
        high = [_person(f"high{i}", 80 + i) for i in range(4)]
        groups = hierarchical_grouping(low + high, target_group_size=4)
        assert {frozenset(g.participant_ids) for g in groups} == {
            frozenset(p.id for p in low),
            frozenset(p.id for p in high),
        }

    @pytest.mark.parametrize("linkage", ["single", "complete", "average"])
    def test_groups_respect_target(self, linkage):
        pool = [_person(f"p{i}", (i * 37) % 100) for i in range(13)]
        groups = hierarchical_grouping(pool, target_group_size=4, linkage=linkage)
        assert all(1 <= len(g.participants) <= 4 for g in groups)
        placed = sorted(pid for g in groups for pid in g.participant_ids)
        assert placed == sorted(p.id for p in pool)

    def test_identical_travelers(self):
        pool = [_person(f"p{i}", 50) for i in range(8)]
        groups = hierarchical_grouping(pool, target_group_size=3)
        assert all(len(g.participants) <= 3 for g in groups)
        assert sorted(pid for g in groups for pid in g.participant_ids) == sorted(p.id for p in pool)

    def test_unknown_linkage(self):
        with pytest.raises(ValueError):
            hierarchical_grouping([_person("a", 1)], linkage="ward")
