"""Tests for travelmatch/engine/clustering.py."""

from collections import Counter
import logging
import random
from unittest.mock import patch

import pytest

from travelmatch.engine.clustering import (
    STRATEGIES,
    ClusteringOptions,
    cluster_groups,
    select_strategy,
)
from travelmatch.engine.group_dynamics import PoolCharacteristics
from travelmatch.personality_types import Participant, PersonalityVector
from travelmatch.settings import EngineSettings


def _person(pid: str, energy, social, adventure, risk) -> Participant:
    return Participant(
        id=pid,
        name=pid,
        personality=PersonalityVector(
            energy_level=energy,
            social_preference=social,
            adventure_style=adventure,
            risk_tolerance=risk,
        ),
    )


def _pool(n: int, seed: int = 42) -> list[Participant]:
    rng = random.Random(seed)
    return [_person(f"p{i}", *(rng.uniform(0, 100) for _ in range(4))) for i in range(n)]


def _ids(result) -> Counter:
    placed = [pid for g in result.groups for pid in g.participant_ids]
    return Counter(placed + [p.id for p in result.unassigned])


class TestPartitionInvariant:
    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_every_participant_once(self, strategy):
        pool = _pool(24) + [Participant(id="ghost")]
        result = cluster_groups(pool, strategy, ClusteringOptions(k=4, target_group_size=5, seed=1))
        assert _ids(result) == Counter(p.id for p in pool)
        assert all(g.participants for g in result.groups)

    @pytest.mark.parametrize("strategy", ["kmeans", "hierarchical", "affinity", "greedy"])
    def test_participants_without_traits_unassigned(self, strategy):
        pool = _pool(12) + [Participant(id="ghost")]
        result = cluster_groups(pool, strategy, ClusteringOptions(k=3, target_group_size=4, seed=1))
        assert [p.id for p in result.unassigned] == ["ghost"]

    def test_warns_about_missing_traits(self, caplog):
        pool = _pool(8) + [Participant(id="ghost")]
        with caplog.at_level(logging.WARNING, logger="travelmatch.engine.clustering"):
            cluster_groups(pool, "kmeans", ClusteringOptions(k=2, seed=0))
        assert "without trait data" in caplog.text


class TestStrategies:
    def test_kmeans_scenario(self):
        pool = [
            _person("A", 20, 20, 50, 20),
            _person("B", 85, 80, 52, 85),
            _person("C", 22, 25, 55, 25),
            _person("D", 80, 78, 45, 80),
        ]
        result = cluster_groups(pool, "kmeans", ClusteringOptions(k=2, seed=5))
        assert result.algorithm == "kmeans"
        assert {frozenset(g.participant_ids) for g in result.groups} == {
            frozenset({"A", "C"}),
            frozenset({"B", "D"}),
        }

    def test_greedy_leftovers(self):
        result = cluster_groups(_pool(14), "greedy", ClusteringOptions(target_group_size=4))
        assert len(result.groups) == 3
        assert len(result.unassigned) == 2
        assert all(len(g.participants) == 4 for g in result.groups)

    def test_hierarchical_small_pool(self):
        result = cluster_groups(_pool(5), "hierarchical", ClusteringOptions(target_group_size=6))
        assert len(result.groups) == 1
        assert len(result.groups[0].participants) == 5

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown clustering strategy"):
            cluster_groups(_pool(4), "dbscan")

    def test_pool_not_mutated(self):
        pool = _pool(10)
        snapshot = list(pool)
        cluster_groups(pool, "greedy", ClusteringOptions(target_group_size=3))
        assert pool == snapshot


class TestHybrid:
    @pytest.mark.parametrize(
        ("diversity", "density", "expected"),
        [(80, 10, "kmeans"), (71, 90, "kmeans"), (50, 70, "hierarchical"), (50, 60, "affinity")],
    )
    def test_select_strategy(self, diversity, density, expected):
        characteristics = PoolCharacteristics(diversity_score=diversity, density_score=density)
        assert select_strategy(characteristics) == expected

    def test_reports_algorithm_used(self):
        result = cluster_groups(_pool(18), "hybrid", ClusteringOptions(seed=3))
        assert result.strategy == "hybrid"
        assert result.algorithm in {"kmeans", "hierarchical", "affinity"}

    def test_falls_back_to_greedy_on_error(self):
        with patch("travelmatch.engine.clustering.select_strategy", return_value="kmeans"), \
                patch("travelmatch.engine.clustering.kmeans_grouping", side_effect=ValueError("boom")):
            result = cluster_groups(_pool(12), "hybrid", ClusteringOptions(target_group_size=4))
        assert result.algorithm == "greedy"
        assert len(result.groups) == 3

    def test_falls_back_when_nothing_clusterable(self):
        pool = [Participant(id=f"ghost{i}") for i in range(3)]
        result = cluster_groups(pool, "hybrid")
        assert result.algorithm == "greedy"
        assert result.groups == []
        assert [p.id for p in result.unassigned] == ["ghost0", "ghost1", "ghost2"]


class TestClusteringOptions:
    def test_from_settings(self):
        options = ClusteringOptions.from_settings(EngineSettings(num_groups=4, linkage="single"))
        assert options.k == 4
        assert options.linkage == "single"

    def test_from_settings_overrides(self):
        options = ClusteringOptions.from_settings(EngineSettings(), k=7, seed=9)
        assert options.k == 7
        assert options.seed == 9
        assert options.target_group_size == 6

    def test_invalid(self):
        with pytest.raises(ValueError):
            ClusteringOptions(k=0)
        with pytest.raises(ValueError):
            ClusteringOptions(linkage="ward")
