"""Strategy dispatch for partitioning a pool into travel groups.

Strategies: ``greedy``, ``kmeans``, ``hierarchical``, ``affinity`` and
``hybrid`` (picks one of the others from the pool's spread). Every call is
stateless; the only randomness is k-means initialisation.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Literal

from pydantic import BaseModel, Field

from travelmatch.engine import constants as c
from travelmatch.engine.affinity import affinity_grouping
from travelmatch.engine.group_dynamics import PoolCharacteristics, analyze_pool
from travelmatch.engine.groups import (
    ClusteringResult,
    Group,
    generate_optimal_groups,
    unassigned_participants,
)
from travelmatch.engine.hierarchical import hierarchical_grouping
from travelmatch.engine.kmeans import kmeans_grouping
from travelmatch.personality_types import Participant
from travelmatch.settings import EngineSettings, Linkage

logger = logging.getLogger(__name__)

Strategy = Literal["kmeans", "hierarchical", "affinity", "hybrid", "greedy"]
STRATEGIES: tuple[str, ...] = ("kmeans", "hierarchical", "affinity", "hybrid", "greedy")


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------
class ClusteringOptions(BaseModel):
    """Per-call clustering parameters."""

    k: int = Field(default=3, ge=1)
    target_group_size: int = Field(default=6, ge=1)
    max_groups: int = Field(default=10, ge=1)
    max_iterations: int = Field(default=100, ge=1)
    tolerance: float = Field(default=0.001, gt=0)
    linkage: Linkage = "average"
    sigma: float = Field(default=50.0, gt=0)
    max_seeds: int = Field(default=10, ge=1)
    seed: int | None = None
    weights: dict[str, float] | None = None

    @classmethod
    def from_settings(cls, settings: EngineSettings, **overrides) -> ClusteringOptions:
        """Options seeded from engine settings, with per-call overrides."""
        base = {
            "k": settings.num_groups,
            "target_group_size": settings.target_group_size,
            "max_groups": settings.max_groups,
            "max_iterations": settings.max_iterations,
            "tolerance": settings.tolerance,
            "linkage": settings.linkage,
            "sigma": settings.sigma,
            "max_seeds": settings.max_seeds,
            "seed": settings.seed,
        }
        return cls(**{**base, **overrides})


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------
def select_strategy(characteristics: PoolCharacteristics) -> str:
    """Pick the clustering strategy suited to a pool's spread."""
    if characteristics.diversity_score > c.HYBRID_DIVERSITY_CUTOFF:
        return "kmeans"
    if characteristics.density_score > c.HYBRID_DENSITY_CUTOFF:
        return "hierarchical"
    return "affinity"


def _run(
    strategy: str,
    pool: list[Participant],
    options: ClusteringOptions,
    k: int,
    rng: random.Random | None,
) -> tuple[list[Group], list[Participant]]:
    if strategy == "kmeans":
        groups = kmeans_grouping(
            pool,
            num_groups=k,
            max_iterations=options.max_iterations,
            tolerance=options.tolerance,
            rng=rng,
            seed=options.seed,
        )
    elif strategy == "hierarchical":
        groups = hierarchical_grouping(
            pool,
            target_group_size=options.target_group_size,
            linkage=options.linkage,
            weights=options.weights,
        )
    elif strategy == "affinity":
        groups = affinity_grouping(pool, num_groups=k, sigma=options.sigma, weights=options.weights)
    elif strategy == "greedy":
        return generate_optimal_groups(
            pool,
            target_group_size=options.target_group_size,
            max_groups=options.max_groups,
            max_seeds=options.max_seeds,
        )
    else:
        raise ValueError(f"Unknown clustering strategy '{strategy}', expected one of {', '.join(STRATEGIES)}")
    return groups, unassigned_participants(pool, groups)


def hybrid_grouping(
    pool: list[Participant],
    options: ClusteringOptions,
    rng: random.Random | None = None,
) -> tuple[str, list[Group], list[Participant]]:
    """Run the strategy chosen by ``select_strategy``.

    ``k`` becomes ``ceil(n / target_group_size)``. Falls back to the greedy
    builder when the chosen strategy fails or produces no groups.

    Returns:
        ``(algorithm_used, groups, unassigned)``.
    """
    characteristics = analyze_pool(pool)
    chosen = select_strategy(characteristics)
    k = max(1, math.ceil(len(pool) / options.target_group_size))
    logger.info(
        "Hybrid selected %s (diversity=%d density=%d k=%d)",
        chosen,
        characteristics.diversity_score,
        characteristics.density_score,
        k,
    )

    try:
        groups, unassigned = _run(chosen, pool, options, k, rng)
    except ValueError as e:
        logger.warning("Strategy %s failed, falling back to greedy: %s", chosen, e)
        groups, unassigned = [], list(pool)

    if not groups:
        if pool:
            logger.warning("Strategy %s produced no groups, falling back to greedy", chosen)
        groups, unassigned = _run("greedy", pool, options, k, rng)
        chosen = "greedy"
    return chosen, groups, unassigned


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def cluster_groups(
    pool: list[Participant],
    strategy: Strategy = "hybrid",
    options: ClusteringOptions | None = None,
    rng: random.Random | None = None,
) -> ClusteringResult:
    """Partition *pool* into travel groups with the named strategy.

    Args:
        pool: Participants to partition (a snapshot; never mutated).
        strategy: One of ``STRATEGIES``.
        options: Clustering parameters; defaults when omitted.
        rng: Random source for k-means initialisation.

    Returns:
        ClusteringResult whose groups plus ``unassigned`` cover every
        participant of *pool* exactly once.

    Raises:
        ValueError: For an unknown strategy or invalid options.
    """
    options = options or ClusteringOptions()
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown clustering strategy '{strategy}', expected one of {', '.join(STRATEGIES)}")

    if strategy == "hybrid":
        algorithm, groups, unassigned = hybrid_grouping(pool, options, rng)
    else:
        algorithm = strategy
        groups, unassigned = _run(strategy, pool, options, options.k, rng)

    missing = [p.id for p in unassigned if p.personality is None]
    if missing:
        logger.warning("%d participants without trait data left unassigned", len(missing))
    logger.info("Clustered %d participants into %d groups using %s", len(pool), len(groups), algorithm)

    return ClusteringResult(
        strategy=strategy,
        algorithm=algorithm,
        groups=groups,
        unassigned=unassigned,
    )
