"""Affinity-based ("spectral") grouping.

A Gaussian kernel turns compatibility distance into affinity,
``exp(-d^2 / 2 sigma^2)``. Groups are then grown directly on the affinity
matrix: this is a similarity heuristic standing in for spectral clustering,
with no Laplacian eigen-decomposition.
"""

from __future__ import annotations

import numpy as np

from travelmatch.engine.compatibility import score_pair_advanced
from travelmatch.engine.groups import Group, make_group
from travelmatch.personality_types import Participant, with_traits


def create_affinity_matrix(
    participants: list[Participant],
    sigma: float = 50.0,
    weights: dict[str, float] | None = None,
) -> np.ndarray:
    """Symmetric Gaussian affinity matrix with ones on the diagonal.

    Raises:
        ValueError: If *sigma* is not positive.
    """
    if sigma <= 0:
        raise ValueError(f"sigma must be > 0, got {sigma}")
    n = len(participants)
    matrix = np.ones((n, n), dtype=float)
    for i in range(n):
        for j in range(i + 1, n):
            score = score_pair_advanced(
                participants[i].personality, participants[j].personality, weights
            ).score
            distance = 100 - score
            matrix[i, j] = matrix[j, i] = np.exp(-(distance ** 2) / (2 * sigma ** 2))
    return matrix


def _group_capacities(n: int, k: int) -> list[int]:
    return [n // k + (1 if i < n % k else 0) for i in range(k)]


def _pick_seeds(affinity: np.ndarray, k: int) -> list[int]:
    """Most central participant first, then farthest-first by affinity."""
    seeds = [int(np.argmax(affinity.sum(axis=1)))]
    while len(seeds) < k:
        closeness = affinity[:, seeds].max(axis=1)
        closeness[seeds] = np.inf
        seeds.append(int(np.argmin(closeness)))
    return seeds


def similarity_groups(affinity: np.ndarray, k: int) -> list[list[int]]:
    """Partition indices into *k* size-balanced groups by mean affinity.

    Each step places the unassigned participant with the strongest mean
    affinity to any group that still has room.
    """
    n = affinity.shape[0]
    capacities = _group_capacities(n, k)
    groups = [[seed] for seed in _pick_seeds(affinity, k)]
    assigned = np.zeros(n, dtype=bool)
    assigned[[g[0] for g in groups]] = True

    while not assigned.all():
        pull = np.stack([affinity[:, members].mean(axis=1) for members in groups])
        full = np.array([len(g) >= cap for g, cap in zip(groups, capacities)])
        pull[full, :] = -np.inf
        pull[:, assigned] = -np.inf
        group_idx, person = divmod(int(np.argmax(pull)), n)
        groups[group_idx].append(person)
        assigned[person] = True

    return [sorted(g) for g in groups]


def affinity_grouping(
    participants: list[Participant],
    num_groups: int = 3,
    sigma: float = 50.0,
    weights: dict[str, float] | None = None,
) -> list[Group]:
    """Group *participants* on Gaussian compatibility affinity.

    Travelers without trait data are left out. When *num_groups* is at least
    the number of clusterable participants, one group holds all of them.

    Raises:
        ValueError: If *num_groups* < 1 or *sigma* <= 0.
    """
    if num_groups < 1:
        raise ValueError(f"num_groups must be >= 1, got {num_groups}")
    if sigma <= 0:
        raise ValueError(f"sigma must be > 0, got {sigma}")

    clustered = with_traits(participants)
    if not clustered:
        return []
    if num_groups >= len(clustered):
        return [make_group("spectral", 1, clustered)]

    affinity = create_affinity_matrix(clustered, sigma, weights)
    return [
        make_group("spectral", index, [clustered[i] for i in members])
        for index, members in enumerate(similarity_groups(affinity, num_groups), start=1)
    ]
