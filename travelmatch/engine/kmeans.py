"""Partition-based (k-means) grouping over the four core traits.

Centroid initialisation draws from an injectable ``random.Random`` so that a
fixed seed reproduces the same clusters.
"""

from __future__ import annotations

import logging
import random

import numpy as np

from travelmatch.engine.groups import Group, make_group
from travelmatch.personality_types import CORE_TRAITS, Participant, with_traits

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Distance
# ---------------------------------------------------------------------------
def trait_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Root-mean-square difference between two core-trait vectors."""
    return float(np.sqrt(np.mean((np.asarray(a) - np.asarray(b)) ** 2)))


def _distances(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """``(n, k)`` matrix of RMS distances from each point to each centroid."""
    diff = points[:, None, :] - centroids[None, :, :]
    return np.sqrt(np.mean(diff ** 2, axis=2))


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------
def initialize_centroids(points: np.ndarray, k: int, rng: random.Random) -> np.ndarray:
    """Sample each centroid trait uniformly within the observed range."""
    low = points.min(axis=0)
    high = points.max(axis=0)
    centroids = np.empty((k, points.shape[1]), dtype=float)
    for i in range(k):
        for d in range(points.shape[1]):
            centroids[i, d] = low[d] + rng.random() * (high[d] - low[d])
    return centroids


def assign_to_centroids(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Nearest-centroid label per point; ties go to the lower centroid index.

    A centroid left without members is moved onto the point farthest from its
    own centroid, taken from a cluster that can spare it.
    """
    distances = _distances(points, centroids)
    labels = distances.argmin(axis=1)
    k = centroids.shape[0]

    for cluster in range(k):
        if np.any(labels == cluster):
            continue
        sizes = np.bincount(labels, minlength=k)
        own = distances[np.arange(len(points)), labels]
        spare = sizes[labels] > 1
        if not spare.any():
            break
        farthest = int(np.argmax(np.where(spare, own, -1.0)))
        centroids[cluster] = points[farthest]
        labels[farthest] = cluster

    return labels


def update_centroids(points: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Per-cluster trait means; empty clusters keep their previous centroid."""
    updated = centroids.copy()
    for cluster in range(centroids.shape[0]):
        members = points[labels == cluster]
        if len(members):
            updated[cluster] = members.mean(axis=0)
    return updated


def centroids_converged(old: np.ndarray, new: np.ndarray, tolerance: float) -> bool:
    return all(trait_distance(o, n) <= tolerance for o, n in zip(old, new))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def kmeans_grouping(
    participants: list[Participant],
    num_groups: int = 3,
    max_iterations: int = 100,
    tolerance: float = 0.001,
    rng: random.Random | None = None,
    seed: int | None = None,
) -> list[Group]:
    """Cluster *participants* into at most *num_groups* groups.

    Participants without trait data are left out of every group. When
    *num_groups* is at least the number of clusterable participants, a single
    group holds all of them.

    Args:
        participants: Pool to partition.
        num_groups: Number of clusters ``k``.
        max_iterations: Upper bound on assign / update rounds.
        tolerance: Centroid movement below which the loop stops.
        rng: Random source for centroid initialisation.
        seed: Used to build ``random.Random(seed)`` when *rng* is omitted.

    Returns:
        Non-empty groups, each carrying its centroid.

    Raises:
        ValueError: If *num_groups* or *max_iterations* < 1.
    """
    if num_groups < 1:
        raise ValueError(f"num_groups must be >= 1, got {num_groups}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")

    clustered = with_traits(participants)
    if not clustered:
        return []
    if num_groups >= len(clustered):
        return [make_group("kmeans", 1, clustered)]

    rng = rng or random.Random(seed)
    points = np.array([p.personality.core_values() for p in clustered], dtype=float)
    centroids = initialize_centroids(points, num_groups, rng)
    labels = np.zeros(len(points), dtype=int)

    for iteration in range(max_iterations):
        labels = assign_to_centroids(points, centroids)
        new_centroids = update_centroids(points, labels, centroids)
        converged = centroids_converged(centroids, new_centroids, tolerance)
        centroids = new_centroids
        if converged:
            logger.debug("k-means converged after %d iterations", iteration + 1)
            break

    groups: list[Group] = []
    for cluster in range(num_groups):
        members = [p for p, label in zip(clustered, labels) if label == cluster]
        if not members:
            continue
        centroid = {name: float(v) for name, v in zip(CORE_TRAITS, centroids[cluster])}
        groups.append(make_group("kmeans", len(groups) + 1, members, centroid))
    return groups
