"""Hierarchical (agglomerative) grouping on compatibility distance.

Distance between two travelers is ``100 - advanced compatibility``. The full
dendrogram is built with scipy under single / complete / average linkage,
then cut top-down until every branch fits the target group size.
"""

from __future__ import annotations

import logging

import numpy as np
from scipy.cluster import hierarchy
from scipy.spatial.distance import squareform

from travelmatch.engine.compatibility import score_pair_advanced
from travelmatch.engine.groups import Group, make_group
from travelmatch.personality_types import Participant, with_traits
from travelmatch.settings import Linkage

logger = logging.getLogger(__name__)

LINKAGES: tuple[str, ...] = ("single", "complete", "average")


# ---------------------------------------------------------------------------
# Distance matrix
# ---------------------------------------------------------------------------
def create_distance_matrix(
    participants: list[Participant],
    weights: dict[str, float] | None = None,
) -> np.ndarray:
    """Symmetric ``(n, n)`` matrix of ``100 - score_pair_advanced``.

    Every participant must carry a personality vector.
    """
    n = len(participants)
    matrix = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(i + 1, n):
            score = score_pair_advanced(
                participants[i].personality, participants[j].personality, weights
            ).score
            matrix[i, j] = matrix[j, i] = 100 - score
    return matrix


# ---------------------------------------------------------------------------
# Dendrogram
# ---------------------------------------------------------------------------
def build_dendrogram(distances: np.ndarray, linkage: Linkage = "average") -> hierarchy.ClusterNode:
    """Agglomerate the square *distances* matrix into a scipy cluster tree.

    Leaf ids are row indices of *distances*.

    Raises:
        ValueError: For an unknown linkage or an empty matrix.
    """
    if linkage not in LINKAGES:
        raise ValueError(f"Unknown linkage '{linkage}', expected one of {', '.join(LINKAGES)}")
    n = distances.shape[0]
    if n == 0:
        raise ValueError("Cannot build a dendrogram from an empty distance matrix")
    if n == 1:
        return hierarchy.ClusterNode(0)

    merges = hierarchy.linkage(squareform(distances, checks=False), method=linkage)
    return hierarchy.to_tree(merges)


def cut_dendrogram(root: hierarchy.ClusterNode, target_size: int) -> list[list[int]]:
    """Split every branch larger than *target_size* into its children.

    Returns member index lists ordered by their lowest member.
    """
    clusters: list[list[int]] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.get_count() <= target_size or node.is_leaf():
            clusters.append(sorted(node.pre_order()))
        else:
            stack.extend((node.get_left(), node.get_right()))
    return sorted(clusters, key=min)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def hierarchical_grouping(
    participants: list[Participant],
    target_group_size: int = 6,
    linkage: Linkage = "average",
    weights: dict[str, float] | None = None,
) -> list[Group]:
    """Group *participants* by cutting a compatibility dendrogram.

    A pool no larger than *target_group_size* comes back as one group with
    everyone in it. Otherwise travelers without trait data are left out.

    Raises:
        ValueError: For an unknown linkage or *target_group_size* < 1.
    """
    if target_group_size < 1:
        raise ValueError(f"target_group_size must be >= 1, got {target_group_size}")
    if linkage not in LINKAGES:
        raise ValueError(f"Unknown linkage '{linkage}', expected one of {', '.join(LINKAGES)}")

    if not participants:
        return []
    if len(participants) <= target_group_size:
        return [make_group("hierarchical", 1, list(participants))]

    clustered = with_traits(participants)
    if not clustered:
        return []

    root = build_dendrogram(create_distance_matrix(clustered, weights), linkage)
    clusters = cut_dendrogram(root, target_group_size)
    logger.debug("Dendrogram cut into %d clusters: sizes=%s", len(clusters), [len(c) for c in clusters])

    return [
        make_group("hierarchical", index, [clustered[i] for i in members])
        for index, members in enumerate(clusters, start=1)
    ]
