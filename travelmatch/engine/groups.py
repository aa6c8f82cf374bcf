"""Group result models and the greedy optimal-group builder.

All functions are *pure*.
"""

from __future__ import annotations

from collections import Counter

import numpy as np
from pydantic import BaseModel, Field

from travelmatch.engine.compatibility import score_pair_basic
from travelmatch.engine.group_dynamics import GroupMetrics, score_group
from travelmatch.personality_types import Participant, with_traits


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------
class Group(BaseModel):
    """One proposed travel group with its compatibility metrics."""

    id: str
    name: str
    participants: list[Participant]
    compatibility: GroupMetrics
    centroid: dict[str, float] | None = None

    @property
    def participant_ids(self) -> list[str]:
        return [p.id for p in self.participants]


class ClusteringResult(BaseModel):
    """Output of one clustering call.

    ``unassigned`` lists participants that no group received: greedy
    leftovers and travelers without trait data.
    """

    strategy: str
    algorithm: str
    groups: list[Group] = Field(default_factory=list)
    unassigned: list[Participant] = Field(default_factory=list)


def make_group(
    prefix: str,
    index: int,
    members: list[Participant],
    centroid: dict[str, float] | None = None,
) -> Group:
    """Wrap *members* as group number *index* (1-based) with full metrics."""
    return Group(
        id=f"{prefix}-group-{index}",
        name=f"Group {index}",
        participants=members,
        compatibility=score_group(members),
        centroid=centroid,
    )


def unassigned_participants(pool: list[Participant], groups: list[Group]) -> list[Participant]:
    """Participants of *pool* not placed in any group (multiset by id)."""
    placed = Counter(pid for g in groups for pid in g.participant_ids)
    left: list[Participant] = []
    for p in pool:
        if placed[p.id] > 0:
            placed[p.id] -= 1
        else:
            left.append(p)
    return left


# ---------------------------------------------------------------------------
# Greedy builder
# ---------------------------------------------------------------------------
class _PairCache:
    """Basic pair scores for a pool, indexed by position.

    ``average(indices)`` equals ``score_group(...).average_score`` for the
    same members.
    """

    def __init__(self, participants: list[Participant]) -> None:
        n = len(participants)
        self.scores = np.zeros((n, n), dtype=float)
        self.valid = np.zeros((n, n), dtype=bool)
        for i, pa in enumerate(participants):
            if pa.personality is None:
                continue
            for j in range(i + 1, n):
                pb = participants[j]
                if pb.personality is None:
                    continue
                s = score_pair_basic(pa.personality, pb.personality).score
                self.scores[i, j] = self.scores[j, i] = s
                self.valid[i, j] = self.valid[j, i] = True

    def average(self, indices: list[int]) -> int:
        if len(indices) < 2:
            return 0
        idx = np.array(indices)
        block = np.triu(self.valid[np.ix_(idx, idx)], k=1)
        count = int(block.sum())
        if count == 0:
            return 0
        total = float(self.scores[np.ix_(idx, idx)][block].sum())
        return round(total / count)


def _greedy_group(cache: _PairCache, pool_size: int, target_size: int, max_seeds: int) -> list[int]:
    best_group: list[int] = []
    best_score = -1

    for seed in range(min(pool_size, max_seeds)):
        group = [seed]
        while len(group) < target_size:
            best_next = None
            best_next_score = -1
            for candidate in range(pool_size):
                if candidate in group:
                    continue
                score = cache.average([*group, candidate])
                if score > best_next_score:
                    best_next, best_next_score = candidate, score
            if best_next is None:
                break
            group.append(best_next)

        score = cache.average(group)
        if score > best_score:
            best_group, best_score = group, score

    return best_group


def create_optimal_group(
    participants: list[Participant],
    target_size: int,
    max_seeds: int = 10,
) -> list[Participant]:
    """Grow one group greedily from each of the first *max_seeds* seeds.

    Each step appends the candidate that maximises the group's average score;
    ties go to the earliest candidate in input order. The best seed's group
    wins (again earliest on ties). A pool smaller than *target_size* is
    returned whole.
    """
    if target_size < 1:
        raise ValueError(f"target_size must be >= 1, got {target_size}")
    if len(participants) < target_size:
        return list(participants)

    cache = _PairCache(participants)
    chosen = _greedy_group(cache, len(participants), target_size, max_seeds)
    return [participants[i] for i in chosen]


def generate_optimal_groups(
    participants: list[Participant],
    target_group_size: int = 6,
    max_groups: int = 10,
    max_seeds: int = 10,
) -> tuple[list[Group], list[Participant]]:
    """Carve greedy groups from the pool until it runs short.

    Participants without trait data never join a group.

    Returns:
        ``(groups, remaining)`` where *remaining* holds, in pool order, the
        leftover participants (fewer than *target_group_size*, or beyond
        *max_groups*) and those without trait data.
    """
    if target_group_size < 1:
        raise ValueError(f"target_group_size must be >= 1, got {target_group_size}")

    groups: list[Group] = []
    placed: set[int] = set()
    remaining = with_traits(participants)

    while len(remaining) >= target_group_size and len(groups) < max_groups:
        members = create_optimal_group(remaining, target_group_size, max_seeds)
        if not members:
            break
        groups.append(make_group("greedy", len(groups) + 1, members))
        placed.update(id(p) for p in members)
        remaining = [p for p in remaining if id(p) not in placed]

    return groups, [p for p in participants if id(p) not in placed]
