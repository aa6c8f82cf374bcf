"""Compatibility scoring and travel-group formation."""

from .engine.clustering import ClusteringOptions, cluster_groups
from .engine.compatibility import score_dimension, score_pair_advanced
from .engine.conflicts import detect_conflicts
from .engine.group_dynamics import score_group
from .engine.prediction import assess_group, predict_success
from .engine.trait_matrix import score_trait
from .personality_types import Participant, PersonalityVector

__all__ = [
    "ClusteringOptions",
    "Participant",
    "PersonalityVector",
    "assess_group",
    "cluster_groups",
    "detect_conflicts",
    "predict_success",
    "score_dimension",
    "score_group",
    "score_pair_advanced",
    "score_trait",
]
