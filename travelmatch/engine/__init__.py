"""Travel-group compatibility engine.

Sub-modules:
- trait_matrix     – per-trait scoring curves with adventure-type weighting
- compatibility    – pairwise scoring (linear, weighted + modifiers, curved)
- group_dynamics   – group averages, trait balance, diversity / density
- groups           – group models and the greedy optimal-group builder
- kmeans           – partition-based clustering
- hierarchical     – agglomerative clustering with a dendrogram cut
- affinity         – Gaussian-affinity ("spectral") grouping
- clustering       – strategy dispatch and the hybrid selector
- conflicts        – seven pairwise conflict detectors and risk level
- recommendations  – conflict-resolution suggestions
- prediction       – group success prediction
"""
