"""
Analysis module for the Mexico regional development project.

Contains composite scoring, rankings, PCA and clustering.
"""

from .clustering import (
    TIER_LABELS,
    ClusteringResult,
    evaluate_cluster_counts,
    generate_cluster_profiles,
    order_clusters_by_development,
    run_clustering,
)
from .pca import PCAResult, run_pca
from .pipeline import AnalysisResult, export_results, run_analysis
from .ranking import RANKING_METRICS, rank, top_bottom
from .scoring import SCORE_COLUMNS, compute_scores

__all__ = [
    "AnalysisResult",
    "ClusteringResult",
    "PCAResult",
    "RANKING_METRICS",
    "SCORE_COLUMNS",
    "TIER_LABELS",
    "compute_scores",
    "evaluate_cluster_counts",
    "export_results",
    "generate_cluster_profiles",
    "order_clusters_by_development",
    "rank",
    "run_analysis",
    "run_clustering",
    "run_pca",
    "top_bottom",
]
