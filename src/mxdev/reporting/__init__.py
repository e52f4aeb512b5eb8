"""
Reporting module: rich console tables and plotly charts.
"""

from .charts import cluster_scatter, loadings_chart, ranking_bar_chart, scree_chart, write_charts
from .console import print_clusters, print_pca_summary, print_ranking

__all__ = [
    "cluster_scatter",
    "loadings_chart",
    "print_clusters",
    "print_pca_summary",
    "print_ranking",
    "ranking_bar_chart",
    "scree_chart",
    "write_charts",
]
