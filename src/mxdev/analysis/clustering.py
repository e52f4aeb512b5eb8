"""
Region clustering on PCA coordinates.

Implements K-Means clustering over the first two principal components
to group Mexican regions by development profile.

Usage:
    from mxdev.analysis.clustering import run_clustering
    result = run_clustering(pca_result.coordinates[:, :2], n_clusters=5, seed=42)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import polars as pl
from loguru import logger
from sklearn.cluster import KMeans
from sklearn.metrics import silhouette_score

from mxdev.config import (
    DEFAULT_MAX_ITER,
    DEFAULT_N_CLUSTERS,
    DEFAULT_N_INIT,
    DEFAULT_SEED,
    POPULATION_COLUMN,
    REGION_COLUMN,
)
from mxdev.exceptions import DegenerateInputError, SchemaError

# Tier names ordered from most to least developed
TIER_LABELS = {
    1: "Leading",
    2: "Advanced",
    3: "Intermediate",
    4: "Lagging",
    5: "Critical",
}


@dataclass(frozen=True)
class ClusteringResult:
    """Labels (1..k) and fit diagnostics for one K-Means run."""

    labels: np.ndarray
    centroids: np.ndarray
    inertia: float
    n_iter: int
    silhouette: float | None
    seed: int

    @property
    def n_clusters(self) -> int:
        return len(self.centroids)

    def cluster_sizes(self) -> dict[int, int]:
        """Number of regions per label."""
        counts = np.bincount(self.labels, minlength=self.n_clusters + 1)[1:]
        return {label: int(count) for label, count in enumerate(counts, 1)}


def _check_inputs(X: np.ndarray, n_clusters: int) -> None:
    if X.ndim != 2 or X.shape[0] == 0:
        raise DegenerateInputError(f"Expected a non-empty 2-D coordinate matrix, got shape {X.shape}")
    if not np.isfinite(X).all():
        raise DegenerateInputError("Coordinate matrix holds non-finite values")

    n_points = X.shape[0]
    if n_clusters < 1:
        raise DegenerateInputError(f"n_clusters must be >= 1, got {n_clusters}")
    if n_clusters > n_points:
        raise DegenerateInputError(
            f"Cannot form {n_clusters} clusters from {n_points} regions"
        )

    n_distinct = len(np.unique(X, axis=0))
    if n_clusters > n_distinct:
        raise DegenerateInputError(
            f"Cannot form {n_clusters} non-empty clusters from "
            f"{n_distinct} distinct points"
        )


def run_clustering(
    X: np.ndarray,
    n_clusters: int = DEFAULT_N_CLUSTERS,
    seed: int = DEFAULT_SEED,
    max_iter: int = DEFAULT_MAX_ITER,
    n_init: int = DEFAULT_N_INIT,
) -> ClusteringResult:
    """
    Run K-Means clustering (Lloyd iterations, best of ``n_init`` restarts).

    Args:
        X: Coordinate matrix, one row per region.
        n_clusters: Number of clusters.
        seed: Random seed for centroid initialization.
        max_iter: Iteration cap per restart.
        n_init: Number of restarts; the lowest-inertia one is kept.

    Returns:
        ClusteringResult with labels in ``1..n_clusters``.

    Raises:
        DegenerateInputError: If ``n_clusters`` exceeds the number of
            regions or distinct points, or a cluster ends up empty.
    """
    X = np.asarray(X, dtype=float)
    _check_inputs(X, n_clusters)

    kmeans = KMeans(
        n_clusters=n_clusters,
        random_state=seed,
        n_init=n_init,
        max_iter=max_iter,
        algorithm="lloyd",
    )
    raw_labels = kmeans.fit_predict(X)

    sizes = np.bincount(raw_labels, minlength=n_clusters)
    empty = [int(i) + 1 for i in np.flatnonzero(sizes == 0)]
    if empty:
        raise DegenerateInputError(f"K-Means left cluster(s) {empty} empty")

    silhouette = None
    if 2 <= n_clusters < X.shape[0]:
        silhouette = float(silhouette_score(X, raw_labels))
        logger.info(f"Silhouette Score: {silhouette:.4f}")

    labels = (raw_labels + 1).astype(int)
    labels.setflags(write=False)
    centroids = np.array(kmeans.cluster_centers_, copy=True)
    centroids.setflags(write=False)

    logger.info(
        f"K-Means k={n_clusters} converged in {kmeans.n_iter_} iterations "
        f"(inertia {kmeans.inertia_:.4f})"
    )

    return ClusteringResult(
        labels=labels,
        centroids=centroids,
        inertia=float(kmeans.inertia_),
        n_iter=int(kmeans.n_iter_),
        silhouette=silhouette,
        seed=seed,
    )


def evaluate_cluster_counts(
    X: np.ndarray,
    max_k: int = 10,
    seed: int = DEFAULT_SEED,
    n_init: int = DEFAULT_N_INIT,
) -> dict:
    """
    Analyze clustering performance for different k values.

    Uses elbow method (inertia) and silhouette score.

    Args:
        X: Coordinate matrix.
        max_k: Maximum number of clusters to test.
        seed: Random seed for every fit.
        n_init: Restarts per fit.

    Returns:
        Dictionary with ``k_range``, ``inertias``, ``silhouettes`` and
        ``best_k_silhouette``.

    Raises:
        DegenerateInputError: If fewer than three regions are given.
    """
    X = np.asarray(X, dtype=float)
    upper = min(max_k, X.shape[0] - 1)
    if upper < 2:
        raise DegenerateInputError(
            f"Need at least 3 regions to compare cluster counts, got {X.shape[0]}"
        )

    inertias = []
    silhouettes = []

    for k in range(2, upper + 1):
        kmeans = KMeans(n_clusters=k, random_state=seed, n_init=n_init, algorithm="lloyd")
        labels = kmeans.fit_predict(X)
        inertias.append(float(kmeans.inertia_))
        if len(np.unique(labels)) > 1:
            silhouettes.append(float(silhouette_score(X, labels)))
        else:
            silhouettes.append(float("nan"))

    scored = [s if np.isfinite(s) else -np.inf for s in silhouettes]
    best_k_silhouette = scored.index(max(scored)) + 2

    return {
        "k_range": list(range(2, upper + 1)),
        "inertias": inertias,
        "silhouettes": silhouettes,
        "best_k_silhouette": best_k_silhouette,
    }


def assign_clusters(df: pl.DataFrame, result: ClusteringResult) -> pl.DataFrame:
    """
    Attach cluster labels to the regional table.

    Raises:
        ValueError: If the label count doesn't match the table length.
    """
    if len(result.labels) != len(df):
        raise ValueError(
            f"Got {len(result.labels)} labels for {len(df)} regions"
        )
    return df.with_columns(pl.Series("cluster", result.labels, dtype=pl.Int64))


def order_clusters_by_development(
    df: pl.DataFrame,
    score_column: str = "development_model",
) -> pl.DataFrame:
    """
    Rank clusters from most to least developed by mean score.

    Adds ``cluster_tier`` (1 = highest mean ``score_column``) and
    ``tier_label``; the raw ``cluster`` label is left untouched.

    Args:
        df: DataFrame with a ``cluster`` column.
        score_column: Column whose cluster mean orders the tiers.

    Returns:
        DataFrame with tier columns appended.
    """
    for column in ("cluster", score_column):
        if column not in df.columns:
            raise SchemaError(column)

    # Calculate mean score per cluster; ties resolved by label
    cluster_means = (
        df.group_by("cluster")
        .agg(pl.col(score_column).mean().alias("mean_score"))
        .sort(["mean_score", "cluster"], descending=[True, False])
    )

    tier_mapping = {
        row["cluster"]: idx
        for idx, row in enumerate(cluster_means.iter_rows(named=True), 1)
    }
    tier_names = {tier: TIER_LABELS.get(tier, f"Tier {tier}") for tier in tier_mapping.values()}

    df = df.with_columns(
        pl.col("cluster")
        .replace_strict(tier_mapping, return_dtype=pl.Int64)
        .alias("cluster_tier")
    )

    return df.with_columns(
        pl.col("cluster_tier")
        .replace_strict(tier_names, return_dtype=pl.Utf8)
        .alias("tier_label")
    )


def generate_cluster_profiles(df: pl.DataFrame) -> pl.DataFrame:
    """
    Generate summary statistics for each cluster.

    Args:
        df: DataFrame with scores and cluster assignments.

    Returns:
        DataFrame with one row per cluster, sorted by label.
    """
    group_cols = ["cluster"]
    if "cluster_tier" in df.columns:
        group_cols += ["cluster_tier", "tier_label"]

    return (
        df.group_by(group_cols)
        .agg([
            pl.len().alias("num_regions"),
            pl.col(POPULATION_COLUMN).sum().alias("total_population"),
            pl.col("development_model").mean().alias("avg_development"),
            pl.col("development_model").min().alias("min_development"),
            pl.col("development_model").max().alias("max_development"),
            pl.col("material").mean().alias("avg_material"),
            pl.col("quality").mean().alias("avg_quality"),
            pl.col("subjectivity").mean().alias("avg_subjectivity"),
            pl.col(REGION_COLUMN).alias("regions"),
        ])
        .sort("cluster")
    )
