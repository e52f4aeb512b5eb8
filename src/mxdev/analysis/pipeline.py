"""
End-to-end development analysis.

Scores, PCA and clustering in one linear pass. Every stage takes the
previous stage's output and returns a new table or result object.

Usage:
    from mxdev.analysis.pipeline import run_analysis
    result = run_analysis(regions_df, AnalysisConfig(seed=7))
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import polars as pl
from loguru import logger

from mxdev.analysis.clustering import (
    ClusteringResult,
    assign_clusters,
    generate_cluster_profiles,
    order_clusters_by_development,
    run_clustering,
)
from mxdev.analysis.pca import PCAResult, run_pca
from mxdev.analysis.scoring import SCORED_INDICATORS, compute_scores
from mxdev.config import POPULATION_COLUMN, REGION_COLUMN, AnalysisConfig
from mxdev.extraction.loader import validate_regions

# Clustering runs on this many leading principal components
CLUSTER_COMPONENTS = 2


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one run produces."""

    config: AnalysisConfig
    scored: pl.DataFrame
    pca: PCAResult
    clustering: ClusteringResult
    regions: pl.DataFrame
    profiles: pl.DataFrame


def run_analysis(df: pl.DataFrame, config: AnalysisConfig | None = None) -> AnalysisResult:
    """
    Run the full scoring, PCA and clustering pipeline.

    Args:
        df: Regional table; the columns this run needs are validated first.
        config: Run parameters; defaults to ``AnalysisConfig()``.

    Returns:
        AnalysisResult whose ``regions`` table carries the scores, the
        first two PCA coordinates, the cluster label and the cluster tier.

    Raises:
        SchemaError: If a needed column is missing or mistyped.
        DataQualityError: If a needed value is missing or non-finite.
        DegenerateInputError: If PCA or clustering cannot run on the data.
    """
    config = config or AnalysisConfig()

    required = [REGION_COLUMN, POPULATION_COLUMN, *SCORED_INDICATORS, *config.pca_features]
    df = validate_regions(df, required=list(dict.fromkeys(required)))

    logger.info("1. Computing composite scores...")
    scored = compute_scores(df)

    logger.info(f"2. Running PCA over {len(config.pca_features)} indicators...")
    pca = run_pca(scored, config.pca_features)

    logger.info(f"3. Running K-Means clustering (k={config.n_clusters}, seed={config.seed})...")
    clustering = run_clustering(
        pca.coordinates[:, :CLUSTER_COMPONENTS],
        n_clusters=config.n_clusters,
        seed=config.seed,
        max_iter=config.max_iter,
        n_init=config.n_init,
    )

    logger.info("4. Ordering clusters by development level...")
    coords = pca.coordinates_frame(CLUSTER_COMPONENTS).drop(REGION_COLUMN)
    regions = scored.hstack(coords)
    regions = assign_clusters(regions, clustering)
    regions = order_clusters_by_development(regions)

    logger.info("5. Generating cluster profiles...")
    profiles = generate_cluster_profiles(regions)

    logger.success(f"Analysis complete for {len(regions)} regions")
    return AnalysisResult(
        config=config,
        scored=scored,
        pca=pca,
        clustering=clustering,
        regions=regions,
        profiles=profiles,
    )


def export_results(result: AnalysisResult, output_dir: Path | str) -> Path:
    """
    Write the scored and clustered regional table to CSV.

    Args:
        result: Completed analysis.
        output_dir: Directory to write into; created if missing.

    Returns:
        Path to the created CSV file.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / "regions_clustered.csv"
    result.regions.write_csv(path)
    logger.info(f"Saved clustered regions to {path}")
    return path
