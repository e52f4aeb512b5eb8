"""
Plotly charts for the development analysis.

Figures are built from the pipeline outputs without further computation
and written as standalone HTML files.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import plotly.express as px
import plotly.graph_objects as go
import polars as pl
from loguru import logger

from mxdev.analysis.pca import PCAResult
from mxdev.analysis.pipeline import AnalysisResult
from mxdev.analysis.ranking import RANKING_METRICS, rank
from mxdev.config import POPULATION_COLUMN, REGION_COLUMN

# Cluster color scheme, keyed by tier (green=best, red=worst)
TIER_COLORS = {
    1: "#27ae60",
    2: "#2ecc71",
    3: "#f1c40f",
    4: "#e67e22",
    5: "#e74c3c",
}


def ranking_bar_chart(ranking: pl.DataFrame, key: str, title: str | None = None) -> go.Figure:
    """Horizontal bar chart of a ``rank()`` result, first row on top."""
    label = RANKING_METRICS.get(key, (key, False))[0]
    fig = px.bar(
        ranking.to_pandas(),
        y=REGION_COLUMN,
        x=key,
        orientation="h",
        title=title or label,
        labels={REGION_COLUMN: "", key: label},
    )
    fig.update_layout(
        yaxis={"categoryorder": "array", "categoryarray": ranking[REGION_COLUMN].to_list()[::-1]},
        margin=dict(l=20, r=20, t=40, b=20),
    )
    return fig


def scree_chart(pca: PCAResult) -> go.Figure:
    """Percent variance per component with the cumulative line."""
    summary = pca.summary_frame().to_pandas()

    fig = px.bar(
        summary,
        x="component",
        y="variance_pct",
        title="Variance Explained by Component",
        labels={"component": "Component", "variance_pct": "% Variance"},
    )
    fig.add_trace(
        go.Scatter(
            x=summary["component"],
            y=summary["cumulative_pct"],
            mode="lines+markers",
            name="Cumulative %",
        )
    )
    return fig


def loadings_chart(pca: PCAResult) -> go.Figure:
    """Correlation circle of the variables on PC1 and PC2."""
    loadings = pca.loadings_frame(2).to_pandas()
    pc1, pc2 = pca.explained_variance[:2]

    fig = px.scatter(
        loadings,
        x="PC1",
        y="PC2",
        text="variable",
        title="Variable Loadings (PC1 vs PC2)",
        labels={"PC1": f"PC1 ({pc1:.1f}%)", "PC2": f"PC2 ({pc2:.1f}%)"},
    )
    for row in loadings.itertuples():
        fig.add_shape(type="line", x0=0, y0=0, x1=row.PC1, y1=row.PC2, line=dict(color="#7f8c8d"))

    theta = np.linspace(0, 2 * np.pi, 200)
    fig.add_trace(
        go.Scatter(x=np.cos(theta), y=np.sin(theta), mode="lines", name="Unit circle",
                   line=dict(dash="dot", color="#bdc3c7"))
    )
    fig.update_traces(textposition="top center", selector=dict(mode="markers+text"))
    fig.update_yaxes(scaleanchor="x", scaleratio=1, range=[-1.1, 1.1])
    fig.update_xaxes(range=[-1.1, 1.1])
    return fig


def cluster_scatter(regions: pl.DataFrame, pca: PCAResult) -> go.Figure:
    """Regions on PC1/PC2, colored by cluster, sized by population."""
    df = regions.with_columns(
        pl.col("cluster").cast(pl.Utf8).alias("cluster_name")
    ).to_pandas()
    pc1, pc2 = pca.explained_variance[:2]

    tier_by_cluster = dict(zip(regions["cluster"].to_list(), regions["cluster_tier"].to_list()))
    color_map = {
        str(cluster): TIER_COLORS.get(tier, "#666")
        for cluster, tier in tier_by_cluster.items()
    }

    fig = px.scatter(
        df,
        x="PC1",
        y="PC2",
        color="cluster_name",
        color_discrete_map=color_map,
        size=POPULATION_COLUMN,
        size_max=40,
        hover_name=REGION_COLUMN,
        hover_data={
            "tier_label": True,
            "development_model": ":.3f",
            POPULATION_COLUMN: ":,.0f",
            "cluster_name": False,
        },
        title="Regions on the First Two Principal Components",
        labels={
            "PC1": f"PC1 ({pc1:.1f}%)",
            "PC2": f"PC2 ({pc2:.1f}%)",
            "cluster_name": "Cluster",
        },
        category_orders={"cluster_name": sorted(color_map, key=int)},
    )
    fig.update_layout(legend=dict(orientation="h", y=-0.15), height=600)
    return fig


def write_charts(result: AnalysisResult, output_dir: Path | str, top_n: int = 10) -> dict[str, Path]:
    """
    Render every chart of a completed analysis as HTML.

    Args:
        result: Completed analysis.
        output_dir: Directory to write into; created if missing.
        top_n: Regions shown in each ranking chart.

    Returns:
        Mapping of chart name to written file.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    figures = {
        "ranking_development": ranking_bar_chart(
            rank(result.regions, "development_model", n=top_n), "development_model"
        ),
        "ranking_income": ranking_bar_chart(
            rank(result.regions, "income_per_capita", n=top_n), "income_per_capita"
        ),
        "pca_scree": scree_chart(result.pca),
        "pca_loadings": loadings_chart(result.pca),
        "cluster_scatter": cluster_scatter(result.regions, result.pca),
    }

    paths = {}
    for name, fig in figures.items():
        path = output_dir / f"{name}.html"
        fig.write_html(path, include_plotlyjs="cdn")
        paths[name] = path
        logger.debug(f"Wrote {path}")

    logger.info(f"Saved {len(paths)} charts to {output_dir}")
    return paths
