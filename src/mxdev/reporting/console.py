"""Rich console tables for rankings, PCA and clusters."""

from __future__ import annotations

import polars as pl
from rich.console import Console
from rich.table import Table

from mxdev.analysis.pca import PCAResult
from mxdev.config import POPULATION_COLUMN, REGION_COLUMN

console = Console()


def format_value(value: float, column: str) -> str:
    """Format a value based on column type."""
    if value is None:
        return "N/A"

    if column == POPULATION_COLUMN:
        if value >= 1_000_000:
            return f"{value / 1_000_000:.1f}M"
        if value >= 1_000:
            return f"{value / 1_000:.0f}k"
        return f"{int(value)}"

    if column == "income_per_capita":
        return f"$ {value:,.2f}"

    if column == "life_expectancy":
        return f"{value:.1f} years"

    return f"{value:.3f}"


def ranking_table(ranking: pl.DataFrame, key: str, title: str) -> Table:
    """Build a table from a ``rank()`` result."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Pos.", justify="right")
    table.add_column("Region", style="cyan")
    table.add_column(key, justify="right")

    for row in ranking.iter_rows(named=True):
        table.add_row(str(row["position"]), row[REGION_COLUMN], format_value(row[key], key))
    return table


def pca_summary_table(pca: PCAResult) -> Table:
    """Eigenvalues and variance explained per component."""
    table = Table(title="PCA - Variance Explained", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan")
    table.add_column("Eigenvalue", justify="right")
    table.add_column("% Variance", justify="right")
    table.add_column("Cumulative %", justify="right")

    for row in pca.summary_frame().iter_rows(named=True):
        table.add_row(
            row["component"],
            f"{row['eigenvalue']:.4f}",
            f"{row['variance_pct']:.2f}",
            f"{row['cumulative_pct']:.2f}",
        )
    return table


def loadings_table(pca: PCAResult, n_components: int = 2) -> Table:
    """Correlation of each variable with the leading components."""
    table = Table(title="PCA - Loadings", show_header=True, header_style="bold magenta")
    table.add_column("Variable", style="cyan")
    for name in pca.component_names[:n_components]:
        table.add_column(name, justify="right")

    for row in pca.loadings_frame(n_components).iter_rows():
        table.add_row(row[0], *(f"{v:+.3f}" for v in row[1:]))
    return table


def cos2_table(pca: PCAResult, n_components: int = 2) -> Table:
    """Squared loadings and their total on the retained plane."""
    table = Table(title="PCA - Quality of Representation (cos2)", show_header=True, header_style="bold magenta")
    table.add_column("Variable", style="cyan")
    for name in pca.component_names[:n_components]:
        table.add_column(name, justify="right")
    table.add_column("Plane", justify="right")

    for row in pca.cos2_frame(n_components).iter_rows():
        table.add_row(row[0], *(f"{v:.3f}" for v in row[1:]))
    return table


def cluster_table(regions: pl.DataFrame) -> Table:
    """One row per region with its cluster label and tier."""
    table = Table(title="Cluster Assignments", show_header=True, header_style="bold green")
    table.add_column("Region", style="cyan")
    table.add_column("Cluster", justify="right")
    table.add_column("Tier")
    table.add_column("Development", justify="right")

    ordered = regions.sort(["cluster", "development_model"], descending=[False, True])
    for row in ordered.iter_rows(named=True):
        table.add_row(
            row[REGION_COLUMN],
            str(row["cluster"]),
            row["tier_label"],
            f"{row['development_model']:.3f}",
        )
    return table


def profiles_table(profiles: pl.DataFrame) -> Table:
    """Per-cluster summary statistics."""
    table = Table(title="Cluster Profiles", show_header=True, header_style="bold green")
    table.add_column("Cluster", justify="right")
    table.add_column("Tier")
    table.add_column("Regions", justify="right")
    table.add_column("Population", justify="right")
    table.add_column("Development", justify="right")
    table.add_column("Range", justify="right")

    for row in profiles.iter_rows(named=True):
        table.add_row(
            str(row["cluster"]),
            row.get("tier_label") or "",
            str(row["num_regions"]),
            format_value(row["total_population"], POPULATION_COLUMN),
            f"{row['avg_development']:.3f}",
            f"{row['min_development']:.3f}-{row['max_development']:.3f}",
        )
    return table


def print_ranking(ranking: pl.DataFrame, key: str, title: str) -> None:
    console.print(ranking_table(ranking, key, title))


def print_pca_summary(pca: PCAResult, n_components: int = 2) -> None:
    console.print(pca_summary_table(pca))
    console.print(loadings_table(pca, n_components))
    console.print(cos2_table(pca, n_components))
    console.print(
        f"\n[bold]Retained information (PC1 + PC2):[/bold] "
        f"{pca.retained_information():.2f}%\n"
    )


def print_clusters(regions: pl.DataFrame, profiles: pl.DataFrame) -> None:
    console.print(cluster_table(regions))
    console.print(profiles_table(profiles))
