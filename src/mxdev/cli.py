"""
Command-line interface for the development analysis.

Usage:
    mxdev run data/regiones_mexico.csv [OPTIONS]
    mxdev rank data/regiones_mexico.csv --key income_per_capita --top 10
    mxdev pca data/regiones_mexico.csv
    mxdev elbow data/regiones_mexico.csv --max-k 8
"""

from __future__ import annotations

from pathlib import Path

import typer
from dotenv import load_dotenv
from loguru import logger
from rich.console import Console
from rich.table import Table

from mxdev.analysis.clustering import evaluate_cluster_counts
from mxdev.analysis.pca import run_pca
from mxdev.analysis.pipeline import export_results, run_analysis
from mxdev.analysis.ranking import RANKING_METRICS, rank, top_bottom
from mxdev.analysis.scoring import compute_scores
from mxdev.config import AnalysisConfig
from mxdev.exceptions import AnalysisError
from mxdev.extraction.loader import load_regions
from mxdev.reporting.charts import write_charts
from mxdev.reporting.console import print_clusters, print_pca_summary, print_ranking

console = Console()
app = typer.Typer(help="Mexico regional development analysis")

_log_sink_id: int | None = None


def configure_logging(log_dir: Path | str = "logs") -> None:
    """Add the rotating file sink (once per process)."""
    global _log_sink_id
    if _log_sink_id is not None:
        logger.remove(_log_sink_id)
    _log_sink_id = logger.add(
        Path(log_dir) / "analysis_{time}.log",
        rotation="10 MB",
        retention="7 days",
        level="INFO",
    )


@app.callback()
def setup(
    log_dir: str = typer.Option("logs", "--log-dir", help="Directory for log files"),
) -> None:
    """Load .env and configure logging before any command."""
    load_dotenv()
    configure_logging(log_dir)


def _load_scored(path: Path):
    try:
        return compute_scores(load_regions(path))
    except (AnalysisError, FileNotFoundError) as e:
        console.print(f"[red]❌ {e}[/red]")
        logger.error(f"Failed to load {path}: {e}")
        raise typer.Exit(1)


def _build_config(**overrides: object) -> AnalysisConfig:
    try:
        return AnalysisConfig.from_env().with_overrides(**overrides)
    except ValueError as e:
        console.print(f"[red]❌ Invalid configuration: {e}[/red]")
        logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(1)


@app.command()
def run(
    path: Path = typer.Argument(..., help="CSV file with one row per region"),
    clusters: int = typer.Option(None, "--clusters", "-k", help="Number of clusters"),
    seed: int = typer.Option(None, "--seed", "-s", help="Random seed for K-Means"),
    top: int = typer.Option(5, "--top", "-n", min=0, help="Regions shown in each ranking"),
    output_dir: Path = typer.Option(None, "--output", "-o", help="Directory for charts and CSV"),
    charts: bool = typer.Option(True, "--charts/--no-charts", help="Write HTML charts"),
) -> None:
    """
    Run scoring, rankings, PCA and clustering end to end.
    """
    console.print("\n[bold blue]🇲🇽 Mexico Regional Development Analysis[/bold blue]\n")

    config = _build_config(n_clusters=clusters, seed=seed, output_dir=output_dir)
    console.print(f"[green]✓[/green] Clusters: [bold]{config.n_clusters}[/bold]")
    console.print(f"[green]✓[/green] Seed: [bold]{config.seed}[/bold]")
    console.print(f"[green]✓[/green] Output directory: [bold]{config.output_dir}[/bold]\n")

    try:
        result = run_analysis(load_regions(path), config)
    except (AnalysisError, FileNotFoundError) as e:
        console.print(f"[red]❌ Analysis failed: {e}[/red]")
        logger.exception("Analysis failed")
        raise typer.Exit(1)

    for key in ("development_model", "material", "quality", "subjectivity"):
        best, worst = top_bottom(result.regions, key, n=top)
        label = RANKING_METRICS[key][0]
        print_ranking(best, key, f"Top {top} - {label}")
        print_ranking(worst, key, f"Bottom {top} - {label}")

    print_pca_summary(result.pca)
    print_clusters(result.regions, result.profiles)

    csv_path = export_results(result, config.output_dir)
    console.print(f"[green]✓[/green] Saved regions to [bold]{csv_path}[/bold]")

    if charts:
        paths = write_charts(result, config.output_dir, top_n=max(top, 10))
        console.print(f"[green]✓[/green] Saved {len(paths)} charts to [bold]{config.output_dir}[/bold]")

    console.print("\n[bold green]✅ Analysis Complete![/bold green]\n")


@app.command("rank")
def rank_command(
    path: Path = typer.Argument(..., help="CSV file with one row per region"),
    key: str = typer.Option("development_model", "--key", "-k", help="Column to rank by"),
    top: int = typer.Option(5, "--top", "-n", min=0, help="Number of regions to show"),
    ascending: bool = typer.Option(False, "--ascending", "-a", help="Lowest values first"),
) -> None:
    """Rank regions by a score or indicator."""
    df = _load_scored(path)

    try:
        ranking = rank(df, key, descending=not ascending, n=top)
    except (AnalysisError, ValueError) as e:
        console.print(f"[red]❌ {e}[/red]")
        logger.error(f"Cannot rank {path} by '{key}': {e}")
        console.print("\nAvailable metrics:")
        for column, (label, _) in RANKING_METRICS.items():
            console.print(f"  - {column} ({label})")
        raise typer.Exit(1)

    direction = "Bottom" if ascending else "Top"
    print_ranking(ranking, key, f"{direction} {top} - {RANKING_METRICS.get(key, (key,))[0]}")


@app.command()
def pca(
    path: Path = typer.Argument(..., help="CSV file with one row per region"),
    components: int = typer.Option(2, "--components", "-c", help="Components shown in the loadings table"),
) -> None:
    """Show eigenvalues, variance explained and loadings."""
    df = _load_scored(path)
    config = _build_config()

    try:
        result = run_pca(df, config.pca_features)
    except AnalysisError as e:
        console.print(f"[red]❌ PCA failed: {e}[/red]")
        logger.error(f"PCA failed for {path}: {e}")
        raise typer.Exit(1)

    print_pca_summary(result, n_components=components)


@app.command()
def elbow(
    path: Path = typer.Argument(..., help="CSV file with one row per region"),
    max_k: int = typer.Option(10, "--max-k", help="Largest cluster count to try"),
) -> None:
    """Compare inertia and silhouette across cluster counts."""
    df = _load_scored(path)
    config = _build_config()

    try:
        coords = run_pca(df, config.pca_features).coordinates[:, :2]
        analysis = evaluate_cluster_counts(coords, max_k=max_k, seed=config.seed, n_init=config.n_init)
    except AnalysisError as e:
        console.print(f"[red]❌ {e}[/red]")
        logger.error(f"Cluster count analysis failed for {path}: {e}")
        raise typer.Exit(1)

    table = Table(title="Cluster Count Analysis", show_header=True, header_style="bold magenta")
    table.add_column("k", justify="right", style="cyan")
    table.add_column("Inertia", justify="right")
    table.add_column("Silhouette", justify="right")

    for k, inertia, silhouette in zip(analysis["k_range"], analysis["inertias"], analysis["silhouettes"]):
        table.add_row(str(k), f"{inertia:.4f}", f"{silhouette:.4f}")

    console.print(table)
    console.print(f"\n[bold]Best k by silhouette:[/bold] {analysis['best_k_silhouette']}")


def main() -> None:
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
