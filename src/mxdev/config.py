"""
Run configuration for the development analysis.

Defaults live in module constants; ``AnalysisConfig.from_env`` lets an
analyst override the random seed, cluster count and k-means budget
through ``MXDEV_*`` environment variables (or a ``.env`` file loaded by
the CLI).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

# Configuration
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DATA_PATH = PROJECT_ROOT / "data" / "regiones_mexico.csv"
DEFAULT_OUTPUT_DIR = PROJECT_ROOT / "outputs"

REGION_COLUMN = "region"
POPULATION_COLUMN = "population"

# Indicators pre-normalized to a 0-10 scale by the source
INDICATOR_COLUMNS = [
    "income",
    "jobs",
    "housing",
    "health",
    "education",
    "environment",
    "safety",
    "civic_engagement",
    "accessibility",
    "community",
    "life_satisfaction",
]

# Raw fields used only for display and ranking
DISPLAY_COLUMNS = [
    "income_per_capita",
    "mortality_rate",
    "life_expectancy",
]

NUMERIC_COLUMNS = [POPULATION_COLUMN, *INDICATOR_COLUMNS, *DISPLAY_COLUMNS]
REQUIRED_COLUMNS = [REGION_COLUMN, *NUMERIC_COLUMNS]

DEFAULT_SEED = 42
DEFAULT_N_CLUSTERS = 5
DEFAULT_MAX_ITER = 300
DEFAULT_N_INIT = 10


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class AnalysisConfig:
    """Parameters that fully determine one analysis run."""

    seed: int = DEFAULT_SEED
    n_clusters: int = DEFAULT_N_CLUSTERS
    max_iter: int = DEFAULT_MAX_ITER
    n_init: int = DEFAULT_N_INIT
    pca_features: tuple[str, ...] = field(default_factory=lambda: tuple(INDICATOR_COLUMNS))
    output_dir: Path = DEFAULT_OUTPUT_DIR

    def __post_init__(self) -> None:
        if self.n_clusters < 1:
            raise ValueError(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.n_init < 1:
            raise ValueError(f"n_init must be >= 1, got {self.n_init}")
        if len(self.pca_features) < 2:
            raise ValueError("pca_features needs at least two columns")

    @classmethod
    def from_env(cls) -> AnalysisConfig:
        """
        Build a config from ``MXDEV_*`` environment variables.

        Unset variables fall back to the module defaults.

        Raises:
            ValueError: If a variable is set but not a valid integer.
        """
        output_dir = os.getenv("MXDEV_OUTPUT_DIR")
        return cls(
            seed=_env_int("MXDEV_SEED", DEFAULT_SEED),
            n_clusters=_env_int("MXDEV_N_CLUSTERS", DEFAULT_N_CLUSTERS),
            max_iter=_env_int("MXDEV_MAX_ITER", DEFAULT_MAX_ITER),
            n_init=_env_int("MXDEV_N_INIT", DEFAULT_N_INIT),
            output_dir=Path(output_dir) if output_dir else DEFAULT_OUTPUT_DIR,
        )

    def with_overrides(self, **overrides: object) -> AnalysisConfig:
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
