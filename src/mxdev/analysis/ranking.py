"""Region rankings by any numeric column."""

from __future__ import annotations

import polars as pl

from mxdev.config import REGION_COLUMN
from mxdev.exceptions import SchemaError

# Metrics offered for ranking: column -> (label, lower_is_better)
RANKING_METRICS = {
    "development_model": ("Development model", False),
    "material": ("Material conditions", False),
    "quality": ("Quality of life", False),
    "subjectivity": ("Subjective well-being", False),
    "income_per_capita": ("Income per capita", False),
    "life_expectancy": ("Life expectancy", False),
    "mortality_rate": ("Mortality rate", True),
    "population": ("Population", False),
}


def rank(
    df: pl.DataFrame,
    key: str,
    descending: bool = True,
    n: int = 5,
) -> pl.DataFrame:
    """
    Rank regions by ``key`` and keep the first ``n``.

    The sort is stable: regions with equal values keep their input order.
    Asking for more rows than the table holds returns the whole table.

    Args:
        df: Regional table.
        key: Numeric column to rank by.
        descending: Highest values first when True.
        n: Number of rows to keep.

    Returns:
        DataFrame with ``position``, ``region`` and ``key`` columns.

    Raises:
        SchemaError: If ``key`` or the region column is missing, or ``key``
            is not a numeric column.
        ValueError: If ``n`` is negative.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    for column in (REGION_COLUMN, key):
        if column not in df.columns:
            raise SchemaError(column)
    if key == REGION_COLUMN or not df.schema[key].is_numeric():
        raise SchemaError(key, f"Cannot rank by '{key}': column must be numeric, got {df.schema[key]}")

    return (
        df.select(REGION_COLUMN, key)
        .sort(key, descending=descending, maintain_order=True)
        .head(n)
        .with_row_index("position", offset=1)
    )


def top_bottom(
    df: pl.DataFrame,
    key: str,
    n: int = 5,
) -> tuple[pl.DataFrame, pl.DataFrame]:
    """
    Top-N and bottom-N regions for ``key``.

    Returns:
        Tuple of (highest values first, lowest values first).
    """
    return rank(df, key, descending=True, n=n), rank(df, key, descending=False, n=n)
