"""
Composite development scores.

Each region gets three weighted sub-indices built from its 0-10
indicators, and a weighted aggregate of those sub-indices:

- material: income, jobs, housing
- quality: health, education, environment, safety, civic engagement
- subjectivity: community, life satisfaction
- development_model: material, quality, subjectivity
"""

from __future__ import annotations

import math

import polars as pl
from loguru import logger

from mxdev.exceptions import DataQualityError, SchemaError

MATERIAL_WEIGHTS = {
    "income": 0.45,
    "jobs": 0.45,
    "housing": 0.10,
}

QUALITY_WEIGHTS = {
    "health": 0.35,
    "education": 0.30,
    "environment": 0.25,
    "safety": 0.05,
    "civic_engagement": 0.05,
}

SUBJECTIVITY_WEIGHTS = {
    "community": 0.30,
    "life_satisfaction": 0.70,
}

DEVELOPMENT_WEIGHTS = {
    "material": 0.4,
    "quality": 0.4,
    "subjectivity": 0.2,
}

SUB_INDEX_WEIGHTS = {
    "material": MATERIAL_WEIGHTS,
    "quality": QUALITY_WEIGHTS,
    "subjectivity": SUBJECTIVITY_WEIGHTS,
}

SCORE_COLUMNS = ["material", "quality", "subjectivity", "development_model"]

SCORED_INDICATORS = [
    column for weights in SUB_INDEX_WEIGHTS.values() for column in weights
]


def check_weights() -> None:
    """
    Verify every weight group sums to one.

    Raises:
        ValueError: If a group's weights do not sum to 1.0.
    """
    groups = {**SUB_INDEX_WEIGHTS, "development_model": DEVELOPMENT_WEIGHTS}
    for name, weights in groups.items():
        total = math.fsum(weights.values())
        if not math.isclose(total, 1.0, rel_tol=0.0, abs_tol=1e-12):
            raise ValueError(f"Weights for '{name}' sum to {total}, expected 1.0")


check_weights()


def _weighted_sum(weights: dict[str, float]) -> pl.Expr:
    terms = [pl.col(column) * weight for column, weight in weights.items()]
    return pl.sum_horizontal(terms)


def _require_indicators(df: pl.DataFrame) -> None:
    for column in SCORED_INDICATORS:
        if column not in df.columns:
            raise SchemaError(column)
        if not df.schema[column].is_numeric():
            raise SchemaError(
                column, f"Column '{column}' must be numeric, got {df.schema[column]}"
            )

    for column in SCORED_INDICATORS:
        values = df.get_column(column).cast(pl.Float64)
        invalid = values.is_null() | values.is_nan() | values.is_infinite()
        if invalid.any():
            row = int(invalid.arg_true()[0]) + 1
            raise DataQualityError(
                f"Row {row} has a missing or non-finite value in '{column}'",
                row=row,
                column=column,
            )


def compute_scores(df: pl.DataFrame) -> pl.DataFrame:
    """
    Add the composite score columns to a regional table.

    Indicators are assumed already scaled to 0-10; no normalization is
    re-applied.

    Args:
        df: Regional table with every scored indicator column.

    Returns:
        New DataFrame with ``material``, ``quality``, ``subjectivity`` and
        ``development_model`` appended.

    Raises:
        SchemaError: If an indicator column is missing or not numeric.
        DataQualityError: If an indicator value is missing or non-finite.
    """
    _require_indicators(df)

    scored = df.with_columns([
        _weighted_sum(weights).alias(name)
        for name, weights in SUB_INDEX_WEIGHTS.items()
    ]).with_columns(
        _weighted_sum(DEVELOPMENT_WEIGHTS).alias("development_model")
    )

    logger.info(
        f"Scored {len(scored)} regions "
        f"(development_model mean {scored['development_model'].mean():.3f})"
    )
    return scored
