"""
Regional table loader.

Reads the Mexican regional indicator table from CSV into a Polars
DataFrame and rejects it before any computation if a column is missing,
mistyped, or holds a missing or non-finite value.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import polars as pl
from loguru import logger

from mxdev.config import INDICATOR_COLUMNS, REGION_COLUMN, REQUIRED_COLUMNS
from mxdev.exceptions import DataQualityError, SchemaError

INDICATOR_MIN = 0.0
INDICATOR_MAX = 10.0
NULL_TOKENS = ["", "NA", "N/A", "NaN", "null"]


def missing_table_help(path: Path | str) -> str:
    """Explain where the regional table comes from and what it must hold."""
    return (
        f"Regional table not found at {path}. "
        "Export the Mexican states from the OECD Regional Well-Being database "
        "(one row per state, topic scores on the 0-10 scale) to CSV with the "
        f"columns: {', '.join(REQUIRED_COLUMNS)}. "
        "Then pass its path or set MXDEV_DATA_PATH."
    )


def load_regions(
    path: Path | str,
    required: Sequence[str] = REQUIRED_COLUMNS,
) -> pl.DataFrame:
    """
    Load and validate the regional table.

    Args:
        path: CSV file with a header row and one row per region.
        required: Columns that must be present.

    Returns:
        Validated Polars DataFrame with numeric columns as Float64.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SchemaError: If a required column is missing or not numeric.
        DataQualityError: If a required value is missing or non-finite.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(missing_table_help(path))

    logger.info(f"Loading regional table from {path}")
    df = pl.read_csv(path, null_values=NULL_TOKENS)
    logger.debug(f"Read {len(df)} rows, {len(df.columns)} columns")

    return validate_regions(df, required=required)


def _check_columns(df: pl.DataFrame, required: Sequence[str]) -> None:
    for column in required:
        if column not in df.columns:
            raise SchemaError(column)

        dtype = df.schema[column]
        if column == REGION_COLUMN:
            if dtype != pl.Utf8:
                raise SchemaError(column, f"Column '{column}' must be text, got {dtype}")
        elif not dtype.is_numeric():
            raise SchemaError(column, f"Column '{column}' must be numeric, got {dtype}")


def _check_values(df: pl.DataFrame, required: Sequence[str]) -> None:
    indexed = df.with_row_index("_row", offset=1)

    for column in required:
        col = pl.col(column)
        if column == REGION_COLUMN:
            invalid = col.is_null() | (col.str.strip_chars() == "")
        else:
            invalid = col.is_null() | col.is_nan() | col.is_infinite()

        bad = indexed.filter(invalid)
        if not bad.is_empty():
            first = bad.row(0, named=True)
            region = first.get(REGION_COLUMN)
            raise DataQualityError(
                f"Row {first['_row']} (region={region!r}) has a missing or "
                f"non-finite value in '{column}'",
                row=first["_row"],
                column=column,
            )


def _check_unique_regions(df: pl.DataFrame) -> None:
    duplicated = df.with_row_index("_row", offset=1).filter(
        pl.col(REGION_COLUMN).is_duplicated()
    )
    if not duplicated.is_empty():
        first = duplicated.row(0, named=True)
        raise DataQualityError(
            f"Region {first[REGION_COLUMN]!r} appears more than once "
            f"(first at row {first['_row']})",
            row=first["_row"],
            column=REGION_COLUMN,
        )


def _warn_out_of_range(df: pl.DataFrame, required: Sequence[str]) -> None:
    for column in INDICATOR_COLUMNS:
        if column not in required:
            continue
        outside = df.filter(
            (pl.col(column) < INDICATOR_MIN) | (pl.col(column) > INDICATOR_MAX)
        )
        if not outside.is_empty():
            logger.warning(
                f"{len(outside)} region(s) have '{column}' outside "
                f"[{INDICATOR_MIN:g}, {INDICATOR_MAX:g}]"
            )


def validate_regions(
    df: pl.DataFrame,
    required: Sequence[str] = REQUIRED_COLUMNS,
) -> pl.DataFrame:
    """
    Validate an in-memory regional table.

    Args:
        df: Raw regional table.
        required: Columns that must be present and complete.

    Returns:
        New DataFrame with every required numeric column cast to Float64.

    Raises:
        SchemaError: If a required column is missing or mistyped.
        DataQualityError: If a value is missing, non-finite, or a region
            name is duplicated.
    """
    _check_columns(df, required)

    numeric = [c for c in required if c != REGION_COLUMN]
    df = df.with_columns([pl.col(c).cast(pl.Float64) for c in numeric])

    _check_values(df, required)
    if REGION_COLUMN in required:
        _check_unique_regions(df)
    _warn_out_of_range(df, required)

    logger.info(f"Validated {len(df)} regions with {len(numeric)} numeric fields")
    return df
