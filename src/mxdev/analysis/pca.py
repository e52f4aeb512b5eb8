"""
Principal Component Analysis on the regional indicators.

Standardizes the indicator columns, eigendecomposes their correlation
matrix and projects every region onto the components ordered by
descending eigenvalue.

Usage:
    from mxdev.analysis.pca import run_pca
    result = run_pca(scored_df)
    result.retained_information()  # % variance kept by PC1 + PC2
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import polars as pl
from loguru import logger
from sklearn.preprocessing import StandardScaler

from mxdev.config import INDICATOR_COLUMNS, REGION_COLUMN
from mxdev.exceptions import DataQualityError, DegenerateInputError, SchemaError


@dataclass(frozen=True)
class PCAResult:
    """Outcome of one PCA run. Arrays are read-only."""

    features: tuple[str, ...]
    regions: tuple[str, ...]
    eigenvalues: np.ndarray
    explained_variance: np.ndarray
    cumulative_variance: np.ndarray
    coordinates: np.ndarray
    loadings: np.ndarray

    @property
    def n_components(self) -> int:
        return len(self.eigenvalues)

    @property
    def component_names(self) -> list[str]:
        return [f"PC{i}" for i in range(1, self.n_components + 1)]

    @property
    def contributions(self) -> np.ndarray:
        """Percent contribution of each variable to each component."""
        squared = self.loadings ** 2
        with np.errstate(divide="ignore", invalid="ignore"):
            contrib = np.where(self.eigenvalues > 0, squared / self.eigenvalues * 100, 0.0)
        return contrib

    @property
    def cos2(self) -> np.ndarray:
        """Quality of representation of each variable on each component."""
        return self.loadings ** 2

    def retained_information(self, n_components: int = 2) -> float:
        """Percent of total variance kept by the first ``n_components``."""
        return float(self.explained_variance[:n_components].sum())

    def summary_frame(self) -> pl.DataFrame:
        """Eigenvalue, % variance and cumulative % per component."""
        return pl.DataFrame({
            "component": self.component_names,
            "eigenvalue": self.eigenvalues,
            "variance_pct": self.explained_variance,
            "cumulative_pct": self.cumulative_variance,
        })

    def coordinates_frame(self, n_components: int | None = None) -> pl.DataFrame:
        """Region coordinates on the first ``n_components`` components."""
        n = n_components or self.n_components
        data = {REGION_COLUMN: list(self.regions)}
        for i, name in enumerate(self.component_names[:n]):
            data[name] = self.coordinates[:, i]
        return pl.DataFrame(data)

    def loadings_frame(self, n_components: int | None = None) -> pl.DataFrame:
        """Correlation of each original variable with each component."""
        n = n_components or self.n_components
        data = {"variable": list(self.features)}
        for i, name in enumerate(self.component_names[:n]):
            data[name] = self.loadings[:, i]
        return pl.DataFrame(data)

    def contributions_frame(self, n_components: int | None = None) -> pl.DataFrame:
        """Percent contribution of each variable to each component."""
        n = n_components or self.n_components
        contrib = self.contributions
        data = {"variable": list(self.features)}
        for i, name in enumerate(self.component_names[:n]):
            data[name] = contrib[:, i]
        return pl.DataFrame(data)

    def cos2_frame(self, n_components: int = 2) -> pl.DataFrame:
        """
        Quality of representation of each variable on the retained plane.

        One squared-loading column per component plus ``plane``, their sum
        over the first ``n_components``. A ``plane`` near 1 means the
        variable is well represented by those components.
        """
        squared = self.cos2[:, :n_components]
        data = {"variable": list(self.features)}
        for i, name in enumerate(self.component_names[:n_components]):
            data[name] = squared[:, i]
        data["plane"] = squared.sum(axis=1)
        return pl.DataFrame(data)


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float, copy=True)
    array.setflags(write=False)
    return array


def extract_matrix(
    df: pl.DataFrame,
    features: Sequence[str] = INDICATOR_COLUMNS,
) -> np.ndarray:
    """
    Pull the PCA feature matrix out of a regional table.

    Raises:
        SchemaError: If a feature column is missing or not numeric.
        DataQualityError: If the matrix holds a missing or non-finite value.
    """
    for column in features:
        if column not in df.columns:
            raise SchemaError(column)
        if not df.schema[column].is_numeric():
            raise SchemaError(column, f"Column '{column}' must be numeric, got {df.schema[column]}")

    X = df.select(features).cast(pl.Float64).to_numpy()

    bad_rows, bad_cols = np.nonzero(~np.isfinite(X))
    if len(bad_rows):
        row, column = int(bad_rows[0]) + 1, features[int(bad_cols[0])]
        raise DataQualityError(
            f"Row {row} has a missing or non-finite value in '{column}'",
            row=row,
            column=column,
        )
    return X


def standardize(X: np.ndarray, features: Sequence[str]) -> np.ndarray:
    """
    Scale each column to zero mean and unit variance.

    Columns whose variance is zero up to floating-point noise count as
    constant; the scaler would otherwise leave them unscaled.

    Raises:
        DegenerateInputError: If a column is constant, since it cannot be
            scaled to unit variance.
    """
    scaler = StandardScaler()
    scaler.fit(X)

    tolerance = np.finfo(float).eps * np.maximum(1.0, scaler.mean_ ** 2)
    constant = [features[i] for i in np.flatnonzero(scaler.var_ <= tolerance)]
    if constant:
        raise DegenerateInputError(
            f"Zero-variance column(s) cannot be standardized: {', '.join(constant)}"
        )

    return scaler.transform(X)


def run_pca(
    df: pl.DataFrame,
    features: Sequence[str] = INDICATOR_COLUMNS,
) -> PCAResult:
    """
    Run PCA over the given feature columns.

    Args:
        df: Regional table.
        features: Ratio/interval-scaled columns to reduce.

    Returns:
        PCAResult with every component kept.

    Raises:
        SchemaError: If a feature column is missing or not numeric.
        DataQualityError: If a value is missing or non-finite.
        DegenerateInputError: If there are fewer than two regions or a
            feature column is constant.
    """
    features = list(features)
    X = extract_matrix(df, features)
    n_rows = X.shape[0]
    if n_rows < 2:
        raise DegenerateInputError(f"PCA needs at least 2 regions, got {n_rows}")

    Z = standardize(X, features)

    # Correlation matrix of the original variables
    R = (Z.T @ Z) / n_rows

    eigenvalues, eigenvectors = np.linalg.eigh(R)
    order = np.argsort(eigenvalues)[::-1]
    eigenvalues = np.clip(eigenvalues[order], 0.0, None)
    eigenvectors = eigenvectors[:, order]

    # Largest-magnitude entry of each eigenvector is positive
    pivots = np.argmax(np.abs(eigenvectors), axis=0)
    signs = np.sign(eigenvectors[pivots, np.arange(eigenvectors.shape[1])])
    signs[signs == 0] = 1.0
    eigenvectors = eigenvectors * signs

    explained = eigenvalues / eigenvalues.sum() * 100
    coordinates = Z @ eigenvectors
    loadings = eigenvectors * np.sqrt(eigenvalues)

    if REGION_COLUMN in df.columns:
        regions = tuple(df.get_column(REGION_COLUMN).cast(pl.Utf8).to_list())
    else:
        regions = tuple(str(i) for i in range(1, n_rows + 1))

    result = PCAResult(
        features=tuple(features),
        regions=regions,
        eigenvalues=_frozen(eigenvalues),
        explained_variance=_frozen(explained),
        cumulative_variance=_frozen(np.cumsum(explained)),
        coordinates=_frozen(coordinates),
        loadings=_frozen(loadings),
    )

    logger.info(
        f"PCA over {len(features)} variables: PC1+PC2 retain "
        f"{result.retained_information():.1f}% of the variance"
    )
    return result
