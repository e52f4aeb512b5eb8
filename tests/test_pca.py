import numpy as np
import polars as pl
import pytest

from mxdev.analysis.pca import run_pca, standardize
from mxdev.config import INDICATOR_COLUMNS
from mxdev.exceptions import DataQualityError, DegenerateInputError, SchemaError


def test_variance_percentages_sum_to_100(regions_df):
    result = run_pca(regions_df)

    assert result.n_components == len(INDICATOR_COLUMNS)
    assert result.explained_variance.sum() == pytest.approx(100.0, abs=1e-6)
    assert result.cumulative_variance[-1] == pytest.approx(100.0, abs=1e-6)


def test_components_ordered_by_eigenvalue(regions_df):
    result = run_pca(regions_df)

    assert np.all(np.diff(result.eigenvalues) <= 1e-12)
    assert result.eigenvalues.sum() == pytest.approx(len(INDICATOR_COLUMNS))


def test_retained_information_is_first_two_components(regions_df):
    result = run_pca(regions_df)
    assert result.retained_information() == pytest.approx(
        result.explained_variance[0] + result.explained_variance[1]
    )


def test_rerun_is_identical(regions_df):
    first = run_pca(regions_df)
    second = run_pca(regions_df)

    np.testing.assert_array_equal(first.eigenvalues, second.eigenvalues)
    np.testing.assert_array_equal(first.coordinates, second.coordinates)
    np.testing.assert_array_equal(first.loadings, second.loadings)


def test_coordinates_are_centered_with_eigenvalue_variance(regions_df):
    result = run_pca(regions_df)

    np.testing.assert_allclose(result.coordinates.mean(axis=0), 0.0, atol=1e-10)
    np.testing.assert_allclose(result.coordinates.var(axis=0), result.eigenvalues, atol=1e-10)


def test_loadings_are_variable_component_correlations(regions_df):
    result = run_pca(regions_df)
    X = regions_df.select(INDICATOR_COLUMNS).to_numpy()

    for j in range(X.shape[1]):
        for k in range(2):
            r = np.corrcoef(X[:, j], result.coordinates[:, k])[0, 1]
            assert result.loadings[j, k] == pytest.approx(r, abs=1e-9)


def test_contributions_sum_to_100_per_component(regions_df):
    result = run_pca(regions_df)
    np.testing.assert_allclose(result.contributions.sum(axis=0), 100.0, atol=1e-8)


def test_sign_convention(regions_df):
    result = run_pca(regions_df)
    loadings = result.loadings
    pivots = np.argmax(np.abs(loadings), axis=0)
    assert np.all(loadings[pivots, np.arange(loadings.shape[1])] > 0)


def test_result_arrays_are_read_only(regions_df):
    result = run_pca(regions_df)
    with pytest.raises(ValueError):
        result.coordinates[0, 0] = 1.0


def test_frames(regions_df):
    result = run_pca(regions_df)

    coords = result.coordinates_frame(2)
    assert coords.columns == ["region", "PC1", "PC2"]
    assert coords["region"].to_list() == regions_df["region"].to_list()

    summary = result.summary_frame()
    assert summary["component"].to_list()[:2] == ["PC1", "PC2"]

    loadings = result.loadings_frame(2)
    assert loadings["variable"].to_list() == INDICATOR_COLUMNS


def test_cos2_on_retained_plane(regions_df):
    result = run_pca(regions_df)
    cos2 = result.cos2_frame(2)

    assert cos2.columns == ["variable", "PC1", "PC2", "plane"]
    assert cos2["variable"].to_list() == INDICATOR_COLUMNS

    expected = (result.loadings[:, :2] ** 2).sum(axis=1)
    np.testing.assert_allclose(cos2["plane"].to_numpy(), expected)
    np.testing.assert_allclose(cos2["PC1"].to_numpy(), result.loadings[:, 0] ** 2)
    assert (cos2["plane"] <= 1 + 1e-12).all()

    # Over every component each variable is fully represented
    full = result.cos2_frame(result.n_components)
    np.testing.assert_allclose(full["plane"].to_numpy(), 1.0)


def test_constant_column_is_rejected(regions_df):
    df = regions_df.with_columns(pl.lit(0.1).alias("safety"))

    with pytest.raises(DegenerateInputError, match="safety"):
        run_pca(df)


def test_column_constant_up_to_rounding_is_rejected(regions_df):
    # 0.1 * 3 and 0.3 differ only in the last bit
    noisy = [0.1 * 3 if i % 2 else 0.3 for i in range(len(regions_df))]
    df = regions_df.with_columns(pl.Series("safety", noisy))
    assert df["safety"].n_unique() == 2

    with pytest.raises(DegenerateInputError, match="safety"):
        run_pca(df)


def test_standardize_rejects_constant_column():
    X = np.array([[1.0, 3.0], [2.0, 3.0], [4.0, 3.0]])
    with pytest.raises(DegenerateInputError, match=r": b$"):
        standardize(X, ["a", "b"])


def test_three_region_table_is_degenerate(three_regions):
    with pytest.raises(DegenerateInputError):
        run_pca(three_regions)


def test_single_region_is_degenerate(regions_df):
    with pytest.raises(DegenerateInputError):
        run_pca(regions_df.head(1))


def test_missing_feature(regions_df):
    with pytest.raises(SchemaError):
        run_pca(regions_df, features=["income", "wealth"])


def test_non_finite_value(regions_df):
    values = regions_df["income"].to_list()
    values[2] = float("nan")
    df = regions_df.with_columns(pl.Series("income", values))

    with pytest.raises(DataQualityError) as exc:
        run_pca(df)
    assert exc.value.row == 3


def test_feature_subset(regions_df):
    result = run_pca(regions_df, features=["income", "jobs", "health"])
    assert result.n_components == 3
    assert result.features == ("income", "jobs", "health")
