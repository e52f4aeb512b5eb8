import math

import polars as pl
import pytest

from mxdev.analysis.scoring import (
    DEVELOPMENT_WEIGHTS,
    SCORE_COLUMNS,
    SUB_INDEX_WEIGHTS,
    check_weights,
    compute_scores,
)
from mxdev.exceptions import DataQualityError, SchemaError


@pytest.mark.parametrize("weights", [*SUB_INDEX_WEIGHTS.values(), DEVELOPMENT_WEIGHTS])
def test_weight_groups_sum_to_one(weights):
    assert math.fsum(weights.values()) == pytest.approx(1.0, abs=1e-12)


def test_check_weights_passes():
    check_weights()


def test_development_model_is_weighted_sum(regions_df):
    scored = compute_scores(regions_df)

    for row in scored.iter_rows(named=True):
        expected = 0.4 * row["material"] + 0.4 * row["quality"] + 0.2 * row["subjectivity"]
        assert abs(row["development_model"] - expected) <= 1e-9


def test_sub_indices_match_weights(regions_df):
    scored = compute_scores(regions_df)
    row = scored.row(0, named=True)

    assert row["material"] == pytest.approx(
        0.45 * row["income"] + 0.45 * row["jobs"] + 0.10 * row["housing"]
    )
    assert row["subjectivity"] == pytest.approx(
        0.30 * row["community"] + 0.70 * row["life_satisfaction"]
    )
    assert row["quality"] == pytest.approx(
        0.35 * row["health"] + 0.30 * row["education"] + 0.25 * row["environment"]
        + 0.05 * row["safety"] + 0.05 * row["civic_engagement"]
    )


def test_material_only_table(three_regions):
    scored = compute_scores(three_regions)

    assert scored["material"].to_list() == pytest.approx([10.0, 10.0, 0.0])
    assert scored["quality"].to_list() == pytest.approx([0.0, 0.0, 0.0])
    assert scored["development_model"].to_list() == pytest.approx([4.0, 4.0, 0.0])


def test_input_table_is_not_modified(regions_df):
    before = regions_df.clone()
    scored = compute_scores(regions_df)

    assert regions_df.equals(before)
    assert scored.columns == regions_df.columns + SCORE_COLUMNS


def test_missing_indicator_fails_fast(regions_df):
    with pytest.raises(SchemaError) as exc:
        compute_scores(regions_df.drop("life_satisfaction"))
    assert exc.value.column == "life_satisfaction"


def test_null_indicator_is_not_defaulted(regions_df):
    values = regions_df["housing"].to_list()
    values[5] = None
    df = regions_df.with_columns(pl.Series("housing", values, dtype=pl.Float64))

    with pytest.raises(DataQualityError) as exc:
        compute_scores(df)
    assert exc.value.row == 6
    assert exc.value.column == "housing"
