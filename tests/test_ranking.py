import polars as pl
import pytest

from mxdev.analysis.ranking import rank, top_bottom
from mxdev.analysis.scoring import compute_scores
from mxdev.exceptions import SchemaError


@pytest.fixture
def scored(regions_df):
    return compute_scores(regions_df)


def test_top_five_sorted_descending(scored):
    ranking = rank(scored, "development_model", descending=True, n=5)

    values = ranking["development_model"].to_list()
    assert len(ranking) == 5
    assert values == sorted(values, reverse=True)
    assert values[0] == scored["development_model"].max()
    assert ranking["position"].to_list() == [1, 2, 3, 4, 5]


def test_n_larger_than_table_returns_everything(scored):
    ranking = rank(scored, "development_model", n=len(scored) + 10)
    assert len(ranking) == len(scored)


def test_ascending_ranking(scored):
    ranking = rank(scored, "mortality_rate", descending=False, n=3)
    assert ranking["mortality_rate"].to_list() == sorted(scored["mortality_rate"].to_list())[:3]


def test_ties_keep_input_order():
    df = pl.DataFrame({
        "region": ["A", "B", "C", "D", "E"],
        "score": [1.0, 3.0, 3.0, 2.0, 3.0],
    })

    assert rank(df, "score", n=3)["region"].to_list() == ["B", "C", "E"]
    assert rank(df, "score", descending=False, n=5)["region"].to_list() == ["A", "D", "B", "C", "E"]


def test_material_ranking_three_regions(three_regions):
    scored = compute_scores(three_regions)
    ranking = rank(scored, "material", descending=True, n=2)

    assert ranking["region"].to_list() == ["Alpha", "Beta"]
    assert ranking["material"].to_list() == pytest.approx([10.0, 10.0])


def test_top_bottom(scored):
    best, worst = top_bottom(scored, "income_per_capita", n=4)

    assert best["income_per_capita"][0] == scored["income_per_capita"].max()
    assert worst["income_per_capita"][0] == scored["income_per_capita"].min()
    assert len(best) == len(worst) == 4


def test_unknown_key(scored):
    with pytest.raises(SchemaError):
        rank(scored, "gdp")


def test_negative_n(scored):
    with pytest.raises(ValueError):
        rank(scored, "development_model", n=-1)


def test_zero_n_is_empty(scored):
    assert rank(scored, "development_model", n=0).is_empty()


def test_region_column_is_not_a_ranking_key(scored):
    with pytest.raises(SchemaError) as exc:
        rank(scored, "region")
    assert exc.value.column == "region"


def test_text_key_is_rejected():
    df = pl.DataFrame({"region": ["A", "B"], "zone": ["north", "south"]})
    with pytest.raises(SchemaError, match="numeric"):
        rank(df, "zone")
