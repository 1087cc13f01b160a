import numpy as np
import pandas as pd
import pytest

from src.processing.reshape import INDEX_COL, pivot_by_adult_year, unpivot_wide


@pytest.fixture
def long_stats() -> pd.DataFrame:
    return pd.DataFrame({
        "adult_yr": [20, 18, 18, 19, 20, 18],
        "generation": ["Millennial", "Gen X", "Baby Boomer", "Baby Boomer", "Baby Boomer", "Millennial"],
        "OWN_HOME": [30.1, 25.0, 35.2, 36.0, 37.5, 22.4],
    })


def test_pivot_orders_rows_and_columns(long_stats):
    wide = pivot_by_adult_year(long_stats, "OWN_HOME")

    assert wide.columns.tolist() == ["Baby Boomer", "Gen X", "Millennial", INDEX_COL]
    assert wide[INDEX_COL].tolist() == [1, 2, 3]
    assert wide["Baby Boomer"].tolist() == [35.2, 36.0, 37.5]
    assert wide["Millennial"].tolist()[0] == 22.4


def test_pivot_leaves_missing_cells_null(long_stats):
    wide = pivot_by_adult_year(long_stats, "OWN_HOME")

    assert np.isnan(wide.loc[1, "Gen X"])
    assert np.isnan(wide.loc[1, "Millennial"])


def test_pivot_index_is_dense_not_key_value():
    df = pd.DataFrame({"adult_yr": [40, 18], "generation": ["Gen X", "Gen X"], "v": [2.0, 1.0]})

    wide = pivot_by_adult_year(df, "v")

    assert wide[INDEX_COL].tolist() == [1, 2]
    assert wide["Gen X"].tolist() == [1.0, 2.0]


def test_pivot_rejects_duplicate_keys():
    df = pd.DataFrame({"adult_yr": [18, 18], "generation": ["Gen X", "Gen X"], "v": [1.0, 2.0]})

    with pytest.raises(ValueError, match="Duplicate"):
        pivot_by_adult_year(df, "v")


def test_pivot_unpivot_round_trip(long_stats):
    wide = pivot_by_adult_year(long_stats, "OWN_HOME")
    long = unpivot_wide(wide, "OWN_HOME")

    # Map the dense index back to the sorted adult years
    key_for_index = dict(zip(range(1, 4), sorted(long_stats["adult_yr"].unique())))
    recovered = {
        (key_for_index[row[INDEX_COL]], row["generation"], row["OWN_HOME"]) for _, row in long.iterrows()
    }
    original = set(long_stats.itertuples(index=False, name=None))

    assert recovered == original


def test_pivot_empty_input():
    df = pd.DataFrame({"adult_yr": pd.Series(dtype="int64"), "generation": pd.Series(dtype=object), "v": []})

    wide = pivot_by_adult_year(df, "v")

    assert wide.empty
    assert wide.columns.tolist() == [INDEX_COL]
