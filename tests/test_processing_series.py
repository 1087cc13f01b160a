import pandas as pd
import pytest

from src.processing.series import (
    adjust_for_inflation,
    income_vs_home_prices,
    inflation_factors,
    inner_join_series,
    rebase_to_first,
)


def test_inner_join_drops_years_missing_anywhere():
    a = pd.DataFrame({"YEAR": [2002, 2000, 2001], "a": [3, 1, 2]})
    b = pd.DataFrame({"YEAR": [2000, 2002], "b": [10, 30]})
    c = pd.DataFrame({"YEAR": [2002, 2000, 2003], "c": [300, 100, 400]})

    result = inner_join_series([a, b, c])

    assert result["YEAR"].tolist() == [2000, 2002]
    assert result.columns.tolist() == ["YEAR", "a", "b", "c"]
    assert result["c"].tolist() == [100, 300]


def test_inner_join_requires_frames():
    with pytest.raises(ValueError):
        inner_join_series([])


def test_inflation_factors_relative_to_latest_year():
    cpi = pd.DataFrame({"YEAR": [2000, 2002, 2001], "value": [100.0, 125.0, 110.0]})

    result = inflation_factors(cpi)

    assert result["YEAR"].tolist() == [2002, 2001, 2000]
    assert result["inf_pct"].tolist() == pytest.approx([1.0, 125 / 110, 1.25])
    assert (result["inf_pct"] >= 1).all()


def test_inflation_factors_empty():
    with pytest.raises(ValueError, match="empty"):
        inflation_factors(pd.DataFrame({"YEAR": [], "value": []}))


def test_adjust_for_inflation():
    df = pd.DataFrame({"YEAR": [2000, 2001], "price": [100.0, 100.0], "label": ["x", "y"]})
    factors = pd.DataFrame({"YEAR": [2001, 2000], "inf_pct": [1.0, 1.5]})

    result = adjust_for_inflation(df, factors, ["price"])

    assert result.columns.tolist() == ["YEAR", "price", "label"]
    assert result["price"].tolist() == pytest.approx([150.0, 100.0])


def test_rebase_to_first():
    df = pd.DataFrame({"YEAR": [2000, 2001, 2002], "value": [100.0, 110.0, 121.0]})

    result = rebase_to_first(df)

    assert result["value"].tolist() == [0.0, 10.0, 21.0]
    assert result["YEAR"].tolist() == [2000, 2001, 2002]


def test_rebase_uses_earliest_year_per_column():
    df = pd.DataFrame({"YEAR": [2001, 2000], "a": [150.0, 100.0], "b": [20.0, 40.0]})

    result = rebase_to_first(df)

    assert result["a"].tolist() == [0.0, 50.0]
    assert result["b"].tolist() == [0.0, -50.0]


def test_rebase_rounds_to_two_decimals():
    df = pd.DataFrame({"YEAR": [2000, 2001], "value": [3.0, 4.0]})

    assert rebase_to_first(df)["value"].tolist() == [0.0, 33.33]


def test_income_vs_home_prices():
    prices = pd.DataFrame({"YEAR": [2000, 2001, 2002], "median_home_price": [100.0, 110.0, 130.0]})
    income = pd.DataFrame({"YEAR": [2000, 2001, 2002], "median_household_income": [50.0, 50.0, 55.0]})
    factors = pd.DataFrame({"YEAR": [2002, 2001, 2000], "inf_pct": [1.0, 1.0, 1.1]})

    result = income_vs_home_prices(prices, income, factors)

    assert result.columns.tolist() == ["YEAR", "Median Home Price", "Median Household Income"]
    # Real 2000 values: price 110, income 55
    assert result["Median Home Price"].tolist() == [0.0, 0.0, 18.18]
    assert result["Median Household Income"].tolist() == [0.0, -9.09, 0.0]
