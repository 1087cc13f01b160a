"""
Generational Housing Affordability - Series Combination and Normalization
Joins annual external series, adjusts for inflation and rebases to the first year

- Join: strict inner join on YEAR (a year missing anywhere is dropped everywhere)
- Inflation: inf_pct(year) = CPI(latest year) / CPI(year)
- Rebase: ((value / first value) - 1) * 100, rounded to 2 decimals
"""

from typing import Iterable, List, Sequence

import pandas as pd

from src.utils.logging import get_logger

logger = get_logger(__name__)

YEAR_COL = "YEAR"


def inner_join_series(frames: Sequence[pd.DataFrame], on: str = YEAR_COL) -> pd.DataFrame:
    """
    Inner-join annual series on their year column.

    Args:
        frames: DataFrames each holding `on` plus value column(s)
        on: Join column

    Returns:
        Joined DataFrame sorted by ascending year
    """
    if not frames:
        raise ValueError("At least one series is required")

    joined = frames[0]
    for frame in frames[1:]:
        joined = joined.merge(frame, on=on, how="inner")

    joined = joined.sort_values(on).reset_index(drop=True)

    logger.info(f"Joined {len(frames)} series on {on}: {len(joined)} common years")
    return joined


def inflation_factors(cpi: pd.DataFrame, value_col: str = "value") -> pd.DataFrame:
    """
    Factor converting each year's dollars into latest-year dollars.

    Args:
        cpi: YEAR, value (annual average index)

    Returns:
        DataFrame with YEAR, inf_pct ordered by descending year
    """
    if cpi.empty:
        raise ValueError("CPI series is empty")

    ordered = cpi[[YEAR_COL, value_col]].sort_values(YEAR_COL, ascending=False).reset_index(drop=True)
    latest = ordered[value_col].iloc[0]

    ordered["inf_pct"] = latest / ordered[value_col]

    logger.info(f"Inflation factors relative to {ordered[YEAR_COL].iloc[0]} (CPI {latest})")
    return ordered[[YEAR_COL, "inf_pct"]]


def adjust_for_inflation(
    df: pd.DataFrame, factors: pd.DataFrame, columns: Iterable[str]
) -> pd.DataFrame:
    """
    Express nominal columns in latest-year dollars.

    Years without an inflation factor are dropped.
    """
    adjusted = inner_join_series([df, factors])
    for column in columns:
        adjusted[column] = adjusted[column] * adjusted["inf_pct"]

    return adjusted.drop(columns=["inf_pct"])


def rebase_to_first(df: pd.DataFrame, exclude: Iterable[str] = (YEAR_COL,)) -> pd.DataFrame:
    """
    Percent change of every column relative to its earliest-year value.

    Args:
        df: Annual series, one row per year
        exclude: Columns left untouched

    Returns:
        Copy of df sorted by year with rebased value columns
    """
    rebased = df.sort_values(YEAR_COL).reset_index(drop=True) if YEAR_COL in df.columns else df.copy()
    exclude = set(exclude)

    for column in rebased.columns:
        if column in exclude:
            continue
        first = rebased[column].iloc[0]
        rebased[column] = (((rebased[column] / first) - 1) * 100).round(2)

    return rebased


def income_vs_home_prices(
    home_prices: pd.DataFrame,
    median_income: pd.DataFrame,
    factors: pd.DataFrame,
) -> pd.DataFrame:
    """
    Real growth of the median new home price against median household income.

    Args:
        home_prices: YEAR, median_home_price
        median_income: YEAR, median_household_income
        factors: YEAR, inf_pct (see inflation_factors)

    Returns:
        DataFrame with YEAR, Median Home Price, Median Household Income as
        percent change since the first common year
    """
    value_columns: List[str] = ["median_home_price", "median_household_income"]

    combined = inner_join_series(
        [home_prices[[YEAR_COL, "median_home_price"]], median_income[[YEAR_COL, "median_household_income"]]]
    )
    real = adjust_for_inflation(combined, factors, value_columns)
    rebased = rebase_to_first(real)

    return rebased.rename(
        columns={
            "median_home_price": "Median Home Price",
            "median_household_income": "Median Household Income",
        }
    )
