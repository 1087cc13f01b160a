"""
Generational Housing Affordability - Weighted Aggregation
Survey-weighted means of microdata fields by (YEAR, generation)

Weighted mean = sum(weight * value) / sum(weight). Weights are used as
given; groups whose weights sum to zero emit no row.

Householder filtering follows IPUMS staff guidance for household-level
rates: one record per household, the reference person (RELATE == 101).
"""

from typing import Sequence

import numpy as np
import pandas as pd

from config.settings import (
    HOUSEHOLDER_RELATE_CODE,
    OWNER_OCCUPIED_CODE,
    get_settings,
)
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

GROUP_KEYS = ("YEAR", "generation")


def weighted_mean(values: Sequence[float], weights: Sequence[float]) -> float:
    """
    Weighted arithmetic mean.

    Args:
        values: Observed values (booleans count as 1/0)
        weights: Non-negative survey weights

    Returns:
        sum(w * v) / sum(w), or NaN when the weights do not sum to a positive number
    """
    values = np.asarray(values, dtype=float)
    weights = np.asarray(weights, dtype=float)

    total_weight = weights.sum()
    if not total_weight > 0:
        return np.nan

    return float((values * weights).sum() / total_weight)


def _empty_group_means(df: pd.DataFrame, keys: Sequence[str], out_col: str) -> pd.DataFrame:
    columns = {k: pd.Series(dtype=df[k].dtype) for k in keys}
    columns[out_col] = pd.Series(dtype=float)
    return pd.DataFrame(columns)


def weighted_group_means(
    df: pd.DataFrame,
    value_col: str,
    weight_col: str,
    out_col: str,
    keys: Sequence[str] = GROUP_KEYS,
) -> pd.DataFrame:
    """
    Compute the weighted mean of a column for every group.

    Args:
        df: Records with the key, value and weight columns
        value_col: Column to average (bool or numeric)
        weight_col: Survey weight column
        out_col: Name of the output statistic column
        keys: Grouping columns

    Returns:
        DataFrame of keys + out_col, one row per group with positive weight,
        sorted by keys. Empty input gives an empty frame with the key dtypes
        and a float statistic column.
    """
    keys = list(keys)
    missing = [c for c in keys + [value_col, weight_col] if c not in df.columns]
    if missing:
        raise ValueError(f"Cannot aggregate, missing columns: {missing}")

    rows = []
    for key, group in df.groupby(keys, sort=True):
        mean = weighted_mean(group[value_col], group[weight_col])
        if np.isnan(mean):
            continue
        rows.append(list(key) + [mean])

    if not rows:
        result = _empty_group_means(df, keys, out_col)
    else:
        result = pd.DataFrame(rows, columns=keys + [out_col])

    logger.info(f"Aggregated {value_col} over {len(df)} records into {len(result)} groups")
    return result


def select_householders(df: pd.DataFrame) -> pd.DataFrame:
    """Keep only household reference persons."""
    return df[df["RELATE"] == HOUSEHOLDER_RELATE_CODE].copy()


def homeownership_by_generation(df: pd.DataFrame, weight_col: str = None) -> pd.DataFrame:
    """
    Homeownership rate (0-1) of householders by survey year and generation.

    Args:
        df: Microdata with `generation` assigned
        weight_col: Weight column (default: settings.WEIGHT_COLUMN)

    Returns:
        DataFrame with YEAR, generation, OWN_HOME
    """
    weight_col = weight_col or settings.WEIGHT_COLUMN

    householders = select_householders(df)
    householders["owns_home"] = householders["OWNERSHP"] == OWNER_OCCUPIED_CODE

    return weighted_group_means(householders, "owns_home", weight_col, "OWN_HOME")


def household_income_by_generation(df: pd.DataFrame, weight_col: str = None) -> pd.DataFrame:
    """
    Average household income of householders by survey year and generation.

    Records with missing income (null after ingestion) are dropped first.

    Args:
        df: Microdata with `generation` assigned
        weight_col: Weight column (default: settings.WEIGHT_COLUMN)

    Returns:
        DataFrame with YEAR, generation, AVG_HH_INCOME
    """
    weight_col = weight_col or settings.WEIGHT_COLUMN

    with_income = df[df["HHINCOME"].notna()]
    dropped = len(df) - len(with_income)
    if dropped:
        logger.info(f"Excluded {dropped} records with missing household income")

    householders = select_householders(with_income)

    return weighted_group_means(householders, "HHINCOME", weight_col, "AVG_HH_INCOME")
