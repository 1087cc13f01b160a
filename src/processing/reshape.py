"""
Generational Housing Affordability - Tabular Reshaping
Pivots long cohort statistics into one column per generation

The wide tables are keyed by row position rather than adult_yr: after
sorting by adult_yr, the key is replaced with a dense 1-based
`total_gen_adult_yr` counter.
"""

from typing import List

import pandas as pd

from src.processing.generations import Generation
from src.utils.logging import get_logger

logger = get_logger(__name__)

INDEX_COL = "total_gen_adult_yr"

_GENERATION_ORDER: List[str] = [g.value for g in Generation]


def _ordered_categories(categories) -> List[str]:
    known = [g for g in _GENERATION_ORDER if g in set(categories)]
    extra = sorted(c for c in set(categories) if c not in _GENERATION_ORDER)
    return known + extra


def pivot_by_adult_year(
    df: pd.DataFrame,
    value_col: str,
    key_col: str = "adult_yr",
    category_col: str = "generation",
) -> pd.DataFrame:
    """
    Pivot long (key, category, value) rows to a wide table.

    Args:
        df: Long-format rows
        value_col: Column holding cell values
        key_col: Alignment key (one output row per distinct value)
        category_col: Category column (one output column per distinct value)

    Returns:
        Wide DataFrame: one column per category present, then total_gen_adult_yr;
        cells with no value are NaN. Empty input gives a frame with only
        total_gen_adult_yr and no rows.
    """
    if df.duplicated(subset=[key_col, category_col]).any():
        raise ValueError(f"Duplicate ({key_col}, {category_col}) rows cannot be pivoted")

    if df.empty:
        logger.warning(f"No {value_col} rows to pivot")
        return pd.DataFrame({INDEX_COL: pd.Series(dtype="int64")})

    wide = df.pivot(index=key_col, columns=category_col, values=value_col)
    wide = wide.sort_index()
    wide = wide[_ordered_categories(wide.columns)]

    wide = wide.reset_index(drop=True)
    wide.columns.name = None
    wide[INDEX_COL] = range(1, len(wide) + 1)

    logger.info(f"Pivoted {len(df)} {value_col} rows into {len(wide)} x {len(wide.columns) - 1} table")
    return wide


def unpivot_wide(wide: pd.DataFrame, value_col: str, category_col: str = "generation") -> pd.DataFrame:
    """
    Melt a wide table back to (total_gen_adult_yr, category, value) rows.

    Null cells are dropped.
    """
    long = wide.melt(id_vars=[INDEX_COL], var_name=category_col, value_name=value_col)
    long = long.dropna(subset=[value_col])

    return long.sort_values([INDEX_COL, category_col]).reset_index(drop=True)
