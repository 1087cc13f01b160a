"""
Generational Housing Affordability - Adult-Year Alignment
Re-expresses calendar years as years since each cohort's reference birth year

adult_yr = YEAR - reference_year(generation). The reference year is the last
birth year of the cohort, so adult_yr >= 18 means every member of the cohort
is an adult. This puts Boomers in 1982, Gen X in 1998 and Millennials in 2014
at the same point on the x-axis.
"""

from typing import Dict

import pandas as pd

from config.settings import get_settings
from src.processing.generations import Generation
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

REFERENCE_BIRTH_YEARS: Dict[str, int] = {
    Generation.BABY_BOOMER.value: 1964,
    Generation.GEN_X.value: 1980,
    Generation.MILLENNIAL.value: 1996,
}


def adult_year(year: int, generation: str) -> int:
    """
    Years elapsed since the cohort's reference birth year.

    Raises:
        KeyError: generation has no reference year
    """
    if isinstance(generation, Generation):
        generation = generation.value
    return int(year) - REFERENCE_BIRTH_YEARS[generation]


def align_to_adult_years(df: pd.DataFrame, min_adult_year: int = None) -> pd.DataFrame:
    """
    Add `adult_yr` and keep only adult cohort-years.

    Args:
        df: CohortYearStat rows (YEAR, generation, statistic)
        min_adult_year: Smallest adult_yr kept (default: settings.MIN_ADULT_YEAR)

    Returns:
        Copy of df with adult_yr, sorted by (adult_yr, generation)
    """
    if min_adult_year is None:
        min_adult_year = settings.MIN_ADULT_YEAR

    result = df[df["generation"].isin(list(REFERENCE_BIRTH_YEARS))].copy()
    result["adult_yr"] = pd.Series(
        [adult_year(y, g) for y, g in zip(result["YEAR"], result["generation"])],
        index=result.index,
        dtype="int64",
    )

    before = len(result)
    result = result[result["adult_yr"] >= min_adult_year]
    result = result.sort_values(["adult_yr", "generation"]).reset_index(drop=True)

    logger.info(f"Aligned {len(result)} cohort-years (dropped {before - len(result)} below adult_yr {min_adult_year})")
    return result
