"""
Generational Housing Affordability - Cohort Classification
Assigns a generation label to each survey record from its birth year

Birth year = survey YEAR - AGE, bucketed with inclusive bounds:
- Pre-War:      < 1901
- Greatest:     1901-1927
- Silent:       1928-1945
- Baby Boomer:  1946-1964
- Gen X:        1965-1980
- Millennial:   1981-1996
- Gen Z:        > 1996

Only Baby Boomers, Gen X and Millennials are carried into the statistics.
"""

from enum import Enum
from typing import Dict, List, Tuple

import pandas as pd

from src.utils.logging import get_logger

logger = get_logger(__name__)


class Generation(str, Enum):
    """Generational cohort label"""
    PRE_WAR = "Pre-War"
    GREATEST = "Greatest"
    SILENT = "Silent"
    BABY_BOOMER = "Baby Boomer"
    GEN_X = "Gen X"
    MILLENNIAL = "Millennial"
    GEN_Z = "Gen Z"


# Inclusive birth-year bounds for the closed cohorts
GENERATION_BIRTH_YEARS: Dict[Generation, Tuple[int, int]] = {
    Generation.GREATEST: (1901, 1927),
    Generation.SILENT: (1928, 1945),
    Generation.BABY_BOOMER: (1946, 1964),
    Generation.GEN_X: (1965, 1980),
    Generation.MILLENNIAL: (1981, 1996),
}

FIRST_BIRTH_YEAR = 1901
LAST_BIRTH_YEAR = 1996

TARGET_GENERATIONS: List[Generation] = [
    Generation.BABY_BOOMER,
    Generation.GEN_X,
    Generation.MILLENNIAL,
]


def birth_year(year, age):
    """Survey year minus age; accepts scalars or aligned Series."""
    return year - age


def classify_generation(birth: int) -> Generation:
    """
    Map a birth year to its generation.

    Every integer falls in exactly one bucket, so there is no error case.

    Args:
        birth: Birth year (survey year minus age)

    Returns:
        Generation label
    """
    if birth < FIRST_BIRTH_YEAR:
        return Generation.PRE_WAR
    if birth > LAST_BIRTH_YEAR:
        return Generation.GEN_Z

    for generation, (start, end) in GENERATION_BIRTH_YEARS.items():
        if start <= birth <= end:
            return generation

    # Unreachable: the closed ranges cover FIRST_BIRTH_YEAR..LAST_BIRTH_YEAR
    raise AssertionError(f"Birth year {birth} fell between generation ranges")


def assign_generations(df: pd.DataFrame, year_col: str = "YEAR", age_col: str = "AGE") -> pd.DataFrame:
    """
    Add a `generation` column derived from survey year and age.

    Args:
        df: Microdata with year and age columns
        year_col: Survey year column
        age_col: Respondent age column

    Returns:
        Copy of df with a string `generation` column
    """
    missing = [c for c in (year_col, age_col) if c not in df.columns]
    if missing:
        raise ValueError(f"Cannot assign generations, missing columns: {missing}")

    result = df.copy()
    births = birth_year(result[year_col].astype(int), result[age_col].astype(int))

    # Classify each distinct birth year once, then map
    labels = {b: classify_generation(b).value for b in births.unique()}
    result["generation"] = births.map(labels)

    return result


def filter_target_generations(
    df: pd.DataFrame, generations: List[Generation] = TARGET_GENERATIONS
) -> pd.DataFrame:
    """Keep only records belonging to the given generations."""
    keep = [g.value for g in generations]
    filtered = df[df["generation"].isin(keep)].copy()

    logger.info(f"Kept {len(filtered)} of {len(df)} records in generations {keep}")
    return filtered
