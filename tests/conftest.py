"""
Pytest configuration and shared fixtures for the generational housing tests.
"""

import pandas as pd
import pytest


@pytest.fixture
def sample_microdata() -> pd.DataFrame:
    """Cleaned CPS ASEC records: a few householders and non-householders per cohort."""
    return pd.DataFrame({
        # Boomers born 1960 in 1990; Gen X born 1970 in 2006; Millennial born 1990 in 2022
        "YEAR": [1990, 1990, 1990, 2006, 2006, 2006, 2022, 2022, 2022, 1990],
        "AGE": [30, 30, 28, 36, 36, 40, 32, 32, 32, 70],
        "RELATE": [101, 101, 201, 101, 101, 101, 101, 101, 301, 101],
        "OWNERSHP": [10, 22, 10, 10, 10, 22, 10, 22, 10, 10],
        "HHINCOME": pd.array([60000, 30000, 60000, 80000, None, 40000, 90000, 60000, 90000, 20000], dtype="Int64"),
        "ASECWTH": [2.0, 1.0, 2.0, 1.0, 3.0, 1.0, 1.0, 1.0, 1.0, 5.0],
    })


@pytest.fixture
def sample_home_prices() -> pd.DataFrame:
    return pd.DataFrame({
        "YEAR": [1990, 2006, 2022],
        "median_home_price": [122900.0, 246500.0, 457800.0],
    })


@pytest.fixture
def sample_mortgage_rates() -> pd.DataFrame:
    return pd.DataFrame({
        "YEAR": [1990, 2006, 2022],
        "interest_rate": [0.1013, 0.0641, 0.0534],
    })


@pytest.fixture
def sample_income_by_gen() -> pd.DataFrame:
    """Aligned average household income (YEAR, generation, AVG_HH_INCOME, adult_yr)."""
    return pd.DataFrame({
        "YEAR": [1990, 1991, 2006, 2007, 2022],
        "generation": ["Baby Boomer", "Baby Boomer", "Gen X", "Gen X", "Millennial"],
        "AVG_HH_INCOME": [40000.0, 41000.0, 70000.0, 72000.0, 95000.0],
        "adult_yr": [26, 27, 26, 27, 26],
    })


@pytest.fixture
def empty_dataframe() -> pd.DataFrame:
    """Return an empty DataFrame for edge case testing."""
    return pd.DataFrame()
