"""
Generational Housing Affordability - Affordability Index Engine

Two measures per generation:

- Downpayment burden: a 20% downpayment on the median new home as a share of
  the generation's average household income in its ninth adult year, for a
  handful of snapshot years.
- Home cost index: follows the Atlanta Fed Home Ownership Affordability
  Monitor (HOAM) methodology without its insurance and tax detail.
  100 means income exactly covers the target housing cost; above 100 is
  more affordable, below 100 less.

Index formula:
    principal  = median_home_price * 0.9
    payment    = principal * r / (1 - (1 + r) ** -360),  r = annual_rate / 12
    required   = (payment + principal * 0.00558) * 3.33 * 12
    index      = AVG_HH_INCOME / required * 100
"""

from typing import Iterable, Optional

import numpy as np
import pandas as pd

from config.settings import get_settings
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

# HOAM constants, kept exactly as published
FINANCED_SHARE = 0.9  # 10% down, 90% financed
MORTGAGE_TERM_MONTHS = 360  # 30-year fixed
INSURANCE_TAX_MONTHLY_RATE = 0.00558  # monthly insurance/tax proxy on principal
HOUSING_BURDEN_MULTIPLIER = 3.33  # income needed per dollar of housing cost (~30% target)
MONTHS_PER_YEAR = 12

DOWNPAYMENT_SHARE = 0.20


def amortized_monthly_payment(principal, annual_rate, term_months: int = MORTGAGE_TERM_MONTHS):
    """
    Fixed-rate mortgage payment.

    Works on scalars and on pandas/numpy arrays.

    Args:
        principal: Amount financed
        annual_rate: Annual interest rate as a decimal (0.065 for 6.5%)
        term_months: Number of monthly payments

    Returns:
        Monthly payment
    """
    monthly_rate = np.asarray(annual_rate, dtype=float) / MONTHS_PER_YEAR
    principal_arr = np.asarray(principal, dtype=float)

    with np.errstate(divide="ignore", invalid="ignore"):
        amortized = principal_arr * monthly_rate / (1 - (1 + monthly_rate) ** (-term_months))

    # Zero rate: straight-line repayment
    payment = np.where(monthly_rate == 0, principal_arr / term_months, amortized)

    if np.ndim(payment) == 0:
        return float(payment)
    if isinstance(principal, pd.Series):
        return pd.Series(payment, index=principal.index)
    return payment


def required_annual_cost(median_home_price, annual_rate):
    """Income required for the target housing cost share on a median-priced home."""
    principal = median_home_price * FINANCED_SHARE
    payment = amortized_monthly_payment(principal, annual_rate)
    insurance_tax = principal * INSURANCE_TAX_MONTHLY_RATE

    return (payment + insurance_tax) * HOUSING_BURDEN_MULTIPLIER * MONTHS_PER_YEAR


def home_cost_index(avg_hh_income, median_home_price, annual_rate):
    """
    Affordability index for an income, home price and mortgage rate.

    Returns:
        (income / required annual cost) * 100
    """
    return avg_hh_income / required_annual_cost(median_home_price, annual_rate) * 100


def home_cost_index_table(
    home_prices: pd.DataFrame,
    mortgage_rates: pd.DataFrame,
    income_by_gen: pd.DataFrame,
) -> pd.DataFrame:
    """
    Home cost index for every aligned cohort-year with complete inputs.

    Years missing from any input are dropped (inner join, no imputation).

    Args:
        home_prices: YEAR, median_home_price
        mortgage_rates: YEAR, interest_rate (decimal)
        income_by_gen: YEAR, generation, AVG_HH_INCOME, adult_yr

    Returns:
        DataFrame with adult_yr, generation, home_cost_index
    """
    merged = (
        home_prices.merge(mortgage_rates, on="YEAR", how="inner")
        .merge(income_by_gen, on="YEAR", how="inner")
        .dropna(subset=["median_home_price", "interest_rate", "AVG_HH_INCOME"])
    )

    merged["home_cost_index"] = home_cost_index(
        merged["AVG_HH_INCOME"], merged["median_home_price"], merged["interest_rate"]
    )

    result = merged[["adult_yr", "generation", "home_cost_index"]]
    result = result.sort_values(["adult_yr", "generation"]).reset_index(drop=True)

    logger.info(
        f"Computed home cost index for {len(result)} cohort-years "
        f"({len(income_by_gen) - len(result)} without price/rate data)"
    )
    return result


def downpayment_proportions(
    home_prices: pd.DataFrame,
    income_by_gen: pd.DataFrame,
    snapshot_years: Optional[Iterable[int]] = None,
    adult_year: Optional[int] = None,
    downpayment_share: Optional[float] = None,
) -> pd.DataFrame:
    """
    Downpayment burden for each generation at a fixed adult year.

    Args:
        home_prices: YEAR, median_home_price
        income_by_gen: YEAR, generation, AVG_HH_INCOME, adult_yr
        snapshot_years: Calendar years to report (default: settings.DOWNPAYMENT_SNAPSHOT_YEARS)
        adult_year: Adult year whose income is used (default: settings.DOWNPAYMENT_ADULT_YEAR)
        downpayment_share: Share of price paid up front (default: settings.DOWNPAYMENT_SHARE)

    Returns:
        DataFrame with YEAR, median_home_price, generation, AVG_HH_INCOME,
        adult_yr, twenty_pct_downpmt_prop
    """
    if snapshot_years is None:
        snapshot_years = settings.DOWNPAYMENT_SNAPSHOT_YEARS
    if adult_year is None:
        adult_year = settings.DOWNPAYMENT_ADULT_YEAR
    if downpayment_share is None:
        downpayment_share = settings.DOWNPAYMENT_SHARE

    snapshot_years = sorted(set(int(y) for y in snapshot_years))

    prices = home_prices[home_prices["YEAR"].isin(snapshot_years)]
    income = income_by_gen[income_by_gen["adult_yr"] == adult_year]

    result = prices.merge(income, on="YEAR", how="inner").dropna(
        subset=["median_home_price", "AVG_HH_INCOME"]
    )
    result["twenty_pct_downpmt_prop"] = (
        result["median_home_price"] * downpayment_share / result["AVG_HH_INCOME"]
    )

    result = result.sort_values(["YEAR", "generation"]).reset_index(drop=True)

    logger.info(
        f"Downpayment burden for {len(result)} generation snapshots "
        f"(years={snapshot_years}, adult_yr={adult_year})"
    )
    return result
