"""
Generational Housing Affordability - External Annual Series

Sources:
- Median new home price: Census Bureau New Residential Sales
  (https://www.census.gov/construction/nrs/data.html), workbook usprice_cust.xls
- 30-year fixed mortgage rate: Freddie Mac PMMS via FRED (MORTGAGE30US), weekly
- Median household income: FRED (MEHOINUSA646N), annual
- CPI-U annual average: BLS flat-file database (cu.data.1.AllItems)

Every loader returns one row per YEAR.
"""

from typing import Optional

import pandas as pd

from config.settings import get_settings
from src.utils.data_sources import fetch_bls_flat_file
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

FRED_DATE_COLUMNS = ["DATE", "observation_date"]


def _fred_date_column(df: pd.DataFrame) -> str:
    for candidate in FRED_DATE_COLUMNS:
        if candidate in df.columns:
            return candidate
    raise ValueError(f"FRED series has no date column (expected one of {FRED_DATE_COLUMNS})")


def read_fred_series(path: str, series_id: str) -> pd.DataFrame:
    """
    Read a FRED CSV download.

    Args:
        path: CSV path
        series_id: FRED series column (e.g., 'MORTGAGE30US')

    Returns:
        DataFrame with DATE (datetime) and the numeric series column;
        FRED's '.' placeholders become NaN and are dropped
    """
    df = pd.read_csv(path)
    date_col = _fred_date_column(df)

    if series_id not in df.columns:
        raise ValueError(f"FRED file {path} has no column {series_id}")

    df = df[[date_col, series_id]].rename(columns={date_col: "DATE"})
    df["DATE"] = pd.to_datetime(df["DATE"])
    df[series_id] = pd.to_numeric(df[series_id], errors="coerce")
    df = df.dropna(subset=[series_id]).sort_values("DATE").reset_index(drop=True)

    logger.info(f"Read {len(df)} {series_id} observations from {path}")
    return df


def read_home_prices(path: Optional[str] = None, sheet: Optional[str] = None, skip_rows: Optional[int] = None) -> pd.DataFrame:
    """
    Read annual median new home prices from the Census workbook.

    Args:
        path: Workbook path (default: settings.HOME_PRICES_PATH)
        sheet: Sheet name (default: settings.HOME_PRICES_SHEET)
        skip_rows: Title rows above the header (default: settings.HOME_PRICES_SKIP_ROWS)

    Returns:
        DataFrame with YEAR, median_home_price
    """
    path = path or settings.HOME_PRICES_PATH
    sheet = sheet or settings.HOME_PRICES_SHEET
    if skip_rows is None:
        skip_rows = settings.HOME_PRICES_SKIP_ROWS

    raw = pd.read_excel(path, sheet_name=sheet, skiprows=skip_rows)
    raw.columns = [str(c).strip() for c in raw.columns]

    missing = [c for c in ("Period", "Median") if c not in raw.columns]
    if missing:
        raise ValueError(f"Home price sheet {sheet} missing columns: {missing}")

    prices = raw[["Period", "Median"]].copy()
    prices["Period"] = pd.to_numeric(prices["Period"], errors="coerce")
    prices["Median"] = pd.to_numeric(prices["Median"], errors="coerce")
    prices = prices.dropna(subset=["Period"])

    prices = prices.rename(columns={"Period": "YEAR", "Median": "median_home_price"})
    prices["YEAR"] = prices["YEAR"].astype(int)
    prices = prices.sort_values("YEAR").reset_index(drop=True)

    logger.info(f"Read {len(prices)} annual median home prices ({prices['YEAR'].min()}-{prices['YEAR'].max()})")
    return prices


def annual_mortgage_rates(weekly: pd.DataFrame, series_id: str = "MORTGAGE30US") -> pd.DataFrame:
    """
    Annual average of a weekly mortgage rate series.

    Args:
        weekly: DATE, <series_id> in percent

    Returns:
        DataFrame with YEAR, interest_rate as a decimal
    """
    annual = (
        weekly.assign(YEAR=weekly["DATE"].dt.year)
        .groupby("YEAR", sort=True)[series_id]
        .mean()
        .div(100)
        .rename("interest_rate")
        .reset_index()
    )
    return annual


def read_weekly_mortgage_rates(path: Optional[str] = None) -> pd.DataFrame:
    """Weekly 30-year fixed rate (percent) from the FRED download."""
    return read_fred_series(path or settings.MORTGAGE_RATES_PATH, "MORTGAGE30US")


def mortgage_rate_changes(weekly: pd.DataFrame, series_id: str = "MORTGAGE30US", lag_weeks: int = 52) -> pd.DataFrame:
    """
    Year-over-year change of a weekly rate series, largest first.

    The comparison is positional: each week against the observation
    `lag_weeks` rows earlier.

    Args:
        weekly: DATE, <series_id>
        lag_weeks: Observations per year

    Returns:
        DataFrame with DATE, series_id, yoy_chg sorted by yoy_chg descending;
        the first year (no comparison point) is dropped
    """
    ordered = weekly.sort_values("DATE").reset_index(drop=True)
    ordered["yoy_chg"] = ordered[series_id] - ordered[series_id].shift(lag_weeks)
    ordered = ordered.dropna(subset=["yoy_chg"])

    return ordered.sort_values(["yoy_chg", "DATE"], ascending=[False, False]).reset_index(drop=True)


def read_median_household_income(path: Optional[str] = None, series_id: str = "MEHOINUSA646N") -> pd.DataFrame:
    """
    Annual US median household income (nominal dollars).

    Returns:
        DataFrame with YEAR, median_household_income
    """
    df = read_fred_series(path or settings.HOUSEHOLD_INCOME_PATH, series_id)
    df["YEAR"] = df["DATE"].dt.year

    return (
        df[["YEAR", series_id]]
        .rename(columns={series_id: "median_household_income"})
        .drop_duplicates(subset=["YEAR"], keep="last")
        .reset_index(drop=True)
    )


def annual_cpi(flat_file: pd.DataFrame, series_id: Optional[str] = None, period: Optional[str] = None) -> pd.DataFrame:
    """
    Extract the annual-average index for one CPI series from a BLS flat file.

    Args:
        flat_file: series_id, year, period, value (strings)
        series_id: CPI series (default: settings.CPI_SERIES_ID)
        period: Annual-average period code (default: settings.CPI_ANNUAL_PERIOD)

    Returns:
        DataFrame with YEAR, value sorted by descending year
    """
    series_id = series_id or settings.CPI_SERIES_ID
    period = period or settings.CPI_ANNUAL_PERIOD

    rows = flat_file[(flat_file["series_id"] == series_id) & (flat_file["period"] == period)]

    cpi = pd.DataFrame(
        {
            "YEAR": pd.to_numeric(rows["year"]).astype(int),
            "value": pd.to_numeric(rows["value"], errors="coerce"),
        }
    ).dropna(subset=["value"])

    cpi = cpi.sort_values("YEAR", ascending=False).reset_index(drop=True)
    logger.info(f"Extracted {len(cpi)} annual {series_id} values")
    return cpi


def fetch_annual_cpi(url: Optional[str] = None) -> pd.DataFrame:
    """
    Download the BLS CPI flat file and extract the annual average series.

    Raises:
        ExternalFetchError: the download failed
    """
    flat_file = fetch_bls_flat_file(url or settings.BLS_CPI_URL)
    return annual_cpi(flat_file)
