"""
Generational Housing Affordability - Data Source Utilities
Helper functions for downloading open data files over HTTP
"""

import io

import pandas as pd
import requests

from config.settings import get_settings
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


class ExternalFetchError(RuntimeError):
    """Raised when a remote data file cannot be retrieved."""


def fetch_bls_flat_file(url: str, user_agent: str = None, timeout: int = None) -> pd.DataFrame:
    """
    Fetch a BLS time.series flat file as a string-typed DataFrame.

    BLS rejects scripted requests without an identifying User-Agent, so one
    is always sent. Columns and values are whitespace-stripped.

    Args:
        url: Flat file URL (e.g., .../cu/cu.data.1.AllItems)
        user_agent: User-Agent header (default: settings.BLS_USER_AGENT)
        timeout: Request timeout in seconds (default: settings.REQUEST_TIMEOUT)

    Returns:
        DataFrame with every column as str

    Raises:
        ExternalFetchError: transport failure or non-success status
    """
    user_agent = user_agent or settings.BLS_USER_AGENT
    timeout = timeout or settings.REQUEST_TIMEOUT

    logger.info(f"Fetching BLS flat file: {url}")

    try:
        response = requests.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error(f"BLS flat file request failed: {e}")
        raise ExternalFetchError(f"Failed to fetch {url}: {e}") from e

    df = pd.read_csv(
        io.StringIO(response.text),
        sep="\t",
        dtype=str,
        keep_default_na=False,
    )
    df.columns = [c.strip() for c in df.columns]
    for column in df.columns:
        df[column] = df[column].str.strip()

    logger.info(f"Fetched {len(df)} rows from BLS flat file")
    return df
