"""
Generational Housing Affordability - Survey Microdata Ingestion

Reads an IPUMS CPS ASEC extract, either the native DDI codebook + data file
(via ipumspy) or a CSV export of the same extract, and prepares it for the
cohort statistics:

- Keep the columns the statistics use
- Convert the HHINCOME N.I.U. sentinel (99999999) to a null, once, here
- Coerce codes to integers and weights to floats

Extract variables: YEAR, SERIAL, MONTH, CPSID, ASECFLAG, HFLAG, ASECWTH,
PERNUM, CPSIDP, ASECWT, CPI99, RELATE, AGE, OWNERSHP, HHINCOME.
"""

from pathlib import Path
from typing import Optional

import pandas as pd
from ipumspy import readers

from config.settings import (
    HHINCOME_MISSING,
    MICRODATA_REQUIRED_COLUMNS,
    get_settings,
)
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

OPTIONAL_COLUMNS = ["ASECWT"]


def read_ipums_extract(ddi_path: str, data_path: Optional[str] = None) -> pd.DataFrame:
    """
    Read an IPUMS extract from its DDI codebook.

    Args:
        ddi_path: Path to the extract's DDI xml (e.g., cps_00013.xml)
        data_path: Data file path (default: the file named in the DDI, next to it)

    Returns:
        Raw microdata DataFrame
    """
    logger.info(f"Reading IPUMS DDI: {ddi_path}")
    ddi = readers.read_ipums_ddi(ddi_path)

    if data_path is None:
        data_path = Path(ddi_path).parent / ddi.file_description.filename

    df = readers.read_microdata(ddi, data_path)
    logger.info(f"Read {len(df)} microdata records from {data_path}")
    return df


def read_microdata_file(path: str) -> pd.DataFrame:
    """
    Read a microdata extract, dispatching on file type.

    Args:
        path: DDI xml, or CSV (optionally gzip-compressed) extract

    Returns:
        Raw microdata DataFrame
    """
    suffixes = [s.lower() for s in Path(path).suffixes]

    if suffixes and suffixes[-1] == ".xml":
        return read_ipums_extract(path)

    if ".csv" in suffixes:
        df = pd.read_csv(path, usecols=lambda c: c.upper() in MICRODATA_REQUIRED_COLUMNS + OPTIONAL_COLUMNS)
        df.columns = [c.upper() for c in df.columns]
        logger.info(f"Read {len(df)} microdata records from {path}")
        return df

    raise ValueError(f"Unsupported microdata file type: {path}")


def clean_microdata(df: pd.DataFrame) -> pd.DataFrame:
    """
    Select and type the microdata columns used downstream.

    Args:
        df: Raw extract

    Returns:
        DataFrame with integer codes, float weights and HHINCOME as a
        nullable integer (missing = <NA>)
    """
    missing = [c for c in MICRODATA_REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Microdata extract missing required columns: {missing}")

    columns = MICRODATA_REQUIRED_COLUMNS + [c for c in OPTIONAL_COLUMNS if c in df.columns]
    cleaned = df[columns].copy()

    for column in ["YEAR", "AGE", "RELATE", "OWNERSHP"]:
        cleaned[column] = cleaned[column].astype(int)

    income = pd.to_numeric(cleaned["HHINCOME"], errors="coerce").astype("Int64")
    cleaned["HHINCOME"] = income.mask((income == HHINCOME_MISSING).fillna(False))

    for column in ["ASECWTH"] + [c for c in OPTIONAL_COLUMNS if c in cleaned.columns]:
        cleaned[column] = pd.to_numeric(cleaned[column], errors="coerce").fillna(0.0).clip(lower=0.0)

    logger.info(
        f"Cleaned {len(cleaned)} microdata records "
        f"({int(cleaned['HHINCOME'].isna().sum())} with missing household income)"
    )
    return cleaned


def load_microdata(path: Optional[str] = None) -> pd.DataFrame:
    """
    Read and clean the configured survey extract.

    Args:
        path: Extract path (default: settings.MICRODATA_PATH)
    """
    path = path or settings.MICRODATA_PATH
    if not path:
        raise ValueError("No microdata extract configured (set MICRODATA_PATH)")

    return clean_microdata(read_microdata_file(path))
