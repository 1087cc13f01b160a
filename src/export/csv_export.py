"""
Generational Housing Affordability - CSV Export
Writes the derived tables consumed by the charts

Outputs:
- visualizations/home_own_gen_dw.csv
- visualizations/home_cost_dw.csv
- visualizations/hh_income_vs_home_prices_dw.csv
- data/gen_downpmt_prop.csv
"""

import os
from pathlib import Path
from typing import Optional

import pandas as pd

from config.settings import get_settings
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

HOMEOWNERSHIP_FILE = "home_own_gen_dw.csv"
HOME_COST_FILE = "home_cost_dw.csv"
DOWNPAYMENT_FILE = "gen_downpmt_prop.csv"
INCOME_VS_PRICES_FILE = "hh_income_vs_home_prices_dw.csv"


def write_table(df: pd.DataFrame, filename: str, output_dir: Optional[str] = None) -> Path:
    """
    Write a table as CSV.

    Missing cells are written as "NA". Row order is preserved, so identical
    input produces identical bytes.

    Args:
        df: Table to write
        filename: File name within output_dir
        output_dir: Target directory (default: settings.OUTPUT_DIR)

    Returns:
        Path of the written file
    """
    output_dir = output_dir or settings.OUTPUT_DIR
    os.makedirs(output_dir, exist_ok=True)

    path = Path(output_dir) / filename
    df.to_csv(path, index=False, na_rep="NA", lineterminator="\n")

    logger.info(f"Wrote {len(df)} rows to {path}")
    return path
