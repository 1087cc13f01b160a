"""
Generational Housing Affordability - Main Pipeline Orchestration

Builds the generational homeownership and affordability tables from the
CPS ASEC extract and the external price, rate, income and CPI series.

Pipeline stages:
1. Ingestion (microdata, home prices, mortgage rates, household income)
2. Cohort statistics (generation, householder weighted means, adult years)
3. Affordability (home cost index, downpayment burden)
4. Real income vs. home prices (needs the BLS CPI download)
5. CSV export

Usage:
    python src/run_pipeline.py --microdata cps_00013.xml
    python src/run_pipeline.py --microdata cps_00013.csv.gz --skip-cpi
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple

import pandas as pd

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import get_settings
from src.export.csv_export import (
    DOWNPAYMENT_FILE,
    HOME_COST_FILE,
    HOMEOWNERSHIP_FILE,
    INCOME_VS_PRICES_FILE,
    write_table,
)
from src.ingest.external_series import (
    annual_mortgage_rates,
    fetch_annual_cpi,
    mortgage_rate_changes,
    read_home_prices,
    read_median_household_income,
    read_weekly_mortgage_rates,
)
from src.ingest.microdata import load_microdata
from src.processing.affordability import downpayment_proportions, home_cost_index_table
from src.processing.aggregation import household_income_by_generation, homeownership_by_generation
from src.processing.alignment import align_to_adult_years
from src.processing.generations import assign_generations, filter_target_generations
from src.processing.reshape import pivot_by_adult_year
from src.processing.series import income_vs_home_prices, inflation_factors
from src.utils.data_sources import ExternalFetchError
from src.utils.logging import log_stage, setup_logging

logger = setup_logging("pipeline")
settings = get_settings()


def build_cohort_stats(microdata: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Homeownership rate and average household income by generation and adult year.

    Args:
        microdata: Cleaned microdata (see src.ingest.microdata.clean_microdata)

    Returns:
        Tuple of (ownership, income) AlignedStat frames
    """
    cohorts = filter_target_generations(assign_generations(microdata))

    ownership = align_to_adult_years(homeownership_by_generation(cohorts))
    income = align_to_adult_years(household_income_by_generation(cohorts))

    return ownership, income


def build_homeownership_table(ownership: pd.DataFrame) -> pd.DataFrame:
    """Wide homeownership table in percent, one decimal."""
    percent = ownership.assign(OWN_HOME=(ownership["OWN_HOME"] * 100).round(1))
    return pivot_by_adult_year(percent, "OWN_HOME")


def build_home_cost_table(
    home_prices: pd.DataFrame, mortgage_rates: pd.DataFrame, income: pd.DataFrame
) -> pd.DataFrame:
    index = home_cost_index_table(home_prices, mortgage_rates, income)
    return pivot_by_adult_year(index, "home_cost_index")


def build_income_vs_home_prices(
    home_prices: pd.DataFrame, median_income: pd.DataFrame, cpi: pd.DataFrame
) -> pd.DataFrame:
    return income_vs_home_prices(home_prices, median_income, inflation_factors(cpi))


def log_rate_changes(weekly_rates: pd.DataFrame, top_n: int = 5) -> None:
    changes = mortgage_rate_changes(weekly_rates)
    for row in changes.head(top_n).itertuples(index=False):
        logger.info(f"Large 30-year rate change: {row.DATE:%Y-%m-%d} yoy_chg={row.yoy_chg:+.2f}pt")


def run_report(
    microdata_path: Optional[str] = None,
    home_prices_path: Optional[str] = None,
    mortgage_rates_path: Optional[str] = None,
    household_income_path: Optional[str] = None,
    output_dir: Optional[str] = None,
    data_dir: Optional[str] = None,
    skip_cpi: bool = False,
) -> Dict[str, Optional[Path]]:
    """
    Build and write every report table.

    A failed CPI download only skips the inflation-adjusted comparison;
    every other failure propagates.

    Returns:
        Dict mapping output file name -> written path (None when skipped)
    """
    output_dir = output_dir or settings.OUTPUT_DIR
    data_dir = data_dir or settings.DATA_DIR
    outputs: Dict[str, Optional[Path]] = {}

    log_stage(logger, "STAGE 1: INGESTION")
    microdata = load_microdata(microdata_path)
    home_prices = read_home_prices(home_prices_path)
    weekly_rates = read_weekly_mortgage_rates(mortgage_rates_path)
    mortgage_rates = annual_mortgage_rates(weekly_rates)
    median_income = read_median_household_income(household_income_path)
    log_rate_changes(weekly_rates)

    log_stage(logger, "STAGE 2: COHORT STATISTICS")
    ownership, income = build_cohort_stats(microdata)
    outputs[HOMEOWNERSHIP_FILE] = write_table(build_homeownership_table(ownership), HOMEOWNERSHIP_FILE, output_dir)

    log_stage(logger, "STAGE 3: AFFORDABILITY")
    outputs[DOWNPAYMENT_FILE] = write_table(downpayment_proportions(home_prices, income), DOWNPAYMENT_FILE, data_dir)
    outputs[HOME_COST_FILE] = write_table(
        build_home_cost_table(home_prices, mortgage_rates, income), HOME_COST_FILE, output_dir
    )

    log_stage(logger, "STAGE 4: REAL INCOME VS. HOME PRICES")
    outputs[INCOME_VS_PRICES_FILE] = None
    if skip_cpi:
        logger.info("Skipping CPI-adjusted comparison (--skip-cpi)")
    else:
        try:
            cpi = fetch_annual_cpi()
        except ExternalFetchError as e:
            logger.error(f"CPI download failed, skipping {INCOME_VS_PRICES_FILE}: {e}", exc_info=True)
        else:
            comparison = build_income_vs_home_prices(home_prices, median_income, cpi)
            outputs[INCOME_VS_PRICES_FILE] = write_table(comparison, INCOME_VS_PRICES_FILE, output_dir)

    return outputs


def main():
    """Main pipeline orchestration"""

    parser = argparse.ArgumentParser(
        description="Generational Housing Affordability - Report Pipeline"
    )

    parser.add_argument("--microdata", type=str, help="IPUMS CPS DDI xml or CSV extract (default: MICRODATA_PATH)")
    parser.add_argument("--home-prices", type=str, help="Census median new home price workbook")
    parser.add_argument("--mortgage-rates", type=str, help="FRED MORTGAGE30US CSV")
    parser.add_argument("--household-income", type=str, help="FRED MEHOINUSA646N CSV")
    parser.add_argument("--output-dir", type=str, help="Directory for chart tables (default: OUTPUT_DIR)")
    parser.add_argument(
        "--skip-cpi",
        action="store_true",
        help="Skip the BLS CPI download and the inflation-adjusted comparison",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL for this run",
    )

    args = parser.parse_args()

    if args.log_level:
        setup_logging("pipeline", level=args.log_level)

    start_time = datetime.now()
    log_stage(logger, "Generational Housing Affordability - Pipeline Start")
    logger.info(f"Time: {start_time.isoformat()}")
    logger.info(f"Arguments: {vars(args)}")

    try:
        outputs = run_report(
            microdata_path=args.microdata,
            home_prices_path=args.home_prices,
            mortgage_rates_path=args.mortgage_rates,
            household_income_path=args.household_income,
            output_dir=args.output_dir,
            skip_cpi=args.skip_cpi,
        )

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        sys.exit(130)

    except Exception as e:
        logger.error(f"Pipeline failed with unhandled exception: {e}", exc_info=True)
        sys.exit(1)

    duration = (datetime.now() - start_time).total_seconds()
    written = [name for name, path in outputs.items() if path is not None]

    log_stage(logger, "PIPELINE COMPLETE")
    logger.info(f"Tables written: {written}")
    logger.info(f"Duration: {duration:.1f} seconds")

    sys.exit(0)


if __name__ == "__main__":
    main()
