"""
Generational Housing Affordability - Application Settings
Manages environment variables and configuration using Pydantic
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Optional
import os


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field has a default so the report can be built from the
    standard file layout without a .env file.

    Optional:
        - MICRODATA_PATH (IPUMS CPS DDI xml or CSV extract)
        - BLS_USER_AGENT (contact address BLS asks scripted clients to send)
    """

    # Application
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # File storage
    DATA_DIR: str = "data"
    OUTPUT_DIR: str = "visualizations"
    LOG_DIR: str = "logs"

    # Input files
    MICRODATA_PATH: Optional[str] = None
    HOME_PRICES_PATH: str = "data/usprice_cust.xls"
    HOME_PRICES_SHEET: str = "Price Ann"
    HOME_PRICES_SKIP_ROWS: int = 4
    MORTGAGE_RATES_PATH: str = "data/MORTGAGE30US.csv"
    HOUSEHOLD_INCOME_PATH: str = "data/MEHOINUSA646N.csv"

    # BLS flat-file CPI database
    BLS_CPI_URL: str = "https://download.bls.gov/pub/time.series/cu/cu.data.1.AllItems"
    BLS_USER_AGENT: str = "generational-housing-report"
    CPI_SERIES_ID: str = "CUUR0000SA0"  # CPI-U, U.S. city average, all items
    CPI_ANNUAL_PERIOD: str = "M13"  # BLS code for the annual average
    REQUEST_TIMEOUT: int = 60

    # Cohort alignment
    MIN_ADULT_YEAR: int = 18
    WEIGHT_COLUMN: str = "ASECWTH"

    # Downpayment snapshot (years bracket the early-90s, the 2006 peak and 2022)
    DOWNPAYMENT_SNAPSHOT_YEARS: List[int] = [1990, 2006, 2022]
    DOWNPAYMENT_ADULT_YEAR: int = 26  # ninth year of adulthood
    DOWNPAYMENT_SHARE: float = 0.20

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Create directories if they don't exist
        os.makedirs(self.OUTPUT_DIR, exist_ok=True)
        os.makedirs(self.LOG_DIR, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached settings instance.
    Uses lru_cache to avoid re-reading .env on every call.
    """
    return Settings()


# IPUMS CPS codes used by the cohort statistics
HOUSEHOLDER_RELATE_CODE = 101  # RELATE: head/householder
OWNER_OCCUPIED_CODE = 10  # OWNERSHP: owned or being bought
HHINCOME_MISSING = 99999999  # HHINCOME: N.I.U.

# Microdata columns the core logic reads
MICRODATA_REQUIRED_COLUMNS = ["YEAR", "AGE", "RELATE", "OWNERSHP", "HHINCOME", "ASECWTH"]
