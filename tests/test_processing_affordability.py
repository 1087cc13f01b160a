"""
Tests for the affordability index engine

Run with: pytest tests/test_processing_affordability.py -v
"""

import numpy as np
import pandas as pd
import pytest

from src.processing.affordability import (
    HOUSING_BURDEN_MULTIPLIER,
    INSURANCE_TAX_MONTHLY_RATE,
    amortized_monthly_payment,
    downpayment_proportions,
    home_cost_index,
    home_cost_index_table,
    required_annual_cost,
)


class TestMortgageMath:
    """Test the amortization and index formulas"""

    def test_published_constants(self):
        assert HOUSING_BURDEN_MULTIPLIER == 3.33
        assert INSURANCE_TAX_MONTHLY_RATE == 0.00558

    def test_amortized_payment_known_value(self):
        # $200k at 6% over 30 years: $1,199.10/month
        assert amortized_monthly_payment(200000, 0.06) == pytest.approx(1199.10, abs=0.01)

    def test_amortized_payment_zero_rate(self):
        assert amortized_monthly_payment(360000, 0.0) == pytest.approx(1000.0)

    def test_amortized_payment_series_keeps_index(self):
        principal = pd.Series([100000.0, 200000.0], index=[5, 7])
        rates = pd.Series([0.06, 0.06], index=[5, 7])

        result = amortized_monthly_payment(principal, rates)

        assert list(result.index) == [5, 7]
        assert result.loc[7] == pytest.approx(2 * result.loc[5])

    def test_required_annual_cost(self):
        principal = 200000 * 0.9
        expected = (amortized_monthly_payment(principal, 0.06) + principal * 0.00558) * 3.33 * 12

        assert required_annual_cost(200000, 0.06) == pytest.approx(expected)

    def test_index_is_100_when_income_covers_cost(self):
        income = required_annual_cost(250000, 0.07)
        assert home_cost_index(income, 250000, 0.07) == pytest.approx(100.0)

    def test_index_scale_invariance(self):
        """Doubling income and price together leaves the index unchanged"""
        base = home_cost_index(50000, 200000, 0.05)
        scaled = home_cost_index(100000, 400000, 0.05)

        assert scaled == pytest.approx(base)

    def test_higher_rate_is_less_affordable(self):
        assert home_cost_index(60000, 300000, 0.07) < home_cost_index(60000, 300000, 0.03)


class TestHomeCostIndexTable:
    """Test the joined cohort index"""

    def test_inner_join_drops_incomplete_years(
        self, sample_home_prices, sample_mortgage_rates, sample_income_by_gen
    ):
        result = home_cost_index_table(sample_home_prices, sample_mortgage_rates, sample_income_by_gen)

        assert list(result.columns) == ["adult_yr", "generation", "home_cost_index"]
        # 1991 and 2007 have no price/rate rows
        assert len(result) == 3
        boomers = result[result["generation"] == "Baby Boomer"].iloc[0]
        assert boomers["home_cost_index"] == pytest.approx(home_cost_index(40000.0, 122900.0, 0.1013))

    def test_missing_rate_value_excludes_year(
        self, sample_home_prices, sample_mortgage_rates, sample_income_by_gen
    ):
        rates = sample_mortgage_rates.copy()
        rates.loc[rates["YEAR"] == 2006, "interest_rate"] = np.nan

        result = home_cost_index_table(sample_home_prices, rates, sample_income_by_gen)

        assert "Gen X" not in set(result["generation"])


class TestDownpaymentProportions:
    """Test the downpayment burden snapshot"""

    def test_ratio_example(self):
        prices = pd.DataFrame({"YEAR": [2000], "median_home_price": [200000.0]})
        income = pd.DataFrame({
            "YEAR": [2000], "generation": ["Gen X"], "AVG_HH_INCOME": [50000.0], "adult_yr": [20],
        })

        result = downpayment_proportions(prices, income, snapshot_years=[2000], adult_year=20)

        assert result["twenty_pct_downpmt_prop"].iloc[0] == pytest.approx(0.8)

    def test_snapshot_years_and_ninth_adult_year(self, sample_home_prices, sample_income_by_gen):
        result = downpayment_proportions(
            sample_home_prices, sample_income_by_gen, snapshot_years=[1990, 2006, 2022], adult_year=26
        )

        assert list(result.columns) == [
            "YEAR", "median_home_price", "generation", "AVG_HH_INCOME", "adult_yr", "twenty_pct_downpmt_prop",
        ]
        assert result["generation"].tolist() == ["Baby Boomer", "Gen X", "Millennial"]
        assert result["twenty_pct_downpmt_prop"].tolist() == pytest.approx([
            122900.0 * 0.2 / 40000.0,
            246500.0 * 0.2 / 70000.0,
            457800.0 * 0.2 / 95000.0,
        ])

    def test_defaults_from_settings(self, monkeypatch, sample_home_prices, sample_income_by_gen):
        import src.processing.affordability as aff

        monkeypatch.setattr(aff.settings, "DOWNPAYMENT_SNAPSHOT_YEARS", [2006], raising=False)
        monkeypatch.setattr(aff.settings, "DOWNPAYMENT_ADULT_YEAR", 26, raising=False)
        monkeypatch.setattr(aff.settings, "DOWNPAYMENT_SHARE", 0.1, raising=False)

        result = aff.downpayment_proportions(sample_home_prices, sample_income_by_gen)

        assert result["generation"].tolist() == ["Gen X"]
        assert result["twenty_pct_downpmt_prop"].iloc[0] == pytest.approx(246500.0 * 0.1 / 70000.0)
