"""Tests for econ_invest.domain.valuation and catalog."""

import random
from datetime import UTC, datetime, timedelta

import pytest

from src.econ_invest.domain.catalog import PRODUCTS, available_products, get_product
from src.econ_invest.domain.models import Investment
from src.econ_invest.domain.valuation import (
    days_remaining,
    expected_return,
    liquidation_value,
    market_linked_value,
    maturity_value,
    sample_variation,
)

NOW = datetime(2026, 6, 1, tzinfo=UTC)


def _make_investment(kind: str = "FIXED_DEPOSIT", **kwargs) -> Investment:
    return Investment(
        id="INV-1",
        account_id="ACC-1",
        product_id="p",
        investment_type=kind,
        product_name="Product",
        principal=kwargs.get("principal", 100000),
        current_value=kwargs.get("current_value", 100000),
        interest_rate=kwargs.get("rate", 4.0),
        term_months=kwargs.get("term_months", 12),
        status="ACTIVE",
        invested_at=kwargs.get("invested_at", NOW - timedelta(days=365)),
    )


class _FixedRandom(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__(0)
        self._value = value

    def random(self) -> float:
        return self._value


class TestExpectedReturn:
    def test_simple_interest_over_term(self) -> None:
        # 100000 × 3.5% × 3/12 = 875
        assert expected_return(100000, 3.5, 3) == 100875

    def test_open_ended_returns_principal(self) -> None:
        assert expected_return(100000, 10.0, None) == 100000


class TestLiquidationValue:
    def test_fixed_deposit_two_percent_penalty(self) -> None:
        assert liquidation_value(_make_investment(), NOW) == 98000

    def test_bond_keeps_most_of_accrued_interest(self) -> None:
        # 365 days at 4% = 4000 accrued, 80% kept
        inv = _make_investment("GOVERNMENT_BOND")
        assert liquidation_value(inv, NOW) == 103200

    def test_mutual_fund_exit_fee(self) -> None:
        inv = _make_investment("MUTUAL_FUND", current_value=200000, term_months=None)
        assert liquidation_value(inv, NOW) == 194000

    def test_insurance_early_surrender(self) -> None:
        inv = _make_investment("LIFE_INSURANCE", invested_at=NOW - timedelta(days=30))
        assert liquidation_value(inv, NOW) == 70000

    def test_insurance_after_a_year(self) -> None:
        inv = _make_investment("LIFE_INSURANCE", invested_at=NOW - timedelta(days=400))
        assert liquidation_value(inv, NOW) == 90000


class TestMaturityValue:
    def test_fixed_income_pays_agreed_interest(self) -> None:
        assert maturity_value(_make_investment(rate=5.0)) == 105000

    def test_market_linked_pays_current_value(self) -> None:
        inv = _make_investment("MUTUAL_FUND", current_value=123456)
        assert maturity_value(inv) == 123456


class TestMarketLinked:
    def test_no_time_no_change(self) -> None:
        assert market_linked_value(100000, 10.0, 0, 0.1) == 100000

    def test_one_day_growth(self) -> None:
        # daily 36.5% / 365 = 0.1%
        assert market_linked_value(100000, 36.5, 1, 0.0) == 100100

    def test_variation_bounds(self) -> None:
        assert sample_variation(_FixedRandom(1.0), "MUTUAL_FUND") == pytest.approx(0.15)
        assert sample_variation(_FixedRandom(0.0), "MUTUAL_FUND") == pytest.approx(-0.15)
        assert sample_variation(_FixedRandom(0.5), "INVESTMENT_INSURANCE") == pytest.approx(0.0)


class TestDaysRemaining:
    def test_partial_day_counts(self) -> None:
        assert days_remaining(NOW + timedelta(hours=1), NOW) == 1

    def test_past_maturity(self) -> None:
        assert days_remaining(NOW - timedelta(days=3), NOW) == 0

    def test_open_ended(self) -> None:
        assert days_remaining(None, NOW) is None


class TestCatalog:
    def test_twelve_products_unique_ids(self) -> None:
        assert len({p.id for p in PRODUCTS}) == len(PRODUCTS)

    def test_lookup(self) -> None:
        assert get_product("fd-3m").term_months == 3
        assert get_product("nope") is None

    def test_gated_products_hidden_from_beginners(self) -> None:
        ids = {p.id for p in available_products(level=1, credit_score=500)}
        assert "fd-3m" in ids
        assert "corp-bond-aa" not in ids
        assert "mutual-aggressive" not in ids

    def test_veteran_sees_everything(self) -> None:
        assert len(available_products(level=99, credit_score=850)) == len(PRODUCTS)
