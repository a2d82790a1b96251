"""Investment valuation: expected return, early liquidation, maturity, drift.

All results in int cents.
"""

import random
from datetime import datetime
from types import MappingProxyType

from src.econ_common.cents import round_cents
from src.econ_common.datetime_utils import days_between
from src.econ_invest.domain.models import Investment

FIXED_INCOME_TYPES = frozenset({"FIXED_DEPOSIT", "GOVERNMENT_BOND", "CORPORATE_BOND"})
BOND_TYPES = frozenset({"GOVERNMENT_BOND", "CORPORATE_BOND"})
INSURANCE_TYPES = frozenset({"LIFE_INSURANCE", "INVESTMENT_INSURANCE"})

# Daily revaluation band per market-linked product type
VARIATION_BANDS = MappingProxyType({
    "MUTUAL_FUND": 0.15,
    "INVESTMENT_INSURANCE": 0.08,
})

BOND_ACCRUAL_KEPT = 0.8
MUTUAL_FUND_KEPT = 0.97
DEFAULT_KEPT = 0.95


def expected_return(principal: int, annual_rate: float, term_months: int | None) -> int:
    """Simple interest over the term; open-ended products return the principal."""
    if not term_months:
        return principal
    return principal + round_cents(principal * annual_rate / 100 * term_months / 12)


def accrued_interest(principal: int, annual_rate: float, days: int) -> float:
    return principal * annual_rate / 100 / 365 * days


def liquidation_value(investment: Investment, now: datetime) -> int:
    """What an early exit pays out, by product type."""
    held_days = days_between(investment.invested_at or now, now)
    kind = investment.investment_type
    if kind == "FIXED_DEPOSIT":
        return investment.principal * 98 // 100
    if kind in BOND_TYPES:
        earned = accrued_interest(investment.principal, investment.interest_rate, held_days)
        return investment.principal + round_cents(earned * BOND_ACCRUAL_KEPT)
    if kind == "MUTUAL_FUND":
        return round_cents(investment.current_value * MUTUAL_FUND_KEPT)
    if kind in INSURANCE_TYPES:
        kept = 0.7 if held_days < 365 else 0.9
        return round_cents(investment.principal * kept)
    return round_cents(investment.principal * DEFAULT_KEPT)


def maturity_value(investment: Investment) -> int:
    """Fixed income pays the agreed simple interest; everything else its current value."""
    if investment.investment_type in FIXED_INCOME_TYPES and investment.term_months:
        return expected_return(
            investment.principal, investment.interest_rate, investment.term_months
        )
    return investment.current_value


def sample_variation(rng: random.Random, investment_type: str) -> float:
    """Uniform draw in [-band, +band] for the product type."""
    band = VARIATION_BANDS.get(investment_type, 0.1)
    return (rng.random() - 0.5) * 2 * band


def market_linked_value(
    principal: int, annual_rate: float, days: int, variation: float
) -> int:
    """principal × (1 + daily × (1 + variation))^days."""
    daily = annual_rate / 100 / 365 * (1 + variation)
    return round_cents(principal * (1 + daily) ** days)


def days_remaining(maturity_date: datetime | None, now: datetime) -> int | None:
    if maturity_date is None:
        return None
    seconds = (maturity_date - now).total_seconds()
    # Partial days count as a whole day left
    return max(0, -int(-seconds // 86400))
