"""Loan pricing and amortization.

All money in int cents. The monthly payment is rounded UP and each month's
interest is rounded DOWN, so paying ``monthly_payment`` for ``term_months``
months always clears the balance.
"""

import math
from types import MappingProxyType

from src.econ_loan.domain.models import PaymentSplit, ScheduleRow

MAX_ACTIVE_LOANS = 3
MIN_LOAN_CREDIT_SCORE = 400

PURPOSE_RISK = MappingProxyType({
    "JOB_CHANGE": 0.0,
    "EQUIPMENT": 1.0,
    "BUSINESS": 3.0,
    "INVESTMENT": 5.0,
})

COLLATERAL_DISCOUNT = 2.0


def monthly_rate(annual_rate: float) -> float:
    return annual_rate / 100 / 12


def loan_rate(
    account_rate: float, purpose: str, credit_score: int, has_collateral: bool
) -> float:
    """Account base rate plus a non-negative risk premium."""
    risk = PURPOSE_RISK.get(purpose, 0.0)
    if credit_score < 500:
        risk += 3
    elif credit_score < 600:
        risk += 1
    if has_collateral:
        risk -= COLLATERAL_DISCOUNT
    return account_rate + max(0.0, risk)


def monthly_payment(principal: int, annual_rate: float, term_months: int) -> int:
    """Standard annuity payment P·r·(1+r)^n / ((1+r)^n − 1), rounded up to the cent."""
    r = monthly_rate(annual_rate)
    if r == 0:
        return -(-principal // term_months)
    growth = (1 + r) ** term_months
    exact = principal * r * growth / (growth - 1)
    # Trim float noise before the ceiling so 17081.0000000002 stays 17081
    return math.ceil(round(exact, 6))


def total_interest(principal: int, payment: int, term_months: int) -> int:
    return payment * term_months - principal


def split_payment(remaining: int, annual_rate: float, amount: int) -> PaymentSplit:
    """Divide ``amount`` into this month's interest and principal.

    Any excess over what clears the loan is not charged.
    """
    interest = math.floor(remaining * monthly_rate(annual_rate))
    charged = min(amount, remaining + interest)
    principal = max(0, charged - interest)
    return PaymentSplit(
        charged=charged,
        interest=min(interest, charged),
        principal=principal,
        remaining_after=max(0, remaining - principal),
    )


def amortization_schedule(
    remaining: int, annual_rate: float, payment: int, max_months: int
) -> list[ScheduleRow]:
    """Project the payments left from ``remaining`` at a fixed payment."""
    rows: list[ScheduleRow] = []
    month = 0
    while remaining > 0 and month < max_months:
        month += 1
        split = split_payment(remaining, annual_rate, payment)
        rows.append(
            ScheduleRow(
                month=month,
                payment=split.charged,
                interest=split.interest,
                principal=split.principal,
                remaining=split.remaining_after,
            )
        )
        if split.principal == 0:
            # Payment does not cover interest; the balance would never shrink
            break
        remaining = split.remaining_after
    return rows


def rejection_reason(
    amount: int, credit_limit: int, active_loans: int, credit_score: int
) -> str | None:
    """First eligibility rule the application breaks, or None."""
    if amount > credit_limit:
        return f"amount {amount} exceeds credit limit {credit_limit}"
    if active_loans >= MAX_ACTIVE_LOANS:
        return f"already {active_loans} active loans"
    if credit_score < MIN_LOAN_CREDIT_SCORE:
        return f"credit score {credit_score} below {MIN_LOAN_CREDIT_SCORE}"
    return None
