"""Service pricing and the payment options a character is offered.

Options are evaluated up front against the character's current account and
stock portfolio; ``process_service`` re-checks the chosen one inside its unit.
"""

from datetime import timedelta
from types import MappingProxyType

from src.econ_bank.domain.models import Account
from src.econ_common.cents import gold_to_cents, round_cents
from src.econ_loan.domain.amortization import loan_rate, monthly_payment
from src.econ_orchestrator.domain.models import PaymentOption

BASE_SERVICE_COST = MappingProxyType({
    "NOVICE": 0,
    "WARRIOR": gold_to_cents(1_000),
    "MAGE": gold_to_cents(1_500),
    "ARCHER": gold_to_cents(1_200),
    "ROGUE": gold_to_cents(800),
})

LOAN_MIN_CREDIT_SCORE = 500
LOAN_TERM_MONTHS = 12
INSTALLMENT_COUNT = 3
INSTALLMENT_SURCHARGE = 5.0         # %
COLLATERAL_COVERAGE = 120           # % of the service total
BACKED_LOAN_TERM_MONTHS = 6
PORTFOLIO_COLLATERAL = "INVESTMENT_PORTFOLIO"
APPOINTMENT_DELAY = timedelta(hours=24)


def base_service_cost(target_class: str) -> int:
    return BASE_SERVICE_COST.get(target_class, 0)


def installment_total(total: int) -> int:
    return round_cents(total * (1 + INSTALLMENT_SURCHARGE / 100))


def installment_amount(total: int) -> int:
    """Each of the equal parts, rounded up so the parts cover the plan total."""
    return -(-installment_total(total) // INSTALLMENT_COUNT)


def portfolio_covers(portfolio_value: int, total: int) -> bool:
    return portfolio_value * 100 >= total * COLLATERAL_COVERAGE


def _loan_terms(account: Account | None, total: int, term: int, collateral: bool) -> dict:
    if account is None:
        return {"term_months": term}
    rate = loan_rate(account.interest_rate, "JOB_CHANGE", account.credit_score, collateral)
    payment = monthly_payment(total, rate, term)
    return {
        "term_months": term,
        "interest_rate": round(rate, 4),
        "monthly_payment": payment,
        "total_repayment": payment * term,
    }


def payment_options(
    total: int, account: Account | None, portfolio_value: int
) -> list[PaymentOption]:
    balance = account.balance if account and account.is_active else 0
    score = account.credit_score if account and account.is_active else 0
    loan = _loan_terms(account, total, LOAN_TERM_MONTHS, False)
    backed = _loan_terms(account, total, BACKED_LOAN_TERM_MONTHS, True)
    part = installment_amount(total)
    return [
        PaymentOption(
            payment_type="FULL_PAYMENT",
            description="Pay the full amount now",
            upfront_cost=total,
            total_cost=total,
            requires_approval=False,
            eligible=balance >= total,
        ),
        PaymentOption(
            payment_type="LOAN",
            description=f"Bank loan over {LOAN_TERM_MONTHS} months",
            upfront_cost=0,
            total_cost=loan.get("total_repayment", total),
            requires_approval=True,
            eligible=score >= LOAN_MIN_CREDIT_SCORE,
            terms=loan,
        ),
        PaymentOption(
            payment_type="INSTALLMENT",
            description=f"{INSTALLMENT_COUNT} installments, {INSTALLMENT_SURCHARGE:g}% surcharge",
            upfront_cost=part,
            total_cost=installment_total(total),
            requires_approval=False,
            eligible=balance >= part,
            terms={"installments": INSTALLMENT_COUNT, "installment_amount": part},
        ),
        PaymentOption(
            payment_type="INVESTMENT_BACKED",
            description="Loan secured by your stock portfolio",
            upfront_cost=0,
            total_cost=backed.get("total_repayment", total),
            requires_approval=True,
            eligible=account is not None and portfolio_covers(portfolio_value, total),
            terms={**backed, "required_portfolio_value": -(-total * COLLATERAL_COVERAGE // 100)},
        ),
    ]
