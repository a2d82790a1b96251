"""Pydantic schemas for econ_loan."""

from pydantic import BaseModel, Field

from src.econ_common.cents import cents_to_display
from src.econ_common.enums import LoanPurpose
from src.econ_loan.domain.amortization import total_interest
from src.econ_loan.domain.models import Loan, LoanPayment, ScheduleRow


class LoanApplicationRequest(BaseModel):
    amount_cents: int = Field(..., gt=0)
    term_months: int = Field(..., ge=1, le=360)
    purpose: LoanPurpose
    collateral_type: str | None = None
    collateral_value_cents: int = Field(0, ge=0)


class LoanPaymentRequest(BaseModel):
    amount_cents: int = Field(..., gt=0)


class LoanTermsResponse(BaseModel):
    loan_id: str
    principal_cents: int
    principal_display: str
    interest_rate: float
    term_months: int
    monthly_payment_cents: int
    monthly_payment_display: str
    total_interest_cents: int
    total_interest_display: str
    next_payment_due: str | None

    @classmethod
    def from_loan(cls, loan: Loan) -> "LoanTermsResponse":
        interest = total_interest(loan.principal, loan.monthly_payment, loan.term_months)
        return cls(
            loan_id=loan.id,
            principal_cents=loan.principal,
            principal_display=cents_to_display(loan.principal),
            interest_rate=round(loan.interest_rate, 2),
            term_months=loan.term_months,
            monthly_payment_cents=loan.monthly_payment,
            monthly_payment_display=cents_to_display(loan.monthly_payment),
            total_interest_cents=interest,
            total_interest_display=cents_to_display(interest),
            next_payment_due=loan.next_payment_due.isoformat() if loan.next_payment_due else None,
        )


class LoanItem(BaseModel):
    loan_id: str
    status: str
    purpose: str
    principal_cents: int
    remaining_balance_cents: int
    remaining_balance_display: str
    monthly_payment_cents: int
    interest_rate: float
    term_months: int
    next_payment_due: str | None

    @classmethod
    def from_loan(cls, loan: Loan) -> "LoanItem":
        return cls(
            loan_id=loan.id,
            status=loan.status,
            purpose=loan.purpose,
            principal_cents=loan.principal,
            remaining_balance_cents=loan.remaining_balance,
            remaining_balance_display=cents_to_display(loan.remaining_balance),
            monthly_payment_cents=loan.monthly_payment,
            interest_rate=round(loan.interest_rate, 2),
            term_months=loan.term_months,
            next_payment_due=loan.next_payment_due.isoformat() if loan.next_payment_due else None,
        )


class LoanPaymentResponse(BaseModel):
    loan_id: str
    paid_cents: int
    interest_cents: int
    principal_cents: int
    remaining_balance_cents: int
    remaining_balance_display: str
    status: str
    account_balance_cents: int

    @classmethod
    def from_result(
        cls, loan: Loan, payment: LoanPayment, account_balance: int
    ) -> "LoanPaymentResponse":
        return cls(
            loan_id=loan.id,
            paid_cents=payment.payment_amount,
            interest_cents=payment.interest_amount,
            principal_cents=payment.principal_amount,
            remaining_balance_cents=loan.remaining_balance,
            remaining_balance_display=cents_to_display(loan.remaining_balance),
            status=loan.status,
            account_balance_cents=account_balance,
        )


class ScheduleRowItem(BaseModel):
    month: int
    payment_cents: int
    interest_cents: int
    principal_cents: int
    remaining_cents: int

    @classmethod
    def from_row(cls, row: ScheduleRow) -> "ScheduleRowItem":
        return cls(
            month=row.month,
            payment_cents=row.payment,
            interest_cents=row.interest,
            principal_cents=row.principal,
            remaining_cents=row.remaining,
        )


class AmortizationResponse(BaseModel):
    loan_id: str
    rows: list[ScheduleRowItem]
    total_payments_cents: int
    total_interest_cents: int
