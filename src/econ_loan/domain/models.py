"""Domain models for econ_loan: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Loan:
    id: str
    account_id: str
    principal: int             # cents
    interest_rate: float       # annual %
    term_months: int
    monthly_payment: int       # cents, rounded up
    remaining_balance: int     # cents
    status: str                # LoanStatus value
    purpose: str               # LoanPurpose value
    collateral_type: str | None = None
    collateral_value: int = 0
    next_payment_due: datetime | None = None
    approved_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"


@dataclass
class LoanPayment:
    id: int
    loan_id: str
    payment_amount: int
    principal_amount: int
    interest_amount: int
    payment_type: str          # REGULAR | PAYOFF
    created_at: datetime | None = None


@dataclass(frozen=True)
class PaymentSplit:
    """How one payment divides between interest and principal."""

    charged: int
    interest: int
    principal: int
    remaining_after: int


@dataclass(frozen=True)
class ScheduleRow:
    month: int
    payment: int
    interest: int
    principal: int
    remaining: int
