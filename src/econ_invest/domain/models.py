"""Domain models for econ_invest: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class InvestmentProduct:
    id: str
    investment_type: str       # InvestmentType value
    name: str
    description: str
    min_amount: int            # cents
    max_amount: int            # cents
    annual_return: float       # %
    term_months: int | None    # None for open-ended products
    risk_level: str            # RiskLevel value
    min_credit_score: int | None = None
    min_level: int | None = None

    def admits(self, level: int, credit_score: int) -> bool:
        if self.min_level is not None and level < self.min_level:
            return False
        if self.min_credit_score is not None and credit_score < self.min_credit_score:
            return False
        return True


@dataclass
class Investment:
    id: str
    account_id: str
    product_id: str
    investment_type: str
    product_name: str
    principal: int             # cents
    current_value: int         # cents
    interest_rate: float       # annual %
    term_months: int | None
    status: str                # InvestmentStatus value
    invested_at: datetime | None = None
    maturity_date: datetime | None = None
    closed_at: datetime | None = None
    # Owner, filled by queries that join the account
    character_id: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"
