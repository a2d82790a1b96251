"""Pydantic schemas for econ_invest."""

from pydantic import BaseModel, Field

from src.econ_common.cents import cents_to_display
from src.econ_invest.domain.models import Investment, InvestmentProduct


class PurchaseRequest(BaseModel):
    product_id: str
    amount_cents: int = Field(..., gt=0)


class ProductItem(BaseModel):
    product_id: str
    investment_type: str
    name: str
    description: str
    min_amount_cents: int
    max_amount_cents: int
    annual_return: float
    term_months: int | None
    risk_level: str
    min_credit_score: int | None
    min_level: int | None

    @classmethod
    def from_product(cls, product: InvestmentProduct) -> "ProductItem":
        return cls(
            product_id=product.id,
            investment_type=product.investment_type,
            name=product.name,
            description=product.description,
            min_amount_cents=product.min_amount,
            max_amount_cents=product.max_amount,
            annual_return=product.annual_return,
            term_months=product.term_months,
            risk_level=product.risk_level,
            min_credit_score=product.min_credit_score,
            min_level=product.min_level,
        )


class PurchaseResponse(BaseModel):
    investment_id: str
    product_name: str
    principal_cents: int
    expected_return_cents: int
    expected_return_display: str
    maturity_date: str | None


class LiquidationResponse(BaseModel):
    investment_id: str
    payout_cents: int
    payout_display: str
    penalty_cents: int


class HoldingItem(BaseModel):
    investment_id: str
    product_name: str
    investment_type: str
    status: str
    principal_cents: int
    current_value_cents: int
    current_value_display: str
    interest_rate: float
    term_months: int | None
    invested_at: str | None
    maturity_date: str | None
    expected_return_cents: int
    days_remaining: int | None

    @classmethod
    def from_investment(
        cls, investment: Investment, expected: int, days_left: int | None
    ) -> "HoldingItem":
        return cls(
            investment_id=investment.id,
            product_name=investment.product_name,
            investment_type=investment.investment_type,
            status=investment.status,
            principal_cents=investment.principal,
            current_value_cents=investment.current_value,
            current_value_display=cents_to_display(investment.current_value),
            interest_rate=investment.interest_rate,
            term_months=investment.term_months,
            invested_at=investment.invested_at.isoformat() if investment.invested_at else None,
            maturity_date=(
                investment.maturity_date.isoformat() if investment.maturity_date else None
            ),
            expected_return_cents=expected,
            days_remaining=days_left,
        )


class InvestmentPortfolioResponse(BaseModel):
    holdings: list[HoldingItem]
    active_value_cents: int
    active_value_display: str
