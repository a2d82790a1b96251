"""Pydantic schemas for econ_orchestrator."""

from pydantic import BaseModel, Field

from src.econ_bank.application.schemas import AccountResponse
from src.econ_common.cents import cents_to_display
from src.econ_common.enums import CharacterClass, PaymentType
from src.econ_invest.application.schemas import HoldingItem
from src.econ_loan.application.schemas import LoanItem
from src.econ_market.application.schemas import StockPortfolioResponse
from src.econ_orchestrator.domain.models import PaymentOption, ServiceAppointment
from src.econ_supply.application.schemas import GiftItemResponse, SupplierResponse


class ServiceRequest(BaseModel):
    target_class: CharacterClass
    npc_id: str = Field(..., min_length=1, max_length=64)
    payment_type: PaymentType
    term_months: int | None = Field(None, ge=1, le=360)


class PaymentOptionItem(BaseModel):
    payment_type: str
    description: str
    upfront_cost_cents: int
    total_cost_cents: int
    requires_approval: bool
    eligible: bool
    terms: dict

    @classmethod
    def from_option(cls, option: PaymentOption) -> "PaymentOptionItem":
        return cls(
            payment_type=option.payment_type,
            description=option.description,
            upfront_cost_cents=option.upfront_cost,
            total_cost_cents=option.total_cost,
            requires_approval=option.requires_approval,
            eligible=option.eligible,
            terms=dict(option.terms),
        )


class ServicePackageResponse(BaseModel):
    target_class: str
    base_cost_cents: int
    gifts_cost_cents: int
    total_cost_cents: int
    total_cost_display: str
    gifts: list[GiftItemResponse]
    recommended_supplier: SupplierResponse | None
    payment_options: list[PaymentOptionItem]


class ServiceResultResponse(BaseModel):
    appointment_id: str
    target_class: str
    total_cost_cents: int
    total_cost_display: str
    payment_method: str
    scheduled_at: str
    balance_cents: int
    loan_id: str | None = None
    installment_plan_id: str | None = None
    purchase_order_id: str | None = None


class AppointmentItem(BaseModel):
    appointment_id: str
    target_class: str
    npc_id: str
    total_cost_cents: int
    payment_method: str
    status: str
    scheduled_at: str

    @classmethod
    def from_appointment(cls, appointment: ServiceAppointment) -> "AppointmentItem":
        return cls(
            appointment_id=appointment.id,
            target_class=appointment.target_class,
            npc_id=appointment.npc_id,
            total_cost_cents=appointment.total_cost,
            payment_method=appointment.payment_method,
            status=appointment.status,
            scheduled_at=appointment.scheduled_at.isoformat(),
        )


class CharacterStatusResponse(BaseModel):
    character_id: str
    account: AccountResponse
    loans: list[LoanItem]
    investments: list[HoldingItem]
    stock_portfolio: StockPortfolioResponse
    appointments: list[AppointmentItem]
    credit_score: int
    net_worth_cents: int
    net_worth_display: str

    @classmethod
    def build(
        cls,
        character_id: str,
        account: AccountResponse,
        loans: list[LoanItem],
        investments: list[HoldingItem],
        stock_portfolio: StockPortfolioResponse,
        appointments: list[AppointmentItem],
        net_worth: int,
    ) -> "CharacterStatusResponse":
        return cls(
            character_id=character_id,
            account=account,
            loans=loans,
            investments=investments,
            stock_portfolio=stock_portfolio,
            appointments=appointments,
            credit_score=account.credit_score,
            net_worth_cents=net_worth,
            net_worth_display=cents_to_display(net_worth),
        )


class MarketSection(BaseModel):
    company_count: int
    total_market_cap_cents: int
    average_change_percent: float
    active_events: int


class BankingSection(BaseModel):
    total_accounts: int
    active_accounts: int
    total_deposits_cents: int
    active_loans: int
    outstanding_loans_cents: int
    active_investments: int
    invested_value_cents: int


class ClassCount(BaseModel):
    target_class: str
    services: int


class ServiceSection(BaseModel):
    total_revenue_cents: int
    popular_classes: list[ClassCount]
    average_cost_cents: int


class SupplySection(BaseModel):
    active_suppliers: int
    recent_orders: int
    recent_order_value_cents: int


class EconomicReportResponse(BaseModel):
    generated_at: str
    market: MarketSection
    banking: BankingSection
    services: ServiceSection
    supply: SupplySection


class StepOutcome(BaseModel):
    step: str
    ok: bool
    detail: str


class MaintenanceReport(BaseModel):
    kind: str
    started_at: str
    finished_at: str
    steps: list[StepOutcome]

    @property
    def failed_steps(self) -> list[str]:
        return [s.step for s in self.steps if not s.ok]
