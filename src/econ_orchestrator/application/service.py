"""IntegrationService: cross-subsystem job-change services, status, and maintenance.

Every subsystem is reached through its application service so money still
moves only through the account ledger. ``process_service`` composes the
no-commit steps of those services into one unit; maintenance runs each
step as its own pass and records the outcome instead of stopping.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_bank.application.schemas import AccountResponse
from src.econ_bank.application.service import BankApplicationService
from src.econ_bank.domain.models import Account
from src.econ_bank.domain.repository import AccountRepositoryProtocol
from src.econ_bank.infrastructure.persistence import AccountRepository
from src.econ_common.cents import cents_to_display
from src.econ_common.datetime_utils import utc_now
from src.econ_common.enums import (
    CharacterClass,
    LoanPurpose,
    PaymentType,
    TransactionType,
)
from src.econ_common.errors import (
    AccountNotFoundError,
    InvalidParameterError,
    PaymentIneligibleError,
    UnsupportedPaymentTypeError,
)
from src.econ_common.id_generator import generate_id
from src.econ_common.response import OperationResult
from src.econ_common.unit_of_work import run_operation
from src.econ_events.application.service import EventApplicationService
from src.econ_events.domain.repository import EventRepositoryProtocol
from src.econ_events.infrastructure.persistence import EventRepository
from src.econ_invest.application.schemas import HoldingItem
from src.econ_invest.application.service import InvestmentApplicationService
from src.econ_invest.domain.valuation import days_remaining, expected_return
from src.econ_loan.application.schemas import LoanItem
from src.econ_loan.application.service import LoanApplicationService
from src.econ_market.application.service import MarketApplicationService
from src.econ_orchestrator.application.schemas import (
    AppointmentItem,
    BankingSection,
    CharacterStatusResponse,
    ClassCount,
    EconomicReportResponse,
    MaintenanceReport,
    MarketSection,
    PaymentOptionItem,
    ServicePackageResponse,
    ServiceResultResponse,
    ServiceSection,
    StepOutcome,
    SupplySection,
)
from src.econ_orchestrator.domain.models import InstallmentPlan, ServiceAppointment
from src.econ_orchestrator.domain.payment import (
    APPOINTMENT_DELAY,
    BACKED_LOAN_TERM_MONTHS,
    INSTALLMENT_COUNT,
    LOAN_MIN_CREDIT_SCORE,
    LOAN_TERM_MONTHS,
    PORTFOLIO_COLLATERAL,
    base_service_cost,
    installment_amount,
    installment_total,
    payment_options,
    portfolio_covers,
)
from src.econ_orchestrator.domain.repository import ServiceRepositoryProtocol
from src.econ_orchestrator.infrastructure.persistence import ServiceRepository
from src.econ_supply.application.schemas import GiftItemResponse, SupplierResponse
from src.econ_supply.application.service import SupplyApplicationService

logger = logging.getLogger(__name__)

REPORT_WINDOW = timedelta(days=7)
POPULAR_CLASSES = 3


def _target_class(value: str) -> str:
    try:
        return CharacterClass(value).value
    except ValueError:
        raise InvalidParameterError(f"target_class {value}") from None


class IntegrationService:
    def __init__(
        self,
        repo: ServiceRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        events_repo: EventRepositoryProtocol | None = None,
        bank: BankApplicationService | None = None,
        loans: LoanApplicationService | None = None,
        invest: InvestmentApplicationService | None = None,
        market: MarketApplicationService | None = None,
        events: EventApplicationService | None = None,
        supply: SupplyApplicationService | None = None,
    ) -> None:
        self._repo: ServiceRepositoryProtocol = repo or ServiceRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._events_repo: EventRepositoryProtocol = events_repo or EventRepository()
        self._bank = bank or BankApplicationService(repo=self._accounts)
        self._loans = loans or LoanApplicationService(accounts=self._accounts)
        self._invest = invest or InvestmentApplicationService(accounts=self._accounts)
        self._market = market or MarketApplicationService(accounts=self._accounts)
        self._events = events or EventApplicationService(
            repo=self._events_repo, market=self._market
        )
        self._supply = supply or SupplyApplicationService()

    async def _require_account(self, db: AsyncSession, character_id: str) -> Account:
        account = await self._accounts.get_account(db, character_id)
        if account is None:
            raise AccountNotFoundError(character_id)
        return account

    # ------------------------------------------------------------------
    # Job-change services
    # ------------------------------------------------------------------

    async def get_service_package(
        self, db: AsyncSession, character_id: str, target_class: str
    ) -> OperationResult:
        async def work() -> OperationResult:
            kind = _target_class(target_class)
            account = await self._accounts.get_account(db, character_id)
            quote = await self._supply.quote_gift_cost(db, kind)
            portfolio = await self._market.portfolio_value(db, character_id)
            base = base_service_cost(kind)
            total = base + quote.supplier_cost
            options = payment_options(total, account, portfolio)
            package = ServicePackageResponse(
                target_class=kind,
                base_cost_cents=base,
                gifts_cost_cents=quote.supplier_cost,
                total_cost_cents=total,
                total_cost_display=cents_to_display(total),
                gifts=[GiftItemResponse.from_gift(g) for g in quote.gifts],
                recommended_supplier=(
                    SupplierResponse.from_supplier(quote.recommended)
                    if quote.recommended else None
                ),
                payment_options=[PaymentOptionItem.from_option(o) for o in options],
            )
            return OperationResult.ok(f"Service package for {kind}", package)

        return await run_operation(db, work)

    async def _debit_service(
        self, db: AsyncSession, character_id: str, amount: int, label: str, appointment_id: str
    ) -> Account:
        account, _ = await self._accounts.post_transaction(
            db,
            character_id,
            -amount,
            TransactionType.SERVICE_PAYMENT.value,
            label,
            reference_type="SERVICE_APPOINTMENT",
            reference_id=appointment_id,
        )
        return account

    async def process_service(
        self,
        db: AsyncSession,
        character_id: str,
        target_class: str,
        npc_id: str,
        payment_type: str,
        term_months: int | None = None,
    ) -> OperationResult:
        """Pay for a job change, book the appointment, and order the gift pack.

        All steps share one unit: a failed order or debit undoes the loan,
        the plan, and the appointment with it.
        """
        async def work() -> OperationResult:
            try:
                method = PaymentType(payment_type).value
            except ValueError:
                raise UnsupportedPaymentTypeError(payment_type) from None
            kind = _target_class(target_class)
            account = await self._require_account(db, character_id)
            quote = await self._supply.quote_gift_cost(db, kind)
            total = base_service_cost(kind) + quote.supplier_cost
            if total <= 0:
                raise InvalidParameterError(f"no job-change service for {kind}")

            appointment_id = generate_id("SVC")
            label = f"Job change to {kind}"
            loan_id: str | None = None
            plan_id: str | None = None

            if method == PaymentType.FULL_PAYMENT.value:
                account = await self._debit_service(
                    db, character_id, total, label, appointment_id
                )
            elif method == PaymentType.LOAN.value:
                if account.credit_score < LOAN_MIN_CREDIT_SCORE:
                    raise PaymentIneligibleError(
                        f"credit score {account.credit_score} below {LOAN_MIN_CREDIT_SCORE}"
                    )
                loan = await self._loans.originate_loan(
                    db,
                    character_id,
                    total,
                    term_months or LOAN_TERM_MONTHS,
                    LoanPurpose.JOB_CHANGE.value,
                )
                loan_id = loan.id
                account = await self._debit_service(
                    db, character_id, total, label, appointment_id
                )
            elif method == PaymentType.INSTALLMENT.value:
                part = installment_amount(total)
                account = await self._debit_service(
                    db, character_id, part, f"{label} (installment 1/{INSTALLMENT_COUNT})",
                    appointment_id,
                )
                plan = await self._repo.create_installment_plan(
                    db,
                    InstallmentPlan(
                        id=generate_id("INS"),
                        character_id=character_id,
                        total_amount=installment_total(total),
                        installment_count=INSTALLMENT_COUNT,
                        installment_amount=part,
                        remaining_payments=INSTALLMENT_COUNT - 1,
                        purpose=LoanPurpose.JOB_CHANGE.value,
                        status="ACTIVE",
                    ),
                )
                plan_id = plan.id
            else:
                portfolio = await self._market.portfolio_value(db, character_id)
                if not portfolio_covers(portfolio, total):
                    raise PaymentIneligibleError(
                        f"portfolio value {portfolio} does not cover {total}"
                    )
                loan = await self._loans.originate_loan(
                    db,
                    character_id,
                    total,
                    BACKED_LOAN_TERM_MONTHS,
                    LoanPurpose.JOB_CHANGE.value,
                    collateral_type=PORTFOLIO_COLLATERAL,
                    collateral_value=portfolio,
                )
                loan_id = loan.id
                account = await self._debit_service(
                    db, character_id, total, label, appointment_id
                )

            appointment = await self._repo.create_appointment(
                db,
                ServiceAppointment(
                    id=appointment_id,
                    character_id=character_id,
                    target_class=kind,
                    npc_id=npc_id,
                    total_cost=total,
                    payment_method=method,
                    status="SCHEDULED",
                    scheduled_at=utc_now() + APPOINTMENT_DELAY,
                ),
            )

            order_id: str | None = None
            if quote.gifts and quote.recommended is not None:
                order = await self._supply.place_order(
                    db, kind, quote.recommended.id, ordered_by=f"character-{character_id}"
                )
                order_id = order.id

            logger.info(
                "Service booked: appointment=%s character=%s class=%s total=%d method=%s",
                appointment.id, character_id, kind, total, method,
            )
            return OperationResult.ok(
                f"Job change to {kind} scheduled",
                ServiceResultResponse(
                    appointment_id=appointment.id,
                    target_class=kind,
                    total_cost_cents=total,
                    total_cost_display=cents_to_display(total),
                    payment_method=method,
                    scheduled_at=appointment.scheduled_at.isoformat(),
                    balance_cents=account.balance,
                    loan_id=loan_id,
                    installment_plan_id=plan_id,
                    purchase_order_id=order_id,
                ),
            )

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Character status
    # ------------------------------------------------------------------

    async def get_character_status(
        self, db: AsyncSession, character_id: str
    ) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            now = utc_now()
            loans = await self._loans.loans_for_account(db, account.id)
            investments = await self._invest.investments_for_account(db, account.id)
            portfolio = await self._market.build_portfolio(db, character_id)
            appointments = await self._repo.list_appointments(db, character_id)

            net_worth = (
                account.balance
                + sum(i.current_value for i in investments if i.is_active)
                + portfolio.total_value_cents
                - sum(loan.remaining_balance for loan in loans if loan.is_active)
            )
            status = CharacterStatusResponse.build(
                character_id,
                AccountResponse.from_account(account),
                [LoanItem.from_loan(loan) for loan in loans],
                [
                    HoldingItem.from_investment(
                        i,
                        expected_return(i.principal, i.interest_rate, i.term_months),
                        days_remaining(i.maturity_date, now),
                    )
                    for i in investments
                ],
                portfolio,
                [AppointmentItem.from_appointment(a) for a in appointments],
                net_worth,
            )
            return OperationResult.ok("Character status", status)

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Economic report
    # ------------------------------------------------------------------

    async def build_economic_report(
        self, db: AsyncSession, now: datetime | None = None
    ) -> EconomicReportResponse:
        now = now or utc_now()
        overview = await self._market.market_overview(db)
        active_events = await self._events_repo.list_active_events(db, now)
        bank = await self._bank.summarize(db)
        loans = await self._loans.summarize(db)
        invest = await self._invest.summarize(db)
        stats = await self._repo.service_stats(db, now - REPORT_WINDOW)
        supply = await self._supply.summarize(db, now)

        services = sum(count for count, _ in stats.values())
        revenue = sum(amount for _, amount in stats.values())
        popular = sorted(stats.items(), key=lambda kv: kv[1][0], reverse=True)
        return EconomicReportResponse(
            generated_at=now.isoformat(),
            market=MarketSection(
                company_count=overview.company_count,
                total_market_cap_cents=overview.total_market_cap,
                average_change_percent=overview.average_change_percent,
                active_events=len(active_events),
            ),
            banking=BankingSection(
                total_accounts=bank["total_accounts"],
                active_accounts=bank["active_accounts"],
                total_deposits_cents=bank["total_deposits"],
                active_loans=loans["active_loans"],
                outstanding_loans_cents=loans["outstanding"],
                active_investments=invest["active_investments"],
                invested_value_cents=invest["invested_value"],
            ),
            services=ServiceSection(
                total_revenue_cents=revenue,
                popular_classes=[
                    ClassCount(target_class=kind, services=count)
                    for kind, (count, _) in popular[:POPULAR_CLASSES]
                ],
                average_cost_cents=revenue // services if services else 0,
            ),
            supply=SupplySection(
                active_suppliers=supply["active_suppliers"],
                recent_orders=supply["recent_orders"],
                recent_order_value_cents=supply["recent_order_value"],
            ),
        )

    async def get_economic_report(self, db: AsyncSession) -> OperationResult:
        async def work() -> OperationResult:
            return OperationResult.ok("Economic report", await self.build_economic_report(db))

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def _run_steps(
        self,
        db: AsyncSession,
        kind: str,
        steps: list[tuple[str, Callable[[], Awaitable[object]]]],
    ) -> MaintenanceReport:
        started = utc_now()
        outcomes: list[StepOutcome] = []
        for name, step in steps:
            try:
                result = await step()
            except Exception as exc:
                await db.rollback()
                logger.exception("%s maintenance: step %s failed", kind, name)
                outcomes.append(
                    StepOutcome(step=name, ok=False, detail=str(exc) or type(exc).__name__)
                )
                continue
            outcomes.append(StepOutcome(step=name, ok=True, detail=_describe(result)))

        report = MaintenanceReport(
            kind=kind,
            started_at=started.isoformat(),
            finished_at=utc_now().isoformat(),
            steps=outcomes,
        )
        if report.failed_steps:
            logger.warning("%s maintenance finished with failures: %s", kind, report.failed_steps)
        else:
            logger.info("%s maintenance finished: %d steps", kind, len(outcomes))
        return report

    async def perform_daily_maintenance(self, db: AsyncSession) -> MaintenanceReport:
        return await self._run_steps(
            db,
            "daily",
            [
                ("update_stock_prices", lambda: self._market.update_stock_prices(db)),
                ("process_event_impacts", lambda: self._events.process_ongoing_impacts(db)),
                ("accrue_daily_interest", lambda: self._bank.accrue_daily_interest(db)),
                ("process_matured_investments", lambda: self._invest.process_matured_investments(db)),
                ("update_market_linked_values", lambda: self._invest.update_market_linked_values(db)),
                ("auto_restock_inventory", lambda: self._supply.auto_restock_inventory(db)),
                ("update_supplier_markups", lambda: self._supply.update_supplier_markups(db)),
                ("trigger_random_event", lambda: self._events.trigger_random_event(db)),
            ],
        )

    async def perform_monthly_maintenance(self, db: AsyncSession) -> MaintenanceReport:
        async def report() -> EconomicReportResponse:
            summary = await self.build_economic_report(db)
            await db.commit()
            logger.info(
                "Monthly report: market cap=%d deposits=%d outstanding loans=%d service revenue=%d",
                summary.market.total_market_cap_cents,
                summary.banking.total_deposits_cents,
                summary.banking.outstanding_loans_cents,
                summary.services.total_revenue_cents,
            )
            return summary

        return await self._run_steps(
            db,
            "monthly",
            [
                ("pay_dividends", lambda: self._market.pay_dividends(db)),
                ("reset_supplier_metrics", lambda: self._supply.reset_supplier_metrics(db)),
                ("economic_report", report),
            ],
        )


def _describe(result: object) -> str:
    if isinstance(result, OperationResult):
        return result.message
    if isinstance(result, int):
        return f"{result} updated"
    if isinstance(result, EconomicReportResponse):
        return "report generated"
    if hasattr(result, "model_dump"):
        return str(result.model_dump())
    return "done"
