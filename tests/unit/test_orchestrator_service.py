"""Unit tests for IntegrationService wired to in-memory repositories."""

import random
from datetime import UTC, datetime
from unittest.mock import AsyncMock

from src.econ_bank.application.service import BankApplicationService
from src.econ_bank.domain.models import Account
from src.econ_common.errors import SupplierNotFoundError
from src.econ_events.application.service import EventApplicationService
from src.econ_invest.application.service import InvestmentApplicationService
from src.econ_loan.application.service import LoanApplicationService
from src.econ_market.application.service import MarketApplicationService
from src.econ_market.domain.models import Company
from src.econ_orchestrator.application.service import IntegrationService
from src.econ_supply.application.service import SupplyApplicationService
from tests.fake_repositories import (
    FakeAccountRepository,
    FakeEventRepository,
    FakeInvestmentRepository,
    FakeLoanRepository,
    FakeMarketRepository,
    FakeServiceRepository,
    FakeSupplyRepository,
    make_session,
)

WARRIOR_TOTAL = 148000


class _FixedRandom(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__(0)
        self._value = value

    def random(self) -> float:
        return self._value


def _make_account(balance: int = 500000, credit_score: int = 700) -> Account:
    return Account(
        id="ACC-1",
        character_id="char-1",
        account_type="PREMIUM",
        balance=balance,
        credit_score=credit_score,
        credit_limit=300000,
        interest_rate=8.0,
        status="ACTIVE",
        opened_at=datetime.now(UTC),
    )


class _World:
    """Every subsystem on fakes, sharing one account ledger."""

    def __init__(self, balance: int = 500000, credit_score: int = 700) -> None:
        self.accounts = FakeAccountRepository()
        self.accounts.add(_make_account(balance, credit_score))
        self.loan_repo = FakeLoanRepository(self.accounts)
        self.market_repo = FakeMarketRepository()
        self.market_repo.add_company(Company(
            id="CO-1", name="Deepstone Gem Mining", ticker="GEMS", sector="RESOURCES",
            description="Miner", current_price=10000, market_cap=10000 * 50_000,
            dividend_yield=3.0, pe_ratio=18.5,
        ))
        self.events_repo = FakeEventRepository()
        self.supply_repo = FakeSupplyRepository()
        self.service_repo = FakeServiceRepository()

        rng = _FixedRandom(0.9)
        self.market = MarketApplicationService(
            repo=self.market_repo, accounts=self.accounts, rng=rng
        )
        self.supply = SupplyApplicationService(repo=self.supply_repo)
        self.service = IntegrationService(
            repo=self.service_repo,
            accounts=self.accounts,
            events_repo=self.events_repo,
            bank=BankApplicationService(repo=self.accounts, characters=AsyncMock()),
            loans=LoanApplicationService(repo=self.loan_repo, accounts=self.accounts),
            invest=InvestmentApplicationService(
                repo=FakeInvestmentRepository(), accounts=self.accounts,
                characters=AsyncMock(), rng=random.Random(7),
            ),
            market=self.market,
            events=EventApplicationService(repo=self.events_repo, market=self.market, rng=rng),
            supply=self.supply,
        )

    @property
    def balance(self) -> int:
        return self.accounts.accounts["char-1"].balance


async def _world(**kwargs) -> _World:
    world = _World(**kwargs)
    await world.supply.initialize_suppliers(make_session())
    return world


class TestServicePackage:
    async def test_warrior_package(self) -> None:
        world = await _world()

        result = await world.service.get_service_package(make_session(), "char-1", "WARRIOR")

        package = result.data
        assert package.base_cost_cents == 100000
        assert package.gifts_cost_cents == 48000
        assert package.total_cost_cents == WARRIOR_TOTAL
        assert package.recommended_supplier.name == "Ironforge Outfitters"
        assert len(package.payment_options) == 4
        assert all(o.eligible for o in package.payment_options[:3])

    async def test_package_without_account(self) -> None:
        world = await _world()

        result = await world.service.get_service_package(make_session(), "char-9", "MAGE")

        assert result.success
        assert not any(o.eligible for o in result.data.payment_options)


class TestProcessService:
    async def test_full_payment(self) -> None:
        world = await _world()

        result = await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "FULL_PAYMENT"
        )

        assert result.success
        assert result.data.balance_cents == 500000 - WARRIOR_TOTAL
        assert world.balance == 500000 - WARRIOR_TOTAL
        assert result.data.loan_id is None
        assert result.data.purchase_order_id == world.supply_repo.orders[0].id
        appointment = world.service_repo.appointments[0]
        assert (appointment.status, appointment.total_cost) == ("SCHEDULED", WARRIOR_TOTAL)
        tx = world.accounts.ledger_for("char-1")[-1]
        assert (tx.tx_type, tx.amount) == ("SERVICE_PAYMENT", -WARRIOR_TOTAL)

    async def test_loan_disburses_then_pays(self) -> None:
        world = await _world()

        result = await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "LOAN"
        )

        assert result.success
        assert world.balance == 500000
        loan = world.loan_repo.loans[result.data.loan_id]
        assert loan.principal == WARRIOR_TOTAL
        assert loan.term_months == 12
        assert loan.purpose == "JOB_CHANGE"
        kinds = [tx.tx_type for tx in world.accounts.ledger_for("char-1")]
        assert kinds[-2:] == ["LOAN", "SERVICE_PAYMENT"]

    async def test_loan_custom_term(self) -> None:
        world = await _world()

        result = await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "LOAN", term_months=24
        )

        assert world.loan_repo.loans[result.data.loan_id].term_months == 24

    async def test_loan_needs_credit(self) -> None:
        world = await _world(credit_score=450)

        result = await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "LOAN"
        )

        assert result.code == 7003
        assert world.loan_repo.loans == {}

    async def test_installment_takes_first_part(self) -> None:
        world = await _world()

        result = await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "INSTALLMENT"
        )

        assert world.balance == 500000 - 51800
        plan = world.service_repo.plans[0]
        assert plan.id == result.data.installment_plan_id
        assert (plan.total_amount, plan.installment_amount, plan.remaining_payments) == (
            155400, 51800, 2,
        )

    async def test_investment_backed_requires_portfolio(self) -> None:
        world = await _world()

        result = await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "INVESTMENT_BACKED"
        )

        assert result.code == 7003

    async def test_investment_backed_with_portfolio(self) -> None:
        world = await _world()
        await world.market.buy_stock(make_session(), "char-1", "CO-1", 20)
        balance = world.balance

        result = await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "INVESTMENT_BACKED"
        )

        assert result.success
        assert world.balance == balance
        loan = world.loan_repo.loans[result.data.loan_id]
        assert loan.term_months == 6
        assert loan.collateral_type == "INVESTMENT_PORTFOLIO"
        assert loan.collateral_value == 200000

    async def test_unsupported_payment_type(self) -> None:
        world = await _world()

        result = await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "BARTER"
        )

        assert result.code == 7002

    async def test_novice_has_no_service(self) -> None:
        world = await _world()

        result = await world.service.process_service(
            make_session(), "char-1", "NOVICE", "npc-trainer", "FULL_PAYMENT"
        )

        assert result.code == 1003

    async def test_insufficient_balance(self) -> None:
        world = await _world(balance=1000)

        result = await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "FULL_PAYMENT"
        )

        assert result.code == 2001
        assert world.balance == 1000
        assert world.service_repo.appointments == []

    async def test_unknown_character(self) -> None:
        world = await _world()

        result = await world.service.process_service(
            make_session(), "char-9", "WARRIOR", "npc-trainer", "FULL_PAYMENT"
        )

        assert result.code == 2002

    async def test_failed_order_undoes_loan_and_booking(self) -> None:
        world = await _world()
        world.supply.place_order = AsyncMock(side_effect=SupplierNotFoundError("SUP-GONE"))
        db = make_session(world.accounts, world.loan_repo, world.service_repo)

        result = await world.service.process_service(
            db, "char-1", "WARRIOR", "npc-trainer", "LOAN"
        )

        assert result.code == 7001
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
        assert world.balance == 500000
        assert world.accounts.transactions == []
        assert world.loan_repo.loans == {}
        assert world.accounts.active_loans == {}
        assert world.service_repo.appointments == []


class TestCharacterStatus:
    async def test_net_worth_subtracts_loans(self) -> None:
        world = await _world()
        await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "LOAN"
        )

        result = await world.service.get_character_status(make_session(), "char-1")

        status = result.data
        assert status.credit_score == 700
        assert len(status.loans) == 1
        assert len(status.appointments) == 1
        assert status.net_worth_cents == 500000 - WARRIOR_TOTAL

    async def test_net_worth_counts_stocks(self) -> None:
        world = await _world()
        await world.market.buy_stock(make_session(), "char-1", "CO-1", 10)

        result = await world.service.get_character_status(make_session(), "char-1")

        # 100000 notional + 1000 fee left the balance, the shares are worth 100000
        assert result.data.stock_portfolio.total_value_cents == 100000
        assert result.data.net_worth_cents == 500000 - 1000


class TestEconomicReport:
    async def test_report_sections(self) -> None:
        world = await _world()
        await world.service.process_service(
            make_session(), "char-1", "WARRIOR", "npc-trainer", "FULL_PAYMENT"
        )

        report = await world.service.build_economic_report(make_session())

        assert report.market.company_count == 1
        assert report.market.active_events == 0
        assert report.banking.total_accounts == 1
        assert report.banking.total_deposits_cents == 500000 - WARRIOR_TOTAL
        assert report.services.total_revenue_cents == WARRIOR_TOTAL
        assert report.services.average_cost_cents == WARRIOR_TOTAL
        assert [c.target_class for c in report.services.popular_classes] == ["WARRIOR"]
        assert report.supply.active_suppliers == 8
        assert report.supply.recent_order_value_cents == 48000

    async def test_report_operation(self) -> None:
        world = await _world()

        result = await world.service.get_economic_report(make_session())

        assert result.message == "Economic report"
        assert result.data.services.average_cost_cents == 0


class TestMaintenance:
    async def test_daily_runs_every_step(self) -> None:
        world = await _world()

        report = await world.service.perform_daily_maintenance(make_session())

        assert [s.step for s in report.steps] == [
            "update_stock_prices",
            "process_event_impacts",
            "accrue_daily_interest",
            "process_matured_investments",
            "update_market_linked_values",
            "auto_restock_inventory",
            "update_supplier_markups",
            "trigger_random_event",
        ]
        assert report.failed_steps == []
        assert report.steps[-1].detail == "No event triggered"

    async def test_failing_step_does_not_stop_the_rest(self) -> None:
        world = await _world()
        world.supply.auto_restock_inventory = AsyncMock(side_effect=RuntimeError("warehouse offline"))
        db = make_session()

        report = await world.service.perform_daily_maintenance(db)

        assert report.failed_steps == ["auto_restock_inventory"]
        failed = next(s for s in report.steps if not s.ok)
        assert failed.detail == "warehouse offline"
        assert len(report.steps) == 8
        db.rollback.assert_awaited()

    async def test_monthly(self) -> None:
        world = await _world()

        report = await world.service.perform_monthly_maintenance(make_session())

        assert [s.step for s in report.steps] == [
            "pay_dividends", "reset_supplier_metrics", "economic_report",
        ]
        assert report.failed_steps == []
        assert report.steps[-1].detail == "report generated"
