"""In-memory repositories for multi-subsystem tests.

Each fake honours the same contract as its SQL counterpart (conditional
balance updates, exactly-once guards, purge order) so services can be
exercised end to end without a database. A session made with
``make_session(*repos)`` restores those repositories on rollback.
"""

import copy
from dataclasses import replace
from datetime import datetime
from unittest.mock import AsyncMock

from src.econ_bank.domain.models import Account, Transaction
from src.econ_common.errors import (
    AccountNotActiveError,
    AccountNotFoundError,
    InsufficientBalanceError,
)
from src.econ_events.domain.models import EventStockImpact, WorldEvent
from src.econ_invest.domain.models import Investment
from src.econ_loan.domain.models import Loan, LoanPayment
from src.econ_market.domain.models import (
    Company,
    DividendPayment,
    PortfolioPosition,
    StockPricePoint,
    StockTransaction,
)
from src.econ_orchestrator.domain.models import InstallmentPlan, ServiceAppointment
from src.econ_supply.domain.models import InventoryItem, PurchaseOrder, Supplier


def make_session(*repos) -> AsyncMock:
    """Stand-in AsyncSession: commit/rollback are recorded, nothing else is used.

    State of ``repos`` is checkpointed at creation and on every commit;
    rollback restores the last checkpoint. Private attributes (links to other
    repositories) are left alone.
    """
    db = AsyncMock()
    saved: list[dict] = []

    def public_state(repo) -> dict:
        return {k: v for k, v in vars(repo).items() if not k.startswith("_")}

    def checkpoint() -> None:
        saved[:] = [copy.deepcopy(public_state(repo)) for repo in repos]

    def restore() -> None:
        for repo, state in zip(repos, saved):
            vars(repo).update(copy.deepcopy(state))

    checkpoint()
    db.commit.side_effect = checkpoint
    db.rollback.side_effect = restore
    return db


class FakeAccountRepository:
    def __init__(self) -> None:
        self.accounts: dict[str, Account] = {}
        self.transactions: list[Transaction] = []
        self.active_loans: dict[str, int] = {}

    def add(self, account: Account) -> Account:
        self.accounts[account.character_id] = account
        return account

    async def get_account(self, db, character_id, for_update=False):
        account = self.accounts.get(character_id)
        return replace(account) if account else None

    async def create_account(self, db, account):
        return self.add(replace(account))

    async def post_transaction(
        self, db, character_id, amount, tx_type, description,
        reference_type=None, reference_id=None, require_active=True,
    ):
        account = self.accounts.get(character_id)
        if account is None:
            raise AccountNotFoundError(character_id)
        if require_active and not account.is_active:
            raise AccountNotActiveError(character_id, account.status)
        if account.balance + amount < 0:
            raise InsufficientBalanceError(-amount, account.balance)
        account.balance += amount
        account.version += 1
        tx = Transaction(
            id=len(self.transactions) + 1,
            account_id=account.id,
            tx_type=tx_type,
            amount=amount,
            balance_after=account.balance,
            description=description,
            reference_type=reference_type,
            reference_id=reference_id,
        )
        self.transactions.append(tx)
        return replace(account), tx

    async def adjust_credit_score(self, db, character_id, delta):
        account = self.accounts.get(character_id)
        if account is None:
            return None
        account.credit_score = max(300, min(850, account.credit_score + delta))
        return replace(account)

    async def set_status(self, db, character_id, status):
        account = self.accounts.get(character_id)
        if account is None:
            return None
        account.status = status
        return replace(account)

    async def count_active_loans(self, db, account_id):
        return self.active_loans.get(account_id, 0)

    async def list_interest_candidates(self, db):
        return [replace(a) for a in self.accounts.values() if a.is_active and a.balance > 0]

    async def mark_interest_accrued(self, db, account_id, accrued_at):
        day_start = accrued_at.replace(hour=0, minute=0, second=0, microsecond=0)
        for account in self.accounts.values():
            if account.id == account_id:
                if account.last_interest_at and account.last_interest_at >= day_start:
                    return False
                account.last_interest_at = accrued_at
                return True
        return False

    async def list_transactions(self, db, account_id, cursor_id, limit, tx_type):
        rows = [
            tx for tx in reversed(self.transactions)
            if tx.account_id == account_id
            and (cursor_id is None or tx.id < cursor_id)
            and (tx_type is None or tx.tx_type == tx_type)
        ]
        return rows[:limit]

    async def replay_transactions(self, db, account_id):
        return [tx for tx in self.transactions if tx.account_id == account_id]

    async def summarize(self, db):
        accounts = list(self.accounts.values())
        return {
            "total_accounts": len(accounts),
            "active_accounts": sum(1 for a in accounts if a.is_active),
            "total_deposits": sum(a.balance for a in accounts),
        }

    def ledger_for(self, character_id: str) -> list[Transaction]:
        account = self.accounts[character_id]
        return [tx for tx in self.transactions if tx.account_id == account.id]


class FakeLoanRepository:
    def __init__(self, accounts: FakeAccountRepository | None = None) -> None:
        self.loans: dict[str, Loan] = {}
        self.payments: list[LoanPayment] = []
        self._accounts = accounts

    def _sync_count(self, account_id: str) -> None:
        if self._accounts is not None:
            self._accounts.active_loans[account_id] = sum(
                1 for loan in self.loans.values()
                if loan.account_id == account_id and loan.is_active
            )

    async def create_loan(self, db, loan):
        self.loans[loan.id] = replace(loan)
        self._sync_count(loan.account_id)
        return replace(loan)

    async def get_loan_for_update(self, db, loan_id):
        loan = self.loans.get(loan_id)
        return replace(loan) if loan else None

    async def get_loan(self, db, loan_id):
        return await self.get_loan_for_update(db, loan_id)

    async def count_active(self, db, account_id):
        return sum(
            1 for loan in self.loans.values() if loan.account_id == account_id and loan.is_active
        )

    async def list_loans(self, db, account_id):
        return [replace(loan) for loan in self.loans.values() if loan.account_id == account_id]

    async def record_payment(self, db, loan_id, remaining_balance, status, next_payment_due):
        loan = self.loans[loan_id]
        loan.remaining_balance = remaining_balance
        loan.status = status
        loan.next_payment_due = next_payment_due
        self._sync_count(loan.account_id)
        return replace(loan)

    async def insert_payment(self, db, payment):
        stored = replace(payment, id=len(self.payments) + 1)
        self.payments.append(stored)
        return stored

    async def summarize(self, db):
        active = [loan for loan in self.loans.values() if loan.is_active]
        return {
            "active_loans": len(active),
            "outstanding": sum(loan.remaining_balance for loan in active),
        }


class FakeInvestmentRepository:
    def __init__(self) -> None:
        self.investments: dict[str, Investment] = {}

    async def create_investment(self, db, investment):
        self.investments[investment.id] = replace(investment)
        return replace(investment)

    async def get_for_update(self, db, investment_id):
        investment = self.investments.get(investment_id)
        return replace(investment) if investment else None

    async def list_by_account(self, db, account_id):
        return [replace(i) for i in self.investments.values() if i.account_id == account_id]

    async def list_matured(self, db, now):
        return [
            replace(i) for i in self.investments.values()
            if i.is_active and i.maturity_date is not None and i.maturity_date <= now
        ]

    async def list_active_by_types(self, db, investment_types):
        return [
            replace(i) for i in self.investments.values()
            if i.is_active and i.investment_type in investment_types
        ]

    async def close_investment(self, db, investment_id, status, final_value):
        investment = self.investments.get(investment_id)
        if investment is None or not investment.is_active:
            return None
        investment.status = status
        investment.current_value = final_value
        return replace(investment)

    async def update_current_value(self, db, investment_id, value):
        investment = self.investments.get(investment_id)
        if investment is None or not investment.is_active:
            return False
        investment.current_value = value
        return True

    async def summarize(self, db):
        active = [i for i in self.investments.values() if i.is_active]
        return {
            "active_investments": len(active),
            "invested_value": sum(i.current_value for i in active),
        }


class FakeMarketRepository:
    def __init__(self) -> None:
        self.companies: dict[str, Company] = {}
        self.points: list[StockPricePoint] = []
        self.positions: dict[tuple[str, str], PortfolioPosition] = {}
        self.trades: list[StockTransaction] = []
        self.dividends: list[DividendPayment] = []

    def add_company(self, company: Company) -> Company:
        self.companies[company.id] = company
        return company

    async def count_companies(self, db):
        return len(self.companies)

    async def create_company(self, db, company):
        return replace(self.add_company(replace(company)))

    async def list_companies(self, db, active_only=True):
        companies = sorted(self.companies.values(), key=lambda c: c.ticker)
        return [replace(c) for c in companies if c.is_active or not active_only]

    async def list_companies_by_sector(self, db, sector):
        return [c for c in await self.list_companies(db) if c.sector == sector]

    async def get_company(self, db, company_id, for_update=False):
        company = self.companies.get(company_id)
        return replace(company) if company else None

    async def update_company_price(self, db, company_id, price, market_cap):
        company = self.companies[company_id]
        company.current_price = price
        company.market_cap = market_cap
        return replace(company)

    async def insert_price_point(self, db, point):
        stored = replace(point, id=len(self.points) + 1)
        self.points.append(stored)
        return stored

    async def latest_price_points(self, db):
        latest: dict[str, StockPricePoint] = {}
        for point in self.points:
            latest[point.company_id] = point
        return latest

    async def list_price_history(self, db, company_id, limit):
        return [p for p in reversed(self.points) if p.company_id == company_id][:limit]

    async def get_or_create_position(self, db, position_id, character_id, company_id):
        key = (character_id, company_id)
        if key not in self.positions:
            self.positions[key] = PortfolioPosition(
                id=position_id, character_id=character_id, company_id=company_id
            )
        return replace(self.positions[key])

    async def get_position_for_update(self, db, character_id, company_id):
        position = self.positions.get((character_id, company_id))
        return replace(position) if position else None

    async def save_position(self, db, position):
        self.positions[(position.character_id, position.company_id)] = replace(position)
        return replace(position)

    async def revalue_positions(self, db, company_id, price):
        count = 0
        for position in self.positions.values():
            if position.company_id == company_id and position.shares_owned > 0:
                position.current_value = position.shares_owned * price
                position.unrealized_gain_loss = position.current_value - position.total_invested
                count += 1
        return count

    async def list_positions(self, db, character_id):
        return [
            replace(p) for (owner, _), p in sorted(self.positions.items())
            if owner == character_id and p.shares_owned > 0
        ]

    async def list_holders(self, db, company_id):
        return [
            replace(p) for p in self.positions.values()
            if p.company_id == company_id and p.shares_owned > 0
        ]

    async def portfolio_value(self, db, character_id):
        return sum(
            p.shares_owned * self.companies[p.company_id].current_price
            for (owner, _), p in self.positions.items()
            if owner == character_id and p.shares_owned > 0
        )

    async def insert_stock_transaction(self, db, tx):
        stored = replace(tx, id=len(self.trades) + 1)
        self.trades.append(stored)
        return stored

    async def insert_dividend_payment(self, db, payment):
        stored = replace(payment, id=len(self.dividends) + 1)
        self.dividends.append(stored)
        return stored


class FakeEventRepository:
    def __init__(self) -> None:
        self.events: dict[str, WorldEvent] = {}
        self.impacts: dict[int, EventStockImpact] = {}

    def add_impact(self, impact: EventStockImpact) -> EventStockImpact:
        self.impacts[impact.id] = impact
        return impact

    async def count_active_global(self, db, now):
        return sum(1 for e in self.events.values() if e.global_impact and e.expires_at > now)

    async def create_event(self, db, event):
        self.events[event.id] = replace(event)
        return replace(event)

    async def create_impact(self, db, impact):
        stored = replace(impact, id=len(self.impacts) + 1)
        self.impacts[stored.id] = stored
        return replace(stored)

    async def list_due_delayed(self, db, now):
        return [
            replace(i) for i in self.impacts.values()
            if i.impact_type == "DELAYED" and not i.is_applied
            and i.applied_at <= now < i.expires_at
        ]

    async def list_pending_gradual(self, db, now):
        return [
            replace(i) for i in self.impacts.values()
            if i.impact_type == "GRADUAL" and i.applied_at <= now
            and i.hours_applied < i.duration_hours
        ]

    async def get_impact_for_update(self, db, impact_id):
        impact = self.impacts.get(impact_id)
        return replace(impact) if impact else None

    async def mark_applied(self, db, impact_id):
        impact = self.impacts.get(impact_id)
        if impact is None or impact.is_applied:
            return False
        impact.is_applied = True
        return True

    async def set_hours_applied(self, db, impact_id, hours):
        impact = self.impacts.get(impact_id)
        if impact is None or not impact.hours_applied < hours <= impact.duration_hours:
            return False
        impact.hours_applied = hours
        return True

    async def purge_expired_impacts(self, db, now):
        expired = [i.id for i in self.impacts.values() if i.expires_at < now]
        for impact_id in expired:
            del self.impacts[impact_id]
        return len(expired)

    async def purge_expired_events(self, db, now):
        referenced = {i.event_id for i in self.impacts.values()}
        expired = [
            e.id for e in self.events.values()
            if e.expires_at < now and e.id not in referenced
        ]
        for event_id in expired:
            del self.events[event_id]
        return len(expired)

    async def list_active_events(self, db, now):
        return [replace(e) for e in self.events.values() if e.expires_at > now]

    async def list_event_history(self, db, limit):
        ordered = sorted(self.events.values(), key=lambda e: e.occurred_at, reverse=True)
        return [replace(e) for e in ordered[:limit]]

    async def list_impacts_for_events(self, db, event_ids):
        return [replace(i) for i in self.impacts.values() if i.event_id in event_ids]


class FakeSupplyRepository:
    def __init__(self) -> None:
        self.suppliers: dict[str, Supplier] = {}
        self.inventory: list[InventoryItem] = []
        self.orders: list[PurchaseOrder] = []

    async def count_suppliers(self, db):
        return len(self.suppliers)

    async def create_supplier(self, db, supplier):
        self.suppliers[supplier.id] = replace(supplier)
        return replace(supplier)

    async def list_suppliers(self, db, specialty=None):
        return [
            replace(s) for s in self.suppliers.values()
            if s.is_active and (specialty is None or s.specialty == specialty)
        ]

    async def get_supplier(self, db, supplier_id):
        supplier = self.suppliers.get(supplier_id)
        return replace(supplier) if supplier else None

    async def add_inventory(self, db, item):
        stored = replace(item, id=len(self.inventory) + 1)
        self.inventory.append(stored)
        return replace(stored)

    async def list_inventory(self, db, supplier_id):
        return [replace(i) for i in self.inventory if i.supplier_id == supplier_id]

    async def take_stock(self, db, supplier_id, item_id, quality, quantity):
        for item in self.inventory:
            if (item.supplier_id, item.item_id, item.quality) == (supplier_id, item_id, quality):
                item.quantity = max(item.quantity - quantity, 0)

    async def list_low_stock(self, db):
        return [replace(i) for i in self.inventory if i.quantity < i.minimum_stock]

    async def restock_item(self, db, inventory_id):
        for item in self.inventory:
            if item.id == inventory_id and item.quantity < item.minimum_stock:
                item.quantity += item.restock_amount
                return replace(item)
        return None

    async def create_purchase_order(self, db, order):
        stored = replace(order, items=list(order.items), created_at=datetime.now())
        self.orders.append(stored)
        return stored

    async def count_orders_by_specialty(self, db, since):
        counts: dict[str, int] = {}
        for order in self.orders:
            specialty = self.suppliers[order.supplier_id].specialty
            counts[specialty] = counts.get(specialty, 0) + 1
        return counts

    async def scale_markup(self, db, specialty, factor):
        changed = 0
        for supplier in self.suppliers.values():
            if supplier.specialty == specialty and supplier.is_active:
                supplier.markup_percentage *= factor
                changed += 1
        return changed

    async def reset_metrics(self, db, reputation_factor, markup):
        for supplier in self.suppliers.values():
            supplier.reputation = max(0.0, min(100.0, supplier.reputation * reputation_factor))
            supplier.markup_percentage = markup
        return len(self.suppliers)

    async def summarize(self, db, since):
        return {
            "active_suppliers": sum(1 for s in self.suppliers.values() if s.is_active),
            "recent_orders": len(self.orders),
            "recent_order_value": sum(o.total_amount for o in self.orders),
        }


class FakeServiceRepository:
    def __init__(self) -> None:
        self.appointments: list[ServiceAppointment] = []
        self.plans: list[InstallmentPlan] = []

    async def create_appointment(self, db, appointment):
        self.appointments.append(replace(appointment))
        return replace(appointment)

    async def create_installment_plan(self, db, plan):
        self.plans.append(replace(plan))
        return replace(plan)

    async def list_appointments(self, db, character_id):
        return [replace(a) for a in reversed(self.appointments) if a.character_id == character_id]

    async def service_stats(self, db, since):
        stats: dict[str, tuple[int, int]] = {}
        for a in self.appointments:
            count, revenue = stats.get(a.target_class, (0, 0))
            stats[a.target_class] = (count + 1, revenue + a.total_cost)
        return stats
