"""End-to-end economy flow across every subsystem, on in-memory repositories.

A character opens an account, borrows, buys stock, lives through a world
event and a daily maintenance pass; the ledger must still replay to the
stored balance at the end.
"""

import random
from datetime import UTC, datetime
from unittest.mock import AsyncMock

from src.econ_bank.application.service import BankApplicationService
from src.econ_bank.domain.credit import daily_interest_cents
from src.econ_bank.domain.models import CharacterProfile
from src.econ_events.application.service import EventApplicationService
from src.econ_events.domain.templates import EVENT_TEMPLATES
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


class _FixedRandom(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__(0)
        self._value = value

    def random(self) -> float:
        return self._value


async def test_character_lifecycle_keeps_ledger_consistent() -> None:
    accounts = FakeAccountRepository()
    characters = AsyncMock()
    characters.get_profile.return_value = CharacterProfile(
        character_id="hero-1", level=10, character_class="WARRIOR", gold=1500, luck=50
    )
    market_repo = FakeMarketRepository()
    market_repo.add_company(Company(
        id="CO-GEMS", name="Deepstone Gem Mining", ticker="GEMS", sector="RESOURCES",
        description="Miner", current_price=5000, market_cap=5000 * 50_000,
        dividend_yield=3.0, pe_ratio=18.5,
    ))
    events_repo = FakeEventRepository()
    rng = _FixedRandom(0.5)

    bank = BankApplicationService(repo=accounts, characters=characters)
    loans = LoanApplicationService(repo=FakeLoanRepository(accounts), accounts=accounts)
    market = MarketApplicationService(repo=market_repo, accounts=accounts, rng=rng)
    events = EventApplicationService(repo=events_repo, market=market, rng=rng)
    integration = IntegrationService(
        repo=FakeServiceRepository(),
        accounts=accounts,
        events_repo=events_repo,
        bank=bank,
        loans=loans,
        invest=InvestmentApplicationService(
            repo=FakeInvestmentRepository(), accounts=accounts,
            characters=characters, rng=random.Random(3),
        ),
        market=market,
        events=events,
        supply=SupplyApplicationService(repo=FakeSupplyRepository()),
    )

    opened = await bank.open_account(make_session(), "hero-1", "BUSINESS")
    assert opened.data.credit_limit_cents == 268000

    await bank.deposit(make_session(), "hero-1", 500000)
    loan = await loans.apply_for_loan(make_session(), "hero-1", 200000, 12, "EQUIPMENT")
    assert loan.success
    assert accounts.accounts["hero-1"].balance == 700000

    bought = await market.buy_stock(make_session(), "hero-1", "CO-GEMS", 10)
    assert bought.data.net_amount_cents == 51000
    assert accounts.accounts["hero-1"].balance == 649000

    # Mine collapse: GEMS falls 15% at once
    await events.create_event_from_template(
        make_session(), EVENT_TEMPLATES[0], datetime.now(UTC)
    )
    assert market_repo.companies["CO-GEMS"].current_price == 4250

    rate = accounts.accounts["hero-1"].interest_rate
    report = await integration.perform_daily_maintenance(make_session())
    assert report.failed_steps == []

    balance = accounts.accounts["hero-1"].balance
    assert balance == 649000 + daily_interest_cents(649000, rate)
    assert [tx.tx_type for tx in accounts.ledger_for("hero-1")] == [
        "DEPOSIT", "LOAN", "STOCK_TRADE", "INTEREST",
    ]

    audit = await bank.verify_ledger(make_session(), "hero-1")
    assert audit.message == "Ledger consistent"

    status = await integration.get_character_status(make_session(), "hero-1")
    stocks = status.data.stock_portfolio.total_value_cents
    assert stocks == 10 * market_repo.companies["CO-GEMS"].current_price
    assert status.data.net_worth_cents == balance + stocks - 200000

    # A second daily pass on the same day credits no more interest
    await integration.perform_daily_maintenance(make_session())
    assert accounts.accounts["hero-1"].balance == balance


async def test_deposit_loan_trade_tick_scenario() -> None:
    accounts = FakeAccountRepository()
    characters = AsyncMock()
    characters.get_profile.return_value = CharacterProfile(
        character_id="hero-2", level=10, character_class="WARRIOR", gold=1500, luck=50
    )
    market_repo = FakeMarketRepository()
    market_repo.add_company(Company(
        id="CO-1", name="Starforge Artificers", ticker="FORGE", sector="TECHNOLOGY",
        description="", current_price=5000, market_cap=5000 * 50_000,
        dividend_yield=0.0, pe_ratio=20.0,
    ))
    bank = BankApplicationService(repo=accounts, characters=characters)
    loans = LoanApplicationService(repo=FakeLoanRepository(accounts), accounts=accounts)
    market = MarketApplicationService(repo=market_repo, accounts=accounts, rng=random.Random(5))
    events = EventApplicationService(
        repo=FakeEventRepository(), market=market, rng=random.Random(5)
    )

    await bank.open_account(make_session(), "hero-2", "BUSINESS")
    assert accounts.accounts["hero-2"].balance == 0
    assert accounts.accounts["hero-2"].credit_score == 670

    await bank.deposit(make_session(), "hero-2", 500000)
    await loans.apply_for_loan(make_session(), "hero-2", 200000, 12, "EQUIPMENT")
    await market.buy_stock(make_session(), "hero-2", "CO-1", 10)
    await market.update_stock_prices(make_session())
    processed = await events.process_ongoing_impacts(make_session())

    assert processed.delayed_applied == 0
    assert processed.gradual_applied == 0
    assert accounts.accounts["hero-2"].balance == 649000
    price = market_repo.companies["CO-1"].current_price
    assert market_repo.positions[("hero-2", "CO-1")].current_value == 10 * price
    assert (await bank.verify_ledger(make_session(), "hero-2")).message == "Ledger consistent"


async def test_empty_account_never_earns_interest() -> None:
    accounts = FakeAccountRepository()
    characters = AsyncMock()
    characters.get_profile.return_value = CharacterProfile(
        character_id="hero-3", level=1, character_class="NOVICE", gold=0, luck=50
    )
    bank = BankApplicationService(repo=accounts, characters=characters)
    await bank.open_account(make_session(), "hero-3")

    for _ in range(3):
        assert await bank.accrue_daily_interest(make_session()) == 0

    assert accounts.ledger_for("hero-3") == []
