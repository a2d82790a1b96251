"""MarketApplicationService: companies, prices, trading, dividends.

``move_price`` is the single path by which a company's price changes: it
appends an immutable price point, updates the company and revalues every
open position, all in the caller's unit. Daily ticks and event shocks both
go through it.
"""

import logging
import random
import time

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_bank.domain.models import Account
from src.econ_bank.domain.repository import AccountRepositoryProtocol
from src.econ_bank.infrastructure.persistence import AccountRepository
from src.econ_common.cents import cents_to_display, round_cents
from src.econ_common.enums import StockTradeType, TransactionType
from src.econ_common.errors import (
    AccountNotFoundError,
    CompanyNotFoundError,
    InsufficientSharesError,
    InvalidAmountError,
)
from src.econ_common.id_generator import generate_id
from src.econ_common.response import OperationResult
from src.econ_common.rng import simulation_rng
from src.econ_common.unit_of_work import run_batch, run_operation
from src.econ_market.application.schemas import (
    CompanyResponse,
    MarketOverviewResponse,
    PricePointItem,
    StockPortfolioResponse,
    TradeResponse,
)
from src.econ_market.domain.models import (
    Company,
    DividendPayment,
    PortfolioPosition,
    StockPricePoint,
    StockTransaction,
)
from src.econ_market.domain.overview import MarketOverview, Quote, build_overview
from src.econ_market.domain.pricing import (
    change_percent,
    daily_trend,
    make_price_point,
    market_cap,
    random_walk_price,
    sector_volatility,
    shocked_price,
    simulated_volume,
)
from src.econ_market.domain.repository import MarketRepositoryProtocol
from src.econ_market.domain.seed import DEFAULT_COMPANIES
from src.econ_market.domain.trading import (
    apply_buy,
    apply_sell,
    dividend_amount,
    monthly_dividend_per_share,
    trade_fee,
)
from src.econ_market.infrastructure.persistence import MarketRepository

logger = logging.getLogger(__name__)

MAX_HISTORY = 500


class MarketApplicationService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._rng = rng or simulation_rng()

    async def _require_account(self, db: AsyncSession, character_id: str) -> Account:
        account = await self._accounts.get_account(db, character_id)
        if account is None:
            raise AccountNotFoundError(character_id)
        return account

    async def _tradable_company(self, db: AsyncSession, company_id: str) -> Company:
        company = await self._repo.get_company(db, company_id)
        if company is None or not company.is_active:
            raise CompanyNotFoundError(company_id)
        return company

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    async def initialize_market(self, db: AsyncSession) -> OperationResult:
        """Seed the default companies when the registry is empty."""
        async def work() -> OperationResult:
            if await self._repo.count_companies(db) > 0:
                return OperationResult.ok("Market already initialized", 0)
            for seed in DEFAULT_COMPANIES:
                company = await self._repo.create_company(
                    db,
                    Company(
                        id=generate_id("CO"),
                        name=seed.name,
                        ticker=seed.ticker,
                        sector=seed.sector,
                        description=seed.description,
                        current_price=seed.price,
                        market_cap=market_cap(seed.price),
                        dividend_yield=seed.dividend_yield,
                        pe_ratio=seed.pe_ratio,
                    ),
                )
                await self._repo.insert_price_point(db, self._opening_point(company))
            logger.info("Market initialized with %d companies", len(DEFAULT_COMPANIES))
            return OperationResult.ok("Market initialized", len(DEFAULT_COMPANIES))

        return await run_operation(db, work)

    def _opening_point(self, company: Company) -> StockPricePoint:
        price = company.current_price
        return StockPricePoint(
            id=0,
            company_id=company.id,
            price=price,
            volume=self._rng.randint(1_000, 10_999),
            high=round_cents(price * (1 + self._rng.random() * 0.05)),
            low=max(1, round_cents(price * (1 - self._rng.random() * 0.05))),
            open_price=max(1, round_cents(price * (1 + (self._rng.random() - 0.5) * 0.02))),
            close_price=price,
            price_change=0,
            price_change_percent=0.0,
        )

    async def active_companies(self, db: AsyncSession) -> list[Company]:
        return await self._repo.list_companies(db)

    async def list_companies(self, db: AsyncSession) -> OperationResult:
        async def work() -> OperationResult:
            companies = await self._repo.list_companies(db)
            latest = await self._repo.latest_price_points(db)
            return OperationResult.ok(
                f"{len(companies)} companies",
                [CompanyResponse.from_quote(c, latest.get(c.id)) for c in companies],
            )

        return await run_operation(db, work)

    async def get_company(self, db: AsyncSession, company_id: str) -> OperationResult:
        async def work() -> OperationResult:
            company = await self._repo.get_company(db, company_id)
            if company is None:
                raise CompanyNotFoundError(company_id)
            history = await self._repo.list_price_history(db, company_id, 1)
            return OperationResult.ok(
                company.name,
                CompanyResponse.from_quote(company, history[0] if history else None),
            )

        return await run_operation(db, work)

    async def get_price_history(
        self, db: AsyncSession, company_id: str, limit: int = 30
    ) -> OperationResult:
        async def work() -> OperationResult:
            if await self._repo.get_company(db, company_id) is None:
                raise CompanyNotFoundError(company_id)
            points = await self._repo.list_price_history(
                db, company_id, max(1, min(limit, MAX_HISTORY))
            )
            return OperationResult.ok(
                f"{len(points)} price points",
                [PricePointItem.from_point(point) for point in points],
            )

        return await run_operation(db, work)

    async def market_overview(self, db: AsyncSession) -> MarketOverview:
        companies = await self._repo.list_companies(db)
        latest = await self._repo.latest_price_points(db)
        return build_overview([Quote(c, latest.get(c.id)) for c in companies])

    async def get_market_overview(self, db: AsyncSession) -> OperationResult:
        async def work() -> OperationResult:
            overview = await self.market_overview(db)
            return OperationResult.ok(
                "Market overview", MarketOverviewResponse.from_overview(overview)
            )

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Price movement
    # ------------------------------------------------------------------

    async def move_price(
        self, db: AsyncSession, company: Company, new_price: int, volume: int
    ) -> Company:
        """Record a price change and revalue positions, in the caller's unit."""
        point = make_price_point(company.id, company.current_price, new_price, volume)
        await self._repo.insert_price_point(db, point)
        updated = await self._repo.update_company_price(
            db, company.id, new_price, market_cap(new_price)
        )
        await self._repo.revalue_positions(db, company.id, new_price)
        return updated

    async def apply_price_shock(
        self, db: AsyncSession, company_id: str, percent: float
    ) -> Company:
        """Move a company's price by ``percent`` (event impact), in the caller's unit."""
        company = await self._repo.get_company(db, company_id, for_update=True)
        if company is None or not company.is_active:
            raise CompanyNotFoundError(company_id)
        new_price = shocked_price(company.current_price, percent)
        volume = int(abs(percent) * 100)
        updated = await self.move_price(db, company, new_price, volume)
        logger.info(
            "Price shock %s %+.2f%%: %d -> %d",
            company.ticker, percent, company.current_price, new_price,
        )
        return updated

    async def update_stock_prices(self, db: AsyncSession) -> int:
        """One random-walk tick for every active company, one unit each."""
        companies = await self._repo.list_companies(db)
        trend = daily_trend(time.time())

        async def tick(listed: Company) -> bool:
            company = await self._repo.get_company(db, listed.id, for_update=True)
            if company is None or not company.is_active:
                return False
            new_price = random_walk_price(
                company.current_price,
                sector_volatility(company.sector),
                self._rng.uniform(-1, 1),
                trend,
            )
            volume = simulated_volume(
                self._rng, change_percent(company.current_price, new_price)
            )
            await self.move_price(db, company, new_price, volume)
            return True

        moved = await run_batch(db, "update_stock_prices", companies, tick)
        logger.info("Updated prices for %d/%d companies", moved, len(companies))
        return moved

    # ------------------------------------------------------------------
    # Trading (composable steps, no commit)
    # ------------------------------------------------------------------

    async def execute_buy(
        self, db: AsyncSession, character_id: str, company_id: str, shares: int
    ) -> tuple[Company, StockTransaction, PortfolioPosition]:
        if shares <= 0:
            raise InvalidAmountError("shares")
        company = await self._tradable_company(db, company_id)
        await self._require_account(db, character_id)

        price = company.current_price
        notional = shares * price
        fee = trade_fee(notional)
        position = await self._repo.get_or_create_position(
            db, generate_id("POS"), character_id, company.id
        )
        position = await self._repo.save_position(db, apply_buy(position, shares, price))
        trade = await self._repo.insert_stock_transaction(
            db,
            StockTransaction(
                id=0,
                position_id=position.id,
                tx_type=StockTradeType.BUY.value,
                shares=shares,
                price_per_share=price,
                total_amount=notional,
                fees=fee,
                net_amount=notional + fee,
            ),
        )
        await self._accounts.post_transaction(
            db,
            character_id,
            -(notional + fee),
            TransactionType.STOCK_TRADE.value,
            f"Bought {shares} {company.ticker}",
            reference_type="STOCK_TRADE",
            reference_id=str(trade.id),
        )
        logger.info(
            "BUY %s x%d @ %d fee=%d character=%s",
            company.ticker, shares, price, fee, character_id,
        )
        return company, trade, position

    async def execute_sell(
        self, db: AsyncSession, character_id: str, company_id: str, shares: int
    ) -> tuple[Company, StockTransaction, PortfolioPosition, int]:
        """Returns the company, trade, updated position and realized gain/loss."""
        if shares <= 0:
            raise InvalidAmountError("shares")
        company = await self._tradable_company(db, company_id)
        await self._require_account(db, character_id)

        position = await self._repo.get_position_for_update(db, character_id, company.id)
        owned = position.shares_owned if position else 0
        if position is None or owned < shares:
            raise InsufficientSharesError(shares, owned)

        price = company.current_price
        revenue = shares * price
        fee = trade_fee(revenue)
        net = revenue - fee
        sold, sold_basis = apply_sell(position, shares, price)
        position = await self._repo.save_position(db, sold)
        trade = await self._repo.insert_stock_transaction(
            db,
            StockTransaction(
                id=0,
                position_id=position.id,
                tx_type=StockTradeType.SELL.value,
                shares=shares,
                price_per_share=price,
                total_amount=revenue,
                fees=fee,
                net_amount=net,
            ),
        )
        # A sale smaller than the minimum fee nets negative and is a debit
        await self._accounts.post_transaction(
            db,
            character_id,
            net,
            TransactionType.STOCK_TRADE.value,
            f"Sold {shares} {company.ticker}",
            reference_type="STOCK_TRADE",
            reference_id=str(trade.id),
        )
        logger.info(
            "SELL %s x%d @ %d fee=%d character=%s",
            company.ticker, shares, price, fee, character_id,
        )
        return company, trade, position, net - sold_basis

    async def buy_stock(
        self, db: AsyncSession, character_id: str, company_id: str, shares: int
    ) -> OperationResult:
        async def work() -> OperationResult:
            company, trade, position = await self.execute_buy(
                db, character_id, company_id, shares
            )
            return OperationResult.ok(
                f"Bought {shares} {company.ticker} for {cents_to_display(trade.net_amount)}",
                TradeResponse.from_trade(company.ticker, trade, position),
            )

        return await run_operation(db, work)

    async def sell_stock(
        self, db: AsyncSession, character_id: str, company_id: str, shares: int
    ) -> OperationResult:
        async def work() -> OperationResult:
            company, trade, position, realized = await self.execute_sell(
                db, character_id, company_id, shares
            )
            outcome = "gain" if realized >= 0 else "loss"
            return OperationResult.ok(
                f"Sold {shares} {company.ticker}, {outcome} {cents_to_display(abs(realized))}",
                TradeResponse.from_trade(company.ticker, trade, position, realized),
            )

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Portfolio
    # ------------------------------------------------------------------

    async def portfolio_value(self, db: AsyncSession, character_id: str) -> int:
        return await self._repo.portfolio_value(db, character_id)

    async def build_portfolio(
        self, db: AsyncSession, character_id: str
    ) -> StockPortfolioResponse:
        positions = await self._repo.list_positions(db, character_id)
        companies = {c.id: c for c in await self._repo.list_companies(db, active_only=False)}
        return StockPortfolioResponse.from_positions(positions, companies)

    async def get_portfolio(self, db: AsyncSession, character_id: str) -> OperationResult:
        async def work() -> OperationResult:
            portfolio = await self.build_portfolio(db, character_id)
            return OperationResult.ok(f"{len(portfolio.positions)} positions", portfolio)

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Dividends
    # ------------------------------------------------------------------

    async def pay_dividends(self, db: AsyncSession) -> int:
        """Monthly dividend run, one unit per paying company."""
        companies = [c for c in await self._repo.list_companies(db) if c.dividend_yield > 0]

        async def pay(company: Company) -> bool:
            per_share = monthly_dividend_per_share(company.current_price, company.dividend_yield)
            total = 0
            paid = 0
            for holder in await self._repo.list_holders(db, company.id):
                amount = dividend_amount(holder.shares_owned, per_share)
                if amount < 1:
                    continue
                await self._accounts.post_transaction(
                    db,
                    holder.character_id,
                    amount,
                    TransactionType.INTEREST.value,
                    f"Dividend: {company.ticker}",
                    reference_type="DIVIDEND",
                    reference_id=company.id,
                    require_active=False,
                )
                total += amount
                paid += 1
            await self._repo.insert_dividend_payment(
                db,
                DividendPayment(
                    id=0,
                    company_id=company.id,
                    dividend_per_share=per_share,
                    total_payout=total,
                    holders_paid=paid,
                ),
            )
            return True

        paid_companies = await run_batch(db, "pay_dividends", companies, pay)
        logger.info("Dividends paid for %d companies", paid_companies)
        return paid_companies
