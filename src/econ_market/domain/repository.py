"""Repository Protocol for the market exchange."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_market.domain.models import (
    Company,
    DividendPayment,
    PortfolioPosition,
    StockPricePoint,
    StockTransaction,
)


class MarketRepositoryProtocol(Protocol):
    # companies and prices
    async def count_companies(self, db: AsyncSession) -> int: ...

    async def create_company(self, db: AsyncSession, company: Company) -> Company: ...

    async def list_companies(
        self, db: AsyncSession, active_only: bool = True
    ) -> list[Company]: ...

    async def list_companies_by_sector(
        self, db: AsyncSession, sector: str
    ) -> list[Company]: ...

    async def get_company(
        self, db: AsyncSession, company_id: str, for_update: bool = False
    ) -> Company | None: ...

    async def update_company_price(
        self, db: AsyncSession, company_id: str, price: int, market_cap: int
    ) -> Company: ...

    async def insert_price_point(
        self, db: AsyncSession, point: StockPricePoint
    ) -> StockPricePoint: ...

    async def latest_price_points(self, db: AsyncSession) -> dict[str, StockPricePoint]: ...

    async def list_price_history(
        self, db: AsyncSession, company_id: str, limit: int
    ) -> list[StockPricePoint]: ...

    # positions and trades
    async def get_or_create_position(
        self, db: AsyncSession, position_id: str, character_id: str, company_id: str
    ) -> PortfolioPosition: ...

    async def get_position_for_update(
        self, db: AsyncSession, character_id: str, company_id: str
    ) -> PortfolioPosition | None: ...

    async def save_position(
        self, db: AsyncSession, position: PortfolioPosition
    ) -> PortfolioPosition: ...

    async def revalue_positions(self, db: AsyncSession, company_id: str, price: int) -> int: ...

    async def list_positions(
        self, db: AsyncSession, character_id: str
    ) -> list[PortfolioPosition]: ...

    async def list_holders(
        self, db: AsyncSession, company_id: str
    ) -> list[PortfolioPosition]: ...

    async def portfolio_value(self, db: AsyncSession, character_id: str) -> int: ...

    async def insert_stock_transaction(
        self, db: AsyncSession, tx: StockTransaction
    ) -> StockTransaction: ...

    async def insert_dividend_payment(
        self, db: AsyncSession, payment: DividendPayment
    ) -> DividendPayment: ...
