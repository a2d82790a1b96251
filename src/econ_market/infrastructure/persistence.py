"""MarketRepository: concrete implementation of MarketRepositoryProtocol.

Price moves lock the company row (SELECT ... FOR UPDATE) so concurrent ticks
and event shocks serialize per company. Positions are locked by the upsert
in ``get_or_create_position`` or by ``get_position_for_update``.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.errors import CompanyNotFoundError, InternalError
from src.econ_market.domain.models import (
    Company,
    DividendPayment,
    PortfolioPosition,
    StockPricePoint,
    StockTransaction,
)

_COMPANY_COLUMNS = """
    id, name, ticker, sector, description, current_price, market_cap,
    dividend_yield, pe_ratio, is_active, created_at, updated_at
"""

_POINT_COLUMNS = """
    id, company_id, price, volume, high, low, open_price, close_price,
    price_change, price_change_percent, created_at
"""

_POSITION_COLUMNS = """
    id, character_id, company_id, shares_owned, average_cost, total_invested,
    current_value, unrealized_gain_loss, last_transaction_at
"""

# ---------------------------------------------------------------------------
# SQL: companies and price history
# ---------------------------------------------------------------------------

_COUNT_COMPANIES_SQL = text("SELECT COUNT(*) FROM companies")

_INSERT_COMPANY_SQL = text(f"""
    INSERT INTO companies
        (id, name, ticker, sector, description, current_price, market_cap,
         dividend_yield, pe_ratio, is_active)
    VALUES
        (:id, :name, :ticker, :sector, :description, :current_price, :market_cap,
         :dividend_yield, :pe_ratio, :is_active)
    RETURNING {_COMPANY_COLUMNS}
""")

_LIST_COMPANIES_SQL = text(f"""
    SELECT {_COMPANY_COLUMNS}
    FROM companies
    WHERE (CAST(:active_only AS BOOLEAN) = FALSE OR is_active = TRUE)
    ORDER BY ticker
""")

_LIST_BY_SECTOR_SQL = text(f"""
    SELECT {_COMPANY_COLUMNS}
    FROM companies
    WHERE sector = :sector AND is_active = TRUE
    ORDER BY ticker
""")

_GET_COMPANY_SQL = text(f"SELECT {_COMPANY_COLUMNS} FROM companies WHERE id = :company_id")

_GET_COMPANY_FOR_UPDATE_SQL = text(f"""
    SELECT {_COMPANY_COLUMNS} FROM companies WHERE id = :company_id FOR UPDATE
""")

_UPDATE_PRICE_SQL = text(f"""
    UPDATE companies
    SET current_price = :price,
        market_cap = :market_cap,
        updated_at = NOW()
    WHERE id = :company_id AND :price >= 1
    RETURNING {_COMPANY_COLUMNS}
""")

_INSERT_POINT_SQL = text(f"""
    INSERT INTO stock_price_points
        (company_id, price, volume, high, low, open_price, close_price,
         price_change, price_change_percent)
    VALUES
        (:company_id, :price, :volume, :high, :low, :open_price, :close_price,
         :price_change, :price_change_percent)
    RETURNING {_POINT_COLUMNS}
""")

_LATEST_POINTS_SQL = text(f"""
    SELECT DISTINCT ON (company_id) {_POINT_COLUMNS}
    FROM stock_price_points
    ORDER BY company_id, id DESC
""")

_PRICE_HISTORY_SQL = text(f"""
    SELECT {_POINT_COLUMNS}
    FROM stock_price_points
    WHERE company_id = :company_id
    ORDER BY id DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# SQL: positions, trades, dividends
# ---------------------------------------------------------------------------

_GET_OR_CREATE_POSITION_SQL = text(f"""
    INSERT INTO portfolio_positions (id, character_id, company_id)
    VALUES (:id, :character_id, :company_id)
    ON CONFLICT (character_id, company_id) DO UPDATE
        SET updated_at = NOW()
    RETURNING {_POSITION_COLUMNS}
""")

_GET_POSITION_FOR_UPDATE_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM portfolio_positions
    WHERE character_id = :character_id AND company_id = :company_id
    FOR UPDATE
""")

_SAVE_POSITION_SQL = text(f"""
    UPDATE portfolio_positions
    SET shares_owned = :shares_owned,
        average_cost = :average_cost,
        total_invested = :total_invested,
        current_value = :current_value,
        unrealized_gain_loss = :unrealized_gain_loss,
        last_transaction_at = NOW(),
        updated_at = NOW()
    WHERE id = :id AND :shares_owned >= 0
    RETURNING {_POSITION_COLUMNS}
""")

_REVALUE_POSITIONS_SQL = text("""
    UPDATE portfolio_positions
    SET current_value = shares_owned * :price,
        unrealized_gain_loss = shares_owned * :price - total_invested,
        updated_at = NOW()
    WHERE company_id = :company_id AND shares_owned > 0
""")

_LIST_POSITIONS_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM portfolio_positions
    WHERE character_id = :character_id AND shares_owned > 0
    ORDER BY company_id
""")

_LIST_HOLDERS_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM portfolio_positions
    WHERE company_id = :company_id AND shares_owned > 0
    ORDER BY id
""")

_PORTFOLIO_VALUE_SQL = text("""
    SELECT COALESCE(SUM(p.shares_owned * c.current_price), 0)
    FROM portfolio_positions p
    JOIN companies c ON c.id = p.company_id
    WHERE p.character_id = :character_id AND p.shares_owned > 0
""")

_INSERT_TRADE_SQL = text("""
    INSERT INTO stock_transactions
        (position_id, tx_type, shares, price_per_share, total_amount, fees, net_amount)
    VALUES
        (:position_id, :tx_type, :shares, :price_per_share, :total_amount, :fees, :net_amount)
    RETURNING id, position_id, tx_type, shares, price_per_share, total_amount,
              fees, net_amount, created_at
""")

_INSERT_DIVIDEND_SQL = text("""
    INSERT INTO dividend_payments
        (company_id, dividend_per_share, total_payout, holders_paid)
    VALUES
        (:company_id, :dividend_per_share, :total_payout, :holders_paid)
    RETURNING id, company_id, dividend_per_share, total_payout, holders_paid, paid_at
""")


def _row_to_company(row: object) -> Company:
    return Company(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        ticker=row.ticker,  # type: ignore[attr-defined]
        sector=row.sector,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        current_price=row.current_price,  # type: ignore[attr-defined]
        market_cap=row.market_cap,  # type: ignore[attr-defined]
        dividend_yield=float(row.dividend_yield),  # type: ignore[attr-defined]
        pe_ratio=float(row.pe_ratio),  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_point(row: object) -> StockPricePoint:
    return StockPricePoint(
        id=row.id,  # type: ignore[attr-defined]
        company_id=row.company_id,  # type: ignore[attr-defined]
        price=row.price,  # type: ignore[attr-defined]
        volume=row.volume,  # type: ignore[attr-defined]
        high=row.high,  # type: ignore[attr-defined]
        low=row.low,  # type: ignore[attr-defined]
        open_price=row.open_price,  # type: ignore[attr-defined]
        close_price=row.close_price,  # type: ignore[attr-defined]
        price_change=row.price_change,  # type: ignore[attr-defined]
        price_change_percent=float(row.price_change_percent),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_position(row: object) -> PortfolioPosition:
    return PortfolioPosition(
        id=row.id,  # type: ignore[attr-defined]
        character_id=row.character_id,  # type: ignore[attr-defined]
        company_id=row.company_id,  # type: ignore[attr-defined]
        shares_owned=row.shares_owned,  # type: ignore[attr-defined]
        average_cost=row.average_cost,  # type: ignore[attr-defined]
        total_invested=row.total_invested,  # type: ignore[attr-defined]
        current_value=row.current_value,  # type: ignore[attr-defined]
        unrealized_gain_loss=row.unrealized_gain_loss,  # type: ignore[attr-defined]
        last_transaction_at=row.last_transaction_at,  # type: ignore[attr-defined]
    )


def _row_to_trade(row: object) -> StockTransaction:
    return StockTransaction(
        id=row.id,  # type: ignore[attr-defined]
        position_id=row.position_id,  # type: ignore[attr-defined]
        tx_type=row.tx_type,  # type: ignore[attr-defined]
        shares=row.shares,  # type: ignore[attr-defined]
        price_per_share=row.price_per_share,  # type: ignore[attr-defined]
        total_amount=row.total_amount,  # type: ignore[attr-defined]
        fees=row.fees,  # type: ignore[attr-defined]
        net_amount=row.net_amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class MarketRepository:
    # ------------------------------------------------------------------
    # Companies and prices
    # ------------------------------------------------------------------

    async def count_companies(self, db: AsyncSession) -> int:
        result = await db.execute(_COUNT_COMPANIES_SQL)
        return int(result.scalar_one())

    async def create_company(self, db: AsyncSession, company: Company) -> Company:
        result = await db.execute(
            _INSERT_COMPANY_SQL,
            {
                "id": company.id,
                "name": company.name,
                "ticker": company.ticker,
                "sector": company.sector,
                "description": company.description,
                "current_price": company.current_price,
                "market_cap": company.market_cap,
                "dividend_yield": company.dividend_yield,
                "pe_ratio": company.pe_ratio,
                "is_active": company.is_active,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Company insert returned no rows")
        return _row_to_company(row)

    async def list_companies(
        self, db: AsyncSession, active_only: bool = True
    ) -> list[Company]:
        result = await db.execute(_LIST_COMPANIES_SQL, {"active_only": active_only})
        return [_row_to_company(row) for row in result.fetchall()]

    async def list_companies_by_sector(
        self, db: AsyncSession, sector: str
    ) -> list[Company]:
        result = await db.execute(_LIST_BY_SECTOR_SQL, {"sector": sector})
        return [_row_to_company(row) for row in result.fetchall()]

    async def get_company(
        self, db: AsyncSession, company_id: str, for_update: bool = False
    ) -> Company | None:
        sql = _GET_COMPANY_FOR_UPDATE_SQL if for_update else _GET_COMPANY_SQL
        result = await db.execute(sql, {"company_id": company_id})
        row = result.fetchone()
        return _row_to_company(row) if row else None

    async def update_company_price(
        self, db: AsyncSession, company_id: str, price: int, market_cap: int
    ) -> Company:
        result = await db.execute(
            _UPDATE_PRICE_SQL,
            {"company_id": company_id, "price": price, "market_cap": market_cap},
        )
        row = result.fetchone()
        if row is None:
            raise CompanyNotFoundError(company_id)
        return _row_to_company(row)

    async def insert_price_point(
        self, db: AsyncSession, point: StockPricePoint
    ) -> StockPricePoint:
        result = await db.execute(
            _INSERT_POINT_SQL,
            {
                "company_id": point.company_id,
                "price": point.price,
                "volume": point.volume,
                "high": point.high,
                "low": point.low,
                "open_price": point.open_price,
                "close_price": point.close_price,
                "price_change": point.price_change,
                "price_change_percent": point.price_change_percent,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Price point insert returned no rows")
        return _row_to_point(row)

    async def latest_price_points(self, db: AsyncSession) -> dict[str, StockPricePoint]:
        result = await db.execute(_LATEST_POINTS_SQL)
        return {row.company_id: _row_to_point(row) for row in result.fetchall()}

    async def list_price_history(
        self, db: AsyncSession, company_id: str, limit: int
    ) -> list[StockPricePoint]:
        result = await db.execute(
            _PRICE_HISTORY_SQL, {"company_id": company_id, "limit": limit}
        )
        return [_row_to_point(row) for row in result.fetchall()]

    # ------------------------------------------------------------------
    # Positions and trades
    # ------------------------------------------------------------------

    async def get_or_create_position(
        self, db: AsyncSession, position_id: str, character_id: str, company_id: str
    ) -> PortfolioPosition:
        result = await db.execute(
            _GET_OR_CREATE_POSITION_SQL,
            {"id": position_id, "character_id": character_id, "company_id": company_id},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Position upsert returned no rows")
        return _row_to_position(row)

    async def get_position_for_update(
        self, db: AsyncSession, character_id: str, company_id: str
    ) -> PortfolioPosition | None:
        result = await db.execute(
            _GET_POSITION_FOR_UPDATE_SQL,
            {"character_id": character_id, "company_id": company_id},
        )
        row = result.fetchone()
        return _row_to_position(row) if row else None

    async def save_position(
        self, db: AsyncSession, position: PortfolioPosition
    ) -> PortfolioPosition:
        result = await db.execute(
            _SAVE_POSITION_SQL,
            {
                "id": position.id,
                "shares_owned": position.shares_owned,
                "average_cost": position.average_cost,
                "total_invested": position.total_invested,
                "current_value": position.current_value,
                "unrealized_gain_loss": position.unrealized_gain_loss,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Position update failed: {position.id}")
        return _row_to_position(row)

    async def revalue_positions(self, db: AsyncSession, company_id: str, price: int) -> int:
        result = await db.execute(
            _REVALUE_POSITIONS_SQL, {"company_id": company_id, "price": price}
        )
        return result.rowcount

    async def list_positions(
        self, db: AsyncSession, character_id: str
    ) -> list[PortfolioPosition]:
        result = await db.execute(_LIST_POSITIONS_SQL, {"character_id": character_id})
        return [_row_to_position(row) for row in result.fetchall()]

    async def list_holders(
        self, db: AsyncSession, company_id: str
    ) -> list[PortfolioPosition]:
        result = await db.execute(_LIST_HOLDERS_SQL, {"company_id": company_id})
        return [_row_to_position(row) for row in result.fetchall()]

    async def portfolio_value(self, db: AsyncSession, character_id: str) -> int:
        result = await db.execute(_PORTFOLIO_VALUE_SQL, {"character_id": character_id})
        return int(result.scalar_one())

    async def insert_stock_transaction(
        self, db: AsyncSession, tx: StockTransaction
    ) -> StockTransaction:
        result = await db.execute(
            _INSERT_TRADE_SQL,
            {
                "position_id": tx.position_id,
                "tx_type": tx.tx_type,
                "shares": tx.shares,
                "price_per_share": tx.price_per_share,
                "total_amount": tx.total_amount,
                "fees": tx.fees,
                "net_amount": tx.net_amount,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Stock transaction insert returned no rows")
        return _row_to_trade(row)

    async def insert_dividend_payment(
        self, db: AsyncSession, payment: DividendPayment
    ) -> DividendPayment:
        result = await db.execute(
            _INSERT_DIVIDEND_SQL,
            {
                "company_id": payment.company_id,
                "dividend_per_share": payment.dividend_per_share,
                "total_payout": payment.total_payout,
                "holders_paid": payment.holders_paid,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Dividend insert returned no rows")
        return DividendPayment(
            id=row.id,
            company_id=row.company_id,
            dividend_per_share=float(row.dividend_per_share),
            total_payout=row.total_payout,
            holders_paid=row.holders_paid,
            paid_at=row.paid_at,
        )
