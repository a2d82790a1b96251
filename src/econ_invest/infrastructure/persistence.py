"""InvestmentRepository: concrete implementation of InvestmentRepositoryProtocol.

Every state change carries ``status = 'ACTIVE'`` in its WHERE clause, so
MATURED / LIQUIDATED / CANCELLED rows are never touched again.
"""

from datetime import datetime

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.errors import InternalError
from src.econ_invest.domain.models import Investment

_COLUMNS = """
    i.id, i.account_id, i.product_id, i.investment_type, i.product_name,
    i.principal, i.current_value, i.interest_rate, i.term_months, i.status,
    i.invested_at, i.maturity_date, i.closed_at, a.character_id
"""

_INSERT_SQL = text("""
    INSERT INTO investments
        (id, account_id, product_id, investment_type, product_name, principal,
         current_value, interest_rate, term_months, status, maturity_date)
    VALUES
        (:id, :account_id, :product_id, :investment_type, :product_name, :principal,
         :current_value, :interest_rate, :term_months, :status, :maturity_date)
    RETURNING id, invested_at
""")

_GET_FOR_UPDATE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM investments i
    JOIN bank_accounts a ON a.id = i.account_id
    WHERE i.id = :investment_id
    FOR UPDATE OF i
""")

_LIST_BY_ACCOUNT_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM investments i
    JOIN bank_accounts a ON a.id = i.account_id
    WHERE i.account_id = :account_id
    ORDER BY i.invested_at DESC
""")

_LIST_MATURED_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM investments i
    JOIN bank_accounts a ON a.id = i.account_id
    WHERE i.status = 'ACTIVE'
      AND i.maturity_date IS NOT NULL
      AND i.maturity_date <= :now
    ORDER BY i.maturity_date
""")

_LIST_ACTIVE_BY_TYPES_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM investments i
    JOIN bank_accounts a ON a.id = i.account_id
    WHERE i.status = 'ACTIVE'
      AND i.investment_type IN :investment_types
    ORDER BY i.id
""").bindparams(bindparam("investment_types", expanding=True))

_CLOSE_SQL = text(f"""
    UPDATE investments i
    SET status = :status,
        current_value = :final_value,
        closed_at = NOW()
    FROM bank_accounts a
    WHERE a.id = i.account_id
      AND i.id = :investment_id
      AND i.status = 'ACTIVE'
    RETURNING {_COLUMNS}
""")

_UPDATE_VALUE_SQL = text("""
    UPDATE investments
    SET current_value = :value
    WHERE id = :investment_id AND status = 'ACTIVE'
    RETURNING id
""")

_SUMMARY_SQL = text("""
    SELECT COUNT(*) AS active_investments,
           COALESCE(SUM(current_value), 0) AS invested_value
    FROM investments
    WHERE status = 'ACTIVE'
""")


def _row_to_investment(row: object) -> Investment:
    return Investment(
        id=row.id,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        product_id=row.product_id,  # type: ignore[attr-defined]
        investment_type=row.investment_type,  # type: ignore[attr-defined]
        product_name=row.product_name,  # type: ignore[attr-defined]
        principal=row.principal,  # type: ignore[attr-defined]
        current_value=row.current_value,  # type: ignore[attr-defined]
        interest_rate=float(row.interest_rate),  # type: ignore[attr-defined]
        term_months=row.term_months,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        invested_at=row.invested_at,  # type: ignore[attr-defined]
        maturity_date=row.maturity_date,  # type: ignore[attr-defined]
        closed_at=row.closed_at,  # type: ignore[attr-defined]
        character_id=row.character_id,  # type: ignore[attr-defined]
    )


class InvestmentRepository:
    async def create_investment(self, db: AsyncSession, investment: Investment) -> Investment:
        result = await db.execute(
            _INSERT_SQL,
            {
                "id": investment.id,
                "account_id": investment.account_id,
                "product_id": investment.product_id,
                "investment_type": investment.investment_type,
                "product_name": investment.product_name,
                "principal": investment.principal,
                "current_value": investment.current_value,
                "interest_rate": investment.interest_rate,
                "term_months": investment.term_months,
                "status": investment.status,
                "maturity_date": investment.maturity_date,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Investment insert returned no rows")
        investment.invested_at = row.invested_at
        return investment

    async def get_for_update(
        self, db: AsyncSession, investment_id: str
    ) -> Investment | None:
        result = await db.execute(_GET_FOR_UPDATE_SQL, {"investment_id": investment_id})
        row = result.fetchone()
        return _row_to_investment(row) if row else None

    async def list_by_account(self, db: AsyncSession, account_id: str) -> list[Investment]:
        result = await db.execute(_LIST_BY_ACCOUNT_SQL, {"account_id": account_id})
        return [_row_to_investment(row) for row in result.fetchall()]

    async def list_matured(self, db: AsyncSession, now: datetime) -> list[Investment]:
        result = await db.execute(_LIST_MATURED_SQL, {"now": now})
        return [_row_to_investment(row) for row in result.fetchall()]

    async def list_active_by_types(
        self, db: AsyncSession, investment_types: list[str]
    ) -> list[Investment]:
        result = await db.execute(
            _LIST_ACTIVE_BY_TYPES_SQL, {"investment_types": investment_types}
        )
        return [_row_to_investment(row) for row in result.fetchall()]

    async def close_investment(
        self, db: AsyncSession, investment_id: str, status: str, final_value: int
    ) -> Investment | None:
        result = await db.execute(
            _CLOSE_SQL,
            {"investment_id": investment_id, "status": status, "final_value": final_value},
        )
        row = result.fetchone()
        return _row_to_investment(row) if row else None

    async def update_current_value(
        self, db: AsyncSession, investment_id: str, value: int
    ) -> bool:
        result = await db.execute(
            _UPDATE_VALUE_SQL, {"investment_id": investment_id, "value": value}
        )
        return result.fetchone() is not None

    async def summarize(self, db: AsyncSession) -> dict[str, int]:
        result = await db.execute(_SUMMARY_SQL)
        row = result.fetchone()
        return {
            "active_investments": row.active_investments,  # type: ignore[union-attr]
            "invested_value": int(row.invested_value),  # type: ignore[union-attr]
        }
