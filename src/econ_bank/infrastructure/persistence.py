"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

Every balance change is one conditional PostgreSQL UPDATE ... RETURNING
followed by the matching ledger INSERT. A result of 0 rows means a business
constraint was violated (missing account, inactive account, insufficient
funds); the repository re-reads the row to raise the precise error.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_bank.domain.models import Account, Transaction
from src.econ_common.errors import (
    AccountNotActiveError,
    AccountNotFoundError,
    InsufficientBalanceError,
    InternalError,
)

_ACCOUNT_COLUMNS = """
    id, character_id, account_type, balance, credit_score, credit_limit,
    interest_rate, status, version, opened_at, updated_at, last_interest_at
"""

# ---------------------------------------------------------------------------
# SQL: bank_accounts
# ---------------------------------------------------------------------------

_GET_ACCOUNT_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM bank_accounts
    WHERE character_id = :character_id
""")

_GET_ACCOUNT_FOR_UPDATE_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM bank_accounts
    WHERE character_id = :character_id
    FOR UPDATE
""")

_INSERT_ACCOUNT_SQL = text(f"""
    INSERT INTO bank_accounts
        (id, character_id, account_type, balance, credit_score, credit_limit,
         interest_rate, status)
    VALUES
        (:id, :character_id, :account_type, :balance, :credit_score, :credit_limit,
         :interest_rate, :status)
    RETURNING {_ACCOUNT_COLUMNS}
""")

_POST_BALANCE_SQL = text(f"""
    UPDATE bank_accounts
    SET balance = balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE character_id = :character_id
      AND balance + :amount >= 0
      AND (CAST(:require_active AS BOOLEAN) = FALSE OR status = 'ACTIVE')
    RETURNING {_ACCOUNT_COLUMNS}
""")

_ADJUST_CREDIT_SQL = text(f"""
    UPDATE bank_accounts
    SET credit_score = LEAST(850, GREATEST(300, credit_score + :delta)),
        version = version + 1,
        updated_at = NOW()
    WHERE character_id = :character_id
    RETURNING {_ACCOUNT_COLUMNS}
""")

_SET_STATUS_SQL = text(f"""
    UPDATE bank_accounts
    SET status = :status,
        version = version + 1,
        updated_at = NOW()
    WHERE character_id = :character_id
    RETURNING {_ACCOUNT_COLUMNS}
""")

_COUNT_ACTIVE_LOANS_SQL = text("""
    SELECT COUNT(*) AS loan_count
    FROM loans
    WHERE account_id = :account_id AND status = 'ACTIVE'
""")

_LIST_INTEREST_CANDIDATES_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM bank_accounts
    WHERE status = 'ACTIVE' AND balance > 0
    ORDER BY id
""")

# Conditional on the previous accrual being before today's UTC midnight, so a
# second run on the same day updates nothing.
_MARK_INTEREST_SQL = text("""
    UPDATE bank_accounts
    SET last_interest_at = :accrued_at
    WHERE id = :account_id
      AND (last_interest_at IS NULL OR last_interest_at < :day_start)
    RETURNING id
""")

_SUMMARY_SQL = text("""
    SELECT COUNT(*) AS total_accounts,
           COUNT(*) FILTER (WHERE status = 'ACTIVE') AS active_accounts,
           COALESCE(SUM(balance), 0) AS total_deposits
    FROM bank_accounts
""")

# ---------------------------------------------------------------------------
# SQL: bank_transactions (append-only)
# ---------------------------------------------------------------------------

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO bank_transactions
        (account_id, tx_type, amount, balance_after,
         description, reference_type, reference_id)
    VALUES
        (:account_id, :tx_type, :amount, :balance_after,
         :description, :reference_type, :reference_id)
    RETURNING id, account_id, tx_type, amount, balance_after,
              description, reference_type, reference_id, created_at
""")

_LIST_TRANSACTIONS_SQL = text("""
    SELECT id, account_id, tx_type, amount, balance_after,
           description, reference_type, reference_id, created_at
    FROM bank_transactions
    WHERE account_id = :account_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < :cursor_id)
      AND (CAST(:tx_type AS VARCHAR) IS NULL OR tx_type = :tx_type)
    ORDER BY id DESC
    LIMIT :limit
""")

_REPLAY_TRANSACTIONS_SQL = text("""
    SELECT id, account_id, tx_type, amount, balance_after,
           description, reference_type, reference_id, created_at
    FROM bank_transactions
    WHERE account_id = :account_id
    ORDER BY id ASC
""")


def _row_to_account(row: object) -> Account:
    return Account(
        id=row.id,  # type: ignore[attr-defined]
        character_id=row.character_id,  # type: ignore[attr-defined]
        account_type=row.account_type,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        credit_score=row.credit_score,  # type: ignore[attr-defined]
        credit_limit=row.credit_limit,  # type: ignore[attr-defined]
        interest_rate=float(row.interest_rate),  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        opened_at=row.opened_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
        last_interest_at=row.last_interest_at,  # type: ignore[attr-defined]
    )


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        tx_type=row.tx_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository. All balance changes atomic at the SQL level."""

    async def get_account(
        self, db: AsyncSession, character_id: str, for_update: bool = False
    ) -> Account | None:
        sql = _GET_ACCOUNT_FOR_UPDATE_SQL if for_update else _GET_ACCOUNT_SQL
        result = await db.execute(sql, {"character_id": character_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def create_account(self, db: AsyncSession, account: Account) -> Account:
        result = await db.execute(
            _INSERT_ACCOUNT_SQL,
            {
                "id": account.id,
                "character_id": account.character_id,
                "account_type": account.account_type,
                "balance": account.balance,
                "credit_score": account.credit_score,
                "credit_limit": account.credit_limit,
                "interest_rate": account.interest_rate,
                "status": account.status,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Account insert returned no rows")
        return _row_to_account(row)

    async def post_transaction(
        self,
        db: AsyncSession,
        character_id: str,
        amount: int,
        tx_type: str,
        description: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
        require_active: bool = True,
    ) -> tuple[Account, Transaction]:
        """Apply a signed amount and append the ledger row in one unit."""
        result = await db.execute(
            _POST_BALANCE_SQL,
            {
                "character_id": character_id,
                "amount": amount,
                "require_active": require_active,
            },
        )
        row = result.fetchone()
        if row is None:
            current = await self.get_account(db, character_id)
            if current is None:
                raise AccountNotFoundError(character_id)
            if require_active and not current.is_active:
                raise AccountNotActiveError(character_id, current.status)
            raise InsufficientBalanceError(-amount, current.balance)
        account = _row_to_account(row)
        tx_result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "account_id": account.id,
                "tx_type": tx_type,
                "amount": amount,
                "balance_after": account.balance,
                "description": description,
                "reference_type": reference_type,
                "reference_id": reference_id,
            },
        )
        tx_row = tx_result.fetchone()
        if tx_row is None:
            raise InternalError("Ledger insert returned no rows")
        return account, _row_to_transaction(tx_row)

    async def adjust_credit_score(
        self, db: AsyncSession, character_id: str, delta: int
    ) -> Account | None:
        result = await db.execute(
            _ADJUST_CREDIT_SQL, {"character_id": character_id, "delta": delta}
        )
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def set_status(
        self, db: AsyncSession, character_id: str, status: str
    ) -> Account | None:
        result = await db.execute(
            _SET_STATUS_SQL, {"character_id": character_id, "status": status}
        )
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def count_active_loans(self, db: AsyncSession, account_id: str) -> int:
        result = await db.execute(_COUNT_ACTIVE_LOANS_SQL, {"account_id": account_id})
        return int(result.scalar_one())

    async def list_interest_candidates(self, db: AsyncSession) -> list[Account]:
        result = await db.execute(_LIST_INTEREST_CANDIDATES_SQL)
        return [_row_to_account(row) for row in result.fetchall()]

    async def mark_interest_accrued(
        self, db: AsyncSession, account_id: str, accrued_at: datetime
    ) -> bool:
        day_start = accrued_at.replace(hour=0, minute=0, second=0, microsecond=0)
        result = await db.execute(
            _MARK_INTEREST_SQL,
            {"account_id": account_id, "accrued_at": accrued_at, "day_start": day_start},
        )
        return result.fetchone() is not None

    async def list_transactions(
        self,
        db: AsyncSession,
        account_id: str,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_TRANSACTIONS_SQL,
            {
                "account_id": account_id,
                "cursor_id": cursor_id,
                "tx_type": tx_type,
                "limit": limit,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def replay_transactions(
        self, db: AsyncSession, account_id: str
    ) -> list[Transaction]:
        result = await db.execute(_REPLAY_TRANSACTIONS_SQL, {"account_id": account_id})
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def summarize(self, db: AsyncSession) -> dict[str, int]:
        result = await db.execute(_SUMMARY_SQL)
        row = result.fetchone()
        return {
            "total_accounts": row.total_accounts,  # type: ignore[union-attr]
            "active_accounts": row.active_accounts,  # type: ignore[union-attr]
            "total_deposits": int(row.total_deposits),  # type: ignore[union-attr]
        }
