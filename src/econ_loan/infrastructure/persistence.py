"""LoanRepository: concrete implementation of LoanRepositoryProtocol.

Payments lock the loan row with SELECT ... FOR UPDATE; the status guard in
the UPDATE keeps PAID_OFF loans immutable.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.errors import InternalError, LoanNotFoundError
from src.econ_loan.domain.models import Loan, LoanPayment

_LOAN_COLUMNS = """
    id, account_id, principal, interest_rate, term_months, monthly_payment,
    remaining_balance, status, purpose, collateral_type, collateral_value,
    next_payment_due, approved_at, updated_at
"""

_INSERT_LOAN_SQL = text(f"""
    INSERT INTO loans
        (id, account_id, principal, interest_rate, term_months, monthly_payment,
         remaining_balance, status, purpose, collateral_type, collateral_value,
         next_payment_due)
    VALUES
        (:id, :account_id, :principal, :interest_rate, :term_months, :monthly_payment,
         :remaining_balance, :status, :purpose, :collateral_type, :collateral_value,
         :next_payment_due)
    RETURNING {_LOAN_COLUMNS}
""")

_GET_LOAN_SQL = text(f"SELECT {_LOAN_COLUMNS} FROM loans WHERE id = :loan_id")

_GET_LOAN_FOR_UPDATE_SQL = text(f"""
    SELECT {_LOAN_COLUMNS} FROM loans WHERE id = :loan_id FOR UPDATE
""")

_COUNT_ACTIVE_SQL = text("""
    SELECT COUNT(*) FROM loans WHERE account_id = :account_id AND status = 'ACTIVE'
""")

_LIST_LOANS_SQL = text(f"""
    SELECT {_LOAN_COLUMNS}
    FROM loans
    WHERE account_id = :account_id
    ORDER BY approved_at DESC
""")

_RECORD_PAYMENT_SQL = text(f"""
    UPDATE loans
    SET remaining_balance = :remaining_balance,
        status = :status,
        next_payment_due = :next_payment_due,
        updated_at = NOW()
    WHERE id = :loan_id AND status = 'ACTIVE'
    RETURNING {_LOAN_COLUMNS}
""")

_INSERT_PAYMENT_SQL = text("""
    INSERT INTO loan_payments
        (loan_id, payment_amount, principal_amount, interest_amount, payment_type)
    VALUES
        (:loan_id, :payment_amount, :principal_amount, :interest_amount, :payment_type)
    RETURNING id, loan_id, payment_amount, principal_amount, interest_amount,
              payment_type, created_at
""")

_SUMMARY_SQL = text("""
    SELECT COUNT(*) AS active_loans,
           COALESCE(SUM(remaining_balance), 0) AS outstanding
    FROM loans
    WHERE status = 'ACTIVE'
""")


def _row_to_loan(row: object) -> Loan:
    return Loan(
        id=row.id,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        principal=row.principal,  # type: ignore[attr-defined]
        interest_rate=float(row.interest_rate),  # type: ignore[attr-defined]
        term_months=row.term_months,  # type: ignore[attr-defined]
        monthly_payment=row.monthly_payment,  # type: ignore[attr-defined]
        remaining_balance=row.remaining_balance,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        purpose=row.purpose,  # type: ignore[attr-defined]
        collateral_type=row.collateral_type,  # type: ignore[attr-defined]
        collateral_value=row.collateral_value,  # type: ignore[attr-defined]
        next_payment_due=row.next_payment_due,  # type: ignore[attr-defined]
        approved_at=row.approved_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_payment(row: object) -> LoanPayment:
    return LoanPayment(
        id=row.id,  # type: ignore[attr-defined]
        loan_id=row.loan_id,  # type: ignore[attr-defined]
        payment_amount=row.payment_amount,  # type: ignore[attr-defined]
        principal_amount=row.principal_amount,  # type: ignore[attr-defined]
        interest_amount=row.interest_amount,  # type: ignore[attr-defined]
        payment_type=row.payment_type,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class LoanRepository:
    async def create_loan(self, db: AsyncSession, loan: Loan) -> Loan:
        result = await db.execute(
            _INSERT_LOAN_SQL,
            {
                "id": loan.id,
                "account_id": loan.account_id,
                "principal": loan.principal,
                "interest_rate": loan.interest_rate,
                "term_months": loan.term_months,
                "monthly_payment": loan.monthly_payment,
                "remaining_balance": loan.remaining_balance,
                "status": loan.status,
                "purpose": loan.purpose,
                "collateral_type": loan.collateral_type,
                "collateral_value": loan.collateral_value,
                "next_payment_due": loan.next_payment_due,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Loan insert returned no rows")
        return _row_to_loan(row)

    async def get_loan(self, db: AsyncSession, loan_id: str) -> Loan | None:
        result = await db.execute(_GET_LOAN_SQL, {"loan_id": loan_id})
        row = result.fetchone()
        return _row_to_loan(row) if row else None

    async def get_loan_for_update(self, db: AsyncSession, loan_id: str) -> Loan | None:
        result = await db.execute(_GET_LOAN_FOR_UPDATE_SQL, {"loan_id": loan_id})
        row = result.fetchone()
        return _row_to_loan(row) if row else None

    async def count_active(self, db: AsyncSession, account_id: str) -> int:
        result = await db.execute(_COUNT_ACTIVE_SQL, {"account_id": account_id})
        return int(result.scalar_one())

    async def list_loans(self, db: AsyncSession, account_id: str) -> list[Loan]:
        result = await db.execute(_LIST_LOANS_SQL, {"account_id": account_id})
        return [_row_to_loan(row) for row in result.fetchall()]

    async def record_payment(
        self,
        db: AsyncSession,
        loan_id: str,
        remaining_balance: int,
        status: str,
        next_payment_due: datetime | None,
    ) -> Loan:
        result = await db.execute(
            _RECORD_PAYMENT_SQL,
            {
                "loan_id": loan_id,
                "remaining_balance": remaining_balance,
                "status": status,
                "next_payment_due": next_payment_due,
            },
        )
        row = result.fetchone()
        if row is None:
            raise LoanNotFoundError(loan_id)
        return _row_to_loan(row)

    async def insert_payment(self, db: AsyncSession, payment: LoanPayment) -> LoanPayment:
        result = await db.execute(
            _INSERT_PAYMENT_SQL,
            {
                "loan_id": payment.loan_id,
                "payment_amount": payment.payment_amount,
                "principal_amount": payment.principal_amount,
                "interest_amount": payment.interest_amount,
                "payment_type": payment.payment_type,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Loan payment insert returned no rows")
        return _row_to_payment(row)

    async def summarize(self, db: AsyncSession) -> dict[str, int]:
        result = await db.execute(_SUMMARY_SQL)
        row = result.fetchone()
        return {
            "active_loans": row.active_loans,  # type: ignore[union-attr]
            "outstanding": int(row.outstanding),  # type: ignore[union-attr]
        }
