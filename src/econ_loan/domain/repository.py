"""Repository Protocol for the loan book."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_loan.domain.models import Loan, LoanPayment


class LoanRepositoryProtocol(Protocol):
    async def create_loan(self, db: AsyncSession, loan: Loan) -> Loan: ...

    async def get_loan_for_update(self, db: AsyncSession, loan_id: str) -> Loan | None: ...

    async def get_loan(self, db: AsyncSession, loan_id: str) -> Loan | None: ...

    async def count_active(self, db: AsyncSession, account_id: str) -> int: ...

    async def list_loans(self, db: AsyncSession, account_id: str) -> list[Loan]: ...

    async def record_payment(
        self,
        db: AsyncSession,
        loan_id: str,
        remaining_balance: int,
        status: str,
        next_payment_due: datetime | None,
    ) -> Loan: ...

    async def insert_payment(self, db: AsyncSession, payment: LoanPayment) -> LoanPayment: ...

    async def summarize(self, db: AsyncSession) -> dict[str, int]: ...
