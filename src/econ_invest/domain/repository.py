"""Repository Protocol for held investments."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_invest.domain.models import Investment


class InvestmentRepositoryProtocol(Protocol):
    async def create_investment(self, db: AsyncSession, investment: Investment) -> Investment: ...

    async def get_for_update(
        self, db: AsyncSession, investment_id: str
    ) -> Investment | None: ...

    async def list_by_account(self, db: AsyncSession, account_id: str) -> list[Investment]: ...

    async def list_matured(self, db: AsyncSession, now: datetime) -> list[Investment]: ...

    async def list_active_by_types(
        self, db: AsyncSession, investment_types: list[str]
    ) -> list[Investment]: ...

    async def close_investment(
        self, db: AsyncSession, investment_id: str, status: str, final_value: int
    ) -> Investment | None: ...

    async def update_current_value(
        self, db: AsyncSession, investment_id: str, value: int
    ) -> bool: ...

    async def summarize(self, db: AsyncSession) -> dict[str, int]: ...
