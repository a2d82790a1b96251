"""Repository Protocol for world events and their stock impacts."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_events.domain.models import EventStockImpact, WorldEvent


class EventRepositoryProtocol(Protocol):
    async def count_active_global(self, db: AsyncSession, now: datetime) -> int: ...

    async def create_event(self, db: AsyncSession, event: WorldEvent) -> WorldEvent: ...

    async def create_impact(
        self, db: AsyncSession, impact: EventStockImpact
    ) -> EventStockImpact: ...

    async def list_due_delayed(
        self, db: AsyncSession, now: datetime
    ) -> list[EventStockImpact]: ...

    async def list_pending_gradual(
        self, db: AsyncSession, now: datetime
    ) -> list[EventStockImpact]: ...

    async def get_impact_for_update(
        self, db: AsyncSession, impact_id: int
    ) -> EventStockImpact | None: ...

    async def mark_applied(self, db: AsyncSession, impact_id: int) -> bool: ...

    async def set_hours_applied(
        self, db: AsyncSession, impact_id: int, hours: int
    ) -> bool: ...

    async def purge_expired_impacts(self, db: AsyncSession, now: datetime) -> int: ...

    async def purge_expired_events(self, db: AsyncSession, now: datetime) -> int: ...

    async def list_active_events(
        self, db: AsyncSession, now: datetime
    ) -> list[WorldEvent]: ...

    async def list_event_history(self, db: AsyncSession, limit: int) -> list[WorldEvent]: ...

    async def list_impacts_for_events(
        self, db: AsyncSession, event_ids: list[str]
    ) -> list[EventStockImpact]: ...
