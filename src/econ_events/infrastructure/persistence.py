"""EventRepository: concrete implementation of EventRepositoryProtocol.

Impact bookkeeping is guarded in SQL: ``mark_applied`` only flips an unapplied
row and ``set_hours_applied`` only moves the counter forward, so a shock is
never pushed twice even if two passes overlap.
"""

from datetime import datetime

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.errors import InternalError
from src.econ_events.domain.models import EventStockImpact, WorldEvent

_EVENT_COLUMNS = """
    id, event_type, title, description, severity, duration_hours,
    global_impact, occurred_at, expires_at
"""

_IMPACT_COLUMNS = """
    i.id, i.event_id, i.company_id, i.impact_percentage, i.duration_hours,
    i.impact_type, i.applied_at, i.expires_at, i.is_applied, i.hours_applied,
    c.ticker, c.name AS company_name
"""

_COUNT_ACTIVE_GLOBAL_SQL = text("""
    SELECT COUNT(*) FROM world_events
    WHERE global_impact = TRUE AND expires_at > :now
""")

_INSERT_EVENT_SQL = text(f"""
    INSERT INTO world_events
        (id, event_type, title, description, severity, duration_hours,
         global_impact, occurred_at, expires_at)
    VALUES
        (:id, :event_type, :title, :description, :severity, :duration_hours,
         :global_impact, :occurred_at, :expires_at)
    RETURNING {_EVENT_COLUMNS}
""")

_INSERT_IMPACT_SQL = text(f"""
    WITH inserted AS (
        INSERT INTO event_stock_impacts
            (event_id, company_id, impact_percentage, duration_hours, impact_type,
             applied_at, expires_at, is_applied, hours_applied)
        VALUES
            (:event_id, :company_id, :impact_percentage, :duration_hours, :impact_type,
             :applied_at, :expires_at, :is_applied, :hours_applied)
        RETURNING *
    )
    SELECT {_IMPACT_COLUMNS}
    FROM inserted i
    JOIN companies c ON c.id = i.company_id
""")

_DUE_DELAYED_SQL = text(f"""
    SELECT {_IMPACT_COLUMNS}
    FROM event_stock_impacts i
    JOIN companies c ON c.id = i.company_id
    WHERE i.impact_type = 'DELAYED'
      AND i.is_applied = FALSE
      AND i.applied_at <= :now
      AND i.expires_at > :now
    ORDER BY i.id
""")

_PENDING_GRADUAL_SQL = text(f"""
    SELECT {_IMPACT_COLUMNS}
    FROM event_stock_impacts i
    JOIN companies c ON c.id = i.company_id
    WHERE i.impact_type = 'GRADUAL'
      AND i.applied_at <= :now
      AND i.hours_applied < i.duration_hours
    ORDER BY i.id
""")

_GET_IMPACT_FOR_UPDATE_SQL = text(f"""
    SELECT {_IMPACT_COLUMNS}
    FROM event_stock_impacts i
    JOIN companies c ON c.id = i.company_id
    WHERE i.id = :impact_id
    FOR UPDATE OF i
""")

_MARK_APPLIED_SQL = text("""
    UPDATE event_stock_impacts
    SET is_applied = TRUE
    WHERE id = :impact_id AND is_applied = FALSE
    RETURNING id
""")

_SET_HOURS_SQL = text("""
    UPDATE event_stock_impacts
    SET hours_applied = :hours
    WHERE id = :impact_id
      AND hours_applied < :hours
      AND :hours <= duration_hours
    RETURNING id
""")

_PURGE_IMPACTS_SQL = text("DELETE FROM event_stock_impacts WHERE expires_at < :now")

_PURGE_EVENTS_SQL = text("""
    DELETE FROM world_events e
    WHERE e.expires_at < :now
      AND NOT EXISTS (
          SELECT 1 FROM event_stock_impacts i WHERE i.event_id = e.id
      )
""")

_ACTIVE_EVENTS_SQL = text(f"""
    SELECT {_EVENT_COLUMNS}
    FROM world_events
    WHERE expires_at > :now
    ORDER BY occurred_at DESC
""")

_EVENT_HISTORY_SQL = text(f"""
    SELECT {_EVENT_COLUMNS}
    FROM world_events
    ORDER BY occurred_at DESC
    LIMIT :limit
""")

_IMPACTS_FOR_EVENTS_SQL = text(f"""
    SELECT {_IMPACT_COLUMNS}
    FROM event_stock_impacts i
    JOIN companies c ON c.id = i.company_id
    WHERE i.event_id IN :event_ids
    ORDER BY i.id
""").bindparams(bindparam("event_ids", expanding=True))


def _row_to_event(row: object) -> WorldEvent:
    return WorldEvent(
        id=row.id,  # type: ignore[attr-defined]
        event_type=row.event_type,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        severity=row.severity,  # type: ignore[attr-defined]
        duration_hours=row.duration_hours,  # type: ignore[attr-defined]
        global_impact=row.global_impact,  # type: ignore[attr-defined]
        occurred_at=row.occurred_at,  # type: ignore[attr-defined]
        expires_at=row.expires_at,  # type: ignore[attr-defined]
    )


def _row_to_impact(row: object) -> EventStockImpact:
    return EventStockImpact(
        id=row.id,  # type: ignore[attr-defined]
        event_id=row.event_id,  # type: ignore[attr-defined]
        company_id=row.company_id,  # type: ignore[attr-defined]
        impact_percentage=float(row.impact_percentage),  # type: ignore[attr-defined]
        duration_hours=row.duration_hours,  # type: ignore[attr-defined]
        impact_type=row.impact_type,  # type: ignore[attr-defined]
        applied_at=row.applied_at,  # type: ignore[attr-defined]
        expires_at=row.expires_at,  # type: ignore[attr-defined]
        is_applied=row.is_applied,  # type: ignore[attr-defined]
        hours_applied=row.hours_applied,  # type: ignore[attr-defined]
        ticker=row.ticker,  # type: ignore[attr-defined]
        company_name=row.company_name,  # type: ignore[attr-defined]
    )


class EventRepository:
    async def count_active_global(self, db: AsyncSession, now: datetime) -> int:
        result = await db.execute(_COUNT_ACTIVE_GLOBAL_SQL, {"now": now})
        return int(result.scalar_one())

    async def create_event(self, db: AsyncSession, event: WorldEvent) -> WorldEvent:
        result = await db.execute(
            _INSERT_EVENT_SQL,
            {
                "id": event.id,
                "event_type": event.event_type,
                "title": event.title,
                "description": event.description,
                "severity": event.severity,
                "duration_hours": event.duration_hours,
                "global_impact": event.global_impact,
                "occurred_at": event.occurred_at,
                "expires_at": event.expires_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("World event insert returned no rows")
        return _row_to_event(row)

    async def create_impact(
        self, db: AsyncSession, impact: EventStockImpact
    ) -> EventStockImpact:
        result = await db.execute(
            _INSERT_IMPACT_SQL,
            {
                "event_id": impact.event_id,
                "company_id": impact.company_id,
                "impact_percentage": impact.impact_percentage,
                "duration_hours": impact.duration_hours,
                "impact_type": impact.impact_type,
                "applied_at": impact.applied_at,
                "expires_at": impact.expires_at,
                "is_applied": impact.is_applied,
                "hours_applied": impact.hours_applied,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Event impact insert returned no rows")
        return _row_to_impact(row)

    async def list_due_delayed(
        self, db: AsyncSession, now: datetime
    ) -> list[EventStockImpact]:
        result = await db.execute(_DUE_DELAYED_SQL, {"now": now})
        return [_row_to_impact(row) for row in result.fetchall()]

    async def list_pending_gradual(
        self, db: AsyncSession, now: datetime
    ) -> list[EventStockImpact]:
        result = await db.execute(_PENDING_GRADUAL_SQL, {"now": now})
        return [_row_to_impact(row) for row in result.fetchall()]

    async def get_impact_for_update(
        self, db: AsyncSession, impact_id: int
    ) -> EventStockImpact | None:
        result = await db.execute(_GET_IMPACT_FOR_UPDATE_SQL, {"impact_id": impact_id})
        row = result.fetchone()
        return _row_to_impact(row) if row else None

    async def mark_applied(self, db: AsyncSession, impact_id: int) -> bool:
        result = await db.execute(_MARK_APPLIED_SQL, {"impact_id": impact_id})
        return result.fetchone() is not None

    async def set_hours_applied(
        self, db: AsyncSession, impact_id: int, hours: int
    ) -> bool:
        result = await db.execute(_SET_HOURS_SQL, {"impact_id": impact_id, "hours": hours})
        return result.fetchone() is not None

    async def purge_expired_impacts(self, db: AsyncSession, now: datetime) -> int:
        result = await db.execute(_PURGE_IMPACTS_SQL, {"now": now})
        return result.rowcount

    async def purge_expired_events(self, db: AsyncSession, now: datetime) -> int:
        result = await db.execute(_PURGE_EVENTS_SQL, {"now": now})
        return result.rowcount

    async def list_active_events(
        self, db: AsyncSession, now: datetime
    ) -> list[WorldEvent]:
        result = await db.execute(_ACTIVE_EVENTS_SQL, {"now": now})
        return [_row_to_event(row) for row in result.fetchall()]

    async def list_event_history(self, db: AsyncSession, limit: int) -> list[WorldEvent]:
        result = await db.execute(_EVENT_HISTORY_SQL, {"limit": limit})
        return [_row_to_event(row) for row in result.fetchall()]

    async def list_impacts_for_events(
        self, db: AsyncSession, event_ids: list[str]
    ) -> list[EventStockImpact]:
        if not event_ids:
            return []
        result = await db.execute(_IMPACTS_FOR_EVENTS_SQL, {"event_ids": event_ids})
        return [_row_to_impact(row) for row in result.fetchall()]
