"""EventApplicationService: world events and their effect on share prices.

Every price effect goes through ``MarketApplicationService.apply_price_shock``
so a shock records a price point and revalues positions like any other move.
"""

import logging
import random
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.datetime_utils import hours_from, utc_now
from src.econ_common.enums import ImpactType, WorldEventType
from src.econ_common.errors import EventTemplateNotFoundError, InvalidParameterError
from src.econ_common.id_generator import generate_id
from src.econ_common.response import OperationResult
from src.econ_common.rng import simulation_rng
from src.econ_common.unit_of_work import run_batch, run_operation
from src.econ_events.application.schemas import (
    EventTemplateItem,
    ImpactPassResponse,
    WorldEventResponse,
)
from src.econ_events.domain.models import EventStockImpact, EventTemplate, WorldEvent
from src.econ_events.domain.repository import EventRepositoryProtocol
from src.econ_events.domain.templates import EVENT_TEMPLATES, templates_for
from src.econ_events.domain.timing import (
    delayed_is_due,
    gradual_hours_due,
    gradual_percentage,
    impact_window,
    jittered_percentage,
    trigger_chance,
)
from src.econ_events.infrastructure.persistence import EventRepository
from src.econ_market.application.service import MarketApplicationService

logger = logging.getLogger(__name__)

MAX_HISTORY = 100


class EventApplicationService:
    def __init__(
        self,
        repo: EventRepositoryProtocol | None = None,
        market: MarketApplicationService | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._repo: EventRepositoryProtocol = repo or EventRepository()
        self._market = market or MarketApplicationService()
        self._rng = rng or simulation_rng()

    def list_templates(self) -> list[EventTemplateItem]:
        return [EventTemplateItem.from_template(t) for t in EVENT_TEMPLATES]

    # ------------------------------------------------------------------
    # Triggering
    # ------------------------------------------------------------------

    async def create_event_from_template(
        self, db: AsyncSession, template: EventTemplate, now: datetime | None = None
    ) -> tuple[WorldEvent, list[EventStockImpact]]:
        """Record the event, one impact per active company in each hit sector,
        and apply the IMMEDIATE shocks. Runs in the caller's unit."""
        now = now or utc_now()
        event = await self._repo.create_event(
            db,
            WorldEvent(
                id=generate_id("EVT"),
                event_type=template.event_type,
                title=template.title,
                description=template.description,
                severity=template.severity,
                duration_hours=template.duration_hours,
                global_impact=template.global_impact,
                occurred_at=now,
                expires_at=hours_from(now, template.duration_hours),
            ),
        )

        companies = await self._market.active_companies(db)
        impacts: list[EventStockImpact] = []
        for sector_impact in template.sector_impacts:
            duration = sector_impact.duration_hours or template.duration_hours
            immediate = sector_impact.impact_type == ImpactType.IMMEDIATE.value
            for company in companies:
                if company.sector != sector_impact.sector:
                    continue
                percentage = jittered_percentage(sector_impact.impact_percentage, self._rng)
                applied_at, expires_at = impact_window(
                    now, sector_impact.impact_type, duration
                )
                impact = await self._repo.create_impact(
                    db,
                    EventStockImpact(
                        id=0,
                        event_id=event.id,
                        company_id=company.id,
                        impact_percentage=percentage,
                        duration_hours=duration,
                        impact_type=sector_impact.impact_type,
                        applied_at=applied_at,
                        expires_at=expires_at,
                        is_applied=immediate,
                    ),
                )
                if immediate:
                    await self._market.apply_price_shock(db, company.id, percentage)
                impacts.append(impact)

        logger.info(
            "World event %s (%s) triggered, %d companies affected",
            template.title, template.event_type, len(impacts),
        )
        return event, impacts

    async def trigger_random_event(self, db: AsyncSession) -> OperationResult:
        async def work() -> OperationResult:
            active_global = await self._repo.count_active_global(db, utc_now())
            if self._rng.random() > trigger_chance(active_global > 0):
                return OperationResult.ok("No event triggered", None)
            template = self._rng.choice(EVENT_TEMPLATES)
            event, impacts = await self.create_event_from_template(db, template)
            return OperationResult.ok(
                f"Event triggered: {event.title}",
                WorldEventResponse.from_event(event, impacts),
            )

        return await run_operation(db, work)

    async def trigger_specific_event(
        self, db: AsyncSession, event_type: str
    ) -> OperationResult:
        async def work() -> OperationResult:
            try:
                kind = WorldEventType(event_type).value
            except ValueError:
                raise InvalidParameterError(f"event_type {event_type}") from None
            candidates = templates_for(kind)
            if not candidates:
                raise EventTemplateNotFoundError(kind)
            event, impacts = await self.create_event_from_template(
                db, self._rng.choice(candidates)
            )
            return OperationResult.ok(
                f"Event triggered: {event.title}",
                WorldEventResponse.from_event(event, impacts),
            )

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Ongoing impacts
    # ------------------------------------------------------------------

    async def process_ongoing_impacts(
        self, db: AsyncSession, now: datetime | None = None
    ) -> ImpactPassResponse:
        """Apply due DELAYED and GRADUAL shocks, one unit per impact, then purge."""
        now = now or utc_now()

        async def apply_delayed(impact: EventStockImpact) -> bool:
            if not delayed_is_due(impact, now):
                return False
            if not await self._repo.mark_applied(db, impact.id):
                return False
            await self._market.apply_price_shock(
                db, impact.company_id, impact.impact_percentage
            )
            logger.info(
                "Delayed impact applied: %s %+.2f%%", impact.ticker, impact.impact_percentage
            )
            return True

        async def apply_gradual(listed: EventStockImpact) -> bool:
            impact = await self._repo.get_impact_for_update(db, listed.id)
            if impact is None:
                return False
            hours = gradual_hours_due(impact, now)
            if hours <= 0:
                return False
            await self._repo.set_hours_applied(db, impact.id, impact.hours_applied + hours)
            await self._market.apply_price_shock(
                db, impact.company_id, gradual_percentage(impact, hours)
            )
            return True

        delayed = await run_batch(
            db, "delayed_impacts", await self._repo.list_due_delayed(db, now), apply_delayed
        )
        gradual = await run_batch(
            db, "gradual_impacts", await self._repo.list_pending_gradual(db, now), apply_gradual
        )

        # Impacts first: an event row goes only once nothing references it
        try:
            impacts_purged = await self._repo.purge_expired_impacts(db, now)
            events_purged = await self._repo.purge_expired_events(db, now)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Impact pass: delayed=%d gradual=%d purged impacts=%d events=%d",
            delayed, gradual, impacts_purged, events_purged,
        )
        return ImpactPassResponse(
            delayed_applied=delayed,
            gradual_applied=gradual,
            impacts_purged=impacts_purged,
            events_purged=events_purged,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def _with_impacts(
        self, db: AsyncSession, events: list[WorldEvent]
    ) -> list[WorldEventResponse]:
        impacts = await self._repo.list_impacts_for_events(db, [e.id for e in events])
        by_event: dict[str, list[EventStockImpact]] = {}
        for impact in impacts:
            by_event.setdefault(impact.event_id, []).append(impact)
        return [WorldEventResponse.from_event(e, by_event.get(e.id, [])) for e in events]

    async def list_active_events(self, db: AsyncSession) -> OperationResult:
        async def work() -> OperationResult:
            events = await self._repo.list_active_events(db, utc_now())
            return OperationResult.ok(
                f"{len(events)} active events", await self._with_impacts(db, events)
            )

        return await run_operation(db, work)

    async def get_event_history(self, db: AsyncSession, limit: int = 20) -> OperationResult:
        async def work() -> OperationResult:
            events = await self._repo.list_event_history(db, max(1, min(limit, MAX_HISTORY)))
            return OperationResult.ok(
                f"{len(events)} events", await self._with_impacts(db, events)
            )

        return await run_operation(db, work)
