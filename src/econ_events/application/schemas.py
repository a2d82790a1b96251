"""Pydantic schemas for econ_events."""

from pydantic import BaseModel

from src.econ_events.domain.models import EventStockImpact, EventTemplate, WorldEvent


class SectorImpactItem(BaseModel):
    sector: str
    impact_percentage: float
    impact_type: str
    duration_hours: int | None


class EventTemplateItem(BaseModel):
    event_type: str
    title: str
    description: str
    severity: int
    duration_hours: int
    global_impact: bool
    sector_impacts: list[SectorImpactItem]

    @classmethod
    def from_template(cls, template: EventTemplate) -> "EventTemplateItem":
        return cls(
            event_type=template.event_type,
            title=template.title,
            description=template.description,
            severity=template.severity,
            duration_hours=template.duration_hours,
            global_impact=template.global_impact,
            sector_impacts=[
                SectorImpactItem(
                    sector=s.sector,
                    impact_percentage=s.impact_percentage,
                    impact_type=s.impact_type,
                    duration_hours=s.duration_hours,
                )
                for s in template.sector_impacts
            ],
        )


class StockImpactItem(BaseModel):
    company_id: str
    ticker: str
    company_name: str
    impact_percentage: float
    impact_type: str
    duration_hours: int
    applied_at: str
    expires_at: str
    is_applied: bool
    hours_applied: int

    @classmethod
    def from_impact(cls, impact: EventStockImpact) -> "StockImpactItem":
        return cls(
            company_id=impact.company_id,
            ticker=impact.ticker,
            company_name=impact.company_name,
            impact_percentage=round(impact.impact_percentage, 4),
            impact_type=impact.impact_type,
            duration_hours=impact.duration_hours,
            applied_at=impact.applied_at.isoformat(),
            expires_at=impact.expires_at.isoformat(),
            is_applied=impact.is_applied,
            hours_applied=impact.hours_applied,
        )


class WorldEventResponse(BaseModel):
    event_id: str
    event_type: str
    title: str
    description: str
    severity: int
    duration_hours: int
    global_impact: bool
    occurred_at: str
    expires_at: str
    stock_impacts: list[StockImpactItem]

    @classmethod
    def from_event(
        cls, event: WorldEvent, impacts: list[EventStockImpact]
    ) -> "WorldEventResponse":
        return cls(
            event_id=event.id,
            event_type=event.event_type,
            title=event.title,
            description=event.description,
            severity=event.severity,
            duration_hours=event.duration_hours,
            global_impact=event.global_impact,
            occurred_at=event.occurred_at.isoformat(),
            expires_at=event.expires_at.isoformat(),
            stock_impacts=[StockImpactItem.from_impact(i) for i in impacts],
        )


class ImpactPassResponse(BaseModel):
    delayed_applied: int
    gradual_applied: int
    impacts_purged: int
    events_purged: int
