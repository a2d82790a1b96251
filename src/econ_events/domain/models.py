"""Domain models for econ_events: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SectorImpact:
    sector: str                      # CompanySector value
    impact_percentage: float
    impact_type: str                 # ImpactType value
    duration_hours: int | None = None  # None: lasts as long as the event


@dataclass(frozen=True)
class EventTemplate:
    event_type: str                  # WorldEventType value
    title: str
    description: str
    severity: int                    # 1..5
    duration_hours: int
    global_impact: bool
    sector_impacts: tuple[SectorImpact, ...]


@dataclass
class WorldEvent:
    id: str
    event_type: str
    title: str
    description: str
    severity: int
    duration_hours: int
    global_impact: bool
    occurred_at: datetime
    expires_at: datetime


@dataclass
class EventStockImpact:
    """One company's exposure to an event.

    ``is_applied`` marks a DELAYED (or IMMEDIATE) shock as done;
    ``hours_applied`` counts the GRADUAL hours already pushed into the price.
    """

    id: int
    event_id: str
    company_id: str
    impact_percentage: float
    duration_hours: int
    impact_type: str
    applied_at: datetime
    expires_at: datetime
    is_applied: bool = False
    hours_applied: int = 0
    ticker: str = ""
    company_name: str = ""
