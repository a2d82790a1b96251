"""When and how much of an event impact reaches the price.

IMMEDIATE impacts hit once at creation. DELAYED impacts hit once, the first
pass after ``applied_at``. GRADUAL impacts spread their percentage evenly
over ``duration_hours``; the pass computes how many whole hours have elapsed
and pushes only the hours not yet applied, so a skipped pass catches up and
a repeated one is a no-op.
"""

import random
from datetime import datetime, timedelta

from src.econ_common.datetime_utils import hours_between, hours_from
from src.econ_events.domain.models import EventStockImpact

BASE_TRIGGER_CHANCE = 0.3
GLOBAL_ACTIVE_TRIGGER_CHANCE = 0.1
IMPACT_JITTER = 0.4                 # ±20 % around the sector baseline
DELAY = timedelta(hours=24)


def trigger_chance(global_event_active: bool) -> float:
    return GLOBAL_ACTIVE_TRIGGER_CHANCE if global_event_active else BASE_TRIGGER_CHANCE


def jittered_percentage(base: float, rng: random.Random) -> float:
    return base * (1 + (rng.random() - 0.5) * IMPACT_JITTER)


def impact_window(
    now: datetime, impact_type: str, duration_hours: int
) -> tuple[datetime, datetime]:
    """(applied_at, expires_at) for a new impact created at ``now``."""
    applied_at = now + DELAY if impact_type == "DELAYED" else now
    return applied_at, hours_from(now, duration_hours)


def delayed_is_due(impact: EventStockImpact, now: datetime) -> bool:
    return not impact.is_applied and impact.applied_at <= now < impact.expires_at


def gradual_hours_due(impact: EventStockImpact, now: datetime) -> int:
    if impact.duration_hours <= 0 or now < impact.applied_at:
        return 0
    elapsed = min(hours_between(impact.applied_at, now), impact.duration_hours)
    return max(0, elapsed - impact.hours_applied)


def gradual_percentage(impact: EventStockImpact, hours: int) -> float:
    return impact.impact_percentage * hours / impact.duration_hours
