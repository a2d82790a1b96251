"""Supplier pricing, ranking, delivery and demand-driven markup rules."""

from src.econ_common.cents import round_cents
from src.econ_supply.domain.models import Supplier

DEFAULT_MARKUP = 50.0           # used when no supplier serves the class
RESET_MARKUP = 20.0
REPUTATION_DECAY = 0.95
HIGH_DEMAND_ORDERS = 10
LOW_DEMAND_ORDERS = 3
HIGH_DEMAND_FACTOR = 1.1
LOW_DEMAND_FACTOR = 0.95
DEMAND_WINDOW_DAYS = 7
FASTEST_DELIVERY_HOURS = 12
SLOWEST_DELIVERY_HOURS = 48


def marked_up(base_cents: int, markup_percentage: float) -> int:
    return round_cents(base_cents * (1 + markup_percentage / 100))


def rank_score(supplier: Supplier) -> float:
    return supplier.reputation - supplier.markup_percentage


def best_supplier(suppliers: list[Supplier]) -> Supplier | None:
    """Highest reputation minus markup; the first one listed wins a tie."""
    if not suppliers:
        return None
    return max(suppliers, key=rank_score)


def delivery_hours(reputation: float) -> int:
    """12 h at reputation 100, 48 h at 0, linear in between."""
    span = SLOWEST_DELIVERY_HOURS - FASTEST_DELIVERY_HOURS
    return round(FASTEST_DELIVERY_HOURS + span * (1 - reputation / 100))


def demand_factor(orders: int) -> float | None:
    """Markup multiplier for a week's order count, None when unchanged."""
    if orders > HIGH_DEMAND_ORDERS:
        return HIGH_DEMAND_FACTOR
    if orders < LOW_DEMAND_ORDERS:
        return LOW_DEMAND_FACTOR
    return None
