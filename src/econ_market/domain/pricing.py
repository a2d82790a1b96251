"""Price dynamics: random walk per sector, event shocks, price points."""

import math
import random
from types import MappingProxyType

from src.econ_common.cents import round_cents
from src.econ_common.datetime_utils import SECONDS_PER_DAY
from src.econ_market.domain.models import StockPricePoint

MIN_PRICE = 1                   # one cent
SHARES_OUTSTANDING = 50_000

SECTOR_VOLATILITY = MappingProxyType({
    "TECHNOLOGY": 0.03,
    "RESOURCES": 0.025,
    "TRANSPORT": 0.02,
    "MANUFACTURING": 0.015,
    "SERVICES": 0.015,
    "FINANCE": 0.01,
})
DEFAULT_VOLATILITY = 0.02


def sector_volatility(sector: str) -> float:
    return SECTOR_VOLATILITY.get(sector, DEFAULT_VOLATILITY)


def daily_trend(epoch_seconds: float) -> float:
    """Slow market-wide drift shared by every company at a given moment."""
    return math.sin(epoch_seconds / SECONDS_PER_DAY) * 0.001


def random_walk_price(
    last_price: int, volatility: float, random_factor: float, trend: float
) -> int:
    """last × (1 + volatility × random_factor + trend), never below one cent.

    ``random_factor`` is a uniform draw in [-1, 1].
    """
    change = round_cents(last_price * (random_factor * volatility + trend))
    return max(MIN_PRICE, last_price + change)


def shocked_price(price: int, percent: float) -> int:
    return max(MIN_PRICE, round_cents(price * (1 + percent / 100)))


def market_cap(price: int) -> int:
    return price * SHARES_OUTSTANDING


def simulated_volume(rng: random.Random, change_percent: float) -> int:
    """Tick volume: 1,000-5,999 shares, doubled on moves above 2 %."""
    base = rng.randint(1_000, 5_999)
    return base * 2 if abs(change_percent) > 2 else base


def change_percent(last_price: int, new_price: int) -> float:
    if last_price <= 0:
        return 0.0
    return (new_price - last_price) / last_price * 100


def make_price_point(
    company_id: str, last_price: int, new_price: int, volume: int
) -> StockPricePoint:
    return StockPricePoint(
        id=0,
        company_id=company_id,
        price=new_price,
        volume=volume,
        high=max(new_price, last_price),
        low=min(new_price, last_price),
        open_price=last_price,
        close_price=new_price,
        price_change=new_price - last_price,
        price_change_percent=round(change_percent(last_price, new_price), 4),
    )
