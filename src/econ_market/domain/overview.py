"""Market-wide aggregates over the latest quote of every company."""

from dataclasses import dataclass, field

from src.econ_market.domain.models import Company, StockPricePoint

TOP_N = 5


@dataclass(frozen=True)
class Quote:
    company: Company
    last_point: StockPricePoint | None

    @property
    def change_percent(self) -> float:
        return self.last_point.price_change_percent if self.last_point else 0.0

    @property
    def volume(self) -> int:
        return self.last_point.volume if self.last_point else 0


@dataclass
class MarketOverview:
    total_market_cap: int
    average_change_percent: float
    company_count: int = 0
    top_gainers: list[Quote] = field(default_factory=list)
    top_losers: list[Quote] = field(default_factory=list)
    most_active: list[Quote] = field(default_factory=list)


def build_overview(quotes: list[Quote], top_n: int = TOP_N) -> MarketOverview:
    if not quotes:
        return MarketOverview(total_market_cap=0, average_change_percent=0.0)
    by_change = sorted(quotes, key=lambda q: q.change_percent, reverse=True)
    return MarketOverview(
        total_market_cap=sum(q.company.market_cap for q in quotes),
        average_change_percent=round(
            sum(q.change_percent for q in quotes) / len(quotes), 4
        ),
        company_count=len(quotes),
        top_gainers=by_change[:top_n],
        top_losers=list(reversed(by_change[-top_n:])),
        most_active=sorted(quotes, key=lambda q: q.volume, reverse=True)[:top_n],
    )
