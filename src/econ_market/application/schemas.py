"""Pydantic schemas for econ_market."""

from pydantic import BaseModel, Field

from src.econ_common.cents import cents_to_display
from src.econ_market.domain.models import (
    Company,
    PortfolioPosition,
    StockPricePoint,
    StockTransaction,
)
from src.econ_market.domain.overview import MarketOverview, Quote
from src.econ_market.domain.trading import gain_loss_percent


class TradeRequest(BaseModel):
    company_id: str
    shares: int = Field(..., gt=0)


class CompanyResponse(BaseModel):
    company_id: str
    name: str
    ticker: str
    sector: str
    description: str
    current_price_cents: int
    current_price_display: str
    market_cap_cents: int
    dividend_yield: float
    pe_ratio: float
    price_change_cents: int
    price_change_percent: float
    volume: int
    is_active: bool

    @classmethod
    def from_quote(cls, company: Company, point: StockPricePoint | None) -> "CompanyResponse":
        return cls(
            company_id=company.id,
            name=company.name,
            ticker=company.ticker,
            sector=company.sector,
            description=company.description,
            current_price_cents=company.current_price,
            current_price_display=cents_to_display(company.current_price),
            market_cap_cents=company.market_cap,
            dividend_yield=company.dividend_yield,
            pe_ratio=company.pe_ratio,
            price_change_cents=point.price_change if point else 0,
            price_change_percent=point.price_change_percent if point else 0.0,
            volume=point.volume if point else 0,
            is_active=company.is_active,
        )


class PricePointItem(BaseModel):
    price_cents: int
    volume: int
    high_cents: int
    low_cents: int
    open_cents: int
    close_cents: int
    change_cents: int
    change_percent: float
    created_at: str | None

    @classmethod
    def from_point(cls, point: StockPricePoint) -> "PricePointItem":
        return cls(
            price_cents=point.price,
            volume=point.volume,
            high_cents=point.high,
            low_cents=point.low,
            open_cents=point.open_price,
            close_cents=point.close_price,
            change_cents=point.price_change,
            change_percent=point.price_change_percent,
            created_at=point.created_at.isoformat() if point.created_at else None,
        )


class TradeResponse(BaseModel):
    trade_id: int
    ticker: str
    trade_type: str
    shares: int
    price_per_share_cents: int
    total_amount_cents: int
    fees_cents: int
    net_amount_cents: int
    net_amount_display: str
    shares_held: int
    position_value_cents: int
    realized_gain_loss_cents: int | None = None

    @classmethod
    def from_trade(
        cls,
        ticker: str,
        trade: StockTransaction,
        position: PortfolioPosition,
        realized: int | None = None,
    ) -> "TradeResponse":
        return cls(
            trade_id=trade.id,
            ticker=ticker,
            trade_type=trade.tx_type,
            shares=trade.shares,
            price_per_share_cents=trade.price_per_share,
            total_amount_cents=trade.total_amount,
            fees_cents=trade.fees,
            net_amount_cents=trade.net_amount,
            net_amount_display=cents_to_display(trade.net_amount),
            shares_held=position.shares_owned,
            position_value_cents=position.current_value,
            realized_gain_loss_cents=realized,
        )


class PositionItem(BaseModel):
    company_id: str
    company_name: str
    ticker: str
    shares_owned: int
    average_cost_cents: int
    current_price_cents: int
    current_value_cents: int
    total_invested_cents: int
    unrealized_gain_loss_cents: int
    unrealized_gain_loss_percent: float


class StockPortfolioResponse(BaseModel):
    total_value_cents: int
    total_value_display: str
    total_invested_cents: int
    total_gain_loss_cents: int
    total_gain_loss_percent: float
    positions: list[PositionItem]

    @classmethod
    def from_positions(
        cls, positions: list[PortfolioPosition], companies: dict[str, Company]
    ) -> "StockPortfolioResponse":
        items: list[PositionItem] = []
        for position in positions:
            company = companies[position.company_id]
            value = position.shares_owned * company.current_price
            gain = value - position.total_invested
            items.append(
                PositionItem(
                    company_id=company.id,
                    company_name=company.name,
                    ticker=company.ticker,
                    shares_owned=position.shares_owned,
                    average_cost_cents=position.average_cost,
                    current_price_cents=company.current_price,
                    current_value_cents=value,
                    total_invested_cents=position.total_invested,
                    unrealized_gain_loss_cents=gain,
                    unrealized_gain_loss_percent=gain_loss_percent(gain, position.total_invested),
                )
            )
        total_value = sum(item.current_value_cents for item in items)
        total_invested = sum(item.total_invested_cents for item in items)
        return cls(
            total_value_cents=total_value,
            total_value_display=cents_to_display(total_value),
            total_invested_cents=total_invested,
            total_gain_loss_cents=total_value - total_invested,
            total_gain_loss_percent=gain_loss_percent(total_value - total_invested, total_invested),
            positions=items,
        )


class MarketOverviewResponse(BaseModel):
    total_market_cap_cents: int
    average_change_percent: float
    top_gainers: list[CompanyResponse]
    top_losers: list[CompanyResponse]
    most_active: list[CompanyResponse]

    @classmethod
    def from_overview(cls, overview: MarketOverview) -> "MarketOverviewResponse":
        def convert(quotes: list[Quote]) -> list[CompanyResponse]:
            return [CompanyResponse.from_quote(q.company, q.last_point) for q in quotes]

        return cls(
            total_market_cap_cents=overview.total_market_cap,
            average_change_percent=overview.average_change_percent,
            top_gainers=convert(overview.top_gainers),
            top_losers=convert(overview.top_losers),
            most_active=convert(overview.most_active),
        )
