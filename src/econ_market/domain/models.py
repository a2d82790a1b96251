"""Domain models for econ_market: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Company:
    id: str
    name: str
    ticker: str
    sector: str                # CompanySector value
    description: str
    current_price: int         # cents per share, always >= 1
    market_cap: int            # cents
    dividend_yield: float      # annual %
    pe_ratio: float
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class StockPricePoint:
    """One price observation. Never modified after it is written."""

    id: int
    company_id: str
    price: int
    volume: int
    high: int
    low: int
    open_price: int
    close_price: int
    price_change: int
    price_change_percent: float
    created_at: datetime | None = None


@dataclass
class PortfolioPosition:
    id: str
    character_id: str
    company_id: str
    shares_owned: int = 0
    average_cost: int = 0          # cents per share
    total_invested: int = 0        # cost basis in cents, fees excluded
    current_value: int = 0         # shares × current price
    unrealized_gain_loss: int = 0  # current_value − total_invested
    last_transaction_at: datetime | None = None


@dataclass
class StockTransaction:
    id: int
    position_id: str
    tx_type: str               # StockTradeType value
    shares: int
    price_per_share: int
    total_amount: int          # shares × price
    fees: int
    net_amount: int            # buy: total + fees, sell: total − fees
    created_at: datetime | None = None


@dataclass
class DividendPayment:
    id: int
    company_id: str
    dividend_per_share: float  # cents, fractional
    total_payout: int
    holders_paid: int
    paid_at: datetime | None = None
