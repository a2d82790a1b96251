"""Trade settlement math: fees, weighted-average cost basis, dividends.

Pure functions over ``PortfolioPosition``; callers persist the result.
"""

from dataclasses import replace

from src.econ_common.cents import calculate_fee, round_cents
from src.econ_market.domain.models import PortfolioPosition

TRADE_FEE_BPS = 20              # 0.2 %
MIN_TRADE_FEE = 1_000           # 10 gold


def trade_fee(notional: int) -> int:
    return calculate_fee(notional, TRADE_FEE_BPS, minimum=MIN_TRADE_FEE)


def revalue(position: PortfolioPosition, price: int) -> PortfolioPosition:
    value = position.shares_owned * price
    return replace(
        position,
        current_value=value,
        unrealized_gain_loss=value - position.total_invested,
    )


def apply_buy(position: PortfolioPosition, shares: int, price: int) -> PortfolioPosition:
    """Add shares at ``price``; average cost is total cost basis over shares held."""
    held = position.shares_owned + shares
    invested = position.total_invested + shares * price
    bought = replace(
        position,
        shares_owned=held,
        total_invested=invested,
        average_cost=round_cents(invested / held),
    )
    return revalue(bought, price)


def apply_sell(
    position: PortfolioPosition, shares: int, price: int
) -> tuple[PortfolioPosition, int]:
    """Remove shares, reducing cost basis proportionally.

    Returns the updated position and the cost basis that left with the shares.
    Selling everything zeroes the position but keeps the row.
    """
    remaining = position.shares_owned - shares
    if remaining == 0:
        sold_basis = position.total_invested
        emptied = replace(
            position,
            shares_owned=0,
            total_invested=0,
            average_cost=0,
            current_value=0,
            unrealized_gain_loss=0,
        )
        return emptied, sold_basis
    sold_basis = position.total_invested * shares // position.shares_owned
    sold = replace(
        position,
        shares_owned=remaining,
        total_invested=position.total_invested - sold_basis,
    )
    return revalue(sold, price), sold_basis


def monthly_dividend_per_share(price: int, dividend_yield: float) -> float:
    """Fractional cents per share for one month."""
    return price * dividend_yield / 100 / 12


def dividend_amount(shares: int, per_share: float) -> int:
    return round_cents(shares * per_share)


def gain_loss_percent(gain_loss: int, invested: int) -> float:
    if invested <= 0:
        return 0.0
    return round(gain_loss / invested * 100, 2)
