"""Integer arithmetic utilities for the gold economy.

All balances, prices and amounts are int cents (1/100 gold). Rates and
percentages stay float; every conversion back to money rounds to a cent here.
"""

import math


def gold_to_cents(gold: int) -> int:
    """Whole gold coins to cents: 1000 -> 100000."""
    return gold * 100


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 650000 -> '6,500.00g', -1200 -> '-12.00g'."""
    if cents < 0:
        abs_cents = -cents
        return f"-{abs_cents // 100:,}.{abs_cents % 100:02d}g"
    return f"{cents // 100:,}.{cents % 100:02d}g"


def round_cents(value: float) -> int:
    """Round a fractional cent amount to the nearest cent (half away from zero)."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def apply_percent(cents: int, percent: float) -> int:
    """Return cents × percent / 100, rounded to the nearest cent."""
    return round_cents(cents * percent / 100)


def calculate_fee(trade_value: int, fee_rate_bps: int, minimum: int = 0) -> int:
    """Calculate a fee with ceiling division, never below ``minimum``.

    fee = max(ceil(trade_value * fee_rate_bps / 10000), minimum)
    Using integer ceiling: (a + b - 1) // b
    """
    if trade_value <= 0 or fee_rate_bps == 0:
        return minimum
    return max((trade_value * fee_rate_bps + 9999) // 10000, minimum)
