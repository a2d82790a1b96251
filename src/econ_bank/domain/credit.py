"""Credit scoring, limits, rates and savings interest: pure functions.

Static tables are read-only mappings built once at import.
"""

from collections.abc import Iterable
from types import MappingProxyType

from src.econ_bank.domain.models import CharacterProfile, LedgerAudit, Transaction
from src.econ_common.cents import gold_to_cents, round_cents

MIN_CREDIT_SCORE = 300
MAX_CREDIT_SCORE = 850
BASE_CREDIT_SCORE = 500

CLASS_CREDIT_BONUS = MappingProxyType({
    "WARRIOR": 20,
    "MAGE": 30,
    "ARCHER": 15,
    "ROGUE": 10,
    "NOVICE": 0,
})

ACCOUNT_LIMIT_MULTIPLIER = MappingProxyType({
    "BASIC": 1.0,
    "PREMIUM": 1.5,
    "BUSINESS": 2.0,
})

ACCOUNT_RATE_DISCOUNT = MappingProxyType({
    "BASIC": 0.0,
    "PREMIUM": -1.0,
    "BUSINESS": -2.0,
})

MIN_BASE_RATE = 3.0


def clamp_credit_score(score: int) -> int:
    return max(MIN_CREDIT_SCORE, min(MAX_CREDIT_SCORE, score))


def initial_credit_score(profile: CharacterProfile) -> int:
    """500 base, +10/level (max 100), class bonus, gold tier, luck around 50."""
    score = BASE_CREDIT_SCORE
    score += min(profile.level * 10, 100)
    score += CLASS_CREDIT_BONUS.get(profile.character_class, 0)
    if profile.gold > 1000:
        score += 50
    elif profile.gold > 500:
        score += 25
    score += round_cents((profile.luck - 50) / 100 * 50)
    return clamp_credit_score(score)


def credit_limit_cents(credit_score: int, account_type: str) -> int:
    """Credit limit is twice the score in gold, scaled by account tier."""
    multiplier = ACCOUNT_LIMIT_MULTIPLIER.get(account_type, 1.0)
    return gold_to_cents(round_cents(credit_score * 2 * multiplier))


def base_interest_rate(credit_score: int, account_type: str) -> float:
    """Linear 15% (score 300) down to 5% (score 850), tier discount, floor 3%."""
    rate = 15 - (credit_score - MIN_CREDIT_SCORE) / 550 * 10
    return max(MIN_BASE_RATE, rate + ACCOUNT_RATE_DISCOUNT.get(account_type, 0.0))


def daily_interest_cents(balance: int, annual_rate: float) -> int:
    """Interest for one day on ``balance``, rounded to the cent."""
    if balance <= 0:
        return 0
    return round_cents(balance * annual_rate / 100 / 365)


def replay_ledger(
    account_id: str, stored_balance: int, transactions: Iterable[Transaction]
) -> LedgerAudit:
    """Sum signed amounts from zero in order and compare against every snapshot."""
    running = 0
    count = 0
    mismatched: list[int] = []
    for tx in transactions:
        running += tx.amount
        count += 1
        if tx.balance_after != running:
            mismatched.append(tx.id)
    return LedgerAudit(
        account_id=account_id,
        stored_balance=stored_balance,
        replayed_balance=running,
        transaction_count=count,
        mismatched_ids=mismatched,
    )
