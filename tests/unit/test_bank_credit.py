"""Tests for econ_bank.domain.credit: scoring, limits, rates, ledger replay."""

import pytest

from src.econ_bank.domain.credit import (
    base_interest_rate,
    clamp_credit_score,
    credit_limit_cents,
    daily_interest_cents,
    initial_credit_score,
    replay_ledger,
)
from src.econ_bank.domain.models import CharacterProfile, Transaction


def _profile(level: int = 1, cls: str = "NOVICE", gold: int = 0, luck: int = 50) -> CharacterProfile:
    return CharacterProfile(
        character_id="char-1", level=level, character_class=cls, gold=gold, luck=luck
    )


def _tx(tx_id: int, amount: int, balance_after: int) -> Transaction:
    return Transaction(
        id=tx_id, account_id="ACC-1", tx_type="DEPOSIT",
        amount=amount, balance_after=balance_after,
    )


class TestInitialCreditScore:
    def test_novice_baseline(self) -> None:
        # 500 + 10 (level 1)
        assert initial_credit_score(_profile()) == 510

    def test_level_bonus_caps_at_100(self) -> None:
        assert initial_credit_score(_profile(level=50)) == 600

    def test_class_and_gold_tiers(self) -> None:
        # 500 + 100 + 20 (warrior) + 50 (gold > 1000)
        assert initial_credit_score(_profile(level=10, cls="WARRIOR", gold=1500)) == 670
        # 500 + 100 + 30 (mage) + 25 (gold > 500)
        assert initial_credit_score(_profile(level=10, cls="MAGE", gold=600)) == 655

    def test_luck_shifts_score(self) -> None:
        assert initial_credit_score(_profile(luck=100)) == 535
        assert initial_credit_score(_profile(luck=0)) == 485

    def test_clamped(self) -> None:
        assert clamp_credit_score(1000) == 850
        assert clamp_credit_score(100) == 300


class TestCreditLimit:
    def test_basic(self) -> None:
        # 670 × 2 = 1340 gold
        assert credit_limit_cents(670, "BASIC") == 134000

    def test_business_doubles(self) -> None:
        assert credit_limit_cents(500, "BUSINESS") == 200000

    def test_premium(self) -> None:
        assert credit_limit_cents(500, "PREMIUM") == 150000


class TestBaseInterestRate:
    def test_worst_score(self) -> None:
        assert base_interest_rate(300, "BASIC") == pytest.approx(15.0)

    def test_best_score(self) -> None:
        assert base_interest_rate(850, "BASIC") == pytest.approx(5.0)

    def test_floor_applies(self) -> None:
        # 5 - 2 = 3, still at the floor
        assert base_interest_rate(850, "BUSINESS") == pytest.approx(3.0)

    def test_premium_discount(self) -> None:
        assert base_interest_rate(300, "PREMIUM") == pytest.approx(14.0)


class TestDailyInterest:
    def test_one_day(self) -> None:
        # 365000 × 10% / 365 = 100
        assert daily_interest_cents(365000, 10.0) == 100

    def test_zero_balance(self) -> None:
        assert daily_interest_cents(0, 10.0) == 0

    def test_tiny_balance_rounds_to_zero(self) -> None:
        assert daily_interest_cents(100, 5.0) == 0


class TestReplayLedger:
    def test_consistent(self) -> None:
        audit = replay_ledger("ACC-1", 400, [_tx(1, 500, 500), _tx(2, -100, 400)])
        assert audit.consistent
        assert audit.transaction_count == 2
        assert audit.replayed_balance == 400

    def test_bad_snapshot_detected(self) -> None:
        audit = replay_ledger("ACC-1", 400, [_tx(1, 500, 500), _tx(2, -100, 450)])
        assert not audit.consistent
        assert audit.mismatched_ids == [2]

    def test_stored_balance_drift_detected(self) -> None:
        audit = replay_ledger("ACC-1", 999, [_tx(1, 500, 500)])
        assert not audit.consistent
        assert audit.mismatched_ids == []

    def test_empty_ledger_zero_balance(self) -> None:
        assert replay_ledger("ACC-1", 0, []).consistent
