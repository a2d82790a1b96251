"""Tests for econ_common.cents: integer gold arithmetic."""

from src.econ_common.cents import (
    apply_percent,
    calculate_fee,
    cents_to_display,
    gold_to_cents,
    round_cents,
)


class TestGoldToCents:
    def test_basic(self) -> None:
        assert gold_to_cents(1000) == 100000

    def test_zero(self) -> None:
        assert gold_to_cents(0) == 0


class TestCentsToDisplay:
    def test_basic(self) -> None:
        assert cents_to_display(650000) == "6,500.00g"

    def test_zero(self) -> None:
        assert cents_to_display(0) == "0.00g"

    def test_one_cent(self) -> None:
        assert cents_to_display(1) == "0.01g"

    def test_negative(self) -> None:
        assert cents_to_display(-1200) == "-12.00g"

    def test_large(self) -> None:
        assert cents_to_display(123456789) == "1,234,567.89g"


class TestRoundCents:
    def test_half_rounds_up(self) -> None:
        assert round_cents(2.5) == 3

    def test_below_half_rounds_down(self) -> None:
        assert round_cents(2.49) == 2

    def test_negative_half_rounds_away_from_zero(self) -> None:
        assert round_cents(-2.5) == -3

    def test_integral_value_unchanged(self) -> None:
        assert round_cents(100.0) == 100


class TestApplyPercent:
    def test_basic(self) -> None:
        assert apply_percent(10000, 5) == 500

    def test_negative_percent(self) -> None:
        assert apply_percent(10000, -15) == -1500

    def test_fractional_result_rounds(self) -> None:
        # 333 * 1.5 / 100 = 4.995
        assert apply_percent(333, 1.5) == 5


class TestCalculateFee:
    def test_basic(self) -> None:
        # 1_000_000 * 20 / 10000 = 2000
        assert calculate_fee(1_000_000, 20) == 2000

    def test_ceiling_rounds_up(self) -> None:
        # 6501 * 20 / 10000 = 13.002 → ceil = 14
        assert calculate_fee(6501, 20) == 14

    def test_minimum_applies(self) -> None:
        assert calculate_fee(50000, 20, minimum=1000) == 1000

    def test_zero_fee_rate(self) -> None:
        assert calculate_fee(6500, 0) == 0

    def test_zero_value_returns_minimum(self) -> None:
        assert calculate_fee(0, 20, minimum=1000) == 1000
