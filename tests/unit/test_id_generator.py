"""Tests for econ_common.id_generator and econ_common.datetime_utils."""

from datetime import UTC, datetime

import pytest

from src.econ_common.datetime_utils import (
    add_months,
    days_between,
    hours_between,
    utc_now,
)
from src.econ_common.id_generator import SnowflakeIdGenerator, generate_id


class TestSnowflakeIdGenerator:
    def test_returns_str(self) -> None:
        assert isinstance(SnowflakeIdGenerator(node_id=1).next_id(), str)

    def test_unique_ids(self) -> None:
        gen = SnowflakeIdGenerator(node_id=1)
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = SnowflakeIdGenerator(node_id=1)
        prev = gen.next_int()
        for _ in range(100):
            current = gen.next_int()
            assert current > prev
            prev = current

    def test_prefix(self) -> None:
        assert generate_id("LN").startswith("LN-")

    def test_invalid_node_id(self) -> None:
        with pytest.raises(ValueError):
            SnowflakeIdGenerator(node_id=1024)


class TestUtcNow:
    def test_returns_aware_datetime(self) -> None:
        now = utc_now()
        assert isinstance(now, datetime)
        assert now.tzinfo is not None


class TestAddMonths:
    def test_simple(self) -> None:
        assert add_months(datetime(2026, 1, 15, tzinfo=UTC), 1) == datetime(2026, 2, 15, tzinfo=UTC)

    def test_clamps_day_to_month_end(self) -> None:
        assert add_months(datetime(2026, 1, 31, tzinfo=UTC), 1) == datetime(2026, 2, 28, tzinfo=UTC)

    def test_crosses_year(self) -> None:
        assert add_months(datetime(2026, 11, 10, tzinfo=UTC), 3) == datetime(2027, 2, 10, tzinfo=UTC)


class TestElapsed:
    def test_hours_floor(self) -> None:
        start = datetime(2026, 1, 1, 0, 0, tzinfo=UTC)
        assert hours_between(start, datetime(2026, 1, 1, 5, 59, tzinfo=UTC)) == 5

    def test_negative_is_zero(self) -> None:
        start = datetime(2026, 1, 2, tzinfo=UTC)
        assert hours_between(start, datetime(2026, 1, 1, tzinfo=UTC)) == 0
        assert days_between(start, datetime(2026, 1, 1, tzinfo=UTC)) == 0

    def test_days(self) -> None:
        assert days_between(datetime(2026, 1, 1, tzinfo=UTC), datetime(2026, 1, 31, tzinfo=UTC)) == 30
