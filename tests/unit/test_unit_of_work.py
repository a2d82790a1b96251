"""Tests for econ_common.unit_of_work: commit/rollback ownership."""

from unittest.mock import AsyncMock

import pytest

from src.econ_common.errors import AccountNotFoundError, InternalError
from src.econ_common.response import OperationResult
from src.econ_common.unit_of_work import run_batch, run_operation


class TestRunOperation:
    async def test_commits_on_success(self) -> None:
        db = AsyncMock()

        async def work() -> OperationResult:
            return OperationResult.ok("done")

        result = await run_operation(db, work)

        assert result.success is True
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

    async def test_business_error_becomes_failure(self) -> None:
        db = AsyncMock()

        async def work() -> OperationResult:
            raise AccountNotFoundError("char-1")

        result = await run_operation(db, work)

        assert result.success is False
        assert result.code == 2002
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_system_app_error_propagates(self) -> None:
        db = AsyncMock()

        async def work() -> OperationResult:
            raise InternalError("boom")

        with pytest.raises(InternalError):
            await run_operation(db, work)
        db.rollback.assert_awaited_once()

    async def test_unexpected_exception_propagates(self) -> None:
        db = AsyncMock()

        async def work() -> OperationResult:
            raise RuntimeError("db gone")

        with pytest.raises(RuntimeError):
            await run_operation(db, work)
        db.rollback.assert_awaited_once()


class TestRunBatch:
    async def test_counts_changed_items(self) -> None:
        db = AsyncMock()

        async def step(item: int) -> bool:
            return item % 2 == 0

        changed = await run_batch(db, "evens", [1, 2, 3, 4], step)

        assert changed == 2
        assert db.commit.await_count == 4

    async def test_failing_item_does_not_stop_batch(self) -> None:
        db = AsyncMock()
        seen: list[int] = []

        async def step(item: int) -> bool:
            if item == 2:
                raise RuntimeError("bad item")
            seen.append(item)
            return True

        changed = await run_batch(db, "mixed", [1, 2, 3], step)

        assert changed == 2
        assert seen == [1, 3]
        db.rollback.assert_awaited_once()
        assert db.commit.await_count == 2

    async def test_empty_batch(self) -> None:
        db = AsyncMock()

        async def step(item: int) -> bool:
            return True

        assert await run_batch(db, "empty", [], step) == 0
        db.commit.assert_not_awaited()
