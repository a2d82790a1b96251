"""Transactional unit helpers.

Transaction ownership: repositories never commit. Application services wrap
every read-modify-write in exactly one unit via ``run_operation`` (player
requests) or ``run_batch`` (maintenance passes, one unit per entity).
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.errors import AppError
from src.econ_common.response import OperationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_operation(
    db: AsyncSession, work: Callable[[], Awaitable[OperationResult]]
) -> OperationResult:
    """Run ``work`` as one atomic unit.

    Business-rule errors roll back and become a failure result.
    System faults (5xx AppError or any other exception) roll back and propagate.
    """
    try:
        result = await work()
        await db.commit()
    except AppError as exc:
        await db.rollback()
        if exc.http_status >= 500:
            raise
        logger.info("Operation rejected: code=%d %s", exc.code, exc.message)
        return OperationResult.failure(exc)
    except Exception:
        await db.rollback()
        raise
    return result


async def run_batch(
    db: AsyncSession,
    name: str,
    items: Iterable[T],
    step: Callable[[T], Awaitable[bool]],
) -> int:
    """Apply ``step`` to every item, committing each item on its own.

    ``step`` returns True when it changed something. A failing item is rolled
    back and logged; the pass continues with the next item. Returns the number
    of items changed.
    """
    changed = 0
    for item in items:
        try:
            if await step(item):
                changed += 1
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("%s: item failed, continuing batch: %r", name, item)
    return changed
