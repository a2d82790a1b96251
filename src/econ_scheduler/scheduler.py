"""Fixed-interval asyncio scheduler for maintenance jobs.

Each job runs in its own task: sleep for the interval, open a fresh session,
run, close. A failing run is logged and the job waits for its next slot.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

JobFn = Callable[[AsyncSession], Awaitable[object]]


@dataclass(frozen=True)
class Job:
    name: str
    interval_seconds: float
    run: JobFn


class MaintenanceScheduler:
    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], jobs: list[Job]
    ) -> None:
        names = [job.name for job in jobs]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate job names: {names}")
        self._session_factory = session_factory
        self._jobs = list(jobs)
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    @property
    def job_names(self) -> list[str]:
        return [job.name for job in self._jobs]

    async def run_once(self, job: Job) -> bool:
        """Run ``job`` in a fresh session. Returns False when the run failed."""
        try:
            async with self._session_factory() as session:
                await job.run(session)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Scheduled job %s failed", job.name)
            return False
        logger.info("Scheduled job %s completed", job.name)
        return True

    async def _loop(self, job: Job) -> None:
        while True:
            await asyncio.sleep(job.interval_seconds)
            await self.run_once(job)

    def start(self) -> None:
        if self._tasks:
            return
        for job in self._jobs:
            self._tasks[job.name] = asyncio.create_task(
                self._loop(job), name=f"scheduler:{job.name}"
            )
        logger.info("Scheduler started: %s", ", ".join(self.job_names))

    async def stop(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info("Scheduler stopped")
