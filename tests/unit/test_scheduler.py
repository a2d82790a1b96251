"""Unit tests for the maintenance scheduler and its default job wiring."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from config.settings import Settings
from src.econ_scheduler.jobs import build_scheduler, default_jobs
from src.econ_scheduler.scheduler import Job, MaintenanceScheduler


def _session_factory():
    """async_sessionmaker stand-in: calling it yields an async context manager."""
    factory = MagicMock()
    session = factory.return_value.__aenter__.return_value
    return factory, session


class TestConstruction:
    def test_duplicate_names_rejected(self) -> None:
        factory, _ = _session_factory()
        jobs = [Job("daily", 10, AsyncMock()), Job("daily", 20, AsyncMock())]

        with pytest.raises(ValueError):
            MaintenanceScheduler(factory, jobs)

    def test_job_names_in_order(self) -> None:
        factory, _ = _session_factory()
        scheduler = MaintenanceScheduler(
            factory, [Job("a", 1, AsyncMock()), Job("b", 1, AsyncMock())]
        )

        assert scheduler.job_names == ["a", "b"]
        assert scheduler.running is False


class TestRunOnce:
    async def test_runs_with_fresh_session(self) -> None:
        factory, session = _session_factory()
        run = AsyncMock()
        scheduler = MaintenanceScheduler(factory, [])

        ok = await scheduler.run_once(Job("daily", 1, run))

        assert ok is True
        run.assert_awaited_once_with(session)
        factory.assert_called_once()

    async def test_failure_is_logged_not_raised(self, caplog) -> None:
        factory, _ = _session_factory()
        scheduler = MaintenanceScheduler(factory, [])
        job = Job("daily", 1, AsyncMock(side_effect=RuntimeError("db down")))

        with caplog.at_level(logging.ERROR):
            ok = await scheduler.run_once(job)

        assert ok is False
        assert "Scheduled job daily failed" in caplog.text

    async def test_cancellation_propagates(self) -> None:
        factory, _ = _session_factory()
        scheduler = MaintenanceScheduler(factory, [])
        job = Job("daily", 1, AsyncMock(side_effect=asyncio.CancelledError()))

        with pytest.raises(asyncio.CancelledError):
            await scheduler.run_once(job)


class TestLifecycle:
    async def test_start_runs_jobs_until_stopped(self) -> None:
        factory, _ = _session_factory()
        run = AsyncMock()
        scheduler = MaintenanceScheduler(factory, [Job("fast", 0.01, run)])

        scheduler.start()
        scheduler.start()
        await asyncio.sleep(0.1)
        await scheduler.stop()
        calls = run.await_count
        await asyncio.sleep(0.05)

        assert calls >= 1
        assert run.await_count == calls
        assert scheduler.running is False

    async def test_failing_job_keeps_its_slot(self) -> None:
        factory, _ = _session_factory()
        run = AsyncMock(side_effect=RuntimeError("boom"))
        scheduler = MaintenanceScheduler(factory, [Job("flaky", 0.01, run)])

        scheduler.start()
        await asyncio.sleep(0.1)
        await scheduler.stop()

        assert run.await_count >= 2

    async def test_stop_without_start(self) -> None:
        factory, _ = _session_factory()
        scheduler = MaintenanceScheduler(factory, [Job("a", 1, AsyncMock())])

        await scheduler.stop()

        assert scheduler.running is False


class TestDefaultJobs:
    def test_intervals_come_from_settings(self) -> None:
        settings = Settings(
            DAILY_MAINTENANCE_INTERVAL_SECONDS=60,
            MONTHLY_MAINTENANCE_INTERVAL_SECONDS=600,
            EVENT_IMPACT_INTERVAL_SECONDS=6,
        )
        integration = MagicMock()
        events = MagicMock()

        jobs = {job.name: job for job in default_jobs(settings, integration, events)}

        assert jobs["daily_maintenance"].interval_seconds == 60
        assert jobs["daily_maintenance"].run is integration.perform_daily_maintenance
        assert jobs["monthly_maintenance"].interval_seconds == 600
        assert jobs["event_impacts"].run is events.process_ongoing_impacts

    def test_build_scheduler(self) -> None:
        factory, _ = _session_factory()

        scheduler = build_scheduler(Settings(), factory)

        assert scheduler.job_names == [
            "daily_maintenance", "monthly_maintenance", "event_impacts",
        ]
