"""Default maintenance jobs wired from settings."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import Settings
from src.econ_events.application.service import EventApplicationService
from src.econ_orchestrator.application.service import IntegrationService
from src.econ_scheduler.scheduler import Job, MaintenanceScheduler


def default_jobs(
    settings: Settings,
    integration: IntegrationService | None = None,
    events: EventApplicationService | None = None,
) -> list[Job]:
    integration = integration or IntegrationService()
    events = events or EventApplicationService()
    return [
        Job(
            "daily_maintenance",
            settings.DAILY_MAINTENANCE_INTERVAL_SECONDS,
            integration.perform_daily_maintenance,
        ),
        Job(
            "monthly_maintenance",
            settings.MONTHLY_MAINTENANCE_INTERVAL_SECONDS,
            integration.perform_monthly_maintenance,
        ),
        Job(
            "event_impacts",
            settings.EVENT_IMPACT_INTERVAL_SECONDS,
            events.process_ongoing_impacts,
        ),
    ]


def build_scheduler(
    settings: Settings, session_factory: async_sessionmaker[AsyncSession]
) -> MaintenanceScheduler:
    return MaintenanceScheduler(session_factory, default_jobs(settings))
