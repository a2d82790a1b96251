"""Repository Protocol for orchestrator-owned records."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_orchestrator.domain.models import InstallmentPlan, ServiceAppointment


class ServiceRepositoryProtocol(Protocol):
    async def create_appointment(
        self, db: AsyncSession, appointment: ServiceAppointment
    ) -> ServiceAppointment: ...

    async def create_installment_plan(
        self, db: AsyncSession, plan: InstallmentPlan
    ) -> InstallmentPlan: ...

    async def list_appointments(
        self, db: AsyncSession, character_id: str
    ) -> list[ServiceAppointment]: ...

    async def service_stats(
        self, db: AsyncSession, since: datetime
    ) -> dict[str, tuple[int, int]]: ...
