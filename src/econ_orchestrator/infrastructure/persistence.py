"""ServiceRepository: appointments and installment plans."""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.errors import InternalError
from src.econ_orchestrator.domain.models import InstallmentPlan, ServiceAppointment

_APPOINTMENT_COLUMNS = """
    id, character_id, target_class, npc_id, total_cost, payment_method,
    status, scheduled_at, created_at
"""

_INSERT_APPOINTMENT_SQL = text(f"""
    INSERT INTO service_appointments
        (id, character_id, target_class, npc_id, total_cost, payment_method,
         status, scheduled_at)
    VALUES
        (:id, :character_id, :target_class, :npc_id, :total_cost, :payment_method,
         :status, :scheduled_at)
    RETURNING {_APPOINTMENT_COLUMNS}
""")

_INSERT_PLAN_SQL = text("""
    INSERT INTO installment_plans
        (id, character_id, total_amount, installment_count, installment_amount,
         remaining_payments, purpose, status)
    VALUES
        (:id, :character_id, :total_amount, :installment_count, :installment_amount,
         :remaining_payments, :purpose, :status)
    RETURNING id, character_id, total_amount, installment_count, installment_amount,
              remaining_payments, purpose, status, created_at
""")

_LIST_APPOINTMENTS_SQL = text(f"""
    SELECT {_APPOINTMENT_COLUMNS}
    FROM service_appointments
    WHERE character_id = :character_id
    ORDER BY created_at DESC
    LIMIT 10
""")

_SERVICE_STATS_SQL = text("""
    SELECT target_class, COUNT(*) AS services, COALESCE(SUM(total_cost), 0) AS revenue
    FROM service_appointments
    WHERE created_at >= :since
    GROUP BY target_class
""")


def _row_to_appointment(row: object) -> ServiceAppointment:
    return ServiceAppointment(
        id=row.id,  # type: ignore[attr-defined]
        character_id=row.character_id,  # type: ignore[attr-defined]
        target_class=row.target_class,  # type: ignore[attr-defined]
        npc_id=row.npc_id,  # type: ignore[attr-defined]
        total_cost=row.total_cost,  # type: ignore[attr-defined]
        payment_method=row.payment_method,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        scheduled_at=row.scheduled_at,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class ServiceRepository:
    async def create_appointment(
        self, db: AsyncSession, appointment: ServiceAppointment
    ) -> ServiceAppointment:
        result = await db.execute(
            _INSERT_APPOINTMENT_SQL,
            {
                "id": appointment.id,
                "character_id": appointment.character_id,
                "target_class": appointment.target_class,
                "npc_id": appointment.npc_id,
                "total_cost": appointment.total_cost,
                "payment_method": appointment.payment_method,
                "status": appointment.status,
                "scheduled_at": appointment.scheduled_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Appointment insert returned no rows")
        return _row_to_appointment(row)

    async def create_installment_plan(
        self, db: AsyncSession, plan: InstallmentPlan
    ) -> InstallmentPlan:
        result = await db.execute(
            _INSERT_PLAN_SQL,
            {
                "id": plan.id,
                "character_id": plan.character_id,
                "total_amount": plan.total_amount,
                "installment_count": plan.installment_count,
                "installment_amount": plan.installment_amount,
                "remaining_payments": plan.remaining_payments,
                "purpose": plan.purpose,
                "status": plan.status,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Installment plan insert returned no rows")
        return InstallmentPlan(
            id=row.id,
            character_id=row.character_id,
            total_amount=row.total_amount,
            installment_count=row.installment_count,
            installment_amount=row.installment_amount,
            remaining_payments=row.remaining_payments,
            purpose=row.purpose,
            status=row.status,
            created_at=row.created_at,
        )

    async def list_appointments(
        self, db: AsyncSession, character_id: str
    ) -> list[ServiceAppointment]:
        result = await db.execute(_LIST_APPOINTMENTS_SQL, {"character_id": character_id})
        return [_row_to_appointment(row) for row in result.fetchall()]

    async def service_stats(
        self, db: AsyncSession, since: datetime
    ) -> dict[str, tuple[int, int]]:
        """(services booked, revenue) per target class since ``since``."""
        result = await db.execute(_SERVICE_STATS_SQL, {"since": since})
        return {
            row.target_class: (int(row.services), int(row.revenue))
            for row in result.fetchall()
        }
