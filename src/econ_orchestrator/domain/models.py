"""Domain models for econ_orchestrator: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ServiceAppointment:
    id: str
    character_id: str
    target_class: str
    npc_id: str
    total_cost: int            # cents
    payment_method: str        # PaymentType value
    status: str                # SCHEDULED | COMPLETED | CANCELLED
    scheduled_at: datetime
    created_at: datetime | None = None


@dataclass
class InstallmentPlan:
    id: str
    character_id: str
    total_amount: int          # surcharge included
    installment_count: int
    installment_amount: int
    remaining_payments: int
    purpose: str
    status: str                # ACTIVE | COMPLETED
    created_at: datetime | None = None


@dataclass(frozen=True)
class PaymentOption:
    payment_type: str
    description: str
    upfront_cost: int
    total_cost: int
    requires_approval: bool
    eligible: bool
    terms: dict = field(default_factory=dict)
