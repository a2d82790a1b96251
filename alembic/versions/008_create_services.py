"""008: create service_appointments and installment_plans

Revision ID: 008
Revises: 007
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE service_appointments (
            id                  VARCHAR(64)     PRIMARY KEY,
            character_id        VARCHAR(64)     NOT NULL,
            target_class        VARCHAR(20)     NOT NULL,
            npc_id              VARCHAR(64)     NOT NULL,
            total_cost          BIGINT          NOT NULL,
            payment_method      VARCHAR(20)     NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'SCHEDULED',
            scheduled_at        TIMESTAMPTZ     NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_service_appointments_cost     CHECK (total_cost > 0),
            CONSTRAINT ck_service_appointments_method   CHECK (payment_method IN (
                'FULL_PAYMENT', 'LOAN', 'INSTALLMENT', 'INVESTMENT_BACKED'
            )),
            CONSTRAINT ck_service_appointments_status   CHECK (
                status IN ('SCHEDULED', 'COMPLETED', 'CANCELLED')
            )
        );
    """)
    op.execute(
        "CREATE INDEX idx_service_appointments_character "
        "ON service_appointments (character_id, created_at DESC);"
    )
    op.execute("CREATE INDEX idx_service_appointments_created ON service_appointments (created_at);")

    op.execute("""
        CREATE TABLE installment_plans (
            id                  VARCHAR(64)     PRIMARY KEY,
            character_id        VARCHAR(64)     NOT NULL,
            total_amount        BIGINT          NOT NULL,
            installment_count   INT             NOT NULL,
            installment_amount  BIGINT          NOT NULL,
            remaining_payments  INT             NOT NULL,
            purpose             VARCHAR(20)     NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'ACTIVE',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_installment_plans_remaining   CHECK (
                remaining_payments BETWEEN 0 AND installment_count
            ),
            CONSTRAINT ck_installment_plans_status      CHECK (status IN ('ACTIVE', 'COMPLETED'))
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS installment_plans CASCADE;")
    op.execute("DROP TABLE IF EXISTS service_appointments CASCADE;")
