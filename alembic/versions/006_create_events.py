"""006: create world_events and event_stock_impacts

Revision ID: 006
Revises: 005
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE world_events (
            id                  VARCHAR(64)     PRIMARY KEY,
            event_type          VARCHAR(20)     NOT NULL,
            title               VARCHAR(128)    NOT NULL,
            description         TEXT            NOT NULL DEFAULT '',
            severity            SMALLINT        NOT NULL,
            duration_hours      INT             NOT NULL,
            global_impact       BOOLEAN         NOT NULL DEFAULT FALSE,
            occurred_at         TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            expires_at          TIMESTAMPTZ     NOT NULL,
            CONSTRAINT ck_world_events_severity CHECK (severity BETWEEN 1 AND 5),
            CONSTRAINT ck_world_events_type     CHECK (event_type IN (
                'DISASTER', 'POLITICAL', 'INVASION', 'DISCOVERY',
                'TRADE', 'ECONOMIC', 'TECHNOLOGICAL', 'MAGICAL'
            ))
        );
    """)
    op.execute("CREATE INDEX idx_world_events_expires ON world_events (expires_at);")

    op.execute("""
        CREATE TABLE event_stock_impacts (
            id                  BIGSERIAL       PRIMARY KEY,
            event_id            VARCHAR(64)     NOT NULL REFERENCES world_events (id),
            company_id          VARCHAR(64)     NOT NULL REFERENCES companies (id),
            impact_percentage   NUMERIC(10, 4)  NOT NULL,
            duration_hours      INT             NOT NULL,
            impact_type         VARCHAR(20)     NOT NULL,
            applied_at          TIMESTAMPTZ     NOT NULL,
            expires_at          TIMESTAMPTZ     NOT NULL,
            is_applied          BOOLEAN         NOT NULL DEFAULT FALSE,
            hours_applied       INT             NOT NULL DEFAULT 0,
            CONSTRAINT ck_event_stock_impacts_type  CHECK (impact_type IN ('IMMEDIATE', 'GRADUAL', 'DELAYED')),
            CONSTRAINT ck_event_stock_impacts_hours CHECK (
                hours_applied >= 0 AND hours_applied <= duration_hours
            )
        );
    """)
    op.execute("""
        CREATE INDEX idx_event_stock_impacts_pending
        ON event_stock_impacts (impact_type, applied_at)
        WHERE is_applied = FALSE;
    """)
    op.execute("CREATE INDEX idx_event_stock_impacts_event ON event_stock_impacts (event_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS event_stock_impacts CASCADE;")
    op.execute("DROP TABLE IF EXISTS world_events CASCADE;")
