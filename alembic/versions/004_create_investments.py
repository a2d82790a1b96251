"""004: create investments

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE investments (
            id                  VARCHAR(64)     PRIMARY KEY,
            account_id          VARCHAR(64)     NOT NULL REFERENCES bank_accounts (id),
            product_id          VARCHAR(64)     NOT NULL,
            investment_type     VARCHAR(32)     NOT NULL,
            product_name        VARCHAR(128)    NOT NULL,
            principal           BIGINT          NOT NULL,
            current_value       BIGINT          NOT NULL,
            interest_rate       NUMERIC(6, 3)   NOT NULL,
            term_months         INT,
            status              VARCHAR(20)     NOT NULL DEFAULT 'ACTIVE',
            invested_at         TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            maturity_date       TIMESTAMPTZ,
            closed_at           TIMESTAMPTZ,
            CONSTRAINT ck_investments_principal CHECK (principal > 0),
            CONSTRAINT ck_investments_value     CHECK (current_value >= 0),
            CONSTRAINT ck_investments_type      CHECK (investment_type IN (
                'FIXED_DEPOSIT', 'MUTUAL_FUND', 'GOVERNMENT_BOND',
                'CORPORATE_BOND', 'LIFE_INSURANCE', 'INVESTMENT_INSURANCE'
            )),
            CONSTRAINT ck_investments_status    CHECK (status IN ('ACTIVE', 'MATURED', 'CANCELLED', 'LIQUIDATED'))
        );
    """)
    op.execute("CREATE INDEX idx_investments_account ON investments (account_id, invested_at DESC);")
    op.execute("""
        CREATE INDEX idx_investments_maturing
        ON investments (maturity_date)
        WHERE status = 'ACTIVE' AND maturity_date IS NOT NULL;
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS investments CASCADE;")
