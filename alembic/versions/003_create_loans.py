"""003: create loans and loan_payments

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE loans (
            id                  VARCHAR(64)     PRIMARY KEY,
            account_id          VARCHAR(64)     NOT NULL REFERENCES bank_accounts (id),
            principal           BIGINT          NOT NULL,
            interest_rate       NUMERIC(6, 3)   NOT NULL,
            term_months         INT             NOT NULL,
            monthly_payment     BIGINT          NOT NULL,
            remaining_balance   BIGINT          NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'ACTIVE',
            purpose             VARCHAR(20)     NOT NULL,
            collateral_type     VARCHAR(32),
            collateral_value    BIGINT          NOT NULL DEFAULT 0,
            next_payment_due    TIMESTAMPTZ,
            approved_at         TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_loans_principal   CHECK (principal > 0),
            CONSTRAINT ck_loans_term        CHECK (term_months BETWEEN 1 AND 360),
            CONSTRAINT ck_loans_remaining   CHECK (remaining_balance >= 0),
            CONSTRAINT ck_loans_status      CHECK (status IN ('ACTIVE', 'PAID_OFF', 'DEFAULTED', 'OVERDUE')),
            CONSTRAINT ck_loans_purpose     CHECK (purpose IN ('JOB_CHANGE', 'EQUIPMENT', 'BUSINESS', 'INVESTMENT'))
        );
    """)
    op.execute("CREATE INDEX idx_loans_account_status ON loans (account_id, status);")
    op.execute("""
        CREATE TRIGGER trg_loans_updated_at
            BEFORE UPDATE ON loans
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE loan_payments (
            id                  BIGSERIAL       PRIMARY KEY,
            loan_id             VARCHAR(64)     NOT NULL REFERENCES loans (id),
            payment_amount      BIGINT          NOT NULL,
            principal_amount    BIGINT          NOT NULL,
            interest_amount     BIGINT          NOT NULL,
            payment_type        VARCHAR(20)     NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_loan_payments_amount  CHECK (payment_amount > 0),
            CONSTRAINT ck_loan_payments_split   CHECK (principal_amount + interest_amount = payment_amount)
        );
    """)
    op.execute("CREATE INDEX idx_loan_payments_loan ON loan_payments (loan_id, id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS loan_payments CASCADE;")
    op.execute("DROP TABLE IF EXISTS loans CASCADE;")
