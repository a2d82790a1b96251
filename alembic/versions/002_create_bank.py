"""002: create bank_accounts and bank_transactions

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bank_accounts (
            id                  VARCHAR(64)     PRIMARY KEY,
            character_id        VARCHAR(64)     NOT NULL,
            account_type        VARCHAR(20)     NOT NULL DEFAULT 'BASIC',
            balance             BIGINT          NOT NULL DEFAULT 0,
            credit_score        INT             NOT NULL DEFAULT 650,
            credit_limit        BIGINT          NOT NULL DEFAULT 0,
            interest_rate       NUMERIC(6, 3)   NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'ACTIVE',
            version             BIGINT          NOT NULL DEFAULT 0,
            opened_at           TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            last_interest_at    TIMESTAMPTZ,
            CONSTRAINT uq_bank_accounts_character   UNIQUE (character_id),
            CONSTRAINT ck_bank_accounts_balance     CHECK (balance >= 0),
            CONSTRAINT ck_bank_accounts_credit      CHECK (credit_score BETWEEN 300 AND 850),
            CONSTRAINT ck_bank_accounts_type        CHECK (account_type IN ('BASIC', 'PREMIUM', 'BUSINESS')),
            CONSTRAINT ck_bank_accounts_status      CHECK (status IN ('ACTIVE', 'SUSPENDED', 'CLOSED'))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_bank_accounts_updated_at
            BEFORE UPDATE ON bank_accounts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE bank_accounts IS 'One account per character, amounts in cents';")

    op.execute("""
        CREATE TABLE bank_transactions (
            id                  BIGSERIAL       PRIMARY KEY,
            account_id          VARCHAR(64)     NOT NULL REFERENCES bank_accounts (id),
            tx_type             VARCHAR(20)     NOT NULL,
            amount              BIGINT          NOT NULL,
            balance_after       BIGINT          NOT NULL,
            description         VARCHAR(255),
            reference_type      VARCHAR(32),
            reference_id        VARCHAR(64),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_bank_transactions_type    CHECK (tx_type IN (
                'DEPOSIT', 'WITHDRAWAL', 'LOAN', 'INTEREST',
                'INVESTMENT', 'STOCK_TRADE', 'SERVICE_PAYMENT'
            )),
            CONSTRAINT ck_bank_transactions_after   CHECK (balance_after >= 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_bank_transactions_account ON bank_transactions (account_id, id DESC);"
    )
    op.execute("COMMENT ON TABLE bank_transactions IS 'Append-only ledger, signed amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bank_transactions CASCADE;")
    op.execute("DROP TABLE IF EXISTS bank_accounts CASCADE;")
