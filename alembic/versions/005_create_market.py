"""005: create companies, price history, positions, stock trades and dividends

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE companies (
            id                  VARCHAR(64)     PRIMARY KEY,
            name                VARCHAR(128)    NOT NULL,
            ticker              VARCHAR(10)     NOT NULL,
            sector              VARCHAR(20)     NOT NULL,
            description         TEXT            NOT NULL DEFAULT '',
            current_price       BIGINT          NOT NULL,
            market_cap          BIGINT          NOT NULL,
            dividend_yield      NUMERIC(6, 3)   NOT NULL DEFAULT 0,
            pe_ratio            NUMERIC(8, 2)   NOT NULL DEFAULT 0,
            is_active           BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_companies_ticker  UNIQUE (ticker),
            CONSTRAINT ck_companies_price   CHECK (current_price >= 1),
            CONSTRAINT ck_companies_sector  CHECK (sector IN (
                'RESOURCES', 'TRANSPORT', 'TECHNOLOGY', 'SERVICES', 'FINANCE', 'MANUFACTURING'
            ))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_companies_updated_at
            BEFORE UPDATE ON companies
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE stock_price_points (
            id                      BIGSERIAL       PRIMARY KEY,
            company_id              VARCHAR(64)     NOT NULL REFERENCES companies (id),
            price                   BIGINT          NOT NULL,
            volume                  BIGINT          NOT NULL DEFAULT 0,
            high                    BIGINT          NOT NULL,
            low                     BIGINT          NOT NULL,
            open_price              BIGINT          NOT NULL,
            close_price             BIGINT          NOT NULL,
            price_change            BIGINT          NOT NULL DEFAULT 0,
            price_change_percent    NUMERIC(10, 4)  NOT NULL DEFAULT 0,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_stock_price_points_price  CHECK (price >= 1 AND low >= 1)
        );
    """)
    op.execute(
        "CREATE INDEX idx_stock_price_points_company ON stock_price_points (company_id, id DESC);"
    )
    op.execute("COMMENT ON TABLE stock_price_points IS 'Immutable price history, one row per move';")

    op.execute("""
        CREATE TABLE portfolio_positions (
            id                      VARCHAR(64)     PRIMARY KEY,
            character_id            VARCHAR(64)     NOT NULL,
            company_id              VARCHAR(64)     NOT NULL REFERENCES companies (id),
            shares_owned            BIGINT          NOT NULL DEFAULT 0,
            average_cost            BIGINT          NOT NULL DEFAULT 0,
            total_invested          BIGINT          NOT NULL DEFAULT 0,
            current_value           BIGINT          NOT NULL DEFAULT 0,
            unrealized_gain_loss    BIGINT          NOT NULL DEFAULT 0,
            last_transaction_at     TIMESTAMPTZ,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_portfolio_positions_holder    UNIQUE (character_id, company_id),
            CONSTRAINT ck_portfolio_positions_shares    CHECK (shares_owned >= 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_portfolio_positions_company ON portfolio_positions (company_id) "
        "WHERE shares_owned > 0;"
    )
    op.execute("""
        CREATE TRIGGER trg_portfolio_positions_updated_at
            BEFORE UPDATE ON portfolio_positions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE stock_transactions (
            id                  BIGSERIAL       PRIMARY KEY,
            position_id         VARCHAR(64)     NOT NULL REFERENCES portfolio_positions (id),
            tx_type             VARCHAR(10)     NOT NULL,
            shares              BIGINT          NOT NULL,
            price_per_share     BIGINT          NOT NULL,
            total_amount        BIGINT          NOT NULL,
            fees                BIGINT          NOT NULL DEFAULT 0,
            net_amount          BIGINT          NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_stock_transactions_type   CHECK (tx_type IN ('BUY', 'SELL')),
            CONSTRAINT ck_stock_transactions_shares CHECK (shares > 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_stock_transactions_position ON stock_transactions (position_id, id DESC);"
    )

    op.execute("""
        CREATE TABLE dividend_payments (
            id                  BIGSERIAL       PRIMARY KEY,
            company_id          VARCHAR(64)     NOT NULL REFERENCES companies (id),
            dividend_per_share  NUMERIC(14, 4)  NOT NULL,
            total_payout        BIGINT          NOT NULL DEFAULT 0,
            holders_paid        INT             NOT NULL DEFAULT 0,
            paid_at             TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS dividend_payments CASCADE;")
    op.execute("DROP TABLE IF EXISTS stock_transactions CASCADE;")
    op.execute("DROP TABLE IF EXISTS portfolio_positions CASCADE;")
    op.execute("DROP TABLE IF EXISTS stock_price_points CASCADE;")
    op.execute("DROP TABLE IF EXISTS companies CASCADE;")
