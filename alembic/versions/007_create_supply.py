"""007: create suppliers, inventory and purchase orders

Revision ID: 007
Revises: 006
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE suppliers (
            id                  VARCHAR(64)     PRIMARY KEY,
            name                VARCHAR(128)    NOT NULL,
            specialty           VARCHAR(20)     NOT NULL,
            location            VARCHAR(128)    NOT NULL DEFAULT '',
            reputation          NUMERIC(6, 2)   NOT NULL DEFAULT 50,
            markup_percentage   NUMERIC(8, 3)   NOT NULL DEFAULT 50,
            is_active           BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_suppliers_reputation  CHECK (reputation BETWEEN 0 AND 100),
            CONSTRAINT ck_suppliers_markup      CHECK (markup_percentage >= 0),
            CONSTRAINT ck_suppliers_specialty   CHECK (specialty IN (
                'NOVICE', 'WARRIOR', 'MAGE', 'ARCHER', 'ROGUE'
            ))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_suppliers_updated_at
            BEFORE UPDATE ON suppliers
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE supplier_inventory (
            id                  BIGSERIAL       PRIMARY KEY,
            supplier_id         VARCHAR(64)     NOT NULL REFERENCES suppliers (id),
            item_id             VARCHAR(64)     NOT NULL,
            quality             VARCHAR(20)     NOT NULL,
            quantity            INT             NOT NULL DEFAULT 0,
            minimum_stock       INT             NOT NULL DEFAULT 5,
            restock_amount      INT             NOT NULL DEFAULT 20,
            unit_cost           BIGINT          NOT NULL,
            last_restocked_at   TIMESTAMPTZ,
            CONSTRAINT uq_supplier_inventory_item       UNIQUE (supplier_id, item_id, quality),
            CONSTRAINT ck_supplier_inventory_quantity   CHECK (quantity >= 0)
        );
    """)
    op.execute("""
        CREATE INDEX idx_supplier_inventory_low
        ON supplier_inventory (id)
        WHERE quantity < minimum_stock;
    """)

    op.execute("""
        CREATE TABLE purchase_orders (
            id                  VARCHAR(64)     PRIMARY KEY,
            supplier_id         VARCHAR(64)     NOT NULL REFERENCES suppliers (id),
            order_type          VARCHAR(20)     NOT NULL,
            total_amount        BIGINT          NOT NULL,
            ordered_by          VARCHAR(64)     NOT NULL,
            expected_delivery   TIMESTAMPTZ     NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_purchase_orders_created ON purchase_orders (created_at);")

    op.execute("""
        CREATE TABLE purchase_order_items (
            id                  BIGSERIAL       PRIMARY KEY,
            order_id            VARCHAR(64)     NOT NULL REFERENCES purchase_orders (id),
            item_id             VARCHAR(64)     NOT NULL,
            quantity            INT             NOT NULL,
            unit_price          BIGINT          NOT NULL,
            total_price         BIGINT          NOT NULL,
            quality             VARCHAR(20)     NOT NULL,
            CONSTRAINT ck_purchase_order_items_quantity CHECK (quantity > 0)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS purchase_order_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS purchase_orders CASCADE;")
    op.execute("DROP TABLE IF EXISTS supplier_inventory CASCADE;")
    op.execute("DROP TABLE IF EXISTS suppliers CASCADE;")
