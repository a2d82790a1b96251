"""SupplyRepository: concrete implementation of SupplyRepositoryProtocol."""

from dataclasses import replace
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.errors import InternalError
from src.econ_supply.domain.models import (
    InventoryItem,
    PurchaseOrder,
    Supplier,
)

_SUPPLIER_COLUMNS = """
    id, name, specialty, location, reputation, markup_percentage, is_active, created_at
"""

_INVENTORY_COLUMNS = """
    id, supplier_id, item_id, quality, quantity, minimum_stock, restock_amount,
    unit_cost, last_restocked_at
"""

_COUNT_SUPPLIERS_SQL = text("SELECT COUNT(*) FROM suppliers")

_INSERT_SUPPLIER_SQL = text(f"""
    INSERT INTO suppliers
        (id, name, specialty, location, reputation, markup_percentage, is_active)
    VALUES
        (:id, :name, :specialty, :location, :reputation, :markup_percentage, :is_active)
    RETURNING {_SUPPLIER_COLUMNS}
""")

_LIST_SUPPLIERS_SQL = text(f"""
    SELECT {_SUPPLIER_COLUMNS}
    FROM suppliers
    WHERE is_active = TRUE
      AND (CAST(:specialty AS VARCHAR) IS NULL OR specialty = :specialty)
    ORDER BY specialty, id
""")

_GET_SUPPLIER_SQL = text(f"SELECT {_SUPPLIER_COLUMNS} FROM suppliers WHERE id = :supplier_id")

_INSERT_INVENTORY_SQL = text(f"""
    INSERT INTO supplier_inventory
        (supplier_id, item_id, quality, quantity, minimum_stock, restock_amount, unit_cost)
    VALUES
        (:supplier_id, :item_id, :quality, :quantity, :minimum_stock, :restock_amount, :unit_cost)
    ON CONFLICT (supplier_id, item_id, quality) DO UPDATE
        SET minimum_stock = EXCLUDED.minimum_stock,
            restock_amount = EXCLUDED.restock_amount,
            unit_cost = EXCLUDED.unit_cost
    RETURNING {_INVENTORY_COLUMNS}
""")

_LIST_INVENTORY_SQL = text(f"""
    SELECT {_INVENTORY_COLUMNS}
    FROM supplier_inventory
    WHERE supplier_id = :supplier_id
    ORDER BY item_id, quality
""")

_TAKE_STOCK_SQL = text("""
    UPDATE supplier_inventory
    SET quantity = GREATEST(quantity - :quantity, 0)
    WHERE supplier_id = :supplier_id AND item_id = :item_id AND quality = :quality
""")

_LOW_STOCK_SQL = text(f"""
    SELECT {_INVENTORY_COLUMNS}
    FROM supplier_inventory
    WHERE quantity < minimum_stock
    ORDER BY id
""")

# Guarded so a second pass over the same low-stock snapshot adds nothing
_RESTOCK_SQL = text(f"""
    UPDATE supplier_inventory
    SET quantity = quantity + restock_amount,
        last_restocked_at = NOW()
    WHERE id = :inventory_id AND quantity < minimum_stock
    RETURNING {_INVENTORY_COLUMNS}
""")

_INSERT_ORDER_SQL = text("""
    INSERT INTO purchase_orders
        (id, supplier_id, order_type, total_amount, ordered_by, expected_delivery)
    VALUES
        (:id, :supplier_id, :order_type, :total_amount, :ordered_by, :expected_delivery)
    RETURNING created_at
""")

_INSERT_ORDER_ITEM_SQL = text("""
    INSERT INTO purchase_order_items
        (order_id, item_id, quantity, unit_price, total_price, quality)
    VALUES
        (:order_id, :item_id, :quantity, :unit_price, :total_price, :quality)
""")

_ORDERS_BY_SPECIALTY_SQL = text("""
    SELECT s.specialty, COUNT(o.id) AS orders
    FROM purchase_orders o
    JOIN suppliers s ON s.id = o.supplier_id
    WHERE o.created_at >= :since AND o.order_type = 'JOB_CHANGE'
    GROUP BY s.specialty
""")

_SCALE_MARKUP_SQL = text("""
    UPDATE suppliers
    SET markup_percentage = markup_percentage * :factor,
        updated_at = NOW()
    WHERE specialty = :specialty AND is_active = TRUE
""")

_RESET_METRICS_SQL = text("""
    UPDATE suppliers
    SET reputation = LEAST(100, GREATEST(0, reputation * :reputation_factor)),
        markup_percentage = :markup,
        updated_at = NOW()
    WHERE is_active = TRUE
""")

_SUMMARY_SQL = text("""
    SELECT
        (SELECT COUNT(*) FROM suppliers WHERE is_active = TRUE) AS active_suppliers,
        (SELECT COUNT(*) FROM purchase_orders WHERE created_at >= :since) AS recent_orders,
        (SELECT COALESCE(SUM(total_amount), 0) FROM purchase_orders
            WHERE created_at >= :since) AS recent_order_value
""")


def _row_to_supplier(row: object) -> Supplier:
    return Supplier(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        specialty=row.specialty,  # type: ignore[attr-defined]
        location=row.location,  # type: ignore[attr-defined]
        reputation=float(row.reputation),  # type: ignore[attr-defined]
        markup_percentage=float(row.markup_percentage),  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_inventory(row: object) -> InventoryItem:
    return InventoryItem(
        id=row.id,  # type: ignore[attr-defined]
        supplier_id=row.supplier_id,  # type: ignore[attr-defined]
        item_id=row.item_id,  # type: ignore[attr-defined]
        quality=row.quality,  # type: ignore[attr-defined]
        quantity=row.quantity,  # type: ignore[attr-defined]
        minimum_stock=row.minimum_stock,  # type: ignore[attr-defined]
        restock_amount=row.restock_amount,  # type: ignore[attr-defined]
        unit_cost=row.unit_cost,  # type: ignore[attr-defined]
        last_restocked_at=row.last_restocked_at,  # type: ignore[attr-defined]
    )


class SupplyRepository:
    async def count_suppliers(self, db: AsyncSession) -> int:
        result = await db.execute(_COUNT_SUPPLIERS_SQL)
        return int(result.scalar_one())

    async def create_supplier(self, db: AsyncSession, supplier: Supplier) -> Supplier:
        result = await db.execute(
            _INSERT_SUPPLIER_SQL,
            {
                "id": supplier.id,
                "name": supplier.name,
                "specialty": supplier.specialty,
                "location": supplier.location,
                "reputation": supplier.reputation,
                "markup_percentage": supplier.markup_percentage,
                "is_active": supplier.is_active,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Supplier insert returned no rows")
        return _row_to_supplier(row)

    async def list_suppliers(
        self, db: AsyncSession, specialty: str | None = None
    ) -> list[Supplier]:
        result = await db.execute(_LIST_SUPPLIERS_SQL, {"specialty": specialty})
        return [_row_to_supplier(row) for row in result.fetchall()]

    async def get_supplier(self, db: AsyncSession, supplier_id: str) -> Supplier | None:
        result = await db.execute(_GET_SUPPLIER_SQL, {"supplier_id": supplier_id})
        row = result.fetchone()
        return _row_to_supplier(row) if row else None

    async def add_inventory(self, db: AsyncSession, item: InventoryItem) -> InventoryItem:
        result = await db.execute(
            _INSERT_INVENTORY_SQL,
            {
                "supplier_id": item.supplier_id,
                "item_id": item.item_id,
                "quality": item.quality,
                "quantity": item.quantity,
                "minimum_stock": item.minimum_stock,
                "restock_amount": item.restock_amount,
                "unit_cost": item.unit_cost,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Inventory insert returned no rows")
        return _row_to_inventory(row)

    async def list_inventory(
        self, db: AsyncSession, supplier_id: str
    ) -> list[InventoryItem]:
        result = await db.execute(_LIST_INVENTORY_SQL, {"supplier_id": supplier_id})
        return [_row_to_inventory(row) for row in result.fetchall()]

    async def take_stock(
        self, db: AsyncSession, supplier_id: str, item_id: str, quality: str, quantity: int
    ) -> None:
        await db.execute(
            _TAKE_STOCK_SQL,
            {
                "supplier_id": supplier_id,
                "item_id": item_id,
                "quality": quality,
                "quantity": quantity,
            },
        )

    async def list_low_stock(self, db: AsyncSession) -> list[InventoryItem]:
        result = await db.execute(_LOW_STOCK_SQL)
        return [_row_to_inventory(row) for row in result.fetchall()]

    async def restock_item(
        self, db: AsyncSession, inventory_id: int
    ) -> InventoryItem | None:
        result = await db.execute(_RESTOCK_SQL, {"inventory_id": inventory_id})
        row = result.fetchone()
        return _row_to_inventory(row) if row else None

    async def create_purchase_order(
        self, db: AsyncSession, order: PurchaseOrder
    ) -> PurchaseOrder:
        result = await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "supplier_id": order.supplier_id,
                "order_type": order.order_type,
                "total_amount": order.total_amount,
                "ordered_by": order.ordered_by,
                "expected_delivery": order.expected_delivery,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Purchase order insert returned no rows")
        for item in order.items:
            await db.execute(
                _INSERT_ORDER_ITEM_SQL,
                {
                    "order_id": order.id,
                    "item_id": item.item_id,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "total_price": item.total_price,
                    "quality": item.quality,
                },
            )
        return replace(order, items=list(order.items), created_at=row.created_at)

    async def count_orders_by_specialty(
        self, db: AsyncSession, since: datetime
    ) -> dict[str, int]:
        result = await db.execute(_ORDERS_BY_SPECIALTY_SQL, {"since": since})
        return {row.specialty: int(row.orders) for row in result.fetchall()}

    async def scale_markup(self, db: AsyncSession, specialty: str, factor: float) -> int:
        result = await db.execute(
            _SCALE_MARKUP_SQL, {"specialty": specialty, "factor": factor}
        )
        return result.rowcount

    async def reset_metrics(
        self, db: AsyncSession, reputation_factor: float, markup: float
    ) -> int:
        result = await db.execute(
            _RESET_METRICS_SQL,
            {"reputation_factor": reputation_factor, "markup": markup},
        )
        return result.rowcount

    async def summarize(self, db: AsyncSession, since: datetime) -> dict[str, int]:
        result = await db.execute(_SUMMARY_SQL, {"since": since})
        row = result.fetchone()
        if row is None:
            return {"active_suppliers": 0, "recent_orders": 0, "recent_order_value": 0}
        return {
            "active_suppliers": int(row.active_suppliers),
            "recent_orders": int(row.recent_orders),
            "recent_order_value": int(row.recent_order_value),
        }
