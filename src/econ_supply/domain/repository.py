"""Repository Protocol for the supplier network."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_supply.domain.models import InventoryItem, PurchaseOrder, Supplier


class SupplyRepositoryProtocol(Protocol):
    async def count_suppliers(self, db: AsyncSession) -> int: ...

    async def create_supplier(self, db: AsyncSession, supplier: Supplier) -> Supplier: ...

    async def list_suppliers(
        self, db: AsyncSession, specialty: str | None = None
    ) -> list[Supplier]: ...

    async def get_supplier(self, db: AsyncSession, supplier_id: str) -> Supplier | None: ...

    async def add_inventory(self, db: AsyncSession, item: InventoryItem) -> InventoryItem: ...

    async def list_inventory(
        self, db: AsyncSession, supplier_id: str
    ) -> list[InventoryItem]: ...

    async def take_stock(
        self, db: AsyncSession, supplier_id: str, item_id: str, quality: str, quantity: int
    ) -> None: ...

    async def list_low_stock(self, db: AsyncSession) -> list[InventoryItem]: ...

    async def restock_item(
        self, db: AsyncSession, inventory_id: int
    ) -> InventoryItem | None: ...

    async def create_purchase_order(
        self, db: AsyncSession, order: PurchaseOrder
    ) -> PurchaseOrder: ...

    async def count_orders_by_specialty(
        self, db: AsyncSession, since: datetime
    ) -> dict[str, int]: ...

    async def scale_markup(self, db: AsyncSession, specialty: str, factor: float) -> int: ...

    async def reset_metrics(
        self, db: AsyncSession, reputation_factor: float, markup: float
    ) -> int: ...

    async def summarize(self, db: AsyncSession, since: datetime) -> dict[str, int]: ...
