"""Domain models for econ_supply: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class GiftItem:
    item_id: str
    name: str
    description: str
    quality: str               # ItemQuality value
    quantity: int
    base_value: int            # cents per unit

    @property
    def line_value(self) -> int:
        return self.base_value * self.quantity


@dataclass
class Supplier:
    id: str
    name: str
    specialty: str             # CharacterClass value
    location: str
    reputation: float          # 0..100
    markup_percentage: float
    is_active: bool = True
    created_at: datetime | None = None


@dataclass
class InventoryItem:
    id: int
    supplier_id: str
    item_id: str
    quality: str
    quantity: int
    minimum_stock: int
    restock_amount: int
    unit_cost: int             # cents
    last_restocked_at: datetime | None = None


@dataclass
class PurchaseOrderItem:
    item_id: str
    quantity: int
    unit_price: int            # locked at order time
    total_price: int
    quality: str


@dataclass
class PurchaseOrder:
    id: str
    supplier_id: str
    order_type: str
    total_amount: int
    ordered_by: str
    expected_delivery: datetime
    items: list[PurchaseOrderItem] = field(default_factory=list)
    created_at: datetime | None = None


@dataclass
class GiftCostQuote:
    target_class: str
    gifts: tuple[GiftItem, ...]
    base_cost: int
    supplier_cost: int
    suppliers: list[Supplier]
    recommended: Supplier | None


@dataclass(frozen=True)
class Shortage:
    item_id: str
    required: int
    available: int

    @property
    def missing(self) -> int:
        return self.required - self.available
