"""Pydantic schemas for econ_supply."""

from pydantic import BaseModel

from src.econ_common.cents import cents_to_display
from src.econ_common.enums import CharacterClass
from src.econ_supply.domain.models import (
    GiftCostQuote,
    GiftItem,
    PurchaseOrder,
    Shortage,
    Supplier,
)


class PurchaseOrderRequest(BaseModel):
    target_class: CharacterClass
    supplier_id: str
    ordered_by: str = "system"


class GiftItemResponse(BaseModel):
    item_id: str
    name: str
    description: str
    quality: str
    quantity: int
    base_value_cents: int

    @classmethod
    def from_gift(cls, gift: GiftItem) -> "GiftItemResponse":
        return cls(
            item_id=gift.item_id,
            name=gift.name,
            description=gift.description,
            quality=gift.quality,
            quantity=gift.quantity,
            base_value_cents=gift.base_value,
        )


class SupplierResponse(BaseModel):
    supplier_id: str
    name: str
    specialty: str
    location: str
    reputation: float
    markup_percentage: float

    @classmethod
    def from_supplier(cls, supplier: Supplier) -> "SupplierResponse":
        return cls(
            supplier_id=supplier.id,
            name=supplier.name,
            specialty=supplier.specialty,
            location=supplier.location,
            reputation=round(supplier.reputation, 2),
            markup_percentage=round(supplier.markup_percentage, 2),
        )


class GiftCostResponse(BaseModel):
    target_class: str
    gifts: list[GiftItemResponse]
    base_cost_cents: int
    supplier_cost_cents: int
    supplier_cost_display: str
    available_suppliers: list[SupplierResponse]
    recommended_supplier: SupplierResponse | None

    @classmethod
    def from_quote(cls, quote: GiftCostQuote) -> "GiftCostResponse":
        return cls(
            target_class=quote.target_class,
            gifts=[GiftItemResponse.from_gift(g) for g in quote.gifts],
            base_cost_cents=quote.base_cost,
            supplier_cost_cents=quote.supplier_cost,
            supplier_cost_display=cents_to_display(quote.supplier_cost),
            available_suppliers=[SupplierResponse.from_supplier(s) for s in quote.suppliers],
            recommended_supplier=(
                SupplierResponse.from_supplier(quote.recommended) if quote.recommended else None
            ),
        )


class OrderLineResponse(BaseModel):
    item_id: str
    quantity: int
    unit_price_cents: int
    total_price_cents: int
    quality: str


class PurchaseOrderResponse(BaseModel):
    order_id: str
    supplier_id: str
    order_type: str
    total_amount_cents: int
    total_amount_display: str
    ordered_by: str
    expected_delivery: str
    items: list[OrderLineResponse]

    @classmethod
    def from_order(cls, order: PurchaseOrder) -> "PurchaseOrderResponse":
        return cls(
            order_id=order.id,
            supplier_id=order.supplier_id,
            order_type=order.order_type,
            total_amount_cents=order.total_amount,
            total_amount_display=cents_to_display(order.total_amount),
            ordered_by=order.ordered_by,
            expected_delivery=order.expected_delivery.isoformat(),
            items=[
                OrderLineResponse(
                    item_id=i.item_id,
                    quantity=i.quantity,
                    unit_price_cents=i.unit_price,
                    total_price_cents=i.total_price,
                    quality=i.quality,
                )
                for i in order.items
            ],
        )


class ShortageItem(BaseModel):
    item_id: str
    required: int
    available: int
    shortage: int


class InventoryCheckResponse(BaseModel):
    supplier_id: str
    in_stock: bool
    shortages: list[ShortageItem]

    @classmethod
    def from_shortages(cls, supplier_id: str, shortages: list[Shortage]) -> "InventoryCheckResponse":
        return cls(
            supplier_id=supplier_id,
            in_stock=not shortages,
            shortages=[
                ShortageItem(
                    item_id=s.item_id,
                    required=s.required,
                    available=s.available,
                    shortage=s.missing,
                )
                for s in shortages
            ],
        )

