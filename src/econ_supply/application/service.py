"""SupplyApplicationService: suppliers, gift pricing, purchase orders, stock."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.datetime_utils import hours_from, utc_now
from src.econ_common.enums import CharacterClass
from src.econ_common.errors import InvalidParameterError, SupplierNotFoundError
from src.econ_common.id_generator import generate_id
from src.econ_common.response import OperationResult
from src.econ_common.unit_of_work import run_batch, run_operation
from src.econ_supply.application.schemas import (
    GiftCostResponse,
    GiftItemResponse,
    InventoryCheckResponse,
    PurchaseOrderResponse,
    SupplierResponse,
)
from src.econ_supply.domain.catalog import GIFT_CATALOG, gift_base_cost, gifts_for
from src.econ_supply.domain.inventory import find_shortages
from src.econ_supply.domain.models import (
    GiftCostQuote,
    InventoryItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Supplier,
)
from src.econ_supply.domain.pricing import (
    DEFAULT_MARKUP,
    DEMAND_WINDOW_DAYS,
    REPUTATION_DECAY,
    RESET_MARKUP,
    best_supplier,
    delivery_hours,
    demand_factor,
    marked_up,
)
from src.econ_supply.domain.repository import SupplyRepositoryProtocol
from src.econ_supply.domain.seed import (
    DEFAULT_SUPPLIERS,
    MINIMUM_STOCK,
    OPENING_STOCK,
    RESTOCK_AMOUNT,
)
from src.econ_supply.infrastructure.persistence import SupplyRepository

logger = logging.getLogger(__name__)

ORDER_TYPE_JOB_CHANGE = "JOB_CHANGE"


def _target_class(value: str) -> str:
    try:
        return CharacterClass(value).value
    except ValueError:
        raise InvalidParameterError(f"target_class {value}") from None


class SupplyApplicationService:
    def __init__(self, repo: SupplyRepositoryProtocol | None = None) -> None:
        self._repo: SupplyRepositoryProtocol = repo or SupplyRepository()

    async def initialize_suppliers(self, db: AsyncSession) -> OperationResult:
        """Seed the default suppliers and their opening stock when none exist."""
        async def work() -> OperationResult:
            if await self._repo.count_suppliers(db) > 0:
                return OperationResult.ok("Suppliers already initialized", 0)
            for seed in DEFAULT_SUPPLIERS:
                supplier = await self._repo.create_supplier(
                    db,
                    Supplier(
                        id=generate_id("SUP"),
                        name=seed.name,
                        specialty=seed.specialty,
                        location=seed.location,
                        reputation=seed.reputation,
                        markup_percentage=seed.markup_percentage,
                    ),
                )
                for gift in gifts_for(seed.specialty):
                    await self._repo.add_inventory(
                        db,
                        InventoryItem(
                            id=0,
                            supplier_id=supplier.id,
                            item_id=gift.item_id,
                            quality=gift.quality,
                            quantity=max(OPENING_STOCK, gift.quantity * 4),
                            minimum_stock=max(MINIMUM_STOCK, gift.quantity),
                            restock_amount=max(RESTOCK_AMOUNT, gift.quantity * 4),
                            unit_cost=gift.base_value,
                        ),
                    )
            logger.info("Supplier network initialized with %d suppliers", len(DEFAULT_SUPPLIERS))
            return OperationResult.ok("Suppliers initialized", len(DEFAULT_SUPPLIERS))

        return await run_operation(db, work)

    def list_gifts(self, target_class: str) -> list[GiftItemResponse]:
        return [GiftItemResponse.from_gift(g) for g in GIFT_CATALOG.get(target_class, ())]

    async def list_suppliers(
        self, db: AsyncSession, specialty: str | None = None
    ) -> OperationResult:
        async def work() -> OperationResult:
            kind = _target_class(specialty) if specialty else None
            suppliers = await self._repo.list_suppliers(db, kind)
            return OperationResult.ok(
                f"{len(suppliers)} suppliers",
                [SupplierResponse.from_supplier(s) for s in suppliers],
            )

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Pricing and ordering (composable, no commit)
    # ------------------------------------------------------------------

    async def quote_gift_cost(self, db: AsyncSession, target_class: str) -> GiftCostQuote:
        kind = _target_class(target_class)
        gifts = gifts_for(kind)
        base = gift_base_cost(gifts)
        suppliers = await self._repo.list_suppliers(db, kind)
        recommended = best_supplier(suppliers)
        if recommended is None:
            logger.warning("No supplier serves %s, using default markup", kind)
        markup = recommended.markup_percentage if recommended else DEFAULT_MARKUP
        return GiftCostQuote(
            target_class=kind,
            gifts=gifts,
            base_cost=base,
            supplier_cost=marked_up(base, markup),
            suppliers=suppliers,
            recommended=recommended,
        )

    async def place_order(
        self,
        db: AsyncSession,
        target_class: str,
        supplier_id: str,
        ordered_by: str = "system",
        now: datetime | None = None,
    ) -> PurchaseOrder:
        kind = _target_class(target_class)
        gifts = gifts_for(kind)
        if not gifts:
            raise InvalidParameterError(f"no gift pack for {kind}")
        supplier = await self._repo.get_supplier(db, supplier_id)
        if supplier is None or not supplier.is_active:
            raise SupplierNotFoundError(supplier_id)

        items: list[PurchaseOrderItem] = []
        for gift in gifts:
            unit_price = marked_up(gift.base_value, supplier.markup_percentage)
            items.append(
                PurchaseOrderItem(
                    item_id=gift.item_id,
                    quantity=gift.quantity,
                    unit_price=unit_price,
                    total_price=unit_price * gift.quantity,
                    quality=gift.quality,
                )
            )
            await self._repo.take_stock(
                db, supplier.id, gift.item_id, gift.quality, gift.quantity
            )

        order = await self._repo.create_purchase_order(
            db,
            PurchaseOrder(
                id=generate_id("PO"),
                supplier_id=supplier.id,
                order_type=ORDER_TYPE_JOB_CHANGE,
                total_amount=sum(i.total_price for i in items),
                ordered_by=ordered_by,
                expected_delivery=hours_from(
                    now or utc_now(), delivery_hours(supplier.reputation)
                ),
                items=items,
            ),
        )
        logger.info(
            "Purchase order %s placed with %s, total=%d",
            order.id, supplier.name, order.total_amount,
        )
        return order

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def calculate_gift_cost(self, db: AsyncSession, target_class: str) -> OperationResult:
        async def work() -> OperationResult:
            quote = await self.quote_gift_cost(db, target_class)
            return OperationResult.ok(
                f"Gift pack for {quote.target_class}", GiftCostResponse.from_quote(quote)
            )

        return await run_operation(db, work)

    async def create_purchase_order(
        self,
        db: AsyncSession,
        target_class: str,
        supplier_id: str,
        ordered_by: str = "system",
    ) -> OperationResult:
        async def work() -> OperationResult:
            order = await self.place_order(db, target_class, supplier_id, ordered_by)
            return OperationResult.ok(
                f"Purchase order {order.id} created", PurchaseOrderResponse.from_order(order)
            )

        return await run_operation(db, work)

    async def check_supplier_inventory(
        self, db: AsyncSession, supplier_id: str, target_class: str
    ) -> OperationResult:
        async def work() -> OperationResult:
            kind = _target_class(target_class)
            if await self._repo.get_supplier(db, supplier_id) is None:
                raise SupplierNotFoundError(supplier_id)
            inventory = await self._repo.list_inventory(db, supplier_id)
            shortages = find_shortages(gifts_for(kind), inventory)
            message = "All items in stock" if not shortages else f"{len(shortages)} items short"
            return OperationResult.ok(
                message, InventoryCheckResponse.from_shortages(supplier_id, shortages)
            )

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def auto_restock_inventory(self, db: AsyncSession) -> int:
        low = await self._repo.list_low_stock(db)

        async def restock(item: InventoryItem) -> bool:
            restocked = await self._repo.restock_item(db, item.id)
            if restocked is None:
                return False
            logger.info(
                "Restocked %s at %s: +%d (cost %d)",
                item.item_id, item.supplier_id, item.restock_amount,
                item.unit_cost * item.restock_amount,
            )
            return True

        return await run_batch(db, "auto_restock_inventory", low, restock)

    async def update_supplier_markups(
        self, db: AsyncSession, now: datetime | None = None
    ) -> int:
        """Scale markups per specialty by last week's job-change orders."""
        since = (now or utc_now()) - timedelta(days=DEMAND_WINDOW_DAYS)
        demand = await self._repo.count_orders_by_specialty(db, since)
        specialties = sorted({s.specialty for s in await self._repo.list_suppliers(db)})

        async def adjust(specialty: str) -> bool:
            factor = demand_factor(demand.get(specialty, 0))
            if factor is None:
                return False
            await self._repo.scale_markup(db, specialty, factor)
            logger.info(
                "%s demand %d orders, markup x%.2f",
                specialty, demand.get(specialty, 0), factor,
            )
            return True

        return await run_batch(db, "update_supplier_markups", specialties, adjust)

    async def reset_supplier_metrics(self, db: AsyncSession) -> int:
        try:
            updated = await self._repo.reset_metrics(db, REPUTATION_DECAY, RESET_MARKUP)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Supplier metrics reset for %d suppliers", updated)
        return updated

    async def summarize(self, db: AsyncSession, now: datetime | None = None) -> dict[str, int]:
        since = (now or utc_now()) - timedelta(days=DEMAND_WINDOW_DAYS)
        return await self._repo.summarize(db, since)
