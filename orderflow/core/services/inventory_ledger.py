"""
Inventory Ledger.

Stock counters per variant, in sets. Reservation happens through a
conditional decrement in the store so concurrent acceptances on the same
variant serialize instead of overselling.
"""

from collections.abc import Iterable

from orderflow.config import get_logger
from orderflow.core.entities.inventory import (
    AdjustmentMode,
    ProductVariant,
    StockShortfall,
)
from orderflow.core.entities.order import Order, OrderItem
from orderflow.core.exceptions import ValidationError
from orderflow.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)


def merge_lines(items: Iterable[OrderItem]) -> dict[str, int]:
    """Sum quantities per variant so one variant is reserved once."""
    lines: dict[str, int] = {}
    for item in items:
        lines[item.variant_id] = lines.get(item.variant_id, 0) + item.quantity_sets
    return lines


def _check_quantity(quantity_sets: int) -> int:
    if isinstance(quantity_sets, bool) or not isinstance(quantity_sets, int):
        raise ValidationError("quantity_sets", "must be an integer", quantity_sets)
    if quantity_sets <= 0:
        raise ValidationError("quantity_sets", "must be positive", quantity_sets)
    return quantity_sets


class InventoryLedger:
    """Owns stock changes. Nothing else writes variant stock."""

    def __init__(self, store: IInventoryStore):
        self._store = store

    async def reserve(
        self,
        variant_id: str,
        quantity_sets: int,
        reference: str | None = None,
        performed_by: str | None = None,
    ) -> ProductVariant:
        """
        Take sets out of stock.

        Raises:
            InsufficientStockError: stock is below the requested quantity
            ValidationError: quantity is not a positive integer
        """
        _check_quantity(quantity_sets)
        updated = await self._store.reserve_many(
            {variant_id: quantity_sets}, reference=reference, performed_by=performed_by
        )
        return updated[0]

    async def release(
        self,
        variant_id: str,
        quantity_sets: int,
        reference: str | None = None,
        performed_by: str | None = None,
    ) -> ProductVariant:
        """Put sets back into stock."""
        _check_quantity(quantity_sets)
        updated = await self._store.release_many(
            {variant_id: quantity_sets}, reference=reference, performed_by=performed_by
        )
        return updated[0]

    async def reserve_for_order(
        self, order: Order, performed_by: str | None = None
    ) -> list[ProductVariant]:
        """Reserve every line of an order, all or nothing."""
        lines = merge_lines(order.items)
        for quantity in lines.values():
            _check_quantity(quantity)
        updated = await self._store.reserve_many(
            lines, reference=order.id, performed_by=performed_by
        )
        logger.info("stock_reserved", order_id=order.id, variants=len(lines))
        return updated

    async def release_for_order(
        self, order: Order, performed_by: str | None = None
    ) -> list[ProductVariant]:
        lines = merge_lines(order.items)
        updated = await self._store.release_many(
            lines, reference=order.id, performed_by=performed_by
        )
        logger.info("stock_released", order_id=order.id, variants=len(lines))
        return updated

    async def adjust_stock(
        self,
        variant_id: str,
        mode: AdjustmentMode,
        value: int,
        reason: str,
        performed_by: str | None = None,
    ) -> ProductVariant:
        """
        Apply an admin correction.

        SET replaces the count and must not be negative. DELTA adds a signed
        change and clamps the result at zero.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("value", "must be an integer", value)
        if mode == AdjustmentMode.SET and value < 0:
            raise ValidationError("value", "stock cannot be set below zero", value)
        if mode == AdjustmentMode.DELTA and value == 0:
            raise ValidationError("value", "delta must not be zero", value)
        if not reason or not reason.strip():
            raise ValidationError("reason", "an adjustment needs a reason")

        variant = await self._store.adjust(
            variant_id, mode, value, reason.strip(), performed_by=performed_by
        )
        logger.info(
            "stock_adjusted",
            variant_id=variant_id,
            mode=mode.value,
            value=value,
            stock_after=variant.stock,
        )
        return variant

    async def check_availability(self, items: Iterable[OrderItem]) -> list[StockShortfall]:
        """
        Advisory check used at order creation. Nothing is reserved.

        Unknown variants report zero availability.
        """
        shortfalls = []
        for variant_id, requested in merge_lines(items).items():
            variant = await self._store.get_variant(variant_id)
            available = variant.stock if variant else 0
            if available < requested:
                shortfalls.append(
                    StockShortfall(variant_id=variant_id, requested=requested, available=available)
                )
        return shortfalls
