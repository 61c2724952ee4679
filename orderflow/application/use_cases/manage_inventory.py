"""Manage Inventory Use Case: catalog variants and admin stock corrections."""

from orderflow.application.dto.requests import AdjustStockRequest, CreateVariantRequest
from orderflow.application.dto.responses import (
    StockMovementResponse,
    VariantListResponse,
    VariantResponse,
)
from orderflow.config import get_logger
from orderflow.core.entities.common import new_id, to_money
from orderflow.core.entities.inventory import ProductVariant, StockMovement
from orderflow.core.exceptions import ValidationError, VariantNotFoundError
from orderflow.core.interfaces.inventory_store import IInventoryStore
from orderflow.core.services.inventory_ledger import InventoryLedger

logger = get_logger(__name__)


class ManageInventoryUseCase:
    """Catalog and stock administration. Stock only changes through the ledger."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from orderflow.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def create_variant(self, request: CreateVariantRequest) -> ProductVariant:
        store = await self._get_inventory_store()
        variant_id = request.id or new_id("var")
        if await store.get_variant(variant_id) is not None:
            raise ValidationError("id", "a variant with this id already exists", variant_id)

        variant = ProductVariant(
            id=variant_id,
            product_id=request.product_id,
            product_name=request.product_name,
            sku=request.sku,
            color=request.color,
            size_range=request.size_range,
            stock=request.stock,
            price_per_piece=to_money(request.price_per_piece),
            pieces_per_set=request.pieces_per_set,
            hsn_code=request.hsn_code,
        )
        variant = await store.create_variant(variant)
        logger.info("variant_created", variant_id=variant.id, stock=variant.stock)
        return variant

    async def get_variant(self, variant_id: str) -> ProductVariant:
        variant = await (await self._get_inventory_store()).get_variant(variant_id)
        if variant is None:
            raise VariantNotFoundError(variant_id)
        return variant

    async def list_variants(self, limit: int = 100, offset: int = 0) -> list[ProductVariant]:
        return await (await self._get_inventory_store()).list_variants(limit=limit, offset=offset)

    async def adjust_stock(self, variant_id: str, request: AdjustStockRequest) -> ProductVariant:
        ledger = InventoryLedger(await self._get_inventory_store())
        return await ledger.adjust_stock(
            variant_id,
            request.mode,
            request.value,
            request.reason,
            performed_by=request.performed_by,
        )

    async def get_movements(self, variant_id: str, limit: int = 100) -> list[StockMovement]:
        await self.get_variant(variant_id)
        return await (await self._get_inventory_store()).get_movements(variant_id, limit=limit)

    @staticmethod
    def to_response(variant: ProductVariant) -> VariantResponse:
        return VariantResponse.from_variant(variant)

    @staticmethod
    def to_list_response(variants: list[ProductVariant]) -> VariantListResponse:
        return VariantListResponse(
            variants=[VariantResponse.from_variant(v) for v in variants],
            total=len(variants),
        )

    @staticmethod
    def to_movement_responses(movements: list[StockMovement]) -> list[StockMovementResponse]:
        return [StockMovementResponse.from_movement(m) for m in movements]
