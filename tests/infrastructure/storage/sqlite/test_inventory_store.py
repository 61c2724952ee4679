"""Tests for SQLiteInventoryStore against a real database."""

import asyncio
from decimal import Decimal

import pytest

from orderflow.core.entities import AdjustmentMode, MovementType
from orderflow.core.exceptions import InsufficientStockError, VariantNotFoundError
from orderflow.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore


@pytest.fixture
async def store(initialized_db, store_variant):
    store = SQLiteInventoryStore()
    await store.create_variant(store_variant)
    return store


class TestVariants:
    async def test_round_trip_keeps_exact_price(self, store):
        variant = await store.get_variant("var-saree-green")
        assert variant.price_per_piece == Decimal("450.50")
        assert variant.stock == 5
        assert variant.hsn_code == "500720"

    async def test_missing(self, store):
        assert await store.get_variant("var-nope") is None

    async def test_opening_stock_movement(self, store):
        movements = await store.get_movements("var-saree-green")
        assert len(movements) == 1
        assert movements[0].movement_type is MovementType.IN
        assert movements[0].stock_after == 5

    async def test_list_without_limit(self, store, store_variant):
        for n in range(3):
            await store.create_variant(
                store_variant.model_copy(update={"id": f"var-extra-{n}", "stock": 0})
            )
        assert len(await store.list_variants(limit=None)) == 4
        assert len(await store.list_variants(limit=2)) == 2


class TestReserve:
    async def test_reserve_and_release(self, store):
        [after_reserve] = await store.reserve_many({"var-saree-green": 3}, reference="ord-1")
        assert after_reserve.stock == 2

        [after_release] = await store.release_many({"var-saree-green": 3}, reference="ord-1")
        assert after_release.stock == 5

        # newest first
        movements = await store.get_movements("var-saree-green")
        assert [m.movement_type for m in movements] == [
            MovementType.IN,
            MovementType.OUT,
            MovementType.IN,
        ]
        assert [m.stock_after for m in movements] == [5, 2, 5]
        assert movements[1].reference == "ord-1"

    async def test_shortfall_leaves_stock_untouched(self, store):
        await store.reserve_many({"var-saree-green": 3})

        with pytest.raises(InsufficientStockError) as exc_info:
            await store.reserve_many({"var-saree-green": 3})

        assert exc_info.value.details["available"] == 2
        assert exc_info.value.details["shortfall"] == 1
        assert (await store.get_variant("var-saree-green")).stock == 2

    async def test_all_or_nothing_across_lines(self, store, store_variant):
        await store.create_variant(store_variant.model_copy(update={"id": "var-low", "stock": 1}))

        with pytest.raises(InsufficientStockError):
            await store.reserve_many({"var-saree-green": 2, "var-low": 2})

        assert (await store.get_variant("var-saree-green")).stock == 5
        assert (await store.get_variant("var-low")).stock == 1

    async def test_unknown_variant(self, store):
        with pytest.raises(VariantNotFoundError):
            await store.reserve_many({"var-nope": 1})

    async def test_concurrent_reservations_never_oversell(self, store):
        async def attempt():
            try:
                await store.reserve_many({"var-saree-green": 2})
                return True
            except InsufficientStockError:
                return False

        results = await asyncio.gather(*(attempt() for _ in range(6)))

        assert results.count(True) == 2
        variant = await store.get_variant("var-saree-green")
        assert variant.stock == 1
        out = [m for m in await store.get_movements("var-saree-green") if m.movement_type is MovementType.OUT]
        assert sum(m.quantity_sets for m in out) + variant.stock == 5


class TestAdjust:
    async def test_set(self, store):
        variant = await store.adjust("var-saree-green", AdjustmentMode.SET, 12, "recount")
        assert variant.stock == 12
        latest = (await store.get_movements("var-saree-green"))[0]
        assert latest.movement_type is MovementType.ADJUSTMENT
        assert latest.quantity_sets == 7
        assert latest.reason == "recount"

    async def test_delta_clamps_at_zero(self, store):
        variant = await store.adjust("var-saree-green", AdjustmentMode.DELTA, -9, "damaged")
        assert variant.stock == 0
        latest = (await store.get_movements("var-saree-green"))[0]
        assert latest.quantity_sets == -5

    async def test_unknown_variant(self, store):
        with pytest.raises(VariantNotFoundError):
            await store.adjust("var-nope", AdjustmentMode.SET, 1, "recount")
