"""API tests for inventory endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from orderflow.api.dependencies import get_manage_inventory_use_case
from orderflow.api.main import app
from orderflow.application.use_cases import ManageInventoryUseCase
from orderflow.core.entities import AdjustmentMode
from orderflow.core.entities.inventory import MovementType, StockMovement


@pytest.fixture
def mock_inventory_store(sample_variant):
    store = AsyncMock()
    store.get_variant.return_value = sample_variant
    store.list_variants.return_value = [sample_variant]
    store.create_variant.side_effect = lambda variant: variant
    store.adjust.return_value = sample_variant.model_copy(update={"stock": 7})
    store.get_movements.return_value = [
        StockMovement(
            id=2,
            variant_id=sample_variant.id,
            movement_type=MovementType.OUT,
            quantity_sets=3,
            stock_after=7,
            reason="Reserved for order",
            reference="ord-test0001",
        ),
        StockMovement(
            id=1,
            variant_id=sample_variant.id,
            movement_type=MovementType.IN,
            quantity_sets=10,
            stock_after=10,
            reason="Opening stock",
        ),
    ]
    return store


@pytest.fixture
async def inv_client(mock_inventory_store):
    use_case = ManageInventoryUseCase(inventory_store=mock_inventory_store)
    app.dependency_overrides[get_manage_inventory_use_case] = lambda: use_case
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_manage_inventory_use_case, None)


class TestInventoryAPI:
    async def test_create_variant_returns_201(self, inv_client, mock_inventory_store):
        mock_inventory_store.get_variant.return_value = None

        response = await inv_client.post(
            "/api/inventory/variants",
            json={
                "id": "var-saree-green",
                "product_id": "prod-saree",
                "product_name": "Banarasi Saree",
                "stock": 4,
                "price_per_piece": "450.50",
                "pieces_per_set": 4,
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "var-saree-green"
        assert data["stock"] == 4
        assert data["stock_pieces"] == 16
        assert data["price_per_piece"] == "450.50"

    async def test_duplicate_variant_is_400(self, inv_client: AsyncClient):
        response = await inv_client.post(
            "/api/inventory/variants",
            json={
                "id": "var-kurti-red",
                "product_id": "prod-kurti",
                "product_name": "Anarkali Kurti",
                "price_per_piece": "100",
                "pieces_per_set": 6,
            },
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "id"

    async def test_zero_pieces_per_set_fails_validation(self, inv_client: AsyncClient):
        response = await inv_client.post(
            "/api/inventory/variants",
            json={
                "product_id": "prod-kurti",
                "product_name": "Anarkali Kurti",
                "price_per_piece": "100",
                "pieces_per_set": 0,
            },
        )
        assert response.status_code == 422

    async def test_list_variants(self, inv_client: AsyncClient):
        response = await inv_client.get("/api/inventory/variants")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["variants"][0]["stock_pieces"] == 60

    async def test_unknown_variant_is_404(self, inv_client, mock_inventory_store):
        mock_inventory_store.get_variant.return_value = None

        response = await inv_client.get("/api/inventory/variants/var-nope")

        assert response.status_code == 404
        assert response.json()["error_code"] == "VARIANT_NOT_FOUND"

    async def test_adjust_stock(self, inv_client, mock_inventory_store):
        response = await inv_client.post(
            "/api/inventory/variants/var-kurti-red/adjust",
            json={"mode": "SET", "value": 7, "reason": "Recount"},
        )

        assert response.status_code == 200
        assert response.json()["stock"] == 7
        args = mock_inventory_store.adjust.call_args.args
        assert args[:4] == ("var-kurti-red", AdjustmentMode.SET, 7, "Recount")

    async def test_negative_set_is_400(self, inv_client, mock_inventory_store):
        response = await inv_client.post(
            "/api/inventory/variants/var-kurti-red/adjust",
            json={"mode": "SET", "value": -1, "reason": "Recount"},
        )

        assert response.status_code == 400
        mock_inventory_store.adjust.assert_not_called()

    async def test_movements_newest_first(self, inv_client: AsyncClient):
        response = await inv_client.get("/api/inventory/variants/var-kurti-red/movements")

        assert response.status_code == 200
        data = response.json()
        assert [m["movement_type"] for m in data] == ["OUT", "IN"]
        assert data[0]["reference"] == "ord-test0001"
