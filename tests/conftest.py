"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from orderflow.application.services import reset_services
from orderflow.core.entities import (
    Account,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    ProductVariant,
)
from orderflow.infrastructure.storage.sqlite import connection as conn_module
from orderflow.infrastructure.storage.sqlite.connection import close_pool
from orderflow.infrastructure.storage.sqlite.migrations import migrator as migrator_module
from orderflow.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture(autouse=True)
def _reset_service_singletons():
    """Service factories cache instances built from settings."""
    reset_services()
    yield
    reset_services()


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 3
    mock.storage.busy_timeout = 5000
    return mock


@pytest.fixture
async def initialized_db(temp_db_path: Path, mock_settings) -> AsyncGenerator[Path, None]:
    """Temporary database with every migration applied and the pool pointed at it."""
    with (
        patch.object(migrator_module, "get_settings", return_value=mock_settings),
        patch.object(conn_module, "get_settings", return_value=mock_settings),
    ):
        await initialize_database(db_path=temp_db_path, create_backup_before=False)
        conn_module._pool = None
        try:
            yield temp_db_path
        finally:
            await close_pool()


# ============================================================================
# Entities
# ============================================================================


@pytest.fixture
def sample_variant() -> ProductVariant:
    """Kurti set: 6 pieces at 100 each, 10 sets in stock."""
    return ProductVariant(
        id="var-kurti-red",
        product_id="prod-kurti",
        product_name="Anarkali Kurti",
        sku="AK-RED-SXXL",
        color="Red",
        size_range="S-XXL",
        stock=10,
        price_per_piece=Decimal("100.00"),
        pieces_per_set=6,
        hsn_code="620429",
    )


@pytest.fixture
def sample_item() -> OrderItem:
    return OrderItem(
        product_id="prod-kurti",
        variant_id="var-kurti-red",
        product_name="Anarkali Kurti",
        color="Red",
        size_range="S-XXL",
        price_per_piece=Decimal("100.00"),
        pieces_per_set=6,
        quantity_sets=5,
    )


@pytest.fixture
def make_order(sample_item):
    """Factory for orders in any status."""

    def _make(
        status: OrderStatus = OrderStatus.PENDING,
        payment_method: PaymentMethod = PaymentMethod.PAY_NOW,
        **overrides,
    ) -> Order:
        values = {
            "id": "ord-test0001",
            "account_id": "acc-retail-1",
            "account_name": "Sharma Garments",
            "items": [sample_item],
            "status": status,
            "payment_method": payment_method,
            "total_amount": Decimal("3000.00"),
            "factory_amount": Decimal("3000.00"),
        }
        values.update(overrides)
        return Order(**values)

    return _make


@pytest.fixture
def sample_account() -> Account:
    return Account(
        id="acc-retail-1",
        business_name="Sharma Garments",
        city="Jaipur",
        assigned_agent_id="agent-7",
    )
