"""Pytest fixtures for SQLite storage tests."""

from decimal import Decimal

import pytest

from orderflow.core.entities import Account, ProductVariant


@pytest.fixture
def store_variant() -> ProductVariant:
    return ProductVariant(
        id="var-saree-green",
        product_id="prod-saree",
        product_name="Banarasi Saree",
        sku="BS-GRN",
        color="Green",
        size_range="Free",
        stock=5,
        price_per_piece=Decimal("450.50"),
        pieces_per_set=4,
        hsn_code="500720",
    )


@pytest.fixture
def store_account() -> Account:
    return Account(
        id="acc-retail-1",
        business_name="Sharma Garments",
        city="Jaipur",
        gstin="08ABCDE1234F1Z5",
        assigned_agent_id="agent-7",
    )
