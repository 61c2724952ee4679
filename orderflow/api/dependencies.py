"""
Dependency injection container for FastAPI.

Provides use cases and stores to route handlers. Tests swap these out
through ``app.dependency_overrides``.
"""

from orderflow.application.use_cases import (
    ComposeInvoiceUseCase,
    ManageInventoryUseCase,
    ManageLedgerUseCase,
    ManagePricingRulesUseCase,
    NegotiateDiscountUseCase,
    ParseQuickOrderUseCase,
    PlaceOrderUseCase,
    TransitionOrderUseCase,
)
from orderflow.infrastructure.storage.sqlite import (
    SQLiteNotificationStore,
    SQLiteOrderStore,
    get_notification_store,
    get_order_store,
)


# Use case dependencies
def get_place_order_use_case() -> PlaceOrderUseCase:
    return PlaceOrderUseCase()


def get_negotiate_discount_use_case() -> NegotiateDiscountUseCase:
    return NegotiateDiscountUseCase()


def get_transition_order_use_case() -> TransitionOrderUseCase:
    return TransitionOrderUseCase()


def get_manage_inventory_use_case() -> ManageInventoryUseCase:
    return ManageInventoryUseCase()


def get_manage_ledger_use_case() -> ManageLedgerUseCase:
    return ManageLedgerUseCase()


def get_manage_pricing_rules_use_case() -> ManagePricingRulesUseCase:
    return ManagePricingRulesUseCase()


def get_compose_invoice_use_case() -> ComposeInvoiceUseCase:
    return ComposeInvoiceUseCase()


def get_parse_quick_order_use_case() -> ParseQuickOrderUseCase:
    return ParseQuickOrderUseCase()


# Store dependencies
async def get_ord_store() -> SQLiteOrderStore:
    """Get order store."""
    return await get_order_store()


async def get_notif_store() -> SQLiteNotificationStore:
    """Get notification store."""
    return await get_notification_store()
