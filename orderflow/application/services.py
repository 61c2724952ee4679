"""
Service factory functions for dependency injection.

This module provides factory functions that wire configuration and
infrastructure implementations to core services. Use cases should import
from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from orderflow.config import get_settings
from orderflow.core.services import (
    DiscountNegotiation,
    FinancialLedger,
    InventoryLedger,
    InvoiceComposer,
    OrderStateMachine,
    PricingEngine,
)

if TYPE_CHECKING:
    from orderflow.core.interfaces import IInventoryStore, INotifier, IOrderStore


# Singleton service instances (stateless, configured once)
_pricing_engine: PricingEngine | None = None
_discount_negotiation: DiscountNegotiation | None = None
_financial_ledger: FinancialLedger | None = None
_invoice_composer: InvoiceComposer | None = None


def get_pricing_engine() -> PricingEngine:
    """Get or create the PricingEngine configured from commerce settings."""
    global _pricing_engine
    if _pricing_engine is None:
        settings = get_settings()
        _pricing_engine = PricingEngine(
            intermediary_share_rate=settings.commerce.intermediary_share_rate,
        )
    return _pricing_engine


def get_discount_negotiation() -> DiscountNegotiation:
    global _discount_negotiation
    if _discount_negotiation is None:
        _discount_negotiation = DiscountNegotiation()
    return _discount_negotiation


def get_financial_ledger() -> FinancialLedger:
    global _financial_ledger
    if _financial_ledger is None:
        settings = get_settings()
        _financial_ledger = FinancialLedger(
            commission_rate=settings.commerce.agent_commission_rate,
        )
    return _financial_ledger


def get_invoice_composer() -> InvoiceComposer:
    """Get or create the InvoiceComposer configured from invoice settings."""
    global _invoice_composer
    if _invoice_composer is None:
        invoice = get_settings().invoice
        _invoice_composer = InvoiceComposer(
            gst_rate=invoice.gst_rate,
            intermediary_discount_rate=invoice.intermediary_discount_rate,
            settlement_days=invoice.settlement_days,
            seller_name=invoice.seller_name,
            seller_gstin=invoice.seller_gstin,
            jurisdiction=invoice.jurisdiction,
        )
    return _invoice_composer


async def get_inventory_ledger(
    inventory_store: "IInventoryStore | None" = None,
) -> InventoryLedger:
    """
    Build an InventoryLedger over the given store.

    Creates the SQLite store if not provided.
    """
    if inventory_store is None:
        # Lazy import infrastructure to avoid circular imports
        from orderflow.infrastructure.storage.sqlite import get_inventory_store

        inventory_store = await get_inventory_store()
    return InventoryLedger(inventory_store)


async def get_order_state_machine(
    order_store: "IOrderStore | None" = None,
    inventory_store: "IInventoryStore | None" = None,
    notifier: "INotifier | None" = None,
) -> OrderStateMachine:
    """
    Build an OrderStateMachine.

    Missing dependencies are filled with the SQLite implementations; the
    notification inbox doubles as the notifier.
    """
    from orderflow.infrastructure.storage.sqlite import (
        get_notification_store,
        get_order_store,
    )

    return OrderStateMachine(
        order_store=order_store or await get_order_store(),
        inventory=await get_inventory_ledger(inventory_store),
        notifier=notifier or await get_notification_store(),
    )


def reset_services() -> None:
    """Reset singleton services (for testing)."""
    global _pricing_engine, _discount_negotiation, _financial_ledger, _invoice_composer
    _pricing_engine = None
    _discount_negotiation = None
    _financial_ledger = None
    _invoice_composer = None
