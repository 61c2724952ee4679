"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from orderflow.application.services import (
    get_discount_negotiation,
    get_financial_ledger,
    get_inventory_ledger,
    get_invoice_composer,
    get_order_state_machine,
    get_pricing_engine,
    reset_services,
)
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

__all__ = [
    # Use Cases
    "PlaceOrderUseCase",
    "NegotiateDiscountUseCase",
    "TransitionOrderUseCase",
    "ManageInventoryUseCase",
    "ManageLedgerUseCase",
    "ManagePricingRulesUseCase",
    "ComposeInvoiceUseCase",
    "ParseQuickOrderUseCase",
    # Service factories
    "get_pricing_engine",
    "get_discount_negotiation",
    "get_financial_ledger",
    "get_invoice_composer",
    "get_inventory_ledger",
    "get_order_state_machine",
    "reset_services",
]
