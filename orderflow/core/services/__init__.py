"""
Core business logic services.

Layer-pure services that depend only on:
- orderflow/core/entities/*
- orderflow/core/interfaces/*
- orderflow/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from orderflow.core.services.discount_negotiation import DiscountNegotiation
from orderflow.core.services.financial_ledger import FinancialLedger
from orderflow.core.services.inventory_ledger import InventoryLedger, merge_lines
from orderflow.core.services.invoice_composer import InvoiceComposer
from orderflow.core.services.order_line_parser import (
    MatchedLine,
    ParseResult,
    UnmatchedLine,
    parse_csv,
    validate_lines,
)
from orderflow.core.services.order_state_machine import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATES,
    OrderStateMachine,
    TransitionRequest,
    can_transition,
    validate_transition,
)
from orderflow.core.services.pricing import PricingEngine, validate_discount_percent

__all__ = [
    # Pricing
    "PricingEngine",
    "validate_discount_percent",
    # Discount negotiation
    "DiscountNegotiation",
    # Inventory
    "InventoryLedger",
    "merge_lines",
    # Lifecycle
    "OrderStateMachine",
    "TransitionRequest",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATES",
    "can_transition",
    "validate_transition",
    # Finance
    "FinancialLedger",
    # Invoices
    "InvoiceComposer",
    # Bulk order input
    "parse_csv",
    "validate_lines",
    "ParseResult",
    "MatchedLine",
    "UnmatchedLine",
]
