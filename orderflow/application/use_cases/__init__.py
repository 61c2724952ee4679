"""Application use cases."""

from orderflow.application.use_cases.compose_invoice import ComposeInvoiceUseCase
from orderflow.application.use_cases.manage_inventory import ManageInventoryUseCase
from orderflow.application.use_cases.manage_ledger import DuesResult, ManageLedgerUseCase
from orderflow.application.use_cases.manage_pricing_rules import ManagePricingRulesUseCase
from orderflow.application.use_cases.negotiate_discount import (
    NegotiateDiscountResult,
    NegotiateDiscountUseCase,
)
from orderflow.application.use_cases.parse_quick_order import ParseQuickOrderUseCase
from orderflow.application.use_cases.place_order import (
    PlaceOrderResult,
    PlaceOrderUseCase,
    apply_totals,
)
from orderflow.application.use_cases.transition_order import TransitionOrderUseCase

__all__ = [
    "PlaceOrderUseCase",
    "PlaceOrderResult",
    "apply_totals",
    "NegotiateDiscountUseCase",
    "NegotiateDiscountResult",
    "TransitionOrderUseCase",
    "ManageInventoryUseCase",
    "ManageLedgerUseCase",
    "DuesResult",
    "ManagePricingRulesUseCase",
    "ComposeInvoiceUseCase",
    "ParseQuickOrderUseCase",
]
