"""Core domain entities."""

from orderflow.core.entities.account import Account
from orderflow.core.entities.discount import (
    MAX_DISCOUNT_PERCENT,
    PAY_NOW_DISCLOSURE,
    AppliedDiscount,
    DiscountOffer,
)
from orderflow.core.entities.inventory import (
    AdjustmentMode,
    MovementType,
    ProductVariant,
    StockMovement,
    StockShortfall,
)
from orderflow.core.entities.invoice import InvoiceDocument, InvoiceLine, InvoiceMode
from orderflow.core.entities.ledger import (
    CommissionRecord,
    CommissionStatus,
    CommissionSummary,
    Transaction,
    TransactionType,
)
from orderflow.core.entities.notification import Notification, NotificationCategory
from orderflow.core.entities.order import (
    Order,
    OrderDocuments,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    TransportDetails,
)
from orderflow.core.entities.pricing import (
    AppliedRule,
    CalculationType,
    LinePrice,
    OrderTotals,
    PricingRule,
    PricingSnapshot,
    RuleContext,
    RuleTarget,
    RuleType,
)

__all__ = [
    # Order entities
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderDocuments",
    "TransportDetails",
    "PaymentMethod",
    # Pricing entities
    "LinePrice",
    "OrderTotals",
    "PricingRule",
    "PricingSnapshot",
    "AppliedRule",
    "RuleContext",
    "RuleTarget",
    "RuleType",
    "CalculationType",
    # Discount entities
    "DiscountOffer",
    "AppliedDiscount",
    "MAX_DISCOUNT_PERCENT",
    "PAY_NOW_DISCLOSURE",
    # Inventory entities
    "ProductVariant",
    "StockMovement",
    "StockShortfall",
    "MovementType",
    "AdjustmentMode",
    # Ledger entities
    "Transaction",
    "TransactionType",
    "CommissionRecord",
    "CommissionStatus",
    "CommissionSummary",
    # Invoice entities
    "InvoiceDocument",
    "InvoiceLine",
    "InvoiceMode",
    # Other
    "Account",
    "Notification",
    "NotificationCategory",
]
