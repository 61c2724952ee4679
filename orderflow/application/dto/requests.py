"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from orderflow.core.entities.inventory import AdjustmentMode
from orderflow.core.entities.invoice import InvoiceMode
from orderflow.core.entities.ledger import TransactionType
from orderflow.core.entities.order import PaymentMethod
from orderflow.core.entities.pricing import CalculationType, RuleTarget, RuleType


# ============================================================================
# Orders
# ============================================================================


class OrderLineRequest(BaseModel):
    """One cart line. Prices are looked up and snapshotted server-side."""

    variant_id: str = Field(..., min_length=1, description="Catalog variant ID")
    quantity_sets: int = Field(..., gt=0, description="Quantity in sets, never pieces")


class DiscountOfferRequest(BaseModel):
    """A discount proposed by a sales person or an assistant."""

    percent: int = Field(..., description="Proposed discount percent (0-3 accepted)")
    message: str = Field(default="", description="Justification shown with the offer")


class PlaceOrderRequest(BaseModel):
    account_id: str = Field(..., min_length=1, description="Ordering account")
    account_name: str | None = Field(
        default=None, description="Display name; taken from the account when omitted"
    )
    lines: list[OrderLineRequest] = Field(..., min_length=1)
    payment_method: PaymentMethod = Field(default=PaymentMethod.PAY_NOW)
    intermediary_id: str | None = Field(
        default=None, description="Gaddi settling this order; taken from the account when omitted"
    )
    discount: DiscountOfferRequest | None = Field(
        default=None, description="Negotiated offer to apply at creation"
    )


class SelectPaymentMethodRequest(BaseModel):
    payment_method: PaymentMethod


class AcceptOrderRequest(BaseModel):
    confirmed: bool = Field(
        default=False, description="Payment or credit terms have been settled"
    )
    performed_by: str | None = None


class MarkReadyRequest(BaseModel):
    invoice_url: str | None = Field(default=None, description="Mandatory invoice document URL")
    eway_bill_url: str | None = None
    performed_by: str | None = None


class DispatchOrderRequest(BaseModel):
    gr_number: str = Field(default="", description="Builty / consignment number (mandatory)")
    carrier_name: str = Field(default="", examples=["KRISHNA FREIGHT MOVERS"])
    vehicle_number: str | None = None
    station: str | None = None
    eway_bill_number: str | None = None
    transport_slip_url: str | None = None
    performed_by: str | None = None


class DeliverOrderRequest(BaseModel):
    confirmed: bool = False
    performed_by: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str = Field(default="", description="Why the order is being cancelled")
    confirmed: bool = False
    performed_by: str | None = None


class AmendDocumentsRequest(BaseModel):
    """Replace document URLs without changing status. Omitted URLs are kept."""

    invoice_url: str | None = None
    eway_bill_url: str | None = None
    transport_slip_url: str | None = None
    retailer_memo_url: str | None = None
    purchase_order_url: str | None = None


class ComposeInvoiceRequest(BaseModel):
    order_id: str
    mode: InvoiceMode = InvoiceMode.RETAILER_MEMO


# ============================================================================
# Inventory
# ============================================================================


class CreateVariantRequest(BaseModel):
    id: str | None = Field(default=None, description="Variant ID; generated when omitted")
    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    sku: str = ""
    color: str = ""
    size_range: str = Field(default="", examples=["S-XXL"])
    stock: int = Field(default=0, ge=0, description="Opening stock in sets")
    price_per_piece: Decimal = Field(..., ge=0)
    pieces_per_set: int = Field(..., gt=0)
    hsn_code: str | None = None


class AdjustStockRequest(BaseModel):
    mode: AdjustmentMode = Field(..., description="SET replaces the count, DELTA adds to it")
    value: int = Field(..., description="New count (SET) or signed change (DELTA), in sets")
    reason: str = Field(default="Manual adjustment", min_length=1)
    performed_by: str | None = None


# ============================================================================
# Ledger
# ============================================================================


class RecordTransactionRequest(BaseModel):
    account_id: str = Field(..., min_length=1)
    type: TransactionType
    amount: Decimal = Field(..., gt=0)
    description: str = ""
    reference_id: str | None = None
    created_by: str = "admin"
    date: datetime | None = None


class UpsertAccountRequest(BaseModel):
    id: str = Field(..., min_length=1)
    business_name: str = Field(..., min_length=1)
    city: str | None = None
    gstin: str | None = None
    assigned_agent_id: str | None = None
    intermediary_id: str | None = None


# ============================================================================
# Pricing rules
# ============================================================================


class CreatePricingRuleRequest(BaseModel):
    name: str = Field(..., min_length=1)
    rule_type: RuleType
    calculation_type: CalculationType = CalculationType.PERCENTAGE
    value: Decimal = Field(..., ge=0)
    min_order_value: Decimal = Field(default=Decimal("0"), ge=0)
    priority: int = 0
    target: RuleTarget = RuleTarget.ALL
    effective_from: datetime | None = None
    effective_to: datetime | None = None


# ============================================================================
# Quick order
# ============================================================================


class QuickOrderParseRequest(BaseModel):
    """Either pasted CSV text or assistant-produced lines."""

    text: str | None = Field(default=None, description="key,quantity rows")
    lines: list[dict[str, Any]] | None = Field(
        default=None,
        description="Assistant lines with keyword, optional color/size, quantity_sets",
    )
