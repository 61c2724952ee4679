"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
Money fields are Decimals and serialize as exact strings ("3000.00").
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from orderflow.core.entities.account import Account
from orderflow.core.entities.inventory import ProductVariant, StockMovement
from orderflow.core.entities.ledger import Transaction
from orderflow.core.entities.notification import Notification
from orderflow.core.entities.order import Order
from orderflow.core.entities.pricing import PricingRule


# ============================================================================
# Orders
# ============================================================================


class OrderItemResponse(BaseModel):
    product_id: str
    variant_id: str
    product_name: str
    color: str
    size_range: str
    price_per_piece: Decimal
    pieces_per_set: int
    quantity_sets: int
    pieces: int = Field(..., description="quantity_sets * pieces_per_set")
    line_total: Decimal = Field(..., description="Undiscounted line value")


class OrderDocumentsResponse(BaseModel):
    invoice_url: str | None = None
    eway_bill_url: str | None = None
    transport_slip_url: str | None = None
    retailer_memo_url: str | None = None
    purchase_order_url: str | None = None


class TransportResponse(BaseModel):
    carrier_name: str
    gr_number: str
    vehicle_number: str | None = None
    station: str | None = None
    eway_bill_number: str | None = None


class AppliedRuleResponse(BaseModel):
    rule_id: str
    rule_name: str
    rule_type: str
    amount: Decimal


class PricingSnapshotResponse(BaseModel):
    base_total: Decimal
    final_total: Decimal
    applied_rules: list[AppliedRuleResponse] = Field(default_factory=list)
    pricing_version: str


class OrderResponse(BaseModel):
    id: str
    account_id: str
    account_name: str
    status: str
    payment_method: str
    intermediary_id: str | None = None
    discount_percent: int
    subtotal: Decimal
    total_amount: Decimal
    factory_amount: Decimal
    items: list[OrderItemResponse]
    documents: OrderDocumentsResponse
    transport: TransportResponse | None = None
    pricing: PricingSnapshotResponse | None = None
    discount_disclosure: str | None = None
    discount_disclosed_at: datetime | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            account_id=order.account_id,
            account_name=order.account_name,
            status=order.status.value,
            payment_method=order.payment_method.value,
            intermediary_id=order.intermediary_id,
            discount_percent=order.discount_percent,
            subtotal=order.subtotal,
            total_amount=order.total_amount,
            factory_amount=order.factory_amount,
            items=[
                OrderItemResponse(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    product_name=item.product_name,
                    color=item.color,
                    size_range=item.size_range,
                    price_per_piece=item.price_per_piece,
                    pieces_per_set=item.pieces_per_set,
                    quantity_sets=item.quantity_sets,
                    pieces=item.pieces,
                    line_total=item.gross_amount,
                )
                for item in order.items
            ],
            documents=OrderDocumentsResponse(**order.documents.model_dump()),
            transport=(
                TransportResponse(**order.transport.model_dump()) if order.transport else None
            ),
            pricing=(
                PricingSnapshotResponse(
                    base_total=order.pricing.base_total,
                    final_total=order.pricing.final_total,
                    applied_rules=[
                        AppliedRuleResponse(
                            rule_id=r.rule_id,
                            rule_name=r.rule_name,
                            rule_type=r.rule_type.value,
                            amount=r.amount,
                        )
                        for r in order.pricing.applied_rules
                    ],
                    pricing_version=order.pricing.pricing_version,
                )
                if order.pricing
                else None
            ),
            discount_disclosure=order.discount_disclosure,
            discount_disclosed_at=order.discount_disclosed_at,
            cancellation_reason=order.cancellation_reason,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class StockShortfallResponse(BaseModel):
    variant_id: str
    requested: int
    available: int
    shortfall: int


class PlaceOrderResponse(BaseModel):
    order: OrderResponse
    stock_warnings: list[StockShortfallResponse] = Field(
        default_factory=list,
        description="Advisory only; stock is reserved when the order is accepted",
    )


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int


class AppliedDiscountResponse(BaseModel):
    order_id: str
    percent: int
    previous_percent: int
    payment_method: str
    disclosure: str | None = None
    disclosed_at: datetime | None = None
    changed: bool
    total_amount: Decimal


# ============================================================================
# Inventory
# ============================================================================


class VariantResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    sku: str
    color: str
    size_range: str
    stock: int = Field(..., description="Available sets")
    stock_pieces: int
    price_per_piece: Decimal
    pieces_per_set: int
    hsn_code: str | None = None
    updated_at: datetime

    @classmethod
    def from_variant(cls, variant: ProductVariant) -> "VariantResponse":
        return cls(
            id=variant.id,
            product_id=variant.product_id,
            product_name=variant.product_name,
            sku=variant.sku,
            color=variant.color,
            size_range=variant.size_range,
            stock=variant.stock,
            stock_pieces=variant.stock_pieces,
            price_per_piece=variant.price_per_piece,
            pieces_per_set=variant.pieces_per_set,
            hsn_code=variant.hsn_code,
            updated_at=variant.updated_at,
        )


class VariantListResponse(BaseModel):
    variants: list[VariantResponse]
    total: int


class StockMovementResponse(BaseModel):
    id: int | None
    variant_id: str
    movement_type: str
    quantity_sets: int
    stock_after: int
    reason: str
    reference: str | None = None
    performed_by: str | None = None
    created_at: datetime

    @classmethod
    def from_movement(cls, movement: StockMovement) -> "StockMovementResponse":
        return cls(
            id=movement.id,
            variant_id=movement.variant_id,
            movement_type=movement.movement_type.value,
            quantity_sets=movement.quantity_sets,
            stock_after=movement.stock_after,
            reason=movement.reason,
            reference=movement.reference,
            performed_by=movement.performed_by,
            created_at=movement.created_at,
        )


# ============================================================================
# Ledger
# ============================================================================


class TransactionResponse(BaseModel):
    id: str
    account_id: str
    type: str
    amount: Decimal
    date: datetime
    description: str
    reference_id: str | None = None
    created_by: str

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionResponse":
        return cls(
            id=tx.id,
            account_id=tx.account_id,
            type=tx.type.value,
            amount=tx.amount,
            date=tx.date,
            description=tx.description,
            reference_id=tx.reference_id,
            created_by=tx.created_by,
        )


class DuesResponse(BaseModel):
    account_id: str
    outstanding_dues: Decimal = Field(..., description="Charges minus payments, from full history")
    transaction_count: int
    transactions: list[TransactionResponse] = Field(default_factory=list)


class CommissionRecordResponse(BaseModel):
    order_id: str
    account_id: str
    account_name: str
    order_date: datetime
    order_value: Decimal
    commission: Decimal
    status: str


class CommissionSummaryResponse(BaseModel):
    agent_id: str
    records: list[CommissionRecordResponse]
    total_paid: Decimal
    total_pending: Decimal


class AccountResponse(BaseModel):
    id: str
    business_name: str
    city: str | None = None
    gstin: str | None = None
    assigned_agent_id: str | None = None
    intermediary_id: str | None = None

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(**account.model_dump(exclude={"created_at"}))


# ============================================================================
# Pricing rules
# ============================================================================


class PricingRuleResponse(BaseModel):
    id: str
    name: str
    rule_type: str
    calculation_type: str
    value: Decimal
    min_order_value: Decimal
    priority: int
    target: str
    effective_from: datetime
    effective_to: datetime | None = None

    @classmethod
    def from_rule(cls, rule: PricingRule) -> "PricingRuleResponse":
        return cls(
            id=rule.id,
            name=rule.name,
            rule_type=rule.rule_type.value,
            calculation_type=rule.calculation_type.value,
            value=rule.value,
            min_order_value=rule.min_order_value,
            priority=rule.priority,
            target=rule.target.value,
            effective_from=rule.effective_from,
            effective_to=rule.effective_to,
        )


# ============================================================================
# Notifications
# ============================================================================


class NotificationResponse(BaseModel):
    id: int | None
    recipient_id: str
    title: str
    message: str
    category: str
    link: str | None = None
    is_read: bool
    created_at: datetime

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            recipient_id=notification.recipient_id,
            title=notification.title,
            message=notification.message,
            category=notification.category.value,
            link=notification.link,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


# ============================================================================
# Quick order
# ============================================================================


class QuickOrderLineResponse(BaseModel):
    variant_id: str
    quantity_sets: int
    key: str


class QuickOrderUnmatchedResponse(BaseModel):
    line_no: int
    raw: str
    reason: str


class QuickOrderParseResponse(BaseModel):
    quantities: dict[str, int] = Field(..., description="Sets per variant, duplicates summed")
    matched: list[QuickOrderLineResponse]
    unmatched: list[QuickOrderUnmatchedResponse]


# ============================================================================
# Health / errors
# ============================================================================


class HealthResponse(BaseModel):
    status: str = Field(..., description="Overall health status")
    version: str
    environment: str
    database: str = Field(..., description="Database reachability")


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - detail: structured context (shortfall, current vs attempted status)
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    hint: str | None = Field(default=None, description="How to resolve the error")
    detail: Any | None = Field(default=None, description="Additional error details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
