"""Order domain entities."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from orderflow.core.entities.common import ZERO, new_id, to_money, utcnow
from orderflow.core.entities.pricing import PricingSnapshot


class OrderStatus(str, Enum):
    """Lifecycle states of an order."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    READY = "READY"
    DISPATCHED = "DISPATCHED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    """How the order is settled. Only PAY_NOW is immediate."""

    PAY_NOW = "PAY_NOW"
    LEDGER = "LEDGER"
    GADDI = "GADDI"
    AGENT = "AGENT"
    DISTRIBUTOR_CREDIT = "DISTRIBUTOR_CREDIT"

    @property
    def is_deferred(self) -> bool:
        return self is not PaymentMethod.PAY_NOW


class OrderItem(BaseModel):
    """A line on an order with the catalog values snapshotted at creation."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    variant_id: str
    product_name: str
    color: str = ""
    size_range: str = ""
    price_per_piece: Decimal = Field(..., ge=0)
    pieces_per_set: int = Field(..., gt=0)
    quantity_sets: int = Field(..., gt=0)
    hsn_code: str | None = None

    @property
    def pieces(self) -> int:
        return self.quantity_sets * self.pieces_per_set

    @property
    def gross_amount(self) -> Decimal:
        """Undiscounted value of the line."""
        return to_money(self.price_per_piece * self.pieces_per_set * self.quantity_sets)

    @property
    def variant_description(self) -> str:
        return f"{self.color} / {self.size_range}"


class OrderDocuments(BaseModel):
    """Document URLs attached progressively as the order moves along."""

    invoice_url: str | None = None
    eway_bill_url: str | None = None
    transport_slip_url: str | None = None
    retailer_memo_url: str | None = None
    purchase_order_url: str | None = None

    def merged(self, other: "OrderDocuments") -> "OrderDocuments":
        """Overlay the URLs set on ``other`` onto this bundle."""
        update = other.model_dump(exclude_none=True)
        return self.model_copy(update=update)


class TransportDetails(BaseModel):
    """Carrier data captured at dispatch."""

    carrier_name: str = ""
    gr_number: str
    vehicle_number: str | None = None
    station: str | None = None
    eway_bill_number: str | None = None


class Order(BaseModel):
    """
    A wholesale order.

    Mutated only by the order state machine, discount negotiation and the
    document amendment side-channel.
    """

    id: str = Field(default_factory=lambda: new_id("ord"))
    account_id: str
    account_name: str = ""
    items: list[OrderItem] = Field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.PAY_NOW
    intermediary_id: str | None = None
    discount_percent: int = Field(default=0, ge=0, le=3)
    total_amount: Decimal = ZERO
    factory_amount: Decimal = ZERO
    documents: OrderDocuments = Field(default_factory=OrderDocuments)
    transport: TransportDetails | None = None
    discount_disclosure: str | None = None
    discount_disclosed_at: datetime | None = None
    cancellation_reason: str | None = None
    pricing: PricingSnapshot | None = None
    # Bumped by the store on every committed write
    version: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def check_payment_lock(self) -> "Order":
        """A granted discount disables deferred settlement."""
        if self.discount_percent > 0 and self.payment_method is not PaymentMethod.PAY_NOW:
            raise ValueError(
                f"discounted order ({self.discount_percent}%) must use PAY_NOW, "
                f"not {self.payment_method.value}"
            )
        return self

    @property
    def subtotal(self) -> Decimal:
        """Sum of undiscounted line values."""
        return sum((item.gross_amount for item in self.items), ZERO)

    @property
    def is_terminal(self) -> bool:
        return self.status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    @property
    def holds_reservation(self) -> bool:
        """Stock is reserved from acceptance until dispatch or cancellation."""
        return self.status in (OrderStatus.ACCEPTED, OrderStatus.READY)
