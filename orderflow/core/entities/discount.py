"""Negotiated discount entities."""

from datetime import datetime

from pydantic import BaseModel, Field

from orderflow.core.entities.order import PaymentMethod

MAX_DISCOUNT_PERCENT = 3

PAY_NOW_DISCLOSURE = (
    "Accepting this discounted rate means only the 'Pay Now' option will be "
    "available at checkout. Ledger/Credit options will be disabled for this order."
)


class DiscountOffer(BaseModel):
    """
    A proposed discount from a human or an automated assistant.

    The percent is deliberately unbounded here: upstream producers are
    untrusted and the ceiling is checked by the negotiation service.
    """

    percent: int
    message: str = ""
    applied: bool = False


class AppliedDiscount(BaseModel):
    """Outcome of an accepted offer."""

    order_id: str
    percent: int
    previous_percent: int
    payment_method: PaymentMethod
    disclosure: str | None
    disclosed_at: datetime | None = None
    changed: bool = Field(default=True, description="False when the offer repeated the current percent")
