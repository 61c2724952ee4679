"""
Discount Negotiation.

Enforces the discount ceiling and the payment-method lock a granted
discount imposes. Offers come from untrusted producers (a sales person or
an assistant) and get the same checks either way.
"""

from orderflow.config import get_logger
from orderflow.core.entities.common import utcnow
from orderflow.core.entities.discount import (
    MAX_DISCOUNT_PERCENT,
    PAY_NOW_DISCLOSURE,
    AppliedDiscount,
    DiscountOffer,
)
from orderflow.core.entities.order import Order, OrderStatus, PaymentMethod
from orderflow.core.exceptions import (
    DiscountRejectedError,
    PaymentMethodLockedError,
    PreconditionNotMetError,
)

logger = get_logger(__name__)


class DiscountNegotiation:
    """
    Applies accepted offers to PENDING orders.

    Mutates the order in place; persisting it is the caller's job.
    """

    def __init__(self, max_percent: int = MAX_DISCOUNT_PERCENT):
        self._max_percent = max_percent

    def propose_discount(self, order: Order, offer: DiscountOffer) -> AppliedDiscount:
        """
        Validate an offer and apply it to the order.

        Raises:
            DiscountRejectedError: percent out of range or offer already used
            PreconditionNotMetError: order is no longer PENDING
        """
        percent = offer.percent
        if isinstance(percent, bool) or not isinstance(percent, int):
            raise DiscountRejectedError(percent, "percent must be a whole number", self._max_percent)
        if percent > self._max_percent:
            logger.warning(
                "discount_rejected",
                order_id=order.id,
                percent=percent,
                reason="above_ceiling",
            )
            raise DiscountRejectedError(
                percent, f"exceeds the {self._max_percent}% ceiling", self._max_percent
            )
        if percent < 0:
            raise DiscountRejectedError(percent, "cannot be negative", self._max_percent)
        if offer.applied:
            raise DiscountRejectedError(percent, "offer has already been applied", self._max_percent)
        if order.status is not OrderStatus.PENDING:
            raise PreconditionNotMetError(
                order.id,
                "status_pending",
                f"Discount can only be negotiated on a PENDING order (status is {order.status.value})",
            )

        previous = order.discount_percent
        offer.applied = True

        if percent == previous:
            return self._result(order, previous, changed=False)

        if percent == 0:
            order.discount_percent = 0
            order.discount_disclosure = None
            order.discount_disclosed_at = None
        else:
            # Lock payment first so the order never holds a discount with credit terms
            order.payment_method = PaymentMethod.PAY_NOW
            order.discount_percent = percent
            order.discount_disclosure = PAY_NOW_DISCLOSURE
            order.discount_disclosed_at = utcnow()
        order.updated_at = utcnow()

        logger.info(
            "discount_applied",
            order_id=order.id,
            percent=percent,
            previous_percent=previous,
        )
        return self._result(order, previous, changed=True)

    def select_payment_method(self, order: Order, method: PaymentMethod) -> Order:
        """
        Change how a PENDING order will be settled.

        Raises:
            PaymentMethodLockedError: a deferred method on a discounted order
            PreconditionNotMetError: order is no longer PENDING
        """
        if order.status is not OrderStatus.PENDING:
            raise PreconditionNotMetError(
                order.id,
                "status_pending",
                f"Payment method is fixed once the order is {order.status.value}",
            )
        if order.discount_percent > 0 and method.is_deferred:
            raise PaymentMethodLockedError(order.id, method.value, order.discount_percent)

        order.payment_method = method
        order.updated_at = utcnow()
        return order

    @staticmethod
    def _result(order: Order, previous: int, changed: bool) -> AppliedDiscount:
        return AppliedDiscount(
            order_id=order.id,
            percent=order.discount_percent,
            previous_percent=previous,
            payment_method=order.payment_method,
            disclosure=order.discount_disclosure,
            disclosed_at=order.discount_disclosed_at,
            changed=changed,
        )
