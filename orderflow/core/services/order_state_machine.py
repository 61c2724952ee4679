"""
Order State Machine.

Defines the only allowed status transitions for orders, the preconditions
each one needs and the side effects it emits.

Commit order for every transition:
    validate -> side effect (stock) -> conditional status commit -> notify

The status commit is conditioned on the status and version read at the
start. Any other write to the order in between, a negotiated discount
included, makes the commit lose with ConcurrencyConflictError instead of
overwriting it. Stock reserved by a losing acceptance is released again
before the conflict is raised.
"""

from dataclasses import dataclass

from orderflow.config import get_logger
from orderflow.core.entities.common import utcnow
from orderflow.core.entities.notification import Notification, NotificationCategory
from orderflow.core.entities.order import (
    Order,
    OrderDocuments,
    OrderStatus,
    TransportDetails,
)
from orderflow.core.exceptions import (
    ConcurrencyConflictError,
    IllegalTransitionError,
    OrderNotFoundError,
    PreconditionNotMetError,
)
from orderflow.core.interfaces.notifier import INotifier
from orderflow.core.interfaces.order_store import IOrderStore
from orderflow.core.services.inventory_ledger import InventoryLedger

logger = get_logger(__name__)

ORDERS_LINK = "/orders"

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.ACCEPTED, OrderStatus.CANCELLED}),
    OrderStatus.ACCEPTED: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DISPATCHED, OrderStatus.CANCELLED}),
    OrderStatus.DISPATCHED: frozenset({OrderStatus.DELIVERED}),
}

# Document amendment never changes status
AMENDABLE_STATES = frozenset({OrderStatus.ACCEPTED, OrderStatus.READY, OrderStatus.DISPATCHED})


def can_transition(*, from_status: OrderStatus, to_status: OrderStatus) -> bool:
    if from_status in TERMINAL_STATES:
        return False
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def validate_transition(*, order: Order, target_status: OrderStatus) -> None:
    if not can_transition(from_status=order.status, to_status=target_status):
        raise IllegalTransitionError(order.id, order.status.value, target_status.value)


@dataclass
class TransitionRequest:
    """Inputs a caller may supply with a transition."""

    confirmed: bool = False
    documents: OrderDocuments | None = None
    transport: TransportDetails | None = None
    reason: str | None = None
    performed_by: str | None = None


class OrderStateMachine:
    """Moves orders along the lifecycle graph."""

    def __init__(
        self,
        order_store: IOrderStore,
        inventory: InventoryLedger,
        notifier: INotifier,
    ):
        self._orders = order_store
        self._inventory = inventory
        self._notifier = notifier

    # ------------------------------------------------------------------
    # Named transitions
    # ------------------------------------------------------------------

    async def accept(
        self, order_id: str, confirmed: bool, performed_by: str | None = None
    ) -> Order:
        return await self.transition(
            order_id,
            OrderStatus.ACCEPTED,
            TransitionRequest(confirmed=confirmed, performed_by=performed_by),
        )

    async def mark_ready(
        self, order_id: str, documents: OrderDocuments, performed_by: str | None = None
    ) -> Order:
        return await self.transition(
            order_id,
            OrderStatus.READY,
            TransitionRequest(documents=documents, performed_by=performed_by),
        )

    async def dispatch(
        self,
        order_id: str,
        transport: TransportDetails,
        documents: OrderDocuments | None = None,
        performed_by: str | None = None,
    ) -> Order:
        return await self.transition(
            order_id,
            OrderStatus.DISPATCHED,
            TransitionRequest(transport=transport, documents=documents, performed_by=performed_by),
        )

    async def deliver(
        self, order_id: str, confirmed: bool, performed_by: str | None = None
    ) -> Order:
        return await self.transition(
            order_id,
            OrderStatus.DELIVERED,
            TransitionRequest(confirmed=confirmed, performed_by=performed_by),
        )

    async def cancel(
        self,
        order_id: str,
        reason: str,
        confirmed: bool,
        performed_by: str | None = None,
    ) -> Order:
        return await self.transition(
            order_id,
            OrderStatus.CANCELLED,
            TransitionRequest(confirmed=confirmed, reason=reason, performed_by=performed_by),
        )

    # ------------------------------------------------------------------
    # Generic transition
    # ------------------------------------------------------------------

    async def transition(
        self,
        order_id: str,
        target: OrderStatus,
        request: TransitionRequest | None = None,
    ) -> Order:
        """
        Move an order to ``target``.

        Raises:
            OrderNotFoundError: no such order
            IllegalTransitionError: target is not reachable from the current status
            PreconditionNotMetError: a required confirmation, document or field is missing
            InsufficientStockError: acceptance could not reserve every line
            ConcurrencyConflictError: another writer changed the order first
        """
        request = request or TransitionRequest()
        order = await self._load(order_id)
        validate_transition(order=order, target_status=target)

        updated = self._prepare(order, target, request)

        reserved = False
        if target is OrderStatus.ACCEPTED:
            await self._inventory.reserve_for_order(order, performed_by=request.performed_by)
            reserved = True

        try:
            committed = await self._orders.update_if_status(updated, expected_status=order.status)
        except ConcurrencyConflictError:
            if reserved:
                await self._inventory.release_for_order(order, performed_by=request.performed_by)
            logger.warning(
                "order_transition_conflict",
                order_id=order.id,
                expected=order.status.value,
                target=target.value,
            )
            raise

        if target is OrderStatus.CANCELLED and order.holds_reservation:
            await self._inventory.release_for_order(order, performed_by=request.performed_by)

        logger.info(
            "order_transitioned",
            order_id=order.id,
            from_status=order.status.value,
            to_status=target.value,
            performed_by=request.performed_by,
        )

        await self._notifier.notify(self._notification_for(committed))
        return committed

    async def amend_documents(self, order_id: str, documents: OrderDocuments) -> Order:
        """Replace document URLs without changing status. No notification."""
        order = await self._load(order_id)
        if order.status not in AMENDABLE_STATES:
            raise PreconditionNotMetError(
                order.id,
                "amendable_status",
                f"Documents cannot be amended while the order is {order.status.value}",
            )
        if not documents.model_dump(exclude_none=True):
            raise PreconditionNotMetError(
                order.id, "document_url", "At least one document URL is required"
            )

        updated = order.model_copy(
            update={"documents": order.documents.merged(documents), "updated_at": utcnow()}
        )
        committed = await self._orders.update_if_status(updated, expected_status=order.status)
        logger.info("order_documents_amended", order_id=order.id, status=order.status.value)
        return committed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load(self, order_id: str) -> Order:
        order = await self._orders.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def _prepare(self, order: Order, target: OrderStatus, request: TransitionRequest) -> Order:
        """Check preconditions and build the post-transition order. No I/O."""
        update: dict = {"status": target, "updated_at": utcnow()}

        if target is OrderStatus.ACCEPTED:
            self._require_confirmation(order, request, "payment or credit terms settled")
            if order.discount_percent > 0 and order.discount_disclosed_at is None:
                raise PreconditionNotMetError(
                    order.id,
                    "discount_disclosure",
                    "The Pay Now disclosure must be shown before a discounted order is accepted",
                )

        elif target is OrderStatus.READY:
            documents = request.documents or OrderDocuments()
            if not documents.invoice_url:
                raise PreconditionNotMetError(
                    order.id,
                    "invoice_document",
                    "Invoice document required before marking Ready",
                )
            update["documents"] = order.documents.merged(documents)

        elif target is OrderStatus.DISPATCHED:
            transport = request.transport
            if transport is None or not transport.gr_number.strip():
                raise PreconditionNotMetError(
                    order.id,
                    "gr_number",
                    "Builty / GR number required before marking Dispatched",
                )
            update["transport"] = transport.model_copy(
                update={"gr_number": transport.gr_number.strip()}
            )
            if request.documents is not None:
                update["documents"] = order.documents.merged(request.documents)

        elif target is OrderStatus.DELIVERED:
            self._require_confirmation(order, request, "delivery")

        elif target is OrderStatus.CANCELLED:
            self._require_confirmation(order, request, "cancellation")
            reason = (request.reason or "").strip()
            if not reason:
                raise PreconditionNotMetError(
                    order.id, "cancellation_reason", "A reason is required to cancel an order"
                )
            update["cancellation_reason"] = reason

        return order.model_copy(update=update)

    @staticmethod
    def _require_confirmation(order: Order, request: TransitionRequest, what: str) -> None:
        if not request.confirmed:
            raise PreconditionNotMetError(
                order.id, "confirmation", f"Explicit confirmation of {what} is required"
            )

    @staticmethod
    def _notification_for(order: Order) -> Notification:
        status = order.status
        category = NotificationCategory.ORDER

        if status is OrderStatus.ACCEPTED:
            title = "Order Accepted"
            message = f"Your order #{order.id} has been accepted and is being processed."
        elif status is OrderStatus.READY:
            title = "Order Ready"
            message = f"Order #{order.id} is packed and ready. Invoice generated."
        elif status is OrderStatus.DISPATCHED:
            transport = order.transport
            title = "Order Dispatched"
            message = (
                f"Builty No: {transport.gr_number}. "
                f"Your order is on the way via {transport.carrier_name or 'transport'}."
            )
        elif status is OrderStatus.DELIVERED:
            title = "Order Delivered"
            message = f"Order #{order.id} has been marked delivered. Please leave a review!"
        else:
            title = "Order Cancelled"
            message = f"Order #{order.id} was cancelled. Reason: {order.cancellation_reason}"
            category = NotificationCategory.ALERT

        return Notification(
            recipient_id=order.account_id,
            title=title,
            message=message,
            category=category,
            link=ORDERS_LINK,
        )
