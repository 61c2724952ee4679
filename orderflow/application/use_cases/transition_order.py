"""Transition Order Use Case: move an order along its lifecycle."""

from collections.abc import Awaitable, Callable

from orderflow.application.dto.requests import (
    AcceptOrderRequest,
    AmendDocumentsRequest,
    CancelOrderRequest,
    DeliverOrderRequest,
    DispatchOrderRequest,
    MarkReadyRequest,
)
from orderflow.application.dto.responses import OrderResponse
from orderflow.application.services import get_order_state_machine
from orderflow.config import get_logger, get_settings
from orderflow.core.entities.common import ZERO
from orderflow.core.entities.ledger import Transaction, TransactionType
from orderflow.core.entities.order import Order, OrderDocuments, OrderStatus, TransportDetails
from orderflow.core.exceptions import ConcurrencyConflictError
from orderflow.core.interfaces.ledger_store import ILedgerStore
from orderflow.core.services.financial_ledger import FinancialLedger
from orderflow.core.services.order_state_machine import OrderStateMachine

logger = get_logger(__name__)


class TransitionOrderUseCase:
    """
    Runs order transitions through the state machine.

    A transition that loses a conditional update is retried against the
    freshly read order, so a retry re-checks the graph and preconditions.
    Delivering a credit order posts its CHARGE to the ledger exactly once.
    """

    def __init__(
        self,
        state_machine: OrderStateMachine | None = None,
        ledger_store: ILedgerStore | None = None,
        retries: int | None = None,
    ):
        self._state_machine = state_machine
        self._ledger_store = ledger_store
        self._retries = retries if retries is not None else get_settings().commerce.transition_retries

    async def _get_state_machine(self) -> OrderStateMachine:
        if self._state_machine is None:
            self._state_machine = await get_order_state_machine()
        return self._state_machine

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from orderflow.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def _with_retry(self, order_id: str, step: Callable[[], Awaitable[Order]]) -> Order:
        attempt = 0
        while True:
            try:
                return await step()
            except ConcurrencyConflictError:
                if attempt >= self._retries:
                    raise
                attempt += 1
                logger.info("order_transition_retry", order_id=order_id, attempt=attempt)

    async def accept(self, order_id: str, request: AcceptOrderRequest) -> Order:
        machine = await self._get_state_machine()
        return await self._with_retry(
            order_id,
            lambda: machine.accept(order_id, request.confirmed, request.performed_by),
        )

    async def mark_ready(self, order_id: str, request: MarkReadyRequest) -> Order:
        machine = await self._get_state_machine()
        documents = OrderDocuments(
            invoice_url=request.invoice_url, eway_bill_url=request.eway_bill_url
        )
        return await self._with_retry(
            order_id,
            lambda: machine.mark_ready(order_id, documents, request.performed_by),
        )

    async def dispatch(self, order_id: str, request: DispatchOrderRequest) -> Order:
        machine = await self._get_state_machine()
        transport = TransportDetails(
            carrier_name=request.carrier_name,
            gr_number=request.gr_number,
            vehicle_number=request.vehicle_number,
            station=request.station,
            eway_bill_number=request.eway_bill_number,
        )
        documents = (
            OrderDocuments(transport_slip_url=request.transport_slip_url)
            if request.transport_slip_url
            else None
        )
        return await self._with_retry(
            order_id,
            lambda: machine.dispatch(order_id, transport, documents, request.performed_by),
        )

    async def deliver(self, order_id: str, request: DeliverOrderRequest) -> Order:
        machine = await self._get_state_machine()
        order = await self._with_retry(
            order_id,
            lambda: machine.deliver(order_id, request.confirmed, request.performed_by),
        )
        await self._post_charge(order, request.performed_by or "system")
        return order

    async def cancel(self, order_id: str, request: CancelOrderRequest) -> Order:
        machine = await self._get_state_machine()
        return await self._with_retry(
            order_id,
            lambda: machine.cancel(
                order_id, request.reason, request.confirmed, request.performed_by
            ),
        )

    async def amend_documents(self, order_id: str, request: AmendDocumentsRequest) -> Order:
        machine = await self._get_state_machine()
        documents = OrderDocuments(**request.model_dump())
        return await self._with_retry(
            order_id, lambda: machine.amend_documents(order_id, documents)
        )

    async def _post_charge(self, order: Order, created_by: str) -> Transaction | None:
        """Put a delivered credit order on the account ledger, once."""
        if (
            order.status is not OrderStatus.DELIVERED
            or not order.payment_method.is_deferred
            or order.total_amount <= ZERO
        ):
            return None

        ledger_store = await self._get_ledger_store()
        existing = await ledger_store.find_by_reference(order.id, TransactionType.CHARGE)
        if existing:
            logger.info("order_charge_exists", order_id=order.id, transaction_id=existing[0].id)
            return existing[0]

        charge = FinancialLedger.charge_for_delivered_order(order, created_by=created_by)
        charge = await ledger_store.add_transaction(charge)
        logger.info(
            "order_charge_posted",
            order_id=order.id,
            account_id=order.account_id,
            amount=str(charge.amount),
        )
        return charge

    @staticmethod
    def to_response(order: Order) -> OrderResponse:
        return OrderResponse.from_order(order)
