"""Tests for OrderStateMachine."""

from itertools import product
from unittest.mock import AsyncMock

import pytest

from orderflow.core.entities import (
    NotificationCategory,
    OrderDocuments,
    OrderStatus,
    TransportDetails,
)
from orderflow.core.exceptions import (
    ConcurrencyConflictError,
    IllegalTransitionError,
    InsufficientStockError,
    OrderNotFoundError,
    PreconditionNotMetError,
)
from orderflow.core.services.order_state_machine import (
    ALLOWED_TRANSITIONS,
    OrderStateMachine,
    TransitionRequest,
    can_transition,
)


@pytest.fixture
def order_store():
    store = AsyncMock()
    store.update_if_status.side_effect = lambda order, expected_status: order
    return store


@pytest.fixture
def inventory():
    return AsyncMock()


@pytest.fixture
def notifier():
    return AsyncMock()


@pytest.fixture
def machine(order_store, inventory, notifier):
    return OrderStateMachine(order_store=order_store, inventory=inventory, notifier=notifier)


def _full_request() -> TransitionRequest:
    """A request satisfying every precondition."""
    return TransitionRequest(
        confirmed=True,
        documents=OrderDocuments(invoice_url="https://files.example/inv.pdf"),
        transport=TransportDetails(carrier_name="KRISHNA FREIGHT MOVERS", gr_number="524339"),
        reason="Customer request",
    )


class TestTransitionGraph:
    @pytest.mark.parametrize(
        "source,target",
        [
            (a, b)
            for a, b in product(OrderStatus, OrderStatus)
            if b not in ALLOWED_TRANSITIONS.get(a, frozenset())
        ],
    )
    async def test_pairs_outside_table_are_illegal(
        self, machine, order_store, make_order, source, target
    ):
        order_store.get_order.return_value = make_order(status=source)
        with pytest.raises(IllegalTransitionError) as exc_info:
            await machine.transition("ord-test0001", target, _full_request())

        assert exc_info.value.details["current"] == source.value
        assert exc_info.value.details["attempted"] == target.value
        order_store.update_if_status.assert_not_called()

    def test_terminal_states_have_no_exits(self):
        for target in OrderStatus:
            assert not can_transition(from_status=OrderStatus.DELIVERED, to_status=target)
            assert not can_transition(from_status=OrderStatus.CANCELLED, to_status=target)

    def test_no_cancel_after_dispatch(self):
        assert not can_transition(
            from_status=OrderStatus.DISPATCHED, to_status=OrderStatus.CANCELLED
        )


class TestAccept:
    async def test_reserves_then_commits_then_notifies(
        self, machine, order_store, inventory, notifier, make_order
    ):
        order_store.get_order.return_value = make_order()

        result = await machine.accept("ord-test0001", confirmed=True)

        assert result.status is OrderStatus.ACCEPTED
        inventory.reserve_for_order.assert_awaited_once()
        order_store.update_if_status.assert_awaited_once()
        assert order_store.update_if_status.call_args.kwargs["expected_status"] is OrderStatus.PENDING
        notifier.notify.assert_awaited_once()
        notification = notifier.notify.call_args[0][0]
        assert notification.title == "Order Accepted"
        assert notification.recipient_id == "acc-retail-1"
        assert notification.link == "/orders"

    async def test_requires_confirmation(self, machine, order_store, inventory, make_order):
        order_store.get_order.return_value = make_order()
        with pytest.raises(PreconditionNotMetError) as exc_info:
            await machine.accept("ord-test0001", confirmed=False)
        assert exc_info.value.details["requirement"] == "confirmation"
        inventory.reserve_for_order.assert_not_called()

    async def test_discount_without_disclosure_rejected(self, machine, order_store, make_order):
        order_store.get_order.return_value = make_order(discount_percent=2)
        with pytest.raises(PreconditionNotMetError) as exc_info:
            await machine.accept("ord-test0001", confirmed=True)
        assert exc_info.value.details["requirement"] == "discount_disclosure"

    async def test_insufficient_stock_leaves_status(
        self, machine, order_store, inventory, notifier, make_order
    ):
        order_store.get_order.return_value = make_order()
        inventory.reserve_for_order.side_effect = InsufficientStockError("var-kurti-red", 5, 2)

        with pytest.raises(InsufficientStockError):
            await machine.accept("ord-test0001", confirmed=True)

        order_store.update_if_status.assert_not_called()
        notifier.notify.assert_not_called()

    async def test_conflict_releases_reservation(
        self, machine, order_store, inventory, notifier, make_order
    ):
        order_store.get_order.return_value = make_order()
        order_store.update_if_status.side_effect = ConcurrencyConflictError(
            "ord-test0001", "PENDING", "CANCELLED"
        )

        with pytest.raises(ConcurrencyConflictError):
            await machine.accept("ord-test0001", confirmed=True)

        inventory.reserve_for_order.assert_awaited_once()
        inventory.release_for_order.assert_awaited_once()
        notifier.notify.assert_not_called()


class TestMarkReady:
    async def test_requires_invoice(self, machine, order_store, make_order):
        order_store.get_order.return_value = make_order(status=OrderStatus.ACCEPTED)
        with pytest.raises(PreconditionNotMetError) as exc_info:
            await machine.mark_ready("ord-test0001", OrderDocuments())
        assert exc_info.value.details["requirement"] == "invoice_document"
        assert "Invoice document required" in exc_info.value.message
        order_store.update_if_status.assert_not_called()

    async def test_attaches_documents(self, machine, order_store, notifier, make_order):
        order_store.get_order.return_value = make_order(status=OrderStatus.ACCEPTED)
        result = await machine.mark_ready(
            "ord-test0001",
            OrderDocuments(invoice_url="https://files.example/inv.pdf", eway_bill_url="https://files.example/ewb.pdf"),
        )
        assert result.status is OrderStatus.READY
        assert result.documents.invoice_url == "https://files.example/inv.pdf"
        assert result.documents.eway_bill_url == "https://files.example/ewb.pdf"
        assert notifier.notify.call_args[0][0].title == "Order Ready"


class TestDispatch:
    async def test_requires_gr_number(self, machine, order_store, make_order):
        order_store.get_order.return_value = make_order(status=OrderStatus.READY)
        with pytest.raises(PreconditionNotMetError) as exc_info:
            await machine.dispatch("ord-test0001", TransportDetails(gr_number="   "))
        assert exc_info.value.details["requirement"] == "gr_number"

    async def test_message_names_gr_and_carrier(self, machine, order_store, notifier, make_order):
        order_store.get_order.return_value = make_order(status=OrderStatus.READY)
        result = await machine.dispatch(
            "ord-test0001",
            TransportDetails(carrier_name="KRISHNA FREIGHT MOVERS", gr_number=" 524339 "),
        )
        assert result.transport.gr_number == "524339"
        message = notifier.notify.call_args[0][0].message
        assert "Builty No: 524339" in message
        assert "KRISHNA FREIGHT MOVERS" in message


class TestDeliver:
    async def test_requires_confirmation(self, machine, order_store, make_order):
        order_store.get_order.return_value = make_order(status=OrderStatus.DISPATCHED)
        with pytest.raises(PreconditionNotMetError):
            await machine.deliver("ord-test0001", confirmed=False)

    async def test_delivers(self, machine, order_store, inventory, make_order):
        order_store.get_order.return_value = make_order(status=OrderStatus.DISPATCHED)
        result = await machine.deliver("ord-test0001", confirmed=True)
        assert result.status is OrderStatus.DELIVERED
        inventory.release_for_order.assert_not_called()


class TestCancel:
    async def test_requires_reason(self, machine, order_store, make_order):
        order_store.get_order.return_value = make_order()
        with pytest.raises(PreconditionNotMetError) as exc_info:
            await machine.cancel("ord-test0001", reason="  ", confirmed=True)
        assert exc_info.value.details["requirement"] == "cancellation_reason"

    async def test_pending_cancel_releases_nothing(
        self, machine, order_store, inventory, notifier, make_order
    ):
        order_store.get_order.return_value = make_order()
        result = await machine.cancel("ord-test0001", reason="Duplicate", confirmed=True)

        assert result.status is OrderStatus.CANCELLED
        assert result.cancellation_reason == "Duplicate"
        inventory.release_for_order.assert_not_called()
        notification = notifier.notify.call_args[0][0]
        assert notification.category is NotificationCategory.ALERT
        assert "Reason: Duplicate" in notification.message

    @pytest.mark.parametrize("status", [OrderStatus.ACCEPTED, OrderStatus.READY])
    async def test_cancel_after_accept_releases_stock(
        self, machine, order_store, inventory, make_order, status
    ):
        order_store.get_order.return_value = make_order(status=status)
        await machine.cancel("ord-test0001", reason="Out of budget", confirmed=True)
        inventory.release_for_order.assert_awaited_once()


class TestAmendDocuments:
    async def test_keeps_status_and_does_not_notify(
        self, machine, order_store, notifier, make_order
    ):
        order_store.get_order.return_value = make_order(
            status=OrderStatus.DISPATCHED,
            documents=OrderDocuments(invoice_url="https://files.example/old.pdf"),
        )
        result = await machine.amend_documents(
            "ord-test0001", OrderDocuments(invoice_url="https://files.example/new.pdf")
        )
        assert result.status is OrderStatus.DISPATCHED
        assert result.documents.invoice_url == "https://files.example/new.pdf"
        notifier.notify.assert_not_called()

    async def test_not_allowed_when_pending(self, machine, order_store, make_order):
        order_store.get_order.return_value = make_order()
        with pytest.raises(PreconditionNotMetError):
            await machine.amend_documents(
                "ord-test0001", OrderDocuments(invoice_url="https://files.example/x.pdf")
            )

    async def test_needs_a_url(self, machine, order_store, make_order):
        order_store.get_order.return_value = make_order(status=OrderStatus.READY)
        with pytest.raises(PreconditionNotMetError):
            await machine.amend_documents("ord-test0001", OrderDocuments())


async def test_missing_order(machine, order_store):
    order_store.get_order.return_value = None
    with pytest.raises(OrderNotFoundError):
        await machine.accept("ord-missing", confirmed=True)
