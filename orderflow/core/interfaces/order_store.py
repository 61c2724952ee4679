"""Abstract interface for order storage."""

from abc import ABC, abstractmethod

from orderflow.core.entities.order import Order, OrderStatus


class IOrderStore(ABC):
    """Interface for order persistence with conditional status updates."""

    @abstractmethod
    async def create_order(self, order: Order) -> Order:
        """Persist a new order with its item snapshot."""
        pass

    @abstractmethod
    async def get_order(self, order_id: str) -> Order | None:
        """Get order by ID."""
        pass

    @abstractmethod
    async def list_orders(
        self,
        status: OrderStatus | None = None,
        account_ids: list[str] | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[Order]:
        """List orders, newest first, optionally filtered by status or accounts.

        A ``None`` limit returns every matching order.
        """
        pass

    @abstractmethod
    async def update_if_status(self, order: Order, expected_status: OrderStatus) -> Order:
        """
        Write the order's mutable fields only if the stored status still equals
        ``expected_status`` and the stored version still equals ``order.version``.

        Returns the order with its version bumped.

        Raises:
            ConcurrencyConflictError: the stored row changed since it was read.
        """
        pass
