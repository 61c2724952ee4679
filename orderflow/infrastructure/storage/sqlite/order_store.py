"""SQLite implementation of order storage."""

import json
from datetime import datetime
from decimal import Decimal

import aiosqlite

from orderflow.config import get_logger
from orderflow.core.entities.order import (
    Order,
    OrderDocuments,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    TransportDetails,
)
from orderflow.core.entities.pricing import PricingSnapshot
from orderflow.core.exceptions import ConcurrencyConflictError, OrderNotFoundError
from orderflow.core.interfaces.order_store import IOrderStore
from orderflow.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteOrderStore(IOrderStore):
    """
    SQLite implementation of order storage.

    Line items are written once at creation and never updated, which keeps
    the price snapshot immutable.
    """

    async def create_order(self, order: Order) -> Order:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO orders (
                    id, account_id, account_name, status, payment_method,
                    intermediary_id, discount_percent, total_amount, factory_amount,
                    items_json, documents_json, transport_json, pricing_json,
                    discount_disclosure, discount_disclosed_at, cancellation_reason,
                    version, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    order.id,
                    order.account_id,
                    order.account_name,
                    order.status.value,
                    order.payment_method.value,
                    order.intermediary_id,
                    order.discount_percent,
                    str(order.total_amount),
                    str(order.factory_amount),
                    json.dumps([item.model_dump(mode="json") for item in order.items]),
                    *self._mutable_json(order),
                    order.discount_disclosure,
                    self._iso(order.discount_disclosed_at),
                    order.cancellation_reason,
                    order.version,
                    order.created_at.isoformat(),
                    order.updated_at.isoformat(),
                ),
            )
            logger.info(
                "order_created",
                order_id=order.id,
                account_id=order.account_id,
                lines=len(order.items),
                total_amount=str(order.total_amount),
            )
            return order

    async def get_order(self, order_id: str) -> Order | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_order(row)

    async def list_orders(
        self,
        status: OrderStatus | None = None,
        account_ids: list[str] | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[Order]:
        clauses = []
        params: list = []
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        if account_ids is not None:
            if not account_ids:
                return []
            clauses.append(f"account_id IN ({', '.join('?' for _ in account_ids)})")
            params.extend(account_ids)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM orders
                {where}
                ORDER BY created_at DESC, id
                LIMIT ? OFFSET ?
                """,
                (*params, -1 if limit is None else limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_order(row) for row in rows]

    async def update_if_status(self, order: Order, expected_status: OrderStatus) -> Order:
        async with get_transaction() as conn:
            documents_json, transport_json, pricing_json = self._mutable_json(order)
            cursor = await conn.execute(
                """
                UPDATE orders SET
                    status = ?,
                    payment_method = ?,
                    discount_percent = ?,
                    total_amount = ?,
                    factory_amount = ?,
                    documents_json = ?,
                    transport_json = ?,
                    pricing_json = ?,
                    discount_disclosure = ?,
                    discount_disclosed_at = ?,
                    cancellation_reason = ?,
                    updated_at = ?,
                    version = version + 1
                WHERE id = ? AND status = ? AND version = ?
                """,
                (
                    order.status.value,
                    order.payment_method.value,
                    order.discount_percent,
                    str(order.total_amount),
                    str(order.factory_amount),
                    documents_json,
                    transport_json,
                    pricing_json,
                    order.discount_disclosure,
                    self._iso(order.discount_disclosed_at),
                    order.cancellation_reason,
                    order.updated_at.isoformat(),
                    order.id,
                    expected_status.value,
                    order.version,
                ),
            )
            if cursor.rowcount == 0:
                cursor = await conn.execute(
                    "SELECT status, version FROM orders WHERE id = ?", (order.id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise OrderNotFoundError(order.id)
                raise ConcurrencyConflictError(
                    order.id,
                    expected_status.value,
                    row["status"],
                    expected_version=order.version,
                    actual_version=row["version"],
                )

            logger.debug(
                "order_updated",
                order_id=order.id,
                expected_status=expected_status.value,
                status=order.status.value,
                version=order.version + 1,
            )
            return order.model_copy(update={"version": order.version + 1})

    @staticmethod
    def _mutable_json(order: Order) -> tuple[str, str | None, str | None]:
        return (
            order.documents.model_dump_json(),
            order.transport.model_dump_json() if order.transport else None,
            order.pricing.model_dump_json() if order.pricing else None,
        )

    @staticmethod
    def _iso(value: datetime | None) -> str | None:
        return value.isoformat() if value else None

    @staticmethod
    def _row_to_order(row: aiosqlite.Row) -> Order:
        return Order(
            id=row["id"],
            account_id=row["account_id"],
            account_name=row["account_name"],
            items=[OrderItem.model_validate(item) for item in json.loads(row["items_json"])],
            status=OrderStatus(row["status"]),
            payment_method=PaymentMethod(row["payment_method"]),
            intermediary_id=row["intermediary_id"],
            discount_percent=row["discount_percent"],
            total_amount=Decimal(row["total_amount"]),
            factory_amount=Decimal(row["factory_amount"]),
            documents=OrderDocuments.model_validate_json(row["documents_json"]),
            transport=(
                TransportDetails.model_validate_json(row["transport_json"])
                if row["transport_json"]
                else None
            ),
            pricing=(
                PricingSnapshot.model_validate_json(row["pricing_json"])
                if row["pricing_json"]
                else None
            ),
            discount_disclosure=row["discount_disclosure"],
            discount_disclosed_at=(
                datetime.fromisoformat(row["discount_disclosed_at"])
                if row["discount_disclosed_at"]
                else None
            ),
            cancellation_reason=row["cancellation_reason"],
            version=row["version"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
