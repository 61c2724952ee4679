"""SQLite implementation of variant stock storage."""

from datetime import datetime
from decimal import Decimal

import aiosqlite

from orderflow.config import get_logger
from orderflow.core.entities.common import utcnow
from orderflow.core.entities.inventory import (
    AdjustmentMode,
    MovementType,
    ProductVariant,
    StockMovement,
)
from orderflow.core.exceptions import InsufficientStockError, VariantNotFoundError
from orderflow.core.interfaces.inventory_store import IInventoryStore
from orderflow.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteInventoryStore(IInventoryStore):
    """
    SQLite implementation of variant stock and its movement log.

    Reservations use ``UPDATE ... WHERE stock >= ?`` so the check and the
    decrement are one statement; SQLite's write lock serializes concurrent
    reservations on the same row.
    """

    async def create_variant(self, variant: ProductVariant) -> ProductVariant:
        now = utcnow()
        variant.created_at = now
        variant.updated_at = now
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO product_variants (
                    id, product_id, product_name, sku, color, size_range,
                    stock, price_per_piece, pieces_per_set, hsn_code,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    variant.id,
                    variant.product_id,
                    variant.product_name,
                    variant.sku,
                    variant.color,
                    variant.size_range,
                    variant.stock,
                    str(variant.price_per_piece),
                    variant.pieces_per_set,
                    variant.hsn_code,
                    variant.created_at.isoformat(),
                    variant.updated_at.isoformat(),
                ),
            )
            if variant.stock > 0:
                await self._record(
                    conn,
                    variant.id,
                    MovementType.IN,
                    variant.stock,
                    variant.stock,
                    reason="Opening stock",
                )
            logger.info("variant_created", variant_id=variant.id, stock=variant.stock)
            return variant

    async def get_variant(self, variant_id: str) -> ProductVariant | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM product_variants WHERE id = ?", (variant_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_variant(row)

    async def list_variants(
        self, limit: int | None = 100, offset: int = 0
    ) -> list[ProductVariant]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM product_variants
                ORDER BY product_name, color, size_range, id
                LIMIT ? OFFSET ?
                """,
                (-1 if limit is None else limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_variant(row) for row in rows]

    async def reserve_many(
        self,
        lines: dict[str, int],
        reference: str | None = None,
        performed_by: str | None = None,
    ) -> list[ProductVariant]:
        """Decrement every line or none; the transaction rolls back on the first miss."""
        updated = []
        async with get_transaction() as conn:
            for variant_id, quantity in lines.items():
                cursor = await conn.execute(
                    """
                    UPDATE product_variants
                    SET stock = stock - ?, updated_at = ?
                    WHERE id = ? AND stock >= ?
                    """,
                    (quantity, utcnow().isoformat(), variant_id, quantity),
                )
                if cursor.rowcount == 0:
                    available = await self._current_stock(conn, variant_id)
                    if available is None:
                        raise VariantNotFoundError(variant_id)
                    logger.warning(
                        "stock_reservation_rejected",
                        variant_id=variant_id,
                        requested=quantity,
                        available=available,
                        reference=reference,
                    )
                    raise InsufficientStockError(variant_id, quantity, available)

                variant = await self._fetch(conn, variant_id)
                await self._record(
                    conn,
                    variant_id,
                    MovementType.OUT,
                    quantity,
                    variant.stock,
                    reason="Reserved for order",
                    reference=reference,
                    performed_by=performed_by,
                )
                updated.append(variant)
        return updated

    async def release_many(
        self,
        lines: dict[str, int],
        reference: str | None = None,
        performed_by: str | None = None,
    ) -> list[ProductVariant]:
        updated = []
        async with get_transaction() as conn:
            for variant_id, quantity in lines.items():
                cursor = await conn.execute(
                    """
                    UPDATE product_variants
                    SET stock = stock + ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (quantity, utcnow().isoformat(), variant_id),
                )
                if cursor.rowcount == 0:
                    raise VariantNotFoundError(variant_id)

                variant = await self._fetch(conn, variant_id)
                await self._record(
                    conn,
                    variant_id,
                    MovementType.IN,
                    quantity,
                    variant.stock,
                    reason="Released from order",
                    reference=reference,
                    performed_by=performed_by,
                )
                updated.append(variant)
        return updated

    async def adjust(
        self,
        variant_id: str,
        mode: AdjustmentMode,
        value: int,
        reason: str,
        performed_by: str | None = None,
    ) -> ProductVariant:
        # Write lock before the read so the recorded change is exact
        async with get_transaction(immediate=True) as conn:
            if mode == AdjustmentMode.SET:
                sql = "UPDATE product_variants SET stock = ?, updated_at = ? WHERE id = ?"
            else:
                sql = "UPDATE product_variants SET stock = MAX(0, stock + ?), updated_at = ? WHERE id = ?"
            before = await self._current_stock(conn, variant_id)
            if before is None:
                raise VariantNotFoundError(variant_id)

            await conn.execute(sql, (value, utcnow().isoformat(), variant_id))
            variant = await self._fetch(conn, variant_id)
            await self._record(
                conn,
                variant_id,
                MovementType.ADJUSTMENT,
                variant.stock - before,
                variant.stock,
                reason=reason,
                performed_by=performed_by,
            )
            return variant

    async def get_movements(self, variant_id: str, limit: int = 100) -> list[StockMovement]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_movements
                WHERE variant_id = ?
                ORDER BY id DESC
                LIMIT ?
                """,
                (variant_id, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def _fetch(self, conn: aiosqlite.Connection, variant_id: str) -> ProductVariant:
        cursor = await conn.execute(
            "SELECT * FROM product_variants WHERE id = ?", (variant_id,)
        )
        row = await cursor.fetchone()
        return self._row_to_variant(row)

    @staticmethod
    async def _current_stock(conn: aiosqlite.Connection, variant_id: str) -> int | None:
        cursor = await conn.execute(
            "SELECT stock FROM product_variants WHERE id = ?", (variant_id,)
        )
        row = await cursor.fetchone()
        return row["stock"] if row else None

    @staticmethod
    async def _record(
        conn: aiosqlite.Connection,
        variant_id: str,
        movement_type: MovementType,
        quantity: int,
        stock_after: int,
        reason: str = "",
        reference: str | None = None,
        performed_by: str | None = None,
    ) -> None:
        await conn.execute(
            """
            INSERT INTO stock_movements (
                variant_id, movement_type, quantity_sets, stock_after,
                reason, reference, performed_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                variant_id,
                movement_type.value,
                quantity,
                stock_after,
                reason,
                reference,
                performed_by,
                utcnow().isoformat(),
            ),
        )
        logger.debug(
            "stock_movement_recorded",
            variant_id=variant_id,
            type=movement_type.value,
            qty=quantity,
            stock_after=stock_after,
        )

    @staticmethod
    def _row_to_variant(row: aiosqlite.Row) -> ProductVariant:
        return ProductVariant(
            id=row["id"],
            product_id=row["product_id"],
            product_name=row["product_name"],
            sku=row["sku"],
            color=row["color"],
            size_range=row["size_range"],
            stock=row["stock"],
            price_per_piece=Decimal(row["price_per_piece"]),
            pieces_per_set=row["pieces_per_set"],
            hsn_code=row["hsn_code"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        return StockMovement(
            id=row["id"],
            variant_id=row["variant_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity_sets=row["quantity_sets"],
            stock_after=row["stock_after"],
            reason=row["reason"],
            reference=row["reference"],
            performed_by=row["performed_by"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
