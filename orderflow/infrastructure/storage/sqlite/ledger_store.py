"""SQLite implementation of ledger transaction storage."""

from datetime import datetime
from decimal import Decimal

import aiosqlite

from orderflow.config import get_logger
from orderflow.core.entities.ledger import Transaction, TransactionType
from orderflow.core.exceptions import ValidationError
from orderflow.core.interfaces.ledger_store import ILedgerStore
from orderflow.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteLedgerStore(ILedgerStore):
    """Append-only transaction table."""

    async def add_transaction(self, transaction: Transaction) -> Transaction:
        async with get_transaction() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO transactions (
                        id, account_id, type, amount, date,
                        description, reference_id, created_by
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        transaction.id,
                        transaction.account_id,
                        transaction.type.value,
                        str(transaction.amount),
                        transaction.date.isoformat(),
                        transaction.description,
                        transaction.reference_id,
                        transaction.created_by,
                    ),
                )
            except aiosqlite.IntegrityError:
                # Unique index allows one CHARGE per order reference
                raise ValidationError(
                    "reference_id",
                    "a charge for this reference is already on the ledger",
                    transaction.reference_id,
                ) from None
            logger.info(
                "transaction_recorded",
                transaction_id=transaction.id,
                account_id=transaction.account_id,
                type=transaction.type.value,
                amount=str(transaction.amount),
            )
            return transaction

    async def list_transactions(
        self, account_id: str | None = None, limit: int | None = None
    ) -> list[Transaction]:
        sql = "SELECT * FROM transactions"
        params: list = []
        if account_id is not None:
            sql += " WHERE account_id = ?"
            params.append(account_id)
        sql += " ORDER BY date DESC, id"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    async def find_by_reference(
        self, reference_id: str, type: TransactionType | None = None
    ) -> list[Transaction]:
        sql = "SELECT * FROM transactions WHERE reference_id = ?"
        params: list = [reference_id]
        if type is not None:
            sql += " AND type = ?"
            params.append(type.value)

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> Transaction:
        return Transaction(
            id=row["id"],
            account_id=row["account_id"],
            type=TransactionType(row["type"]),
            amount=Decimal(row["amount"]),
            date=datetime.fromisoformat(row["date"]),
            description=row["description"],
            reference_id=row["reference_id"],
            created_by=row["created_by"],
        )
