"""SQLite implementation of the account projection."""

from datetime import datetime

import aiosqlite

from orderflow.config import get_logger
from orderflow.core.entities.account import Account
from orderflow.core.interfaces.account_store import IAccountStore
from orderflow.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteAccountStore(IAccountStore):

    async def upsert_account(self, account: Account) -> Account:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO accounts (
                    id, business_name, city, gstin,
                    assigned_agent_id, intermediary_id, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    business_name = excluded.business_name,
                    city = excluded.city,
                    gstin = excluded.gstin,
                    assigned_agent_id = excluded.assigned_agent_id,
                    intermediary_id = excluded.intermediary_id
                """,
                (
                    account.id,
                    account.business_name,
                    account.city,
                    account.gstin,
                    account.assigned_agent_id,
                    account.intermediary_id,
                    account.created_at.isoformat(),
                ),
            )
            logger.info("account_upserted", account_id=account.id)
            return account

    async def get_account(self, account_id: str) -> Account | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM accounts WHERE id = ?", (account_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_account(row)

    async def list_by_agent(self, agent_id: str) -> list[Account]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM accounts WHERE assigned_agent_id = ? ORDER BY business_name",
                (agent_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_account(row) for row in rows]

    @staticmethod
    def _row_to_account(row: aiosqlite.Row) -> Account:
        return Account(
            id=row["id"],
            business_name=row["business_name"],
            city=row["city"],
            gstin=row["gstin"],
            assigned_agent_id=row["assigned_agent_id"],
            intermediary_id=row["intermediary_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
