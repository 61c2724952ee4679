"""SQLite in-app notification inbox."""

from datetime import datetime

import aiosqlite

from orderflow.config import get_logger
from orderflow.core.entities.notification import Notification, NotificationCategory
from orderflow.core.interfaces.notifier import INotificationStore
from orderflow.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteNotificationStore(INotificationStore):
    """Stores emitted notifications so recipients can read them in-app."""

    async def notify(self, notification: Notification) -> Notification:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO notifications (
                    recipient_id, title, message, category, link, is_read, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    notification.recipient_id,
                    notification.title,
                    notification.message,
                    notification.category.value,
                    notification.link,
                    int(notification.is_read),
                    notification.created_at.isoformat(),
                ),
            )
            notification.id = cursor.lastrowid
            logger.info(
                "notification_stored",
                notification_id=notification.id,
                recipient_id=notification.recipient_id,
                title=notification.title,
            )
            return notification

    async def list_for_recipient(
        self, recipient_id: str, unread_only: bool = False, limit: int = 50
    ) -> list[Notification]:
        sql = "SELECT * FROM notifications WHERE recipient_id = ?"
        if unread_only:
            sql += " AND is_read = 0"
        sql += " ORDER BY id DESC LIMIT ?"

        async with get_connection() as conn:
            cursor = await conn.execute(sql, (recipient_id, limit))
            rows = await cursor.fetchall()
            return [self._row_to_notification(row) for row in rows]

    async def mark_read(self, notification_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE notifications SET is_read = 1 WHERE id = ?", (notification_id,)
            )
            return cursor.rowcount > 0

    @staticmethod
    def _row_to_notification(row: aiosqlite.Row) -> Notification:
        return Notification(
            id=row["id"],
            recipient_id=row["recipient_id"],
            title=row["title"],
            message=row["message"],
            category=NotificationCategory(row["category"]),
            link=row["link"],
            is_read=bool(row["is_read"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
