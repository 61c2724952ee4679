"""Abstract interfaces for notification emission and the in-app inbox."""

from abc import ABC, abstractmethod

from orderflow.core.entities.notification import Notification


class INotifier(ABC):
    """Receives events emitted by order transitions."""

    @abstractmethod
    async def notify(self, notification: Notification) -> Notification:
        """Hand a notification to the delivery mechanism."""
        pass


class INotificationStore(INotifier):
    """A notifier that also keeps an inbox per recipient."""

    @abstractmethod
    async def list_for_recipient(
        self, recipient_id: str, unread_only: bool = False, limit: int = 50
    ) -> list[Notification]:
        """List a recipient's notifications, newest first."""
        pass

    @abstractmethod
    async def mark_read(self, notification_id: int) -> bool:
        """Mark one notification read. Returns False when it does not exist."""
        pass
