"""Notification entities emitted by order transitions."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from orderflow.core.entities.common import utcnow


class NotificationCategory(str, Enum):
    ORDER = "ORDER"
    SYSTEM = "SYSTEM"
    PROMOTION = "PROMOTION"
    ALERT = "ALERT"


class Notification(BaseModel):
    """An abstract event for an external notifier to deliver."""

    id: int | None = None
    recipient_id: str
    title: str
    message: str
    category: NotificationCategory = NotificationCategory.ORDER
    link: str | None = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)
