"""In-app notification inbox endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query

from orderflow.api.dependencies import get_notif_store
from orderflow.application.dto.responses import ErrorResponse, NotificationResponse
from orderflow.infrastructure.storage.sqlite import SQLiteNotificationStore

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("/{recipient_id}", response_model=list[NotificationResponse])
async def list_notifications(
    recipient_id: str,
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=200),
    store: SQLiteNotificationStore = Depends(get_notif_store),
) -> list[NotificationResponse]:
    notifications = await store.list_for_recipient(
        recipient_id, unread_only=unread_only, limit=limit
    )
    return [NotificationResponse.from_notification(n) for n in notifications]


@router.post(
    "/{notification_id}/read",
    status_code=204,
    responses={404: {"model": ErrorResponse}},
)
async def mark_read(
    notification_id: int,
    store: SQLiteNotificationStore = Depends(get_notif_store),
) -> None:
    if not await store.mark_read(notification_id):
        raise HTTPException(
            status_code=404, detail=f"Notification not found: {notification_id}"
        )
