"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, WebSocket, status

from app.application.use_cases.notifications import NotificationService
from app.domain.entities import MAX_OFFSET, Notification, NotificationCategory
from app.infrastructure.notifications import NotificationGateway
from app.interfaces.api.dependencies import (
    get_current_user_id,
    get_notification_gateway,
    get_notification_service,
)
from app.interfaces.api.schemas import (
    NotificationListRead,
    NotificationMarkReadRequest,
    NotificationRead,
    NotificationStatsRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("", response_model=NotificationListRead)
async def list_notifications(
    type: NotificationCategory | None = Query(default=None),
    read: bool | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0, le=MAX_OFFSET),
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListRead:
    """Return the notifications of the authenticated user, most recent first."""

    page = await service.get_user_notifications(
        user_id,
        service.build_filters(category=type, read=read, limit=limit, offset=offset),
    )
    return NotificationListRead(
        notifications=[_notification_to_schema(n) for n in page.notifications],
        total=page.total,
    )


@router.get("/unread-count", response_model=UnreadCountRead)
async def read_unread_count(
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountRead:
    return UnreadCountRead(count=await service.get_unread_count(user_id))


@router.get("/stats", response_model=NotificationStatsRead)
async def read_notification_stats(
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationStatsRead:
    stats = await service.get_notification_stats(user_id)
    return NotificationStatsRead(
        total=stats.total, unread=stats.unread, by_category=stats.by_category
    )


@router.patch("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_as_read(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    """Mark one notification as read and push the new unread count."""

    if not await service.mark_as_read(user_id, notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
    await service.publish_unread_count(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notifications_as_read(
    payload: NotificationMarkReadRequest,
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    """Mark a batch of notifications as read."""

    if not await service.mark_multiple_as_read(user_id, payload.unique_ids()):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notifications could not be updated",
        )
    await service.publish_unread_count(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/read-all", status_code=status.HTTP_204_NO_CONTENT)
async def mark_all_notifications_as_read(
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    if not await service.mark_all_as_read(user_id):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notifications could not be updated",
        )
    await service.publish_unread_count(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    if not await service.delete_notification(user_id, notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
    await service.publish_unread_count(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    gateway: NotificationGateway = Depends(get_notification_gateway),
) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    await gateway.serve(websocket)
