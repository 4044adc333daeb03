"""Dashboard notification endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Query

from ....core.responses import GenericResponse, PaginatedResponse, PaginationMeta
from ....models.enums import NotificationCategory
from ....schemas.activity import BulkUpdateResult, NotificationResponse, UnreadCount
from ...deps import Actor, NotificationServiceDep, PageParams

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=PaginatedResponse[NotificationResponse], summary="List notifications")
async def list_notifications(
    actor: Actor,
    service: NotificationServiceDep,
    page: PageParams,
    read: bool | None = Query(None),
    category: NotificationCategory | None = Query(None),
) -> PaginatedResponse[NotificationResponse]:
    items, total = await service.list(skip=page.skip, limit=page.page_size, read=read, category=category)
    return PaginatedResponse(
        message="Notifications retrieved",
        data=[NotificationResponse.model_validate(n) for n in items],
        pagination=PaginationMeta.from_total(total, page.page, page.page_size),
    )


@router.get("/unread-count", response_model=GenericResponse[UnreadCount], summary="Unread count")
async def unread_count(actor: Actor, service: NotificationServiceDep) -> GenericResponse[UnreadCount]:
    return GenericResponse(message="Unread count", data=UnreadCount(unread=await service.unread_count()))


@router.patch("/read-all", response_model=GenericResponse[BulkUpdateResult], summary="Mark all as read")
async def mark_all_read(actor: Actor, service: NotificationServiceDep) -> GenericResponse[BulkUpdateResult]:
    updated = await service.mark_all_read()
    return GenericResponse(message="All notifications marked as read", data=BulkUpdateResult(updated=updated))


@router.patch(
    "/{notification_id}/read",
    response_model=GenericResponse[NotificationResponse],
    summary="Mark as read",
)
async def mark_read(
    notification_id: str,
    actor: Actor,
    service: NotificationServiceDep,
) -> GenericResponse[NotificationResponse]:
    notification = await service.mark_read(notification_id)
    return GenericResponse(
        message="Notification marked as read",
        data=NotificationResponse.model_validate(notification),
    )


@router.delete("/{notification_id}", response_model=GenericResponse[dict], summary="Delete notification")
async def delete_notification(
    notification_id: str,
    actor: Actor,
    service: NotificationServiceDep,
) -> GenericResponse[dict]:
    await service.delete(notification_id)
    return GenericResponse(message="Notification deleted", data={"id": notification_id})
