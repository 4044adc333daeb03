"""Dashboard notifications raised by lifecycle, intake and blacklist events."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotificationNotFoundError
from ..models.enums import NotificationCategory, NotificationPriority, NotificationType
from ..models.notification import Notification
from ..repositories.notification_repository import NotificationRepository
from .unit_of_work import atomic

log = structlog.get_logger(__name__)


class NotificationService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = NotificationRepository(session)

    async def notify(
        self,
        *,
        title: str,
        message: str,
        category: NotificationCategory,
        type: NotificationType = NotificationType.INFO,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        related_entity_id: str | None = None,
        related_entity_type: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        """Stage a notification inside the caller's transaction."""
        notification = Notification(
            title=title,
            message=message,
            category=category,
            type=type,
            priority=priority,
            related_entity_id=related_entity_id,
            related_entity_type=related_entity_type,
            notification_metadata=metadata or {},
        )
        await self.repository.add(notification)
        log.debug("notification_staged", category=category.value, priority=priority.value)
        return notification

    async def list(
        self,
        *,
        skip: int = 0,
        limit: int = 50,
        read: bool | None = None,
        category: NotificationCategory | None = None,
    ) -> tuple[Sequence[Notification], int]:
        items = await self.repository.get_all(skip, limit, read=read, category=category)
        total = await self.repository.count(read=read, category=category)
        return items, total

    async def unread_count(self) -> int:
        return await self.repository.count(read=False)

    async def _get_or_raise(self, notification_id: str) -> Notification:
        notification = await self.repository.get_by_id(notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        return notification

    async def mark_read(self, notification_id: str) -> Notification:
        async with atomic(self.session):
            notification = await self._get_or_raise(notification_id)
            await self.repository.mark_read(notification)
        return notification

    async def mark_all_read(self) -> int:
        async with atomic(self.session):
            updated = await self.repository.mark_all_read()
        log.info("notifications_marked_read", count=updated)
        return updated

    async def delete(self, notification_id: str) -> None:
        async with atomic(self.session):
            notification = await self._get_or_raise(notification_id)
            await self.repository.delete(notification)
