"""Notification Repository - dashboard alerts."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.enums import NotificationCategory
from ..models.notification import Notification


class NotificationRepository:
    """Repository for Notification rows."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, notification: Notification) -> Notification:
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def get_by_id(self, notification_id: str) -> Notification | None:
        result = await self.session.execute(select(Notification).where(Notification.id == notification_id))
        return result.scalar_one_or_none()

    @staticmethod
    def _filtered(query: Select, read: bool | None, category: NotificationCategory | None) -> Select:
        if read is not None:
            query = query.where(Notification.read.is_(read))
        if category:
            query = query.where(Notification.category == category)
        return query

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        read: bool | None = None,
        category: NotificationCategory | None = None,
    ) -> Sequence[Notification]:
        query = self._filtered(select(Notification), read, category)
        query = query.order_by(Notification.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self, read: bool | None = None, category: NotificationCategory | None = None) -> int:
        query = self._filtered(select(func.count(Notification.id)), read, category)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def mark_read(self, notification: Notification) -> Notification:
        notification.read = True
        await self.session.flush()
        return notification

    async def mark_all_read(self) -> int:
        stmt = (
            update(Notification)
            .where(Notification.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def delete(self, notification: Notification) -> None:
        await self.session.delete(notification)
        await self.session.flush()
