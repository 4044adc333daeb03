"""Admin Activity Repository - append-only audit log access."""
from __future__ import annotations

from collections.abc import Collection, Sequence
from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.admin_activity import AdminActivity
from ..models.enums import AdminAction


class AdminActivityRepository:
    """Insert and query AdminActivity rows. There is no update or delete."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, activity: AdminActivity) -> AdminActivity:
        self.session.add(activity)
        await self.session.flush()
        return activity

    @staticmethod
    def _filtered(
        query: Select,
        admin_id: str | None,
        action: AdminAction | None,
        start: datetime | None,
        end: datetime | None,
        exclude_actions: Collection[AdminAction] | None,
    ) -> Select:
        if admin_id:
            query = query.where(AdminActivity.admin_id == admin_id)
        if action:
            query = query.where(AdminActivity.action == action)
        if start:
            query = query.where(AdminActivity.created_at >= start)
        if end:
            query = query.where(AdminActivity.created_at <= end)
        if exclude_actions:
            query = query.where(AdminActivity.action.not_in(list(exclude_actions)))
        return query

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        *,
        admin_id: str | None = None,
        action: AdminAction | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        exclude_actions: Collection[AdminAction] | None = None,
    ) -> Sequence[AdminActivity]:
        query = self._filtered(select(AdminActivity), admin_id, action, start, end, exclude_actions)
        query = query.order_by(AdminActivity.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(
        self,
        *,
        admin_id: str | None = None,
        action: AdminAction | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        exclude_actions: Collection[AdminAction] | None = None,
    ) -> int:
        query = self._filtered(
            select(func.count(AdminActivity.id)), admin_id, action, start, end, exclude_actions
        )
        result = await self.session.execute(query)
        return result.scalar_one()

    async def count_by_action(
        self,
        since: datetime,
        exclude_actions: Collection[AdminAction] | None = None,
    ) -> dict[str, int]:
        query = self._filtered(
            select(AdminActivity.action, func.count(AdminActivity.id)),
            None, None, since, None, exclude_actions,
        ).group_by(AdminActivity.action)
        result = await self.session.execute(query)
        return {action.value: total for action, total in result.all()}

    async def count_by_admin(
        self,
        since: datetime,
        exclude_actions: Collection[AdminAction] | None = None,
    ) -> dict[str, int]:
        query = self._filtered(
            select(AdminActivity.admin_name, func.count(AdminActivity.id)),
            None, None, since, None, exclude_actions,
        ).group_by(AdminActivity.admin_name)
        result = await self.session.execute(query)
        return {name: total for name, total in result.all()}
