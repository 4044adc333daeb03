"""Admin activity recording and reporting.

``record`` only stages the row; it is committed by the surrounding
operation's transaction so the log entry exists if and only if the action
it describes happened.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ValidationError
from ..models.admin_activity import AdminActivity
from ..models.base import utc_now
from ..models.enums import ADMIN_ONLY_ACTIONS, AdminAction, UserRole
from ..repositories.admin_activity_repository import AdminActivityRepository

log = structlog.get_logger(__name__)

STATS_PERIODS: dict[str, timedelta] = {
    "1d": timedelta(days=1),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
}


@dataclass(frozen=True)
class ActorContext:
    """Who is performing an operation, passed explicitly into services."""

    admin_id: str
    admin_name: str
    admin_role: str
    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def system(cls) -> ActorContext:
        return cls(admin_id="system", admin_name="system", admin_role=UserRole.ADMIN.value)

    @property
    def is_admin(self) -> bool:
        return self.admin_role == UserRole.ADMIN.value


@dataclass
class ActivityStats:
    period: str
    total: int
    by_action: dict[str, int]
    by_admin: dict[str, int]


class AuditService:
    """Writes and reads the admin activity log."""

    def __init__(self, session: AsyncSession) -> None:
        self.repository = AdminActivityRepository(session)

    async def record(
        self,
        actor: ActorContext,
        action: AdminAction,
        details: str,
        metadata: dict[str, Any] | None = None,
    ) -> AdminActivity:
        activity = AdminActivity(
            admin_id=actor.admin_id,
            admin_name=actor.admin_name,
            admin_role=actor.admin_role,
            action=action,
            details=details,
            ip_address=actor.ip_address,
            user_agent=actor.user_agent,
            activity_metadata=metadata or {},
        )
        await self.repository.add(activity)
        log.info("admin_activity_recorded", action=action.value, admin_id=actor.admin_id)
        return activity

    @staticmethod
    def _hidden_for(viewer: ActorContext) -> frozenset[AdminAction] | None:
        return None if viewer.is_admin else ADMIN_ONLY_ACTIONS

    async def list(
        self,
        viewer: ActorContext,
        *,
        skip: int = 0,
        limit: int = 50,
        admin_id: str | None = None,
        action: AdminAction | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> tuple[Sequence[AdminActivity], int]:
        """Filtered page of activities plus the total matching count."""
        if start and end and start > end:
            raise ValidationError(
                message="start must not be after end",
                errors=[{"field": "start", "value": start.isoformat()}],
            )
        hidden = self._hidden_for(viewer)
        items = await self.repository.get_all(
            skip, limit,
            admin_id=admin_id, action=action, start=start, end=end, exclude_actions=hidden,
        )
        total = await self.repository.count(
            admin_id=admin_id, action=action, start=start, end=end, exclude_actions=hidden,
        )
        return items, total

    async def stats(self, viewer: ActorContext, period: str = "7d") -> ActivityStats:
        if period not in STATS_PERIODS:
            raise ValidationError(
                message=f"Unsupported period '{period}'",
                errors=[{"field": "period", "allowed": sorted(STATS_PERIODS)}],
            )
        since = utc_now() - STATS_PERIODS[period]
        hidden = self._hidden_for(viewer)
        by_action = await self.repository.count_by_action(since, hidden)
        by_admin = await self.repository.count_by_admin(since, hidden)
        return ActivityStats(
            period=period,
            total=sum(by_action.values()),
            by_action=by_action,
            by_admin=by_admin,
        )
