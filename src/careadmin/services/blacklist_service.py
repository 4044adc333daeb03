"""Blacklist query and maintenance service."""
from __future__ import annotations

from collections.abc import Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import AlreadyBlacklistedError, BlacklistEntryNotFoundError, ValidationError
from ..models.base import utc_now
from ..models.blacklist import BlacklistEntry
from ..models.enums import (
    AdminAction,
    BlacklistReason,
    NotificationCategory,
    NotificationPriority,
    NotificationType,
)
from ..repositories.blacklist_repository import BlacklistRepository
from ..schemas.blacklist import BlacklistCreate, BlacklistStats, BlacklistUpdate
from .audit_service import ActorContext, AuditService
from .notification_service import NotificationService
from .unit_of_work import atomic

log = structlog.get_logger(__name__)


class BlacklistService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = BlacklistRepository(session)
        self.audit = AuditService(session)
        self.notifications = NotificationService(session)

    # =========================================================================
    # Queries
    # =========================================================================

    async def list(
        self,
        *,
        skip: int = 0,
        limit: int = 50,
        reason: BlacklistReason | None = None,
        is_active: bool | None = None,
    ) -> tuple[Sequence[BlacklistEntry], int]:
        items = await self.repository.get_all(skip, limit, reason=reason, is_active=is_active)
        total = await self.repository.count(reason=reason, is_active=is_active)
        return items, total

    async def search(self, term: str, *, skip: int = 0, limit: int = 50) -> tuple[Sequence[BlacklistEntry], int]:
        if not term.strip():
            raise ValidationError(message="Search term must not be empty")
        items = await self.repository.search(term, skip, limit)
        total = await self.repository.count_search(term)
        return items, total

    async def get(self, entry_id: str) -> BlacklistEntry:
        entry = await self.repository.get_by_id(entry_id)
        if entry is None:
            raise BlacklistEntryNotFoundError(entry_id)
        return entry

    async def check(
        self,
        *,
        email: str | None = None,
        phone: str | None = None,
        licenses: Sequence[str] = (),
    ) -> BlacklistEntry | None:
        """Return the active, unexpired entry matching any identifier, if one exists."""
        return await self.repository.find_active_match(
            email=email, phone=phone, licenses=licenses, now=utc_now()
        )

    async def stats(self) -> BlacklistStats:
        total = await self.repository.count()
        active = await self.repository.count(is_active=True)
        return BlacklistStats(
            total=total,
            active=active,
            inactive=total - active,
            by_reason=await self.repository.count_by_reason(),
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create(self, data: BlacklistCreate, actor: ActorContext) -> BlacklistEntry:
        """Add a manual entry unless the credentials are already actively listed."""
        async with atomic(self.session):
            existing = await self.check(email=data.email, phone=data.phone, licenses=data.licenses)
            if existing is not None:
                raise AlreadyBlacklistedError(existing.id)

            entry = BlacklistEntry(
                reason=data.reason,
                email=data.email,
                phone=data.phone,
                licenses=list(data.licenses),
                name=data.name,
                original_entity_type=data.original_entity_type,
                original_entity_id=data.original_entity_id,
                description=data.description,
                expires_at=data.expires_at,
                created_by=actor.admin_name,
            )
            await self.repository.add(entry)
            await self.audit.record(
                actor,
                AdminAction.ADD_BLACKLIST,
                f"Added blacklist entry for {data.name or data.email or data.phone or 'licence holder'}",
                {"blacklist_entry_id": entry.id, "reason": data.reason.value},
            )
            await self.notifications.notify(
                title="Blacklist entry added",
                message=f"{actor.admin_name} added a {data.reason.value} blacklist entry",
                category=NotificationCategory.BLACKLIST,
                type=NotificationType.WARNING,
                related_entity_id=entry.id,
                related_entity_type="blacklist",
            )

        log.info("blacklist_entry_created", entry_id=entry.id, reason=data.reason.value)
        return entry

    async def update(self, entry_id: str, data: BlacklistUpdate, actor: ActorContext) -> BlacklistEntry:
        changes = data.model_dump(exclude_unset=True)
        async with atomic(self.session, resource_type="blacklist_entry", resource_id=entry_id):
            entry = await self.get(entry_id)
            for name, value in changes.items():
                if value is None and name in ("reason", "is_active"):
                    raise ValidationError(
                        message=f"{name} cannot be cleared",
                        errors=[{"field": name, "message": "must not be null"}],
                    )
                setattr(entry, name, value)
            await self.repository.save(entry)
            await self.audit.record(
                actor,
                AdminAction.UPDATE_BLACKLIST,
                f"Updated blacklist entry {entry_id}",
                {"blacklist_entry_id": entry_id, "fields": sorted(changes)},
            )

        log.info("blacklist_entry_updated", entry_id=entry_id, fields=sorted(changes))
        return entry

    async def remove(self, entry_id: str, actor: ActorContext, *, permanent: bool = False) -> BlacklistEntry:
        """Deactivate an entry, or hard-delete it when ``permanent``."""
        async with atomic(self.session, resource_type="blacklist_entry", resource_id=entry_id):
            entry = await self.get(entry_id)
            if permanent:
                await self.repository.delete(entry)
            else:
                entry.is_active = False
                await self.repository.save(entry)

            await self.audit.record(
                actor,
                AdminAction.DELETE_BLACKLIST,
                f"{'Deleted' if permanent else 'Deactivated'} blacklist entry {entry_id}",
                {"blacklist_entry_id": entry_id, "permanent": permanent},
            )
            await self.notifications.notify(
                title="Blacklist entry removed",
                message=f"{actor.admin_name} {'deleted' if permanent else 'deactivated'} a blacklist entry",
                category=NotificationCategory.BLACKLIST,
                priority=NotificationPriority.LOW,
                related_entity_id=entry_id,
                related_entity_type="blacklist",
            )

        log.info("blacklist_entry_removed", entry_id=entry_id, permanent=permanent)
        return entry
