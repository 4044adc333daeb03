"""Blacklist Repository - data access for removed-practitioner fingerprints."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.doctor_utils import license_overlap
from ..models.blacklist import BlacklistEntry
from ..models.enums import BlacklistReason
from ._json import json_array_contains, json_array_mentions, text_mentions


class BlacklistRepository:
    """Repository for BlacklistEntry rows."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, entry: BlacklistEntry) -> BlacklistEntry:
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def save(self, entry: BlacklistEntry) -> BlacklistEntry:
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def delete(self, entry: BlacklistEntry) -> None:
        await self.session.delete(entry)
        await self.session.flush()

    async def get_by_id(self, entry_id: str) -> BlacklistEntry | None:
        result = await self.session.execute(select(BlacklistEntry).where(BlacklistEntry.id == entry_id))
        return result.scalar_one_or_none()

    @staticmethod
    def _filtered(query: Select, reason: BlacklistReason | None, is_active: bool | None) -> Select:
        if reason:
            query = query.where(BlacklistEntry.reason == reason)
        if is_active is not None:
            query = query.where(BlacklistEntry.is_active.is_(is_active))
        return query

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        reason: BlacklistReason | None = None,
        is_active: bool | None = None,
    ) -> Sequence[BlacklistEntry]:
        """Entries, most recently blacklisted first."""
        query = self._filtered(select(BlacklistEntry), reason, is_active)
        query = query.order_by(BlacklistEntry.blacklisted_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self, reason: BlacklistReason | None = None, is_active: bool | None = None) -> int:
        query = self._filtered(select(func.count(BlacklistEntry.id)), reason, is_active)
        result = await self.session.execute(query)
        return result.scalar_one()

    @staticmethod
    def _search_clause(term: str):
        return or_(
            text_mentions(BlacklistEntry.email, term),
            text_mentions(BlacklistEntry.phone, term),
            text_mentions(BlacklistEntry.name, term),
            text_mentions(BlacklistEntry.description, term),
            json_array_mentions(BlacklistEntry.licenses, term),
        )

    async def search(self, term: str, skip: int = 0, limit: int = 100) -> Sequence[BlacklistEntry]:
        query = (
            select(BlacklistEntry)
            .where(self._search_clause(term))
            .order_by(BlacklistEntry.blacklisted_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_search(self, term: str) -> int:
        result = await self.session.execute(
            select(func.count(BlacklistEntry.id)).where(self._search_clause(term))
        )
        return result.scalar_one()

    async def find_active_match(
        self,
        *,
        email: str | None,
        phone: str | None,
        licenses: Sequence[str],
        now: datetime,
    ) -> BlacklistEntry | None:
        """First active, unexpired entry matching the email, phone or any licence."""
        clauses = []
        if email:
            clauses.append(BlacklistEntry.email == email.lower())
        if phone:
            clauses.append(BlacklistEntry.phone == phone)
        clauses.extend(json_array_contains(BlacklistEntry.licenses, lic) for lic in licenses)
        if not clauses:
            return None

        query = (
            select(BlacklistEntry)
            .where(BlacklistEntry.is_active.is_(True))
            .where(or_(BlacklistEntry.expires_at.is_(None), BlacklistEntry.expires_at > now))
            .where(or_(*clauses))
            .order_by(BlacklistEntry.blacklisted_at.desc())
        )
        result = await self.session.execute(query)
        for entry in result.scalars().all():
            if (email and entry.email == email.lower()) or (phone and entry.phone == phone):
                return entry
            if license_overlap(entry.licenses, licenses):
                return entry
        return None

    async def find_active_by_reason_and_email(
        self, reason: BlacklistReason, email: str
    ) -> BlacklistEntry | None:
        query = (
            select(BlacklistEntry)
            .where(BlacklistEntry.reason == reason)
            .where(BlacklistEntry.email == email.lower())
            .where(BlacklistEntry.is_active.is_(True))
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def count_by_reason(self) -> dict[str, int]:
        query = select(BlacklistEntry.reason, func.count(BlacklistEntry.id)).group_by(BlacklistEntry.reason)
        result = await self.session.execute(query)
        return {reason.value: total for reason, total in result.all()}
