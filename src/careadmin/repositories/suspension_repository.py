"""Suspension Repository - strike history for doctors."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.suspension import SuspensionRecord


class SuspensionRepository:
    """Repository for SuspensionRecord rows."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, record: SuspensionRecord) -> SuspensionRecord:
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def count_for_doctor(self, doctor_id: str, *, include_revoked: bool = True) -> int:
        """Number of suspensions recorded for the doctor."""
        query = select(func.count(SuspensionRecord.id)).where(SuspensionRecord.doctor_id == doctor_id)
        if not include_revoked:
            query = query.where(SuspensionRecord.revoked.is_(False))
        result = await self.session.execute(query)
        return result.scalar_one()

    async def list_for_doctor(self, doctor_id: str) -> Sequence[SuspensionRecord]:
        """Full history, newest first."""
        query = (
            select(SuspensionRecord)
            .where(SuspensionRecord.doctor_id == doctor_id)
            .order_by(SuspensionRecord.created_at.desc())
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def revoke_active(self, doctor_id: str, *, revoked_at: datetime, revoked_by: str | None) -> int:
        """Mark every unrevoked record for the doctor as revoked. Returns rows touched."""
        stmt = (
            update(SuspensionRecord)
            .where(SuspensionRecord.doctor_id == doctor_id)
            .where(SuspensionRecord.revoked.is_(False))
            .values(revoked=True, revoked_at=revoked_at, revoked_by=revoked_by)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def delete_for_doctor(self, doctor_id: str) -> int:
        """Remove the doctor's history. Runs before the doctor row is deleted."""
        stmt = (
            delete(SuspensionRecord)
            .where(SuspensionRecord.doctor_id == doctor_id)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
