"""
Doctor Repository.

Data access layer for the doctor registry and for candidate applications.
Repositories only flush; the calling service owns the transaction and
commits once per operation.
"""
from __future__ import annotations

from collections.abc import Sequence

import structlog
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.doctor_utils import license_overlap
from ..models.doctor import Candidate, Doctor
from ..models.enums import CandidateStatus, DoctorStatus, Sentiment
from ._json import json_array_contains, json_array_mentions, text_mentions

log = structlog.get_logger(__name__)


class DoctorRepository:
    """Repository for Doctor entity database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_by_id(self, doctor_id: str, *, for_update: bool = False) -> Doctor | None:
        """Get doctor by ID, optionally taking a row lock."""
        query = select(Doctor).where(Doctor.id == doctor_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Doctor | None:
        query = select(Doctor).where(Doctor.email == email.lower())
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_phone(self, phone: str) -> Doctor | None:
        query = select(Doctor).where(Doctor.phone == phone)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_by_email_or_phone(
        self, email: str, phone: str, *, exclude_id: str | None = None
    ) -> Doctor | None:
        query = select(Doctor).where(or_(Doctor.email == email.lower(), Doctor.phone == phone))
        if exclude_id:
            query = query.where(Doctor.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def find_by_licenses(self, licenses: Sequence[str]) -> list[Doctor]:
        """Doctors holding any of the given licences."""
        if not licenses:
            return []
        query = select(Doctor).where(or_(*(json_array_contains(Doctor.licenses, lic) for lic in licenses)))
        result = await self.session.execute(query)
        return [d for d in result.scalars().all() if license_overlap(d.licenses, licenses)]

    def _filtered(
        self,
        query: Select,
        status: DoctorStatus | None,
        specialization: str | None,
        sentiment: Sentiment | None,
    ) -> Select:
        if status:
            query = query.where(Doctor.status == status)
        if specialization:
            query = query.where(json_array_mentions(Doctor.specializations, specialization))
        if sentiment:
            query = query.where(Doctor.sentiment == sentiment)
        return query

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        status: DoctorStatus | None = None,
        specialization: str | None = None,
        sentiment: Sentiment | None = None,
    ) -> Sequence[Doctor]:
        """Get doctors, newest first, with optional filtering."""
        query = self._filtered(select(Doctor), status, specialization, sentiment)
        query = query.order_by(Doctor.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(
        self,
        status: DoctorStatus | None = None,
        specialization: str | None = None,
        sentiment: Sentiment | None = None,
    ) -> int:
        query = self._filtered(select(func.count(Doctor.id)), status, specialization, sentiment)
        result = await self.session.execute(query)
        return result.scalar_one()

    @staticmethod
    def _search_clause(term: str):
        return or_(
            text_mentions(Doctor.name, term),
            text_mentions(Doctor.email, term),
            text_mentions(Doctor.department, term),
            text_mentions(Doctor.address, term),
            json_array_mentions(Doctor.specializations, term),
            json_array_mentions(Doctor.medical_degrees, term),
            json_array_mentions(Doctor.hospital_affiliations, term),
        )

    async def search(self, term: str, skip: int = 0, limit: int = 100) -> Sequence[Doctor]:
        """Case-insensitive search over names, contact and credential fields."""
        query = (
            select(Doctor)
            .where(self._search_clause(term))
            .order_by(Doctor.name)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_search(self, term: str) -> int:
        result = await self.session.execute(
            select(func.count(Doctor.id)).where(self._search_clause(term))
        )
        return result.scalar_one()

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    async def add(self, doctor: Doctor) -> Doctor:
        self.session.add(doctor)
        await self.session.flush()
        await self.session.refresh(doctor)
        log.info("doctor_staged", doctor_id=doctor.id, status=doctor.status.value)
        return doctor

    async def save(self, doctor: Doctor) -> Doctor:
        """Flush pending changes on a loaded doctor."""
        await self.session.flush()
        await self.session.refresh(doctor)
        return doctor

    async def delete(self, doctor: Doctor) -> None:
        await self.session.delete(doctor)
        await self.session.flush()
        log.info("doctor_delete_staged", doctor_id=doctor.id)


class CandidateRepository:
    """Repository for pending doctor applications."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, candidate_id: str, *, for_update: bool = False) -> Candidate | None:
        query = select(Candidate).where(Candidate.id == candidate_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_pending_by_email_or_phone(self, email: str, phone: str) -> Candidate | None:
        query = (
            select(Candidate)
            .where(Candidate.status == CandidateStatus.PENDING)
            .where(or_(Candidate.email == email.lower(), Candidate.phone == phone))
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_by_licenses(
        self,
        licenses: Sequence[str],
        status: CandidateStatus | None = None,
    ) -> list[Candidate]:
        if not licenses:
            return []
        query = select(Candidate).where(
            or_(*(json_array_contains(Candidate.licenses, lic) for lic in licenses))
        )
        if status:
            query = query.where(Candidate.status == status)
        result = await self.session.execute(query)
        return [c for c in result.scalars().all() if license_overlap(c.licenses, licenses)]

    async def count_rejected_matching(self, email: str, licenses: Sequence[str]) -> int:
        """Rejected applications sharing the email or any licence."""
        clauses = [Candidate.email == email.lower()]
        clauses.extend(json_array_contains(Candidate.licenses, lic) for lic in licenses)
        query = (
            select(Candidate)
            .where(Candidate.status == CandidateStatus.REJECTED)
            .where(or_(*clauses))
        )
        result = await self.session.execute(query)
        matches = [
            c for c in result.scalars().all()
            if c.email == email.lower() or license_overlap(c.licenses, licenses)
        ]
        return len(matches)

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        status: CandidateStatus | None = None,
    ) -> Sequence[Candidate]:
        query = select(Candidate)
        if status:
            query = query.where(Candidate.status == status)
        query = query.order_by(Candidate.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self, status: CandidateStatus | None = None) -> int:
        query = select(func.count(Candidate.id))
        if status:
            query = query.where(Candidate.status == status)
        result = await self.session.execute(query)
        return result.scalar_one()

    @staticmethod
    def _search_clause(term: str):
        return or_(
            text_mentions(Candidate.name, term),
            text_mentions(Candidate.email, term),
            text_mentions(Candidate.phone, term),
            json_array_mentions(Candidate.specializations, term),
            json_array_mentions(Candidate.licenses, term),
        )

    async def search(self, term: str, skip: int = 0, limit: int = 100) -> Sequence[Candidate]:
        query = (
            select(Candidate)
            .where(self._search_clause(term))
            .order_by(Candidate.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_search(self, term: str) -> int:
        result = await self.session.execute(
            select(func.count(Candidate.id)).where(self._search_clause(term))
        )
        return result.scalar_one()

    async def add(self, candidate: Candidate) -> Candidate:
        self.session.add(candidate)
        await self.session.flush()
        await self.session.refresh(candidate)
        return candidate

    async def save(self, candidate: Candidate) -> Candidate:
        await self.session.flush()
        await self.session.refresh(candidate)
        return candidate

    async def delete(self, candidate: Candidate) -> None:
        await self.session.delete(candidate)
        await self.session.flush()
