"""Candidate intake: accept new applications for review.

Intake refuses an application when its email or phone is already held by a
pending candidate or a doctor, or when a licence is already registered.
With ``BLACKLIST_ENFORCE_AT_INTAKE`` on, credentials matching an active
blacklist entry are refused as well.
"""
from __future__ import annotations

from collections.abc import Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings, get_settings
from ..core.exceptions import (
    BlacklistedCredentialsError,
    CandidateAlreadyExistsError,
    CandidateNotFoundError,
    DoctorAlreadyExistsError,
    LicenseConflictError,
    ValidationError,
)
from ..models.base import utc_now
from ..models.doctor import Candidate
from ..models.enums import (
    AdminAction,
    CandidateStatus,
    NotificationCategory,
    NotificationPriority,
    NotificationType,
)
from ..repositories.blacklist_repository import BlacklistRepository
from ..repositories.doctor_repository import CandidateRepository, DoctorRepository
from ..schemas.doctor import CandidateCreate
from .audit_service import ActorContext, AuditService
from .notification_service import NotificationService
from .unit_of_work import atomic

log = structlog.get_logger(__name__)


class CandidateService:
    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.repository = CandidateRepository(session)
        self.doctors = DoctorRepository(session)
        self.blacklist = BlacklistRepository(session)
        self.audit = AuditService(session)
        self.notifications = NotificationService(session)

    async def get(self, candidate_id: str) -> Candidate:
        candidate = await self.repository.get_by_id(candidate_id)
        if candidate is None:
            raise CandidateNotFoundError(candidate_id)
        return candidate

    async def list(
        self,
        *,
        skip: int = 0,
        limit: int = 50,
        status: CandidateStatus | None = None,
    ) -> tuple[Sequence[Candidate], int]:
        items = await self.repository.get_all(skip, limit, status=status)
        total = await self.repository.count(status=status)
        return items, total

    async def search(self, term: str, *, skip: int = 0, limit: int = 50) -> tuple[Sequence[Candidate], int]:
        if not term.strip():
            raise ValidationError(message="Search term must not be empty")
        items = await self.repository.search(term, skip, limit)
        total = await self.repository.count_search(term)
        return items, total

    async def submit(self, data: CandidateCreate, actor: ActorContext) -> Candidate:
        """Validate and store a new pending application."""
        async with atomic(self.session):
            if self.settings.BLACKLIST_ENFORCE_AT_INTAKE:
                await self._refuse_blacklisted(data)

            if await self.repository.find_pending_by_email_or_phone(data.email, data.phone):
                raise CandidateAlreadyExistsError(email=data.email, phone=data.phone)
            if await self.doctors.find_by_email_or_phone(data.email, data.phone):
                raise DoctorAlreadyExistsError(email=data.email, phone=data.phone)

            if data.licenses:
                if await self.doctors.find_by_licenses(data.licenses):
                    raise LicenseConflictError(data.licenses, "doctor")
                if await self.repository.find_by_licenses(data.licenses, status=CandidateStatus.PENDING):
                    raise LicenseConflictError(data.licenses, "candidate")

            candidate = Candidate(**data.model_dump(), status=CandidateStatus.PENDING)
            await self.repository.add(candidate)
            await self.audit.record(
                actor,
                AdminAction.SUBMIT_CANDIDATE,
                f"Submitted candidate {candidate.name}",
                {"candidate_id": candidate.id},
            )
            await self.notifications.notify(
                title="New candidate",
                message=f"{candidate.name} is awaiting review",
                category=NotificationCategory.CANDIDATES,
                related_entity_id=candidate.id,
                related_entity_type="candidate",
            )

        log.info("candidate_submitted", candidate_id=candidate.id)
        return candidate

    async def _refuse_blacklisted(self, data: CandidateCreate) -> None:
        entry = await self.blacklist.find_active_match(
            email=data.email, phone=data.phone, licenses=data.licenses, now=utc_now()
        )
        if entry is None:
            return
        log.warning("blacklisted_intake_refused", blacklist_entry_id=entry.id, reason=entry.reason.value)
        # Recorded in its own transaction; the intake itself is refused.
        await self.notifications.notify(
            title="Blacklisted applicant",
            message=f"An application matching blacklist entry {entry.id} was refused",
            category=NotificationCategory.SECURITY,
            type=NotificationType.ALERT,
            priority=NotificationPriority.HIGH,
            related_entity_id=entry.id,
            related_entity_type="blacklist",
        )
        await self.session.commit()
        raise BlacklistedCredentialsError(entry.reason.value)
