"""Doctor lifecycle: review, approval, suspension strikes and removal.

State machine::

    candidate: pending -> rejected            (record retained)
    candidate: pending -> [promoted]          (copied into doctors, then deleted)
    doctor:    approved <-> suspended
    doctor:    approved | suspended -> [deleted]  (snapshot written to blacklist)

Each public operation runs in one transaction together with its audit row,
notification and blacklist side effects. Suspension is the only operation
that may end in deletion: once a doctor's recorded suspensions reach
``SUSPENSION_DELETE_THRESHOLD`` the doctor is removed and blacklisted
instead of being left suspended.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings, get_settings
from ..core.doctor_utils import CREDENTIAL_FIELDS, PROFILE_TEXT_FIELDS, normalize_credentials
from ..core.exceptions import (
    CandidateNotFoundError,
    DoctorAlreadyExistsError,
    DoctorNotFoundError,
    InvalidStateError,
    ValidationError,
)
from ..models.base import utc_now
from ..models.blacklist import BlacklistEntry
from ..models.doctor import Candidate, Doctor
from ..models.enums import (
    AdminAction,
    BlacklistReason,
    CandidateStatus,
    DoctorStatus,
    EntityType,
    NotificationCategory,
    NotificationPriority,
    NotificationType,
    Sentiment,
    SuspensionSeverity,
    SuspensionType,
)
from ..models.suspension import SuspensionRecord
from ..repositories.blacklist_repository import BlacklistRepository
from ..repositories.doctor_repository import CandidateRepository, DoctorRepository
from ..repositories.suspension_repository import SuspensionRepository
from .audit_service import ActorContext, AuditService
from .locks import KeyedLockRegistry, get_lock_registry
from .notification_service import NotificationService
from .unit_of_work import atomic

log = structlog.get_logger(__name__)

APPROVED_SENTIMENT_SCORE = 0.8


@dataclass
class SuspensionOutcome:
    """Result of ``suspend_doctor``: exactly one of the two branches applies."""

    deleted: bool
    message: str
    suspension_count: int
    doctor: Doctor | None = None
    suspension: SuspensionRecord | None = None
    blacklist_entry: BlacklistEntry | None = None


@dataclass
class RejectionOutcome:
    candidate: Candidate
    rejection_count: int
    blacklist_entry: BlacklistEntry | None = None


@dataclass
class SuspensionSummary:
    doctor_id: str
    status: DoctorStatus
    suspension_count: int
    active_suspensions: int
    warning_threshold: int
    deletion_threshold: int
    next_suspension_will_delete: bool
    remaining_before_deletion: int


@dataclass
class SuspensionRequest:
    reason: str
    detail: str | None = None
    suspension_type: SuspensionType = SuspensionType.TEMPORARY
    severity: SuspensionSeverity = SuspensionSeverity.MAJOR
    duration_days: int | None = None


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


class LifecycleService:
    """Owns every doctor/candidate status transition."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        locks: KeyedLockRegistry | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.locks = locks or get_lock_registry()
        self.doctors = DoctorRepository(session)
        self.candidates = CandidateRepository(session)
        self.suspensions = SuspensionRepository(session)
        self.blacklist = BlacklistRepository(session)
        self.audit = AuditService(session)
        self.notifications = NotificationService(session)

    # =========================================================================
    # Candidate review
    # =========================================================================

    async def _pending_candidate(self, candidate_id: str) -> Candidate:
        candidate = await self.candidates.get_by_id(candidate_id, for_update=True)
        if candidate is None:
            raise CandidateNotFoundError(candidate_id)
        if candidate.status != CandidateStatus.PENDING:
            raise InvalidStateError(
                message=f"Candidate is already {candidate.status.value}",
                current_status=candidate.status.value,
                allowed=[CandidateStatus.PENDING.value],
            )
        return candidate

    async def approve_candidate(self, candidate_id: str, actor: ActorContext) -> Doctor:
        """Promote a pending candidate into the doctor registry."""
        async with self.locks.hold(f"candidate:{candidate_id}"):
            async with atomic(self.session, resource_type="candidate", resource_id=candidate_id):
                candidate = await self._pending_candidate(candidate_id)

                existing = await self.doctors.find_by_email_or_phone(candidate.email, candidate.phone)
                if existing is not None:
                    raise DoctorAlreadyExistsError(email=candidate.email, phone=candidate.phone)

                profile: dict[str, Any] = {name: getattr(candidate, name) for name in PROFILE_TEXT_FIELDS}
                for name in CREDENTIAL_FIELDS:
                    profile[name] = normalize_credentials(getattr(candidate, name))

                now = utc_now()
                doctor = Doctor(
                    name=candidate.name,
                    email=candidate.email,
                    phone=candidate.phone,
                    **profile,
                    department=profile["specializations"][0] if profile["specializations"] else None,
                    status=DoctorStatus.APPROVED,
                    verified=True,
                    verification_date=now,
                    sentiment=Sentiment.POSITIVE,
                    sentiment_score=APPROVED_SENTIMENT_SCORE,
                )
                await self.doctors.add(doctor)
                await self.candidates.delete(candidate)

                await self.audit.record(
                    actor,
                    AdminAction.APPROVE_DOCTOR,
                    f"Approved candidate {doctor.name}",
                    {"candidate_id": candidate_id, "doctor_id": doctor.id},
                )
                await self.notifications.notify(
                    title="Doctor approved",
                    message=f"{doctor.name} was approved and added to the registry",
                    category=NotificationCategory.CANDIDATES,
                    type=NotificationType.SUCCESS,
                    related_entity_id=doctor.id,
                    related_entity_type="doctor",
                )

        log.info("candidate_approved", candidate_id=candidate_id, doctor_id=doctor.id)
        return doctor

    async def reject_candidate(
        self,
        candidate_id: str,
        actor: ActorContext,
        reason: str | None = None,
    ) -> RejectionOutcome:
        """Reject a pending candidate; repeated rejections blacklist the applicant."""
        async with self.locks.hold(f"candidate:{candidate_id}"):
            async with atomic(self.session, resource_type="candidate", resource_id=candidate_id):
                candidate = await self._pending_candidate(candidate_id)

                candidate.status = CandidateStatus.REJECTED
                candidate.rejection_reason = reason
                candidate.reviewed_at = utc_now()
                candidate.reviewed_by = actor.admin_name
                await self.candidates.save(candidate)

                rejection_count = await self.candidates.count_rejected_matching(
                    candidate.email, candidate.licenses
                )
                entry = None
                if rejection_count >= self.settings.CANDIDATE_REJECTION_BLACKLIST_THRESHOLD:
                    entry = await self._blacklist_repeat_applicant(candidate, rejection_count, actor)

                await self.audit.record(
                    actor,
                    AdminAction.REJECT_DOCTOR,
                    f"Rejected candidate {candidate.name}",
                    {
                        "candidate_id": candidate_id,
                        "reason": reason,
                        "rejection_count": rejection_count,
                        "blacklisted": entry is not None,
                    },
                )
                await self.notifications.notify(
                    title="Candidate rejected",
                    message=f"{candidate.name} was rejected ({_ordinal(rejection_count)} rejection)",
                    category=NotificationCategory.CANDIDATES,
                    type=NotificationType.WARNING if entry else NotificationType.INFO,
                    related_entity_id=candidate.id,
                    related_entity_type="candidate",
                )

        log.info(
            "candidate_rejected",
            candidate_id=candidate_id,
            rejection_count=rejection_count,
            blacklisted=entry is not None,
        )
        return RejectionOutcome(candidate=candidate, rejection_count=rejection_count, blacklist_entry=entry)

    async def _blacklist_repeat_applicant(
        self, candidate: Candidate, rejection_count: int, actor: ActorContext
    ) -> BlacklistEntry:
        existing = await self.blacklist.find_active_by_reason_and_email(
            BlacklistReason.CANDIDATE_REJECTED_MULTIPLE, candidate.email
        )
        if existing is not None:
            existing.rejection_count = rejection_count
            existing.licenses = normalize_credentials([*existing.licenses, *candidate.licenses])
            return await self.blacklist.save(existing)

        entry = BlacklistEntry(
            reason=BlacklistReason.CANDIDATE_REJECTED_MULTIPLE,
            email=candidate.email,
            phone=candidate.phone,
            licenses=list(candidate.licenses),
            name=candidate.name,
            original_entity_type=EntityType.CANDIDATE,
            original_entity_id=candidate.id,
            description=f"Candidate rejected {rejection_count} times",
            rejection_count=rejection_count,
            created_by=actor.admin_name,
        )
        await self.blacklist.add(entry)
        await self.notifications.notify(
            title="Candidate blacklisted",
            message=f"{candidate.name} was blacklisted after {rejection_count} rejections",
            category=NotificationCategory.BLACKLIST,
            type=NotificationType.ALERT,
            priority=NotificationPriority.HIGH,
            related_entity_id=entry.id,
            related_entity_type="blacklist",
        )
        return entry

    # =========================================================================
    # Suspension
    # =========================================================================

    async def _doctor_or_raise(self, doctor_id: str, *, for_update: bool = False) -> Doctor:
        doctor = await self.doctors.get_by_id(doctor_id, for_update=for_update)
        if doctor is None:
            raise DoctorNotFoundError(doctor_id)
        return doctor

    async def suspend_doctor(
        self,
        doctor_id: str,
        request: SuspensionRequest,
        actor: ActorContext,
    ) -> SuspensionOutcome:
        """Record a suspension; at the strike threshold delete and blacklist instead."""
        if not request.reason or not request.reason.strip():
            raise ValidationError(
                message="A suspension reason is required",
                errors=[{"field": "reason", "message": "must not be empty"}],
            )

        async with self.locks.hold(f"doctor:{doctor_id}"):
            async with atomic(self.session, resource_type="doctor", resource_id=doctor_id):
                doctor = await self._doctor_or_raise(doctor_id, for_update=True)
                if doctor.status == DoctorStatus.SUSPENDED:
                    raise InvalidStateError(
                        message="Doctor is already suspended",
                        current_status=doctor.status.value,
                        allowed=[s.value for s in DoctorStatus if s != DoctorStatus.SUSPENDED],
                    )

                record = await self.suspensions.add(self._build_record(doctor_id, request, actor))
                count = await self.suspensions.count_for_doctor(
                    doctor_id, include_revoked=self.settings.SUSPENSION_COUNT_INCLUDES_REVOKED
                )

                if count >= self.settings.SUSPENSION_DELETE_THRESHOLD:
                    outcome = await self._delete_on_strike_limit(doctor, request, count, actor)
                else:
                    outcome = await self._mark_suspended(doctor, record, request, count, actor)

        if outcome.deleted:
            log.warning("doctor_deleted_strike_limit", doctor_id=doctor_id, suspension_count=count)
        else:
            log.info("doctor_suspended", doctor_id=doctor_id, suspension_count=count)
        return outcome

    def _build_record(self, doctor_id: str, request: SuspensionRequest, actor: ActorContext) -> SuspensionRecord:
        now = utc_now()
        if request.suspension_type == SuspensionType.PERMANENT:
            duration = None
        elif request.duration_days is not None and request.duration_days < 0:
            duration = None
        else:
            duration = request.duration_days or self.settings.SUSPENSION_DEFAULT_DURATION_DAYS
        return SuspensionRecord(
            doctor_id=doctor_id,
            reason=request.reason.strip(),
            detail=request.detail,
            suspension_type=request.suspension_type,
            severity=request.severity,
            duration_days=duration,
            starts_at=now,
            ends_at=now + timedelta(days=duration) if duration else None,
            suspended_by=actor.admin_name,
        )

    async def _mark_suspended(
        self,
        doctor: Doctor,
        record: SuspensionRecord,
        request: SuspensionRequest,
        count: int,
        actor: ActorContext,
    ) -> SuspensionOutcome:
        doctor.status = DoctorStatus.SUSPENDED
        await self.doctors.save(doctor)

        await self.audit.record(
            actor,
            AdminAction.SUSPEND_DOCTOR,
            f"Suspended doctor {doctor.name}: {request.reason}",
            {
                "doctor_id": doctor.id,
                "suspension_id": record.id,
                "suspension_count": count,
                "severity": request.severity.value,
                "deleted": False,
            },
        )

        final_warning = count >= self.settings.SUSPENSION_WARNING_THRESHOLD
        await self.notifications.notify(
            title="Doctor suspended",
            message=(
                f"{doctor.name} was suspended ({_ordinal(count)} suspension)."
                + (" The next suspension will remove this doctor." if final_warning else "")
            ),
            category=NotificationCategory.SUSPENSIONS,
            type=NotificationType.ALERT if final_warning else NotificationType.WARNING,
            priority=NotificationPriority.HIGH if final_warning else NotificationPriority.MEDIUM,
            related_entity_id=doctor.id,
            related_entity_type="doctor",
        )
        return SuspensionOutcome(
            deleted=False,
            message=f"Doctor suspended ({_ordinal(count)} suspension)",
            suspension_count=count,
            doctor=doctor,
            suspension=record,
        )

    async def _delete_on_strike_limit(
        self,
        doctor: Doctor,
        request: SuspensionRequest,
        count: int,
        actor: ActorContext,
    ) -> SuspensionOutcome:
        doctor_id = doctor.id
        doctor_name = doctor.name
        description = f"Doctor automatically deleted due to {_ordinal(count)} suspension"

        await self.audit.record(
            actor,
            AdminAction.SUSPEND_DOCTOR,
            f"Suspended doctor {doctor_name}: {request.reason}",
            {"doctor_id": doctor_id, "suspension_count": count, "deleted": True},
        )
        entry = await self._remove_doctor(doctor, BlacklistReason.DOCTOR_DELETED, description, actor)

        return SuspensionOutcome(
            deleted=True,
            message=(
                f"Doctor {doctor_name} has been automatically deleted and blacklisted "
                f"after reaching {count} suspensions"
            ),
            suspension_count=count,
            blacklist_entry=entry,
        )

    async def unsuspend_doctor(self, doctor_id: str, actor: ActorContext) -> Doctor:
        """Lift the current suspension. Past records are revoked, never removed."""
        async with self.locks.hold(f"doctor:{doctor_id}"):
            async with atomic(self.session, resource_type="doctor", resource_id=doctor_id):
                doctor = await self._doctor_or_raise(doctor_id, for_update=True)
                if doctor.status != DoctorStatus.SUSPENDED:
                    raise InvalidStateError(
                        message="Doctor is not suspended",
                        current_status=doctor.status.value,
                        allowed=[DoctorStatus.SUSPENDED.value],
                    )

                revoked = await self.suspensions.revoke_active(
                    doctor_id, revoked_at=utc_now(), revoked_by=actor.admin_name
                )
                doctor.status = DoctorStatus.APPROVED
                await self.doctors.save(doctor)

                await self.audit.record(
                    actor,
                    AdminAction.UNSUSPEND_DOCTOR,
                    f"Unsuspended doctor {doctor.name}",
                    {"doctor_id": doctor_id, "revoked_records": revoked},
                )
                await self.notifications.notify(
                    title="Doctor reinstated",
                    message=f"{doctor.name} was unsuspended",
                    category=NotificationCategory.SUSPENSIONS,
                    type=NotificationType.SUCCESS,
                    related_entity_id=doctor_id,
                    related_entity_type="doctor",
                )

        log.info("doctor_unsuspended", doctor_id=doctor_id, revoked_records=revoked)
        return doctor

    async def suspension_history(self, doctor_id: str) -> Sequence[SuspensionRecord]:
        await self._doctor_or_raise(doctor_id)
        return await self.suspensions.list_for_doctor(doctor_id)

    async def suspension_summary(self, doctor_id: str) -> SuspensionSummary:
        doctor = await self._doctor_or_raise(doctor_id)
        count = await self.suspensions.count_for_doctor(
            doctor_id, include_revoked=self.settings.SUSPENSION_COUNT_INCLUDES_REVOKED
        )
        active = await self.suspensions.count_for_doctor(doctor_id, include_revoked=False)
        threshold = self.settings.SUSPENSION_DELETE_THRESHOLD
        return SuspensionSummary(
            doctor_id=doctor_id,
            status=doctor.status,
            suspension_count=count,
            active_suspensions=active,
            warning_threshold=self.settings.SUSPENSION_WARNING_THRESHOLD,
            deletion_threshold=threshold,
            next_suspension_will_delete=count + 1 >= threshold,
            remaining_before_deletion=max(0, threshold - count),
        )

    # =========================================================================
    # Removal
    # =========================================================================

    async def delete_doctor(
        self,
        doctor_id: str,
        actor: ActorContext,
        reason: BlacklistReason = BlacklistReason.DOCTOR_DELETED,
        description: str | None = None,
    ) -> BlacklistEntry:
        """Hard-delete a doctor from any status and blacklist its credentials."""
        if reason == BlacklistReason.CANDIDATE_REJECTED_MULTIPLE:
            raise ValidationError(
                message="candidate_rejected_multiple is reserved for candidate rejections",
                errors=[{"field": "reason", "value": reason.value}],
            )

        async with self.locks.hold(f"doctor:{doctor_id}"):
            async with atomic(self.session, resource_type="doctor", resource_id=doctor_id):
                doctor = await self._doctor_or_raise(doctor_id, for_update=True)
                entry = await self._remove_doctor(
                    doctor, reason, description or "Doctor manually deleted by admin", actor
                )

        log.info("doctor_deleted", doctor_id=doctor_id, reason=reason.value)
        return entry

    async def _remove_doctor(
        self,
        doctor: Doctor,
        reason: BlacklistReason,
        description: str,
        actor: ActorContext,
    ) -> BlacklistEntry:
        """Snapshot into the blacklist, then delete the doctor and its history."""
        doctor_id = doctor.id
        doctor_name = doctor.name
        entry = BlacklistEntry(
            reason=reason,
            email=doctor.email,
            phone=doctor.phone,
            licenses=list(doctor.licenses),
            name=doctor_name,
            original_entity_type=EntityType.DOCTOR,
            original_entity_id=doctor_id,
            description=description,
            created_by=actor.admin_name,
        )
        await self.blacklist.add(entry)
        await self.suspensions.delete_for_doctor(doctor_id)
        await self.doctors.delete(doctor)

        await self.audit.record(
            actor,
            AdminAction.DELETE_DOCTOR,
            f"Deleted doctor {doctor_name}: {description}",
            {"doctor_id": doctor_id, "blacklist_entry_id": entry.id, "reason": reason.value},
        )
        await self.notifications.notify(
            title="Doctor removed",
            message=f"{doctor_name} was deleted and blacklisted. {description}",
            category=NotificationCategory.DOCTORS,
            type=NotificationType.ALERT,
            priority=NotificationPriority.HIGH,
            related_entity_id=entry.id,
            related_entity_type="blacklist",
        )
        return entry
