"""Tests for CandidateService intake rules."""
from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.careadmin.core.config import Settings
from src.careadmin.core.exceptions import (
    BlacklistedCredentialsError,
    CandidateAlreadyExistsError,
    DoctorAlreadyExistsError,
    LicenseConflictError,
    ValidationError,
)
from src.careadmin.models import AdminActivity, BlacklistEntry, Candidate, Notification
from src.careadmin.models.enums import (
    AdminAction,
    BlacklistReason,
    CandidateStatus,
    NotificationCategory,
)
from src.careadmin.schemas.doctor import CandidateCreate
from src.careadmin.services.candidate_service import CandidateService

SECRET = "test-secret-key-that-is-at-least-32-characters"


@pytest.fixture
def service(db_session: AsyncSession, settings: Settings) -> CandidateService:
    return CandidateService(db_session, settings=settings)


@pytest.mark.asyncio
async def test_submit_creates_pending_candidate(service, db_session, doctor_payload, ops_actor):
    data = CandidateCreate(**doctor_payload(specializations=["Cardiology", "", "Cardiology"]))

    candidate = await service.submit(data, ops_actor)

    assert candidate.status == CandidateStatus.PENDING
    assert candidate.specializations == ["Cardiology"]
    activity = (await db_session.execute(select(AdminActivity))).scalar_one()
    assert activity.action == AdminAction.SUBMIT_CANDIDATE
    assert activity.admin_name == "Ops User"


@pytest.mark.asyncio
async def test_duplicate_pending_application(service, make_candidate, doctor_payload, ops_actor):
    existing = await make_candidate()
    data = CandidateCreate(**doctor_payload(email=existing.email))
    with pytest.raises(CandidateAlreadyExistsError):
        await service.submit(data, ops_actor)


@pytest.mark.asyncio
async def test_rejected_applicant_may_reapply(service, make_candidate, doctor_payload, ops_actor):
    rejected = await make_candidate(status=CandidateStatus.REJECTED)
    data = CandidateCreate(**doctor_payload(email=rejected.email, phone=rejected.phone))
    candidate = await service.submit(data, ops_actor)
    assert candidate.id != rejected.id


@pytest.mark.asyncio
async def test_contact_held_by_doctor(service, make_doctor, doctor_payload, ops_actor):
    doctor = await make_doctor()
    data = CandidateCreate(**doctor_payload(phone=doctor.phone))
    with pytest.raises(DoctorAlreadyExistsError):
        await service.submit(data, ops_actor)


@pytest.mark.asyncio
async def test_licence_held_by_doctor(service, make_doctor, doctor_payload, ops_actor):
    await make_doctor(licenses=["KA-2020-1"])
    data = CandidateCreate(**doctor_payload(licenses=["ka-2020-1"]))
    with pytest.raises(LicenseConflictError) as exc:
        await service.submit(data, ops_actor)
    assert exc.value.details["holder_type"] == "doctor"


@pytest.mark.asyncio
async def test_licence_held_by_pending_candidate(service, db_session, make_candidate, doctor_payload, ops_actor):
    await make_candidate(licenses=["KA-2020-2"])
    data = CandidateCreate(**doctor_payload(licenses=["KA-2020-2"]))
    with pytest.raises(LicenseConflictError) as exc:
        await service.submit(data, ops_actor)
    assert exc.value.details["holder_type"] == "candidate"

    count = len((await db_session.execute(select(Candidate))).scalars().all())
    assert count == 1


@pytest.mark.asyncio
async def test_blacklist_ignored_when_enforcement_off(service, db_session, doctor_payload, ops_actor):
    payload = doctor_payload()
    db_session.add(BlacklistEntry(reason=BlacklistReason.MANUAL, email=payload["email"]))
    await db_session.commit()

    candidate = await service.submit(CandidateCreate(**payload), ops_actor)
    assert candidate.id is not None


@pytest.mark.asyncio
async def test_blacklisted_applicant_refused_when_enforced(db_session, doctor_payload, ops_actor):
    settings = Settings(SECRET_KEY=SECRET, BLACKLIST_ENFORCE_AT_INTAKE=True)
    service = CandidateService(db_session, settings=settings)
    payload = doctor_payload(licenses=["TN-BANNED"])
    db_session.add(BlacklistEntry(reason=BlacklistReason.DOCTOR_DELETED, licenses=["TN-BANNED"]))
    await db_session.commit()

    with pytest.raises(BlacklistedCredentialsError) as exc:
        await service.submit(CandidateCreate(**payload), ops_actor)
    assert exc.value.details == {"reason": "doctor_deleted"}

    assert (await db_session.execute(select(Candidate))).scalars().all() == []
    notes = (await db_session.execute(select(Notification))).scalars().all()
    assert [n.category for n in notes] == [NotificationCategory.SECURITY]


@pytest.mark.asyncio
async def test_search_requires_term(service):
    with pytest.raises(ValidationError):
        await service.search("  ")


@pytest.mark.asyncio
async def test_list_by_status(service, make_candidate):
    await make_candidate()
    await make_candidate(status=CandidateStatus.REJECTED)
    items, total = await service.list(status=CandidateStatus.REJECTED)
    assert total == 1
    assert items[0].status == CandidateStatus.REJECTED
