"""Integration tests for BlacklistRepository and SuspensionRepository."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.careadmin.models.blacklist import BlacklistEntry
from src.careadmin.models.enums import BlacklistReason
from src.careadmin.models.suspension import SuspensionRecord
from src.careadmin.repositories.blacklist_repository import BlacklistRepository
from src.careadmin.repositories.suspension_repository import SuspensionRepository


def _now() -> datetime:
    return datetime.now(UTC)


async def _entry(session: AsyncSession, **fields) -> BlacklistEntry:
    fields.setdefault("reason", BlacklistReason.MANUAL)
    entry = await BlacklistRepository(session).add(BlacklistEntry(**fields))
    await session.commit()
    return entry


class TestFindActiveMatch:
    async def test_matches_on_email(self, db_session: AsyncSession):
        entry = await _entry(db_session, email="gone@example.com")
        found = await BlacklistRepository(db_session).find_active_match(
            email="GONE@example.com", phone=None, licenses=[], now=_now()
        )
        assert found is not None and found.id == entry.id

    async def test_matches_on_phone_or_licence(self, db_session: AsyncSession):
        await _entry(db_session, phone="+919812345678")
        await _entry(db_session, licenses=["MH-777"])
        repo = BlacklistRepository(db_session)

        assert await repo.find_active_match(email=None, phone="+919812345678", licenses=[], now=_now())
        assert await repo.find_active_match(email="x@example.com", phone=None, licenses=["mh-777"], now=_now())
        assert await repo.find_active_match(email="x@example.com", phone=None, licenses=["MH-77"], now=_now()) is None

    async def test_inactive_and_expired_entries_are_ignored(self, db_session: AsyncSession):
        await _entry(db_session, email="off@example.com", is_active=False)
        await _entry(db_session, email="old@example.com", expires_at=_now() - timedelta(days=1))
        repo = BlacklistRepository(db_session)

        assert await repo.find_active_match(email="off@example.com", phone=None, licenses=[], now=_now()) is None
        assert await repo.find_active_match(email="old@example.com", phone=None, licenses=[], now=_now()) is None

    async def test_no_identifiers(self, db_session: AsyncSession):
        assert await BlacklistRepository(db_session).find_active_match(
            email=None, phone=None, licenses=[], now=_now()
        ) is None


class TestBlacklistQueries:
    async def test_filters_and_counts(self, db_session: AsyncSession):
        await _entry(db_session, email="a@example.com", reason=BlacklistReason.DOCTOR_DELETED)
        await _entry(db_session, email="b@example.com", reason=BlacklistReason.DOCTOR_DELETED, is_active=False)
        await _entry(db_session, email="c@example.com")
        repo = BlacklistRepository(db_session)

        assert await repo.count() == 3
        assert await repo.count(is_active=True) == 2
        assert await repo.count(reason=BlacklistReason.DOCTOR_DELETED, is_active=False) == 1
        assert await repo.count_by_reason() == {"doctor_deleted": 2, "manual": 1}

    async def test_search(self, db_session: AsyncSession):
        await _entry(db_session, name="Dr. Removed Person", licenses=["TN-4040"])
        repo = BlacklistRepository(db_session)
        assert await repo.count_search("removed") == 1
        assert await repo.count_search("tn-40") == 1
        assert await repo.search("absent") == []

    async def test_find_active_by_reason_and_email(self, db_session: AsyncSession):
        entry = await _entry(
            db_session, email="again@example.com", reason=BlacklistReason.CANDIDATE_REJECTED_MULTIPLE
        )
        repo = BlacklistRepository(db_session)
        found = await repo.find_active_by_reason_and_email(
            BlacklistReason.CANDIDATE_REJECTED_MULTIPLE, "again@example.com"
        )
        assert found is not None and found.id == entry.id
        assert await repo.find_active_by_reason_and_email(BlacklistReason.MANUAL, "again@example.com") is None


class TestSuspensionRepository:
    async def test_count_revoke_and_delete(self, db_session: AsyncSession, make_doctor):
        doctor = await make_doctor()
        repo = SuspensionRepository(db_session)
        await repo.add(SuspensionRecord(doctor_id=doctor.id, reason="late"))
        await repo.add(SuspensionRecord(doctor_id=doctor.id, reason="absent"))
        await db_session.commit()

        assert await repo.count_for_doctor(doctor.id) == 2
        assert await repo.revoke_active(doctor.id, revoked_at=_now(), revoked_by="Test Admin") == 2
        await db_session.commit()

        assert await repo.count_for_doctor(doctor.id) == 2
        assert await repo.count_for_doctor(doctor.id, include_revoked=False) == 0
        history = await repo.list_for_doctor(doctor.id)
        assert all(r.revoked and r.revoked_by == "Test Admin" for r in history)

        assert await repo.delete_for_doctor(doctor.id) == 2
        await db_session.commit()
        assert await repo.count_for_doctor(doctor.id) == 0
