"""Tests for DoctorService, BlacklistService, AuditService and NotificationService."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.careadmin.core.exceptions import (
    AlreadyBlacklistedError,
    BlacklistEntryNotFoundError,
    DoctorAlreadyExistsError,
    DoctorNotFoundError,
    NotificationNotFoundError,
    ValidationError,
)
from src.careadmin.models.enums import (
    AdminAction,
    BlacklistReason,
    EntityType,
    NotificationCategory,
    Sentiment,
)
from src.careadmin.schemas.blacklist import BlacklistCreate, BlacklistUpdate
from src.careadmin.schemas.doctor import DoctorCreate, DoctorUpdate, SentimentUpdate
from src.careadmin.services.audit_service import AuditService
from src.careadmin.services.blacklist_service import BlacklistService
from src.careadmin.services.doctor_service import DoctorService
from src.careadmin.services.notification_service import NotificationService


# =============================================================================
# DoctorService
# =============================================================================

class TestDoctorService:

    @pytest.fixture
    def service(self, db_session: AsyncSession) -> DoctorService:
        return DoctorService(db_session)

    async def test_create_defaults(self, service, doctor_payload, actor):
        doctor = await service.create(DoctorCreate(**doctor_payload(specializations=["Oncology"])), actor)
        assert doctor.verified is True
        assert doctor.department == "Oncology"
        assert doctor.sentiment == Sentiment.POSITIVE

    async def test_create_with_score_derives_label(self, service, doctor_payload, actor):
        doctor = await service.create(DoctorCreate(**doctor_payload(sentiment_score=0.5)), actor)
        assert doctor.sentiment == Sentiment.NEUTRAL
        assert doctor.sentiment_score == 0.5

    async def test_create_duplicate(self, service, make_doctor, doctor_payload, actor):
        doctor = await make_doctor()
        with pytest.raises(DoctorAlreadyExistsError):
            await service.create(DoctorCreate(**doctor_payload(email=doctor.email)), actor)

    async def test_update_partial(self, service, make_doctor, actor):
        doctor = await make_doctor()
        updated = await service.update(doctor.id, DoctorUpdate(department="Surgery", no_of_patients=12), actor)
        assert updated.department == "Surgery"
        assert updated.no_of_patients == 12
        assert updated.name == doctor.name

    async def test_update_cannot_clear_required_field(self, service, make_doctor, actor):
        doctor = await make_doctor()
        with pytest.raises(ValidationError):
            await service.update(doctor.id, DoctorUpdate(name=None), actor)

    async def test_update_to_taken_email(self, service, make_doctor, actor):
        first = await make_doctor()
        second = await make_doctor()
        with pytest.raises(DoctorAlreadyExistsError):
            await service.update(second.id, DoctorUpdate(email=first.email), actor)

    async def test_update_label_snaps_score(self, service, make_doctor, actor):
        doctor = await make_doctor()
        updated = await service.update(doctor.id, DoctorUpdate(sentiment=Sentiment.NEGATIVE), actor)
        assert (updated.sentiment, updated.sentiment_score) == (Sentiment.NEGATIVE, 0.3)

    async def test_update_sentiment_score_wins(self, service, make_doctor, actor):
        doctor = await make_doctor()
        updated = await service.update_sentiment(
            doctor.id, SentimentUpdate(sentiment=Sentiment.POSITIVE, sentiment_score=0.1), actor
        )
        assert updated.sentiment == Sentiment.NEGATIVE
        assert updated.sentiment_score == 0.1

    async def test_update_sentiment_requires_a_field(self, service, make_doctor, actor):
        doctor = await make_doctor()
        with pytest.raises(ValidationError):
            await service.update_sentiment(doctor.id, SentimentUpdate(), actor)

    async def test_get_missing(self, service):
        with pytest.raises(DoctorNotFoundError):
            await service.get("missing")


# =============================================================================
# BlacklistService
# =============================================================================

class TestBlacklistService:

    @pytest.fixture
    def service(self, db_session: AsyncSession) -> BlacklistService:
        return BlacklistService(db_session)

    @staticmethod
    def _create(**fields) -> BlacklistCreate:
        fields.setdefault("original_entity_type", EntityType.DOCTOR)
        return BlacklistCreate(**fields)

    async def test_create_and_check(self, service, actor):
        entry = await service.create(self._create(email="Banned@Example.com", licenses=["AP-1"]), actor)
        assert entry.email == "banned@example.com"
        assert entry.created_by == actor.admin_name

        assert (await service.check(licenses=["ap-1"])).id == entry.id
        assert await service.check(email="fine@example.com") is None

    async def test_create_duplicate(self, service, actor):
        first = await service.create(self._create(phone="+919876543210"), actor)
        with pytest.raises(AlreadyBlacklistedError) as exc:
            await service.create(self._create(phone="+91 98765 43210"), actor)
        assert exc.value.details["existing_entry_id"] == first.id

    async def test_expired_entry_does_not_block(self, service, actor):
        past = datetime.now(UTC) - timedelta(days=1)
        await service.create(self._create(email="temp@example.com", expires_at=past), actor)
        assert await service.check(email="temp@example.com") is None

    async def test_update_and_deactivate(self, service, actor):
        entry = await service.create(self._create(email="x@example.com"), actor)
        updated = await service.update(entry.id, BlacklistUpdate(description="Reviewed"), actor)
        assert updated.description == "Reviewed"

        removed = await service.remove(entry.id, actor)
        assert removed.is_active is False
        assert await service.check(email="x@example.com") is None

    async def test_permanent_remove(self, service, actor):
        entry = await service.create(self._create(email="y@example.com"), actor)
        entry_id = entry.id
        await service.remove(entry_id, actor, permanent=True)
        with pytest.raises(BlacklistEntryNotFoundError):
            await service.get(entry_id)

    async def test_stats(self, service, actor):
        await service.create(self._create(email="a@example.com"), actor)
        entry = await service.create(
            self._create(email="b@example.com", reason=BlacklistReason.LICENSE_CONFLICT), actor
        )
        await service.remove(entry.id, actor)

        stats = await service.stats()
        assert (stats.total, stats.active, stats.inactive) == (2, 1, 1)
        assert stats.by_reason == {"manual": 1, "license_conflict": 1}


# =============================================================================
# AuditService
# =============================================================================

class TestAuditService:

    @pytest.fixture
    def service(self, db_session: AsyncSession) -> AuditService:
        return AuditService(db_session)

    async def _seed(self, service, db_session, actor, ops_actor):
        await service.record(actor, AdminAction.DELETE_DOCTOR, "deleted")
        await service.record(actor, AdminAction.EXPORT_DATA, "exported")
        await service.record(ops_actor, AdminAction.SUSPEND_DOCTOR, "suspended")
        await db_session.commit()

    async def test_admin_sees_everything(self, service, db_session, actor, ops_actor):
        await self._seed(service, db_session, actor, ops_actor)
        items, total = await service.list(actor)
        assert total == 3
        assert {a.action for a in items} == {
            AdminAction.DELETE_DOCTOR, AdminAction.EXPORT_DATA, AdminAction.SUSPEND_DOCTOR
        }

    async def test_operational_staff_do_not_see_admin_only_actions(self, service, db_session, actor, ops_actor):
        await self._seed(service, db_session, actor, ops_actor)
        items, total = await service.list(ops_actor)
        assert total == 2
        assert AdminAction.EXPORT_DATA not in {a.action for a in items}

        stats = await service.stats(ops_actor, "1d")
        assert stats.total == 2
        assert "EXPORT_DATA" not in stats.by_action

    async def test_filter_by_admin(self, service, db_session, actor, ops_actor):
        await self._seed(service, db_session, actor, ops_actor)
        _, total = await service.list(actor, admin_id=ops_actor.admin_id)
        assert total == 1

    async def test_start_after_end(self, service, actor):
        now = datetime.now(UTC)
        with pytest.raises(ValidationError):
            await service.list(actor, start=now, end=now - timedelta(days=1))

    async def test_unknown_period(self, service, actor):
        with pytest.raises(ValidationError):
            await service.stats(actor, "2w")


# =============================================================================
# NotificationService
# =============================================================================

class TestNotificationService:

    @pytest.fixture
    def service(self, db_session: AsyncSession) -> NotificationService:
        return NotificationService(db_session)

    async def test_lifecycle(self, service, db_session):
        first = await service.notify(title="One", message="m", category=NotificationCategory.DOCTORS)
        await service.notify(title="Two", message="m", category=NotificationCategory.SECURITY)
        await db_session.commit()
        assert await service.unread_count() == 2

        await service.mark_read(first.id)
        assert await service.unread_count() == 1
        assert await service.mark_all_read() == 1

        _, total = await service.list(category=NotificationCategory.SECURITY)
        assert total == 1

        await service.delete(first.id)
        _, total = await service.list()
        assert total == 1

    async def test_missing(self, service):
        with pytest.raises(NotificationNotFoundError):
            await service.mark_read("missing")
