"""Doctor registry service: direct creation, lookup, search and edits.

Status changes are not made here; they belong to ``LifecycleService``.
Edits that touch ``sentiment`` or ``sentiment_score`` go through
``core.sentiment.resolve_sentiment`` so the pair stays consistent.
"""
from __future__ import annotations

from collections.abc import Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import DoctorAlreadyExistsError, DoctorNotFoundError, ValidationError
from ..core.sentiment import resolve_sentiment
from ..models.base import utc_now
from ..models.doctor import Doctor
from ..models.enums import AdminAction, DoctorStatus, Sentiment
from ..repositories.doctor_repository import DoctorRepository
from ..schemas.doctor import DoctorCreate, DoctorUpdate, SentimentUpdate
from .audit_service import ActorContext, AuditService
from .unit_of_work import atomic

log = structlog.get_logger(__name__)


class DoctorService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = DoctorRepository(session)
        self.audit = AuditService(session)

    async def get(self, doctor_id: str) -> Doctor:
        doctor = await self.repository.get_by_id(doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(doctor_id)
        return doctor

    async def list(
        self,
        *,
        skip: int = 0,
        limit: int = 50,
        status: DoctorStatus | None = None,
        specialization: str | None = None,
        sentiment: Sentiment | None = None,
    ) -> tuple[Sequence[Doctor], int]:
        items = await self.repository.get_all(
            skip, limit, status=status, specialization=specialization, sentiment=sentiment
        )
        total = await self.repository.count(status=status, specialization=specialization, sentiment=sentiment)
        return items, total

    async def search(self, term: str, *, skip: int = 0, limit: int = 50) -> tuple[Sequence[Doctor], int]:
        if not term.strip():
            raise ValidationError(message="Search term must not be empty")
        items = await self.repository.search(term, skip, limit)
        total = await self.repository.count_search(term)
        return items, total

    async def create(self, data: DoctorCreate, actor: ActorContext) -> Doctor:
        """Add an approved doctor directly to the registry."""
        async with atomic(self.session):
            if await self.repository.find_by_email_or_phone(data.email, data.phone):
                raise DoctorAlreadyExistsError(email=data.email, phone=data.phone)

            fields = data.model_dump(exclude={"sentiment", "sentiment_score"})
            resolved = resolve_sentiment(data.sentiment, data.sentiment_score)
            if resolved:
                fields["sentiment"], fields["sentiment_score"] = resolved
            if not fields.get("department") and data.specializations:
                fields["department"] = data.specializations[0]

            doctor = Doctor(
                **fields,
                status=DoctorStatus.APPROVED,
                verified=True,
                verification_date=utc_now(),
            )
            await self.repository.add(doctor)
            await self.audit.record(
                actor,
                AdminAction.CREATE_DOCTOR,
                f"Created doctor {doctor.name}",
                {"doctor_id": doctor.id},
            )

        log.info("doctor_created", doctor_id=doctor.id)
        return doctor

    async def update(self, doctor_id: str, data: DoctorUpdate, actor: ActorContext) -> Doctor:
        changes = data.model_dump(exclude_unset=True)
        async with atomic(self.session, resource_type="doctor", resource_id=doctor_id):
            doctor = await self.get(doctor_id)

            email = changes.get("email") or doctor.email
            phone = changes.get("phone") or doctor.phone
            if ("email" in changes or "phone" in changes) and await self.repository.find_by_email_or_phone(
                email, phone, exclude_id=doctor_id
            ):
                raise DoctorAlreadyExistsError(email=email, phone=phone)

            sentiment = changes.pop("sentiment", None)
            score = changes.pop("sentiment_score", None)
            for name, value in changes.items():
                if value is None and name in ("name", "email", "phone", "no_of_patients"):
                    raise ValidationError(
                        message=f"{name} cannot be cleared",
                        errors=[{"field": name, "message": "must not be null"}],
                    )
                setattr(doctor, name, value)

            resolved = resolve_sentiment(sentiment, score)
            if resolved:
                doctor.sentiment, doctor.sentiment_score = resolved

            await self.repository.save(doctor)
            await self.audit.record(
                actor,
                AdminAction.UPDATE_DOCTOR,
                f"Updated doctor {doctor.name}",
                {"doctor_id": doctor_id, "fields": sorted(data.model_fields_set)},
            )

        log.info("doctor_updated", doctor_id=doctor_id, fields=sorted(data.model_fields_set))
        return doctor

    async def update_sentiment(self, doctor_id: str, data: SentimentUpdate, actor: ActorContext) -> Doctor:
        resolved = resolve_sentiment(data.sentiment, data.sentiment_score)
        if resolved is None:
            raise ValidationError(
                message="Provide sentiment or sentiment_score",
                errors=[{"field": "sentiment", "message": "one of sentiment, sentiment_score is required"}],
            )

        async with atomic(self.session, resource_type="doctor", resource_id=doctor_id):
            doctor = await self.get(doctor_id)
            doctor.sentiment, doctor.sentiment_score = resolved
            await self.repository.save(doctor)
            await self.audit.record(
                actor,
                AdminAction.UPDATE_DOCTOR,
                f"Updated sentiment for {doctor.name}",
                {
                    "doctor_id": doctor_id,
                    "sentiment": doctor.sentiment.value,
                    "sentiment_score": doctor.sentiment_score,
                },
            )
        return doctor
