"""Doctor registry and candidate application models.

- doctors: approved (or suspended) practitioners in the registry
- pending_doctors: applications awaiting review, retained when rejected

A candidate is promoted by copying its profile into a new ``doctors`` row;
the two tables share the profile columns through ``DoctorProfileMixin``.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ..db.session import Base
from .base import enum_column, new_id, utc_now
from .enums import CandidateStatus, DoctorStatus, Sentiment


class DoctorProfileMixin:
    """Profile and credential columns common to doctors and candidates."""

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Credential sets (JSON arrays of free text)
    specializations: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    licenses: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    medical_degrees: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    residencies: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    fellowships: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    board_certifications: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    hospital_affiliations: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    memberships: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    languages: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    # Free text
    about: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    education: Mapped[str | None] = mapped_column(Text, nullable=True)
    dea_registration: Mapped[str | None] = mapped_column(String(100), nullable=True)
    malpractice_insurance: Mapped[str | None] = mapped_column(String(255), nullable=True)
    consultation_fee: Mapped[float | None] = mapped_column(Float, nullable=True)


class Doctor(DoctorProfileMixin, Base):
    """doctors table - the registry of reviewed practitioners.

    ``version`` is an optimistic-lock counter: a flush that finds the row
    changed underneath it raises ``StaleDataError``.
    """

    __tablename__ = "doctors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False, unique=True, index=True)

    department: Mapped[str | None] = mapped_column(String(150), nullable=True)
    no_of_patients: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    status: Mapped[DoctorStatus] = mapped_column(
        enum_column(DoctorStatus, "doctor_status_enum"),
        default=DoctorStatus.APPROVED,
        nullable=False,
        index=True,
    )
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verification_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    sentiment: Mapped[Sentiment] = mapped_column(
        enum_column(Sentiment, "sentiment_enum"),
        default=Sentiment.POSITIVE,
        nullable=False,
    )
    sentiment_score: Mapped[float] = mapped_column(Float, default=0.8, nullable=False)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index("ix_doctors_status_sentiment", "status", "sentiment"),
    )

    def __repr__(self) -> str:
        return f"<Doctor(id='{self.id}', status='{self.status.value}')>"


class Candidate(DoctorProfileMixin, Base):
    """pending_doctors table - applications awaiting admin review.

    Email and phone are not unique here: a rejected applicant may apply
    again, and the repeated rejections drive the blacklist rule.
    """

    __tablename__ = "pending_doctors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    status: Mapped[CandidateStatus] = mapped_column(
        enum_column(CandidateStatus, "candidate_status_enum"),
        default=CandidateStatus.PENDING,
        nullable=False,
        index=True,
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Candidate(id='{self.id}', status='{self.status.value}')>"
