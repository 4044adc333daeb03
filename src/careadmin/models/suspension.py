"""suspensions table - one row per suspension event.

Rows are never deleted on unsuspend; they are marked ``revoked`` so the
strike history survives. They are removed only together with the doctor.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db.session import Base
from .base import enum_column, new_id, utc_now
from .enums import SuspensionSeverity, SuspensionType


class SuspensionRecord(Base):
    __tablename__ = "suspensions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    doctor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("doctors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    detail: Mapped[str | None] = mapped_column(Text, nullable=True)
    suspension_type: Mapped[SuspensionType] = mapped_column(
        enum_column(SuspensionType, "suspension_type_enum"),
        default=SuspensionType.TEMPORARY,
        nullable=False,
    )
    severity: Mapped[SuspensionSeverity] = mapped_column(
        enum_column(SuspensionSeverity, "suspension_severity_enum"),
        default=SuspensionSeverity.MAJOR,
        nullable=False,
    )

    # Null duration means indefinite.
    duration_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    suspended_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    revoked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    revoked_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_suspensions_doctor_revoked", "doctor_id", "revoked"),
    )

    def __repr__(self) -> str:
        return f"<SuspensionRecord(id='{self.id}', doctor_id='{self.doctor_id}', revoked={self.revoked})>"
