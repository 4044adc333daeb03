"""blacklist table - contact and licence fingerprints of removed practitioners.

Entries snapshot the identifying fields at the time of removal; they carry
no foreign key because the source row is usually gone.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db.session import Base
from .base import enum_column, new_id, utc_now
from .enums import BlacklistReason, EntityType


class BlacklistEntry(Base):
    __tablename__ = "blacklist"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    reason: Mapped[BlacklistReason] = mapped_column(
        enum_column(BlacklistReason, "blacklist_reason_enum"),
        nullable=False,
        index=True,
    )

    # Snapshot
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    licenses: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    original_entity_type: Mapped[EntityType | None] = mapped_column(
        enum_column(EntityType, "entity_type_enum"),
        nullable=True,
    )
    original_entity_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    blacklisted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    __table_args__ = (
        Index("ix_blacklist_reason_active", "reason", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<BlacklistEntry(id='{self.id}', reason='{self.reason.value}', active={self.is_active})>"
