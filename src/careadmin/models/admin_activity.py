"""admin_activities table - append-only audit trail of back-office actions."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db.session import Base
from .base import enum_column, new_id, utc_now
from .enums import AdminAction


class AdminActivity(Base):
    __tablename__ = "admin_activities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    admin_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    admin_name: Mapped[str] = mapped_column(String(255), nullable=False)
    admin_role: Mapped[str] = mapped_column(String(20), nullable=False)

    action: Mapped[AdminAction] = mapped_column(
        enum_column(AdminAction, "admin_action_enum"),
        nullable=False,
        index=True,
    )
    details: Mapped[str] = mapped_column(Text, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # "metadata" is reserved on declarative classes.
    activity_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, default=dict, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )

    __table_args__ = (
        Index("ix_admin_activities_admin_created", "admin_id", "created_at"),
    )
