"""notifications table - dashboard alerts raised by lifecycle events."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db.session import Base
from .base import enum_column, new_id, utc_now
from .enums import NotificationCategory, NotificationPriority, NotificationType


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    type: Mapped[NotificationType] = mapped_column(
        enum_column(NotificationType, "notification_type_enum"),
        default=NotificationType.INFO,
        nullable=False,
    )
    category: Mapped[NotificationCategory] = mapped_column(
        enum_column(NotificationCategory, "notification_category_enum"),
        default=NotificationCategory.SYSTEM,
        nullable=False,
        index=True,
    )
    priority: Mapped[NotificationPriority] = mapped_column(
        enum_column(NotificationPriority, "notification_priority_enum"),
        default=NotificationPriority.MEDIUM,
        nullable=False,
    )
    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    related_entity_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    related_entity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notification_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, default=dict, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
