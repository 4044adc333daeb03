"""Admin activity and notification response schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import AdminAction, NotificationCategory, NotificationPriority, NotificationType


class AdminActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    admin_id: str
    admin_name: str
    admin_role: str
    action: AdminAction
    details: str
    ip_address: str | None = None
    user_agent: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="activity_metadata")
    created_at: datetime


class ActivityStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    period: str
    total: int
    by_action: dict[str, int]
    by_admin: dict[str, int]


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    message: str
    type: NotificationType
    category: NotificationCategory
    priority: NotificationPriority
    read: bool
    related_entity_id: str | None = None
    related_entity_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="notification_metadata")
    created_at: datetime


class UnreadCount(BaseModel):
    unread: int


class BulkUpdateResult(BaseModel):
    updated: int
