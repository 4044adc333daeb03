"""Suspension request and response schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import DoctorStatus, SuspensionSeverity, SuspensionType
from .doctor import DoctorResponse


class SuspendRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=255, examples=["Patient complaint"])
    detail: str | None = Field(None, max_length=5000)
    suspension_type: SuspensionType = SuspensionType.TEMPORARY
    severity: SuspensionSeverity = SuspensionSeverity.MAJOR
    duration_days: int | None = Field(
        None,
        ge=-1,
        description="Days until the suspension lapses; -1 or omitted for permanent means indefinite",
    )


class DoctorStatusChange(BaseModel):
    """Body for PUT /doctors/{id}/status."""

    status: Literal["suspended", "approved"]
    suspension: SuspendRequest | None = None


class SuspensionRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    doctor_id: str
    reason: str
    detail: str | None = None
    suspension_type: SuspensionType
    severity: SuspensionSeverity
    duration_days: int | None = None
    starts_at: datetime
    ends_at: datetime | None = None
    suspended_by: str | None = None
    revoked: bool
    revoked_at: datetime | None = None
    revoked_by: str | None = None
    created_at: datetime


class SuspensionResult(BaseModel):
    """Either the suspended doctor or, on the deletion path, ``deleted=True``."""

    deleted: bool
    suspension_count: int
    doctor: DoctorResponse | None = None
    suspension: SuspensionRecordResponse | None = None
    blacklist_entry_id: str | None = None


class SuspensionSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    doctor_id: str
    status: DoctorStatus
    suspension_count: int
    active_suspensions: int
    warning_threshold: int
    deletion_threshold: int
    next_suspension_will_delete: bool
    remaining_before_deletion: int


class DeletionResult(BaseModel):
    doctor_id: str
    deleted: bool = True
    blacklist_entry_id: str
