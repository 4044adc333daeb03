"""Blacklist request and response schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from ..core.doctor_utils import normalize_credentials, normalize_phone
from ..models.enums import BlacklistReason, EntityType


class _CredentialFields(BaseModel):
    email: EmailStr | None = None
    phone: str | None = None
    licenses: list[str] = Field(default_factory=list)

    @field_validator("licenses", mode="before")
    @classmethod
    def clean_licenses(cls, v: Any) -> list[str]:
        return normalize_credentials(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v

    @field_validator("phone")
    @classmethod
    def clean_phone(cls, v: str | None) -> str | None:
        return normalize_phone(v)


class BlacklistCreate(_CredentialFields):
    """Manual blacklist entry."""

    reason: BlacklistReason = BlacklistReason.MANUAL
    original_entity_type: EntityType
    original_entity_id: str | None = Field(None, max_length=36)
    name: str | None = Field(None, max_length=200)
    description: str | None = Field(None, max_length=5000)
    expires_at: datetime | None = None

    @model_validator(mode="after")
    def require_identifier(self) -> BlacklistCreate:
        if not (self.email or self.phone or self.licenses):
            raise ValueError("At least one of email, phone or licenses is required")
        return self


class BlacklistUpdate(BaseModel):
    """Editable fields. The snapshot credentials are immutable."""

    model_config = ConfigDict(extra="forbid")

    description: str | None = Field(None, max_length=5000)
    is_active: bool | None = None
    expires_at: datetime | None = None
    reason: BlacklistReason | None = None


class BlacklistCheckRequest(_CredentialFields):
    """Credentials to test against active entries."""


class BlacklistResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    reason: BlacklistReason
    email: str | None = None
    phone: str | None = None
    licenses: list[str]
    name: str | None = None
    original_entity_type: EntityType | None = None
    original_entity_id: str | None = None
    description: str | None = None
    rejection_count: int
    is_active: bool
    created_by: str | None = None
    blacklisted_at: datetime
    expires_at: datetime | None = None
    updated_at: datetime


class BlacklistCheckResponse(BaseModel):
    is_blacklisted: bool
    entry: BlacklistResponse | None = None


class BlacklistStats(BaseModel):
    total: int
    active: int
    inactive: int
    by_reason: dict[str, int]
