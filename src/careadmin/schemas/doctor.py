"""
Doctor and candidate schemas.

Credential arrays are normalised on the way in: trimmed, empties dropped,
duplicates removed, and a bare string accepted as a one-element list.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..core.doctor_utils import (
    CREDENTIAL_FIELDS,
    is_valid_phone,
    normalize_credentials,
    normalize_phone,
)
from ..models.enums import CandidateStatus, DoctorStatus, Sentiment


def _validate_phone(v: str | None) -> str | None:
    if v is None:
        return None
    normalized = normalize_phone(v)
    if not is_valid_phone(normalized):
        raise ValueError("Phone number must contain 7 to 15 digits, optionally prefixed with '+'")
    return normalized


def _strip_name(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if not v:
        raise ValueError("Name must not be blank")
    return v


# =============================================================================
# SHARED PROFILE
# =============================================================================

class DoctorProfile(BaseModel):
    """Profile and credential fields shared by doctors and candidates."""

    specializations: list[str] = Field(default_factory=list, examples=[["Cardiology"]])
    licenses: list[str] = Field(default_factory=list, examples=[["MH-2019-44821"]])
    medical_degrees: list[str] = Field(default_factory=list, examples=[["MBBS", "MD"]])
    residencies: list[str] = Field(default_factory=list)
    fellowships: list[str] = Field(default_factory=list)
    board_certifications: list[str] = Field(default_factory=list)
    hospital_affiliations: list[str] = Field(default_factory=list)
    memberships: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)

    about: str | None = None
    experience: str | None = Field(None, max_length=255)
    address: str | None = None
    education: str | None = None
    dea_registration: str | None = Field(None, max_length=100)
    malpractice_insurance: str | None = Field(None, max_length=255)
    consultation_fee: float | None = Field(None, ge=0)

    @field_validator(*CREDENTIAL_FIELDS, mode="before")
    @classmethod
    def clean_credentials(cls, v: Any) -> list[str]:
        return normalize_credentials(v)


class ContactFields(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, examples=["Dr. Asha Rao"])
    email: EmailStr = Field(..., examples=["asha.rao@example.com"])
    phone: str = Field(..., examples=["+919988776655"])

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return _validate_phone(v)


# =============================================================================
# DOCTOR REQUESTS
# =============================================================================

class DoctorCreate(ContactFields, DoctorProfile):
    """Direct registry entry by an admin (skips candidate review)."""

    department: str | None = Field(None, max_length=150)
    no_of_patients: int = Field(default=0, ge=0)
    sentiment: Sentiment | None = None
    sentiment_score: float | None = Field(None, ge=0.0, le=1.0)


class DoctorUpdate(DoctorProfile):
    """Partial update. Only fields present in the request body are applied.

    Status is not editable here; use the lifecycle endpoints.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = None
    department: str | None = Field(None, max_length=150)
    no_of_patients: int | None = Field(None, ge=0)
    sentiment: Sentiment | None = None
    sentiment_score: float | None = Field(None, ge=0.0, le=1.0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return _validate_phone(v)


class SentimentUpdate(BaseModel):
    """Set either the label or the score; the other is derived."""

    sentiment: Sentiment | None = None
    sentiment_score: float | None = Field(None, ge=0.0, le=1.0)


# =============================================================================
# DOCTOR RESPONSES
# =============================================================================

class DoctorResponse(DoctorProfile):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str
    department: str | None = None
    no_of_patients: int
    status: DoctorStatus
    verified: bool
    verification_date: datetime | None = None
    sentiment: Sentiment
    sentiment_score: float
    created_at: datetime
    updated_at: datetime


# =============================================================================
# CANDIDATES
# =============================================================================

class CandidateCreate(ContactFields, DoctorProfile):
    """A new application for review."""


class CandidateResponse(DoctorProfile):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str
    status: CandidateStatus
    rejection_reason: str | None = None
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    created_at: datetime
    updated_at: datetime


class CandidateRejectRequest(BaseModel):
    reason: str | None = Field(None, max_length=2000, examples=["Licence could not be verified"])


class CandidateRejectionResponse(BaseModel):
    candidate: CandidateResponse
    rejection_count: int
    blacklisted: bool
    blacklist_entry_id: str | None = None
