"""Shared doctor-related helper utilities.

Credential arrays (licences, degrees, affiliations, ...) are order-irrelevant
sets of free text. These helpers normalise them at the API boundary and are
reused by the candidate intake, registry and lifecycle code paths.
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

CREDENTIAL_FIELDS: tuple[str, ...] = (
    "specializations",
    "licenses",
    "medical_degrees",
    "residencies",
    "fellowships",
    "board_certifications",
    "hospital_affiliations",
    "memberships",
    "languages",
)

PROFILE_TEXT_FIELDS: tuple[str, ...] = (
    "about",
    "experience",
    "address",
    "education",
    "dea_registration",
    "malpractice_insurance",
    "consultation_fee",
)

_PHONE_RE = re.compile(r"^\+?[0-9]{7,15}$")


def normalize_credentials(value: Any) -> list[str]:
    """Trim, drop empties and de-duplicate a credential list.

    A bare string is treated as a one-element list. First occurrence wins, so
    the admin's ordering is kept for display.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    seen: set[str] = set()
    cleaned: list[str] = []
    for item in value:
        if item is None:
            continue
        text = str(item).strip()
        if text and text not in seen:
            seen.add(text)
            cleaned.append(text)
    return cleaned


def normalize_email(email: str | None) -> str | None:
    if email is None:
        return None
    return email.strip().lower() or None


def normalize_phone(phone: str | None) -> str | None:
    """Strip spaces, dashes and brackets; keep a leading '+'."""
    if phone is None:
        return None
    stripped = phone.strip()
    if not stripped:
        return None
    prefix = "+" if stripped.startswith("+") else ""
    digits = "".join(c for c in stripped if c.isdigit())
    return prefix + digits


def is_valid_phone(phone: str | None) -> bool:
    return bool(phone) and bool(_PHONE_RE.match(phone))


def license_overlap(left: Iterable[str], right: Iterable[str]) -> list[str]:
    """Licences present in both lists, compared case-insensitively."""
    right_keys = {item.strip().lower() for item in right}
    return [item for item in left if item.strip().lower() in right_keys]
