"""Security helpers for JWT-based authentication.

Admin bearer tokens are HS256 JWTs signed with ``SECRET_KEY``. The subject
claim is the admin's phone number, which ``rbac.get_current_user`` resolves
to a ``User`` row.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from datetime import UTC, datetime, timedelta
from typing import Any

from .config import Settings
from .exceptions import UnauthorizedError


def _base64url_encode(data: bytes) -> str:
    """Encode bytes using base64 URL-safe encoding without padding."""

    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

def _base64url_decode(data: str) -> bytes:
    """Decode a base64url-encoded string, handling missing padding."""

    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)

def _encode_jwt(payload: dict[str, Any], *, secret: str, algorithm: str = "HS256") -> str:
    """Minimal HS256 JWT encoder."""

    if algorithm != "HS256":
        raise ValueError("Only HS256 algorithm is supported in this implementation")

    header = {"alg": algorithm, "typ": "JWT"}

    header_json = json.dumps(header, separators=(",", ":"), sort_keys=True).encode("utf-8")
    payload_json = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")

    signing_input = f"{_base64url_encode(header_json)}.{_base64url_encode(payload_json)}"
    signature = hmac.new(secret.encode("utf-8"), signing_input.encode("ascii"), hashlib.sha256).digest()

    return f"{signing_input}.{_base64url_encode(signature)}"

def _decode_jwt(token: str, *, settings: Settings) -> dict[str, Any]:
    """Decode and validate an HS256 JWT.

    - Verifies signature with SECRET_KEY
    - Checks the exp claim against current UTC time
    """

    try:
        header_b64, payload_b64, signature_b64 = token.split(".")
    except ValueError as exc:
        raise UnauthorizedError(
            message="Invalid token format",
            error_code="INVALID_TOKEN",
        ) from exc

    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    expected_sig = hmac.new(
        settings.SECRET_KEY.encode("utf-8"),
        signing_input,
        hashlib.sha256,
    ).digest()

    if not hmac.compare_digest(signature_b64, _base64url_encode(expected_sig)):
        raise UnauthorizedError(
            message="Invalid token signature",
            error_code="INVALID_TOKEN",
        )

    try:
        payload = json.loads(_base64url_decode(payload_b64))
    except (ValueError, UnicodeDecodeError) as exc:
        raise UnauthorizedError(
            message="Invalid token payload",
            error_code="INVALID_TOKEN",
        ) from exc

    exp = payload.get("exp")
    if not isinstance(exp, int):
        raise UnauthorizedError(
            message="Invalid token expiration",
            error_code="INVALID_TOKEN",
        )

    if int(datetime.now(UTC).timestamp()) >= exp:
        raise UnauthorizedError(
            message="Token has expired",
            error_code="TOKEN_EXPIRED",
        )

    return payload

def create_access_token(
    *,
    subject: str,
    settings: Settings,
    role: str,
    expires_minutes: int | None = None,
) -> str:
    """Create a signed access token for an admin user.

    Args:
        subject: Admin phone number (matches ``User.phone``)
        settings: Application settings providing the key and default lifetime
        role: Role claim, informational only (RBAC re-reads the users table)
        expires_minutes: Override for ``ACCESS_TOKEN_EXPIRE_MINUTES``
    """

    now = datetime.now(UTC)
    lifetime = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "sub": subject,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=lifetime)).timestamp()),
    }
    return _encode_jwt(payload, secret=settings.SECRET_KEY, algorithm=settings.ALGORITHM)
