"""RBAC (Role-Based Access Control) FastAPI dependencies.

Endpoints depend on the ``Actor`` and ``AdminActor`` aliases in ``api.deps``,
which wrap these checks.
"""
from __future__ import annotations

import hashlib
from typing import Annotated

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_db
from ..models.enums import UserRole
from ..models.user import User
from ..repositories.user_repository import UserRepository
from .config import Settings, get_settings
from .exceptions import ForbiddenError, UnauthorizedError
from .security import _decode_jwt

logger = structlog.get_logger(__name__)


async def get_current_user(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode the bearer token and return the active User record.

    Raises:
        UnauthorizedError: Missing/invalid/expired token, or user not found.
        ForbiddenError: User account is inactive.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        raise UnauthorizedError(
            message="Missing or invalid Authorization header",
            error_code="UNAUTHORIZED",
        )

    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedError(message="Missing access token", error_code="UNAUTHORIZED")

    payload = _decode_jwt(token, settings=settings)

    phone = payload.get("sub")
    if not isinstance(phone, str) or not phone:
        raise UnauthorizedError(message="Invalid token subject", error_code="INVALID_TOKEN")

    user = await UserRepository(db).get_by_phone(phone)

    if not user:
        # Never log the phone number itself.
        _ph = hashlib.sha256(phone.encode()).hexdigest()[:12]
        logger.warning("user_not_found", phone_hash=_ph)
        raise UnauthorizedError(
            message="User not found. Please contact administrator.",
            error_code="USER_NOT_FOUND",
        )

    if not user.is_active:
        logger.warning("inactive_user_access", user_id=user.id)
        raise ForbiddenError(
            message="Your account has been deactivated. Please contact administrator.",
            error_code="USER_INACTIVE",
        )

    return user


async def require_admin(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Require Admin role. Raises ForbiddenError otherwise."""
    if current_user.role != UserRole.ADMIN.value:
        logger.warning("non_admin_access", user_id=current_user.id, role=current_user.role)
        raise ForbiddenError(message="Admin access required", error_code="ADMIN_REQUIRED")
    return current_user


async def require_admin_or_operational(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Require Admin or Operational role. Raises ForbiddenError otherwise."""
    allowed_roles = (UserRole.ADMIN.value, UserRole.OPERATIONAL.value)
    if current_user.role not in allowed_roles:
        logger.warning("insufficient_role_access", user_id=current_user.id, role=current_user.role)
        raise ForbiddenError(
            message="Admin or operational access required",
            error_code="INSUFFICIENT_PERMISSIONS",
        )
    return current_user


# ---------------------------------------------------------------------------
# Type aliases for endpoint signatures
# ---------------------------------------------------------------------------
AdminUser = Annotated[User, Depends(require_admin)]
AdminOrOperationalUser = Annotated[User, Depends(require_admin_or_operational)]
