"""User Repository - Data access layer for back-office accounts."""
from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.enums import UserRole
from ..models.user import User

log = structlog.get_logger(__name__)


class UserRepository:
    """Repository for User lookups and account creation."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_phone(self, phone: str) -> User | None:
        """Get user by phone number (normalized with +91 prefix)."""
        normalized = self._normalize_phone(phone)
        result = await self.session.execute(select(User).where(User.phone == normalized))
        return result.scalar_one_or_none()

    async def create(
        self,
        phone: str,
        email: str | None = None,
        role: str = UserRole.USER.value,
        first_name: str | None = None,
        last_name: str | None = None,
        is_active: bool = True,
    ) -> User:
        """Create and commit a new user."""
        user = User(
            phone=self._normalize_phone(phone),
            email=email.lower() if email else None,
            role=role,
            first_name=first_name,
            last_name=last_name,
            is_active=is_active,
        )
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)

        log.info("user_created", user_id=user.id, role=role)
        return user

    def _normalize_phone(self, phone: str) -> str:
        """Normalize an Indian mobile number to E.164 (+91XXXXXXXXXX).

        Numbers already starting with '+' are returned unchanged so that
        non-Indian numbers pass through and match their stored value.
        """
        stripped = phone.strip()
        if not stripped or stripped.startswith("+"):
            return stripped

        digits_only = "".join(c for c in stripped if c.isdigit())

        if digits_only.startswith("91") and len(digits_only) == 12:
            return "+" + digits_only
        if digits_only.startswith("0") and len(digits_only) == 11:
            return "+91" + digits_only[1:]
        if len(digits_only) == 10:
            return "+91" + digits_only
        return stripped
