"""
User Model for RBAC (Role-Based Access Control).

Back-office accounts. The phone number is the bearer token subject; the
role decides which admin endpoints are reachable.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ..db.session import Base
from .enums import UserRole


class User(Base):
    """
    Admin user for authentication and authorization.

    Access Control:
        - ADMIN: All back-office endpoints, including deletions
        - OPERATIONAL: Review, suspension and blacklist read/write
        - USER: No back-office access

    Note:
        A user with is_active=False cannot access any endpoint.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    phone: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
        comment="Phone number with country code (e.g., +919988776655)"
    )
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True, index=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.USER.value,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_users_role_active", "role", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role='{self.role}', active={self.is_active})>"

    @property
    def display_name(self) -> str:
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.email or f"user-{self.id}"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value and self.is_active
