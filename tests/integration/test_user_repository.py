"""Integration tests for UserRepository.

Runs against an in-memory SQLite database via the ``db_session`` fixture
defined in ``tests/conftest.py``.  The three role accounts seeded by
``setup_users`` are already present.
"""
from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.careadmin.models.enums import UserRole
from src.careadmin.repositories.user_repository import UserRepository


class TestCreateAndGet:
    async def test_create_returns_user_with_id(self, db_session: AsyncSession):
        repo = UserRepository(db_session)
        user = await repo.create("+919800000001", email="New.Ops@Example.com", role=UserRole.OPERATIONAL.value)
        assert user.id is not None
        assert user.email == "new.ops@example.com"
        assert user.role == "operational"
        assert user.is_active is True

    async def test_get_by_id(self, db_session: AsyncSession):
        repo = UserRepository(db_session)
        user = await repo.create("+919800000002")
        found = await repo.get_by_id(user.id)
        assert found is not None and found.phone == "+919800000002"

    async def test_seeded_admin_is_present(self, db_session: AsyncSession):
        admin = await UserRepository(db_session).get_by_phone("+919999999999")
        assert admin is not None
        assert admin.is_admin
        assert admin.display_name == "Test Admin"


class TestPhoneNormalisation:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("9800000003", "+919800000003"),
            ("919800000003", "+919800000003"),
            ("09800000003", "+919800000003"),
            ("+449800000003", "+449800000003"),
        ],
    )
    def test_normalize(self, db_session: AsyncSession, raw: str, expected: str):
        assert UserRepository(db_session)._normalize_phone(raw) == expected

    async def test_lookup_without_prefix(self, db_session: AsyncSession):
        repo = UserRepository(db_session)
        await repo.create("9800000004")
        found = await repo.get_by_phone("09800000004")
        assert found is not None and found.phone == "+919800000004"

    async def test_missing_user(self, db_session: AsyncSession):
        assert await UserRepository(db_session).get_by_phone("+910000000000") is None
