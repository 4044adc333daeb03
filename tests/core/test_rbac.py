"""Tests for Role-Based Access Control (RBAC) dependencies."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request

from src.careadmin.core.config import Settings
from src.careadmin.core.exceptions import ForbiddenError, UnauthorizedError
from src.careadmin.core.rbac import (
    get_current_user,
    require_admin,
    require_admin_or_operational,
)
from src.careadmin.models.enums import UserRole
from src.careadmin.models.user import User


@pytest.fixture
def mock_settings():
    return Settings(SECRET_KEY="test-secret-key-that-is-at-least-32-characters")


@pytest.fixture
def plain_user():
    return User(id=1, phone="+919999999999", role=UserRole.USER.value, is_active=True)


@pytest.fixture
def inactive_user():
    return User(id=2, phone="+918888888888", role=UserRole.ADMIN.value, is_active=False)


@pytest.fixture
def admin_user():
    return User(
        id=3,
        phone="+917777777777",
        first_name="Asha",
        last_name="Rao",
        role=UserRole.ADMIN.value,
        is_active=True,
    )


@pytest.fixture
def operational_user():
    return User(id=4, phone="+916666666666", email="ops@example.com", role=UserRole.OPERATIONAL.value, is_active=True)


@pytest.fixture
def valid_token_payload():
    return {"sub": "+917777777777", "exp": 9999999999}


def _request(header: str | None) -> MagicMock:
    request = MagicMock(spec=Request)
    request.headers.get.return_value = header
    return request


# --- get_current_user ---

async def test_get_current_user_success(mock_settings, admin_user, valid_token_payload):
    with patch("src.careadmin.core.rbac._decode_jwt", return_value=valid_token_payload):
        with patch("src.careadmin.core.rbac.UserRepository") as MockRepo:
            MockRepo.return_value.get_by_phone = AsyncMock(return_value=admin_user)

            user = await get_current_user(request=_request("Bearer valid_token"), settings=mock_settings, db=MagicMock())
            assert user.id == admin_user.id
            MockRepo.return_value.get_by_phone.assert_awaited_once_with("+917777777777")


async def test_get_current_user_missing_header(mock_settings):
    with pytest.raises(UnauthorizedError) as exc:
        await get_current_user(request=_request(None), settings=mock_settings, db=MagicMock())
    assert "Authorization header" in str(exc.value)


async def test_get_current_user_invalid_scheme(mock_settings):
    with pytest.raises(UnauthorizedError):
        await get_current_user(request=_request("Basic something"), settings=mock_settings, db=MagicMock())


async def test_get_current_user_no_token(mock_settings):
    with pytest.raises(UnauthorizedError):
        await get_current_user(request=_request("Bearer "), settings=mock_settings, db=MagicMock())


async def test_get_current_user_invalid_sub(mock_settings):
    with patch("src.careadmin.core.rbac._decode_jwt", return_value={"sub": None}):
        with pytest.raises(UnauthorizedError) as exc:
            await get_current_user(request=_request("Bearer valid_token"), settings=mock_settings, db=MagicMock())
        assert exc.value.error_code == "INVALID_TOKEN"


async def test_get_current_user_not_in_db(mock_settings, valid_token_payload):
    with patch("src.careadmin.core.rbac._decode_jwt", return_value=valid_token_payload):
        with patch("src.careadmin.core.rbac.UserRepository") as MockRepo:
            MockRepo.return_value.get_by_phone = AsyncMock(return_value=None)

            with pytest.raises(UnauthorizedError) as exc:
                await get_current_user(request=_request("Bearer valid_token"), settings=mock_settings, db=MagicMock())
            assert exc.value.error_code == "USER_NOT_FOUND"


async def test_get_current_user_inactive(mock_settings, inactive_user, valid_token_payload):
    valid_token_payload["sub"] = inactive_user.phone
    with patch("src.careadmin.core.rbac._decode_jwt", return_value=valid_token_payload):
        with patch("src.careadmin.core.rbac.UserRepository") as MockRepo:
            MockRepo.return_value.get_by_phone = AsyncMock(return_value=inactive_user)

            with pytest.raises(ForbiddenError) as exc:
                await get_current_user(request=_request("Bearer valid_token"), settings=mock_settings, db=MagicMock())
            assert "deactivated" in str(exc.value)


# --- Role requirements ---

async def test_require_admin_success(admin_user):
    user = await require_admin(current_user=admin_user)
    assert user.id == admin_user.id


async def test_require_admin_failure(plain_user, operational_user):
    with pytest.raises(ForbiddenError):
        await require_admin(current_user=plain_user)
    with pytest.raises(ForbiddenError) as exc:
        await require_admin(current_user=operational_user)
    assert exc.value.error_code == "ADMIN_REQUIRED"


async def test_require_admin_or_operational_success(admin_user, operational_user):
    assert (await require_admin_or_operational(current_user=admin_user)).id == admin_user.id
    assert (await require_admin_or_operational(current_user=operational_user)).id == operational_user.id


async def test_require_admin_or_operational_failure(plain_user):
    with pytest.raises(ForbiddenError) as exc:
        await require_admin_or_operational(current_user=plain_user)
    assert exc.value.error_code == "INSUFFICIENT_PERMISSIONS"


# --- User helpers used for audit attribution ---

def test_display_name_prefers_full_name(admin_user, operational_user, plain_user):
    assert admin_user.display_name == "Asha Rao"
    assert operational_user.display_name == "ops@example.com"
    assert plain_user.display_name == "user-1"


def test_is_admin_requires_active_admin(admin_user, inactive_user, operational_user):
    assert admin_user.is_admin
    assert not inactive_user.is_admin
    assert not operational_user.is_admin
