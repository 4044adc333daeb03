"""Pytest fixtures and configuration."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import TYPE_CHECKING, Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.careadmin.core.config import Settings, get_settings
from src.careadmin.core.security import create_access_token
from src.careadmin.db.session import Base, get_db
from src.careadmin.main import app
from src.careadmin.models import Candidate, Doctor, User
from src.careadmin.models.enums import CandidateStatus, DoctorStatus, UserRole
from src.careadmin.services import locks as locks_module
from src.careadmin.services.audit_service import ActorContext
from src.careadmin.services.locks import KeyedLockRegistry

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

# Test database URL (in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PHONE = "+919999999999"
OPERATIONAL_PHONE = "+918888888888"
PLAIN_USER_PHONE = "+917777777777"


def _bearer(phone: str, role: str) -> dict[str, str]:
    token = create_access_token(subject=phone, settings=get_settings(), role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer headers for the seeded admin account."""
    return _bearer(ADMIN_PHONE, UserRole.ADMIN.value)


@pytest.fixture
def ops_headers() -> dict[str, str]:
    """Bearer headers for the seeded operational account."""
    return _bearer(OPERATIONAL_PHONE, UserRole.OPERATIONAL.value)


@pytest.fixture
def user_headers() -> dict[str, str]:
    """Bearer headers for an account with no back-office role."""
    return _bearer(PLAIN_USER_PHONE, UserRole.USER.value)


@pytest.fixture
def settings() -> Settings:
    return Settings(SECRET_KEY="test-secret-key-that-is-at-least-32-characters")


@pytest.fixture
def actor() -> ActorContext:
    return ActorContext(admin_id="1", admin_name="Test Admin", admin_role=UserRole.ADMIN.value)


@pytest.fixture
def ops_actor() -> ActorContext:
    return ActorContext(admin_id="2", admin_name="Ops User", admin_role=UserRole.OPERATIONAL.value)


@pytest.fixture
def lock_registry() -> KeyedLockRegistry:
    return KeyedLockRegistry()


@pytest.fixture(autouse=True)
def _fresh_lock_registry() -> None:
    """Process-level locks must not leak between event loops."""
    locks_module._registry = None


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with overridden dependencies."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function", autouse=True)
async def setup_users(db_session: AsyncSession) -> None:
    """Seed one account per role for the bearer-header fixtures."""
    db_session.add_all(
        [
            User(phone=ADMIN_PHONE, email="admin@example.com", first_name="Test", last_name="Admin",
                 role=UserRole.ADMIN.value, is_active=True),
            User(phone=OPERATIONAL_PHONE, email="ops@example.com", first_name="Ops", last_name="User",
                 role=UserRole.OPERATIONAL.value, is_active=True),
            User(phone=PLAIN_USER_PHONE, email="user@example.com",
                 role=UserRole.USER.value, is_active=True),
        ]
    )
    await db_session.commit()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

_counter = {"n": 0}


def _next() -> int:
    _counter["n"] += 1
    return _counter["n"]


@pytest.fixture
def doctor_payload() -> Callable[..., dict[str, Any]]:
    """Build a valid DoctorCreate/CandidateCreate body with unique contact details."""

    def _build(**overrides: Any) -> dict[str, Any]:
        n = _next()
        payload: dict[str, Any] = {
            "name": f"Dr. Test {n}",
            "email": f"doctor{n}@example.com",
            "phone": f"+9190000{n:05d}",
            "specializations": ["Cardiology"],
            "licenses": [f"LIC-{n:05d}"],
            "medical_degrees": ["MBBS", "MD"],
            "languages": ["English"],
            "experience": "10 years",
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def make_doctor(
    db_session: AsyncSession, doctor_payload: Callable[..., dict[str, Any]]
) -> Callable[..., Awaitable[Doctor]]:
    """Insert a doctor row directly and commit it."""

    async def _make(**overrides: Any) -> Doctor:
        fields = doctor_payload()
        fields.update(status=DoctorStatus.APPROVED, verified=True)
        fields.update(overrides)
        doctor = Doctor(**fields)
        db_session.add(doctor)
        await db_session.commit()
        return doctor

    return _make


@pytest.fixture
def make_candidate(
    db_session: AsyncSession, doctor_payload: Callable[..., dict[str, Any]]
) -> Callable[..., Awaitable[Candidate]]:
    """Insert a candidate row directly and commit it."""

    async def _make(**overrides: Any) -> Candidate:
        fields = doctor_payload()
        fields.update(status=CandidateStatus.PENDING)
        fields.update(overrides)
        candidate = Candidate(**fields)
        db_session.add(candidate)
        await db_session.commit()
        return candidate

    return _make
