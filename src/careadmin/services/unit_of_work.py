"""Transaction boundary used by every mutating service operation."""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from ..core.exceptions import ConcurrentModificationError

log = structlog.get_logger(__name__)


@asynccontextmanager
async def atomic(
    session: AsyncSession,
    *,
    resource_type: str = "resource",
    resource_id: str = "",
) -> AsyncIterator[AsyncSession]:
    """Commit once on success; roll back everything on any error.

    A version-counter mismatch on flush or commit is reported as
    ``ConcurrentModificationError``.
    """
    try:
        yield session
        await session.commit()
    except StaleDataError as exc:
        await session.rollback()
        log.warning("concurrent_modification", resource_type=resource_type, resource_id=resource_id)
        raise ConcurrentModificationError(resource_type, resource_id) from exc
    except Exception:
        await session.rollback()
        raise
