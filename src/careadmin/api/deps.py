"""Shared FastAPI dependencies for the v1 endpoints.

Services are built per request around the request's session. The acting
admin is resolved once per request into an ``ActorContext`` and passed
into every mutating service call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings, get_settings
from ..core.rbac import AdminOrOperationalUser, AdminUser
from ..db.session import get_db
from ..models.user import User
from ..services.audit_service import ActorContext, AuditService
from ..services.blacklist_service import BlacklistService
from ..services.candidate_service import CandidateService
from ..services.doctor_service import DoctorService
from ..services.lifecycle_service import LifecycleService
from ..services.notification_service import NotificationService


def _actor_from(request: Request, user: User) -> ActorContext:
    return ActorContext(
        admin_id=str(user.id),
        admin_name=user.display_name,
        admin_role=user.role,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


async def get_actor(request: Request, user: AdminOrOperationalUser) -> ActorContext:
    return _actor_from(request, user)


async def get_admin_actor(request: Request, user: AdminUser) -> ActorContext:
    return _actor_from(request, user)


Actor = Annotated[ActorContext, Depends(get_actor)]
AdminActor = Annotated[ActorContext, Depends(get_admin_actor)]


@dataclass
class Page:
    page: int
    page_size: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


def get_page(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
) -> Page:
    return Page(page=page, page_size=page_size)


PageParams = Annotated[Page, Depends(get_page)]


async def get_lifecycle_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> LifecycleService:
    return LifecycleService(db, settings=settings)


async def get_doctor_service(db: AsyncSession = Depends(get_db)) -> DoctorService:
    return DoctorService(db)


async def get_candidate_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CandidateService:
    return CandidateService(db, settings=settings)


async def get_blacklist_service(db: AsyncSession = Depends(get_db)) -> BlacklistService:
    return BlacklistService(db)


async def get_audit_service(db: AsyncSession = Depends(get_db)) -> AuditService:
    return AuditService(db)


async def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


LifecycleServiceDep = Annotated[LifecycleService, Depends(get_lifecycle_service)]
DoctorServiceDep = Annotated[DoctorService, Depends(get_doctor_service)]
CandidateServiceDep = Annotated[CandidateService, Depends(get_candidate_service)]
BlacklistServiceDep = Annotated[BlacklistService, Depends(get_blacklist_service)]
AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
