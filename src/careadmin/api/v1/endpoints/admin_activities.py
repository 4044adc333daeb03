"""Admin activity log endpoints (read-only)."""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Query

from ....core.responses import GenericResponse, PaginatedResponse, PaginationMeta
from ....models.enums import AdminAction
from ....schemas.activity import ActivityStatsResponse, AdminActivityResponse
from ...deps import Actor, AuditServiceDep, PageParams

router = APIRouter(prefix="/admin-activities", tags=["Admin - Activity Log"])


@router.get("", response_model=PaginatedResponse[AdminActivityResponse], summary="List admin activity")
async def list_activities(
    actor: Actor,
    service: AuditServiceDep,
    page: PageParams,
    admin_id: str | None = Query(None),
    action: AdminAction | None = Query(None),
    start: datetime | None = Query(None, description="Inclusive lower bound (ISO 8601)"),
    end: datetime | None = Query(None, description="Inclusive upper bound (ISO 8601)"),
) -> PaginatedResponse[AdminActivityResponse]:
    activities, total = await service.list(
        actor,
        skip=page.skip,
        limit=page.page_size,
        admin_id=admin_id,
        action=action,
        start=start,
        end=end,
    )
    return PaginatedResponse(
        message="Admin activities retrieved",
        data=[AdminActivityResponse.model_validate(a) for a in activities],
        pagination=PaginationMeta.from_total(total, page.page, page.page_size),
    )


@router.get("/stats", response_model=GenericResponse[ActivityStatsResponse], summary="Activity statistics")
async def activity_stats(
    actor: Actor,
    service: AuditServiceDep,
    period: str = Query("7d", description="One of 1d, 7d, 30d, 90d"),
) -> GenericResponse[ActivityStatsResponse]:
    stats = await service.stats(actor, period)
    return GenericResponse(message="Activity statistics", data=ActivityStatsResponse.model_validate(stats))
