"""
Blacklist API Endpoints.

Browse, search and maintain blacklist entries. Entries are written
automatically by doctor removal and repeated candidate rejection; admins
may also add them by hand. Removing an entry requires the admin role.
"""
from __future__ import annotations

from fastapi import APIRouter, Query, status

from ....core.responses import GenericResponse, PaginatedResponse, PaginationMeta
from ....models.enums import BlacklistReason
from ....schemas.blacklist import (
    BlacklistCheckRequest,
    BlacklistCheckResponse,
    BlacklistCreate,
    BlacklistResponse,
    BlacklistStats,
    BlacklistUpdate,
)
from ...deps import Actor, AdminActor, BlacklistServiceDep, PageParams

router = APIRouter(prefix="/blacklist", tags=["Blacklist"])


@router.get("", response_model=PaginatedResponse[BlacklistResponse], summary="List blacklist entries")
async def list_entries(
    actor: Actor,
    service: BlacklistServiceDep,
    page: PageParams,
    reason: BlacklistReason | None = Query(None),
    is_active: bool | None = Query(None),
) -> PaginatedResponse[BlacklistResponse]:
    entries, total = await service.list(
        skip=page.skip, limit=page.page_size, reason=reason, is_active=is_active
    )
    return PaginatedResponse(
        message="Blacklist entries retrieved",
        data=[BlacklistResponse.model_validate(e) for e in entries],
        pagination=PaginationMeta.from_total(total, page.page, page.page_size),
    )


@router.get("/search", response_model=PaginatedResponse[BlacklistResponse], summary="Search blacklist")
async def search_entries(
    actor: Actor,
    service: BlacklistServiceDep,
    page: PageParams,
    q: str = Query(..., min_length=1, max_length=100),
) -> PaginatedResponse[BlacklistResponse]:
    entries, total = await service.search(q, skip=page.skip, limit=page.page_size)
    return PaginatedResponse(
        message="Search results",
        data=[BlacklistResponse.model_validate(e) for e in entries],
        pagination=PaginationMeta.from_total(total, page.page, page.page_size),
    )


@router.get("/stats", response_model=GenericResponse[BlacklistStats], summary="Blacklist totals")
async def blacklist_stats(actor: Actor, service: BlacklistServiceDep) -> GenericResponse[BlacklistStats]:
    return GenericResponse(message="Blacklist statistics", data=await service.stats())


@router.post(
    "/check",
    response_model=GenericResponse[BlacklistCheckResponse],
    summary="Check credentials against active entries",
)
async def check_credentials(
    body: BlacklistCheckRequest,
    actor: Actor,
    service: BlacklistServiceDep,
) -> GenericResponse[BlacklistCheckResponse]:
    entry = await service.check(email=body.email, phone=body.phone, licenses=body.licenses)
    return GenericResponse(
        message="Credentials are blacklisted" if entry else "Credentials are not blacklisted",
        data=BlacklistCheckResponse(
            is_blacklisted=entry is not None,
            entry=BlacklistResponse.model_validate(entry) if entry else None,
        ),
    )


@router.post(
    "",
    response_model=GenericResponse[BlacklistResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a manual blacklist entry",
)
async def create_entry(
    body: BlacklistCreate,
    actor: Actor,
    service: BlacklistServiceDep,
) -> GenericResponse[BlacklistResponse]:
    entry = await service.create(body, actor)
    return GenericResponse(message="Blacklist entry created", data=BlacklistResponse.model_validate(entry))


@router.get("/{entry_id}", response_model=GenericResponse[BlacklistResponse], summary="Get entry")
async def get_entry(
    entry_id: str,
    actor: Actor,
    service: BlacklistServiceDep,
) -> GenericResponse[BlacklistResponse]:
    entry = await service.get(entry_id)
    return GenericResponse(message="Blacklist entry retrieved", data=BlacklistResponse.model_validate(entry))


@router.patch("/{entry_id}", response_model=GenericResponse[BlacklistResponse], summary="Edit entry")
async def update_entry(
    entry_id: str,
    body: BlacklistUpdate,
    actor: Actor,
    service: BlacklistServiceDep,
) -> GenericResponse[BlacklistResponse]:
    entry = await service.update(entry_id, body, actor)
    return GenericResponse(message="Blacklist entry updated", data=BlacklistResponse.model_validate(entry))


@router.delete(
    "/{entry_id}",
    response_model=GenericResponse[dict],
    summary="Deactivate or permanently delete an entry",
)
async def remove_entry(
    entry_id: str,
    actor: AdminActor,
    service: BlacklistServiceDep,
    permanent: bool = Query(False, description="Hard delete instead of deactivating"),
) -> GenericResponse[dict]:
    await service.remove(entry_id, actor, permanent=permanent)
    return GenericResponse(
        message="Blacklist entry deleted" if permanent else "Blacklist entry deactivated",
        data={"id": entry_id, "permanent": permanent},
    )
