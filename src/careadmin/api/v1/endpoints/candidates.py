"""
Candidate Review API Endpoints.

Intake of new applications and the review decisions on them. Approval
promotes the application into the doctor registry; rejection keeps the
record and may blacklist repeat applicants.
"""
from __future__ import annotations

from fastapi import APIRouter, Query, status

from ....core.responses import GenericResponse, PaginatedResponse, PaginationMeta
from ....models.enums import CandidateStatus
from ....schemas.doctor import (
    CandidateCreate,
    CandidateRejectionResponse,
    CandidateRejectRequest,
    CandidateResponse,
    DoctorResponse,
)
from ...deps import Actor, CandidateServiceDep, LifecycleServiceDep, PageParams

router = APIRouter(prefix="/candidates", tags=["Candidates"])


@router.get("", response_model=PaginatedResponse[CandidateResponse], summary="List candidates")
async def list_candidates(
    actor: Actor,
    service: CandidateServiceDep,
    page: PageParams,
    status_filter: CandidateStatus | None = Query(None, alias="status"),
) -> PaginatedResponse[CandidateResponse]:
    candidates, total = await service.list(skip=page.skip, limit=page.page_size, status=status_filter)
    return PaginatedResponse(
        message="Candidates retrieved",
        data=[CandidateResponse.model_validate(c) for c in candidates],
        pagination=PaginationMeta.from_total(total, page.page, page.page_size),
    )


@router.get("/search", response_model=PaginatedResponse[CandidateResponse], summary="Search candidates")
async def search_candidates(
    actor: Actor,
    service: CandidateServiceDep,
    page: PageParams,
    q: str = Query(..., min_length=1, max_length=100),
) -> PaginatedResponse[CandidateResponse]:
    candidates, total = await service.search(q, skip=page.skip, limit=page.page_size)
    return PaginatedResponse(
        message="Search results",
        data=[CandidateResponse.model_validate(c) for c in candidates],
        pagination=PaginationMeta.from_total(total, page.page, page.page_size),
    )


@router.post(
    "",
    response_model=GenericResponse[CandidateResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Submit a new application",
)
async def submit_candidate(
    body: CandidateCreate,
    actor: Actor,
    service: CandidateServiceDep,
) -> GenericResponse[CandidateResponse]:
    candidate = await service.submit(body, actor)
    return GenericResponse(
        message="Application submitted for review",
        data=CandidateResponse.model_validate(candidate),
    )


@router.get("/{candidate_id}", response_model=GenericResponse[CandidateResponse], summary="Get candidate")
async def get_candidate(
    candidate_id: str,
    actor: Actor,
    service: CandidateServiceDep,
) -> GenericResponse[CandidateResponse]:
    candidate = await service.get(candidate_id)
    return GenericResponse(message="Candidate retrieved", data=CandidateResponse.model_validate(candidate))


@router.post(
    "/{candidate_id}/approve",
    response_model=GenericResponse[DoctorResponse],
    summary="Approve a pending candidate",
)
async def approve_candidate(
    candidate_id: str,
    actor: Actor,
    lifecycle: LifecycleServiceDep,
) -> GenericResponse[DoctorResponse]:
    doctor = await lifecycle.approve_candidate(candidate_id, actor)
    return GenericResponse(
        message="Candidate approved and added to the registry",
        data=DoctorResponse.model_validate(doctor),
    )


@router.post(
    "/{candidate_id}/reject",
    response_model=GenericResponse[CandidateRejectionResponse],
    summary="Reject a pending candidate",
)
async def reject_candidate(
    candidate_id: str,
    actor: Actor,
    lifecycle: LifecycleServiceDep,
    body: CandidateRejectRequest | None = None,
) -> GenericResponse[CandidateRejectionResponse]:
    outcome = await lifecycle.reject_candidate(candidate_id, actor, reason=body.reason if body else None)
    entry = outcome.blacklist_entry
    return GenericResponse(
        message=(
            "Candidate rejected and blacklisted after repeated rejections"
            if entry else "Candidate rejected"
        ),
        data=CandidateRejectionResponse(
            candidate=CandidateResponse.model_validate(outcome.candidate),
            rejection_count=outcome.rejection_count,
            blacklisted=entry is not None,
            blacklist_entry_id=entry.id if entry else None,
        ),
    )
