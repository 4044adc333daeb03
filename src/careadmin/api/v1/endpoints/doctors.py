"""
Doctor Registry API Endpoints.

Registry reads and edits, plus the lifecycle transitions that act on an
existing doctor: suspend, unsuspend and delete. Deletion requires the admin
role; everything else is open to admin and operational staff.
"""
from __future__ import annotations

import structlog
from fastapi import APIRouter, Query, status

from ....core.exceptions import ValidationError
from ....core.responses import GenericResponse, PaginatedResponse, PaginationMeta
from ....models.enums import BlacklistReason, DoctorStatus, Sentiment
from ....schemas.doctor import DoctorCreate, DoctorResponse, DoctorUpdate, SentimentUpdate
from ....schemas.suspension import (
    DeletionResult,
    DoctorStatusChange,
    SuspendRequest,
    SuspensionRecordResponse,
    SuspensionResult,
    SuspensionSummaryResponse,
)
from ....services.lifecycle_service import SuspensionOutcome, SuspensionRequest
from ...deps import (
    Actor,
    AdminActor,
    DoctorServiceDep,
    LifecycleServiceDep,
    PageParams,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/doctors", tags=["Doctors"])


def _suspension_result(outcome: SuspensionOutcome) -> GenericResponse[SuspensionResult]:
    return GenericResponse(
        message=outcome.message,
        data=SuspensionResult(
            deleted=outcome.deleted,
            suspension_count=outcome.suspension_count,
            doctor=DoctorResponse.model_validate(outcome.doctor) if outcome.doctor else None,
            suspension=(
                SuspensionRecordResponse.model_validate(outcome.suspension) if outcome.suspension else None
            ),
            blacklist_entry_id=outcome.blacklist_entry.id if outcome.blacklist_entry else None,
        ),
    )


def _to_request(body: SuspendRequest) -> SuspensionRequest:
    return SuspensionRequest(
        reason=body.reason,
        detail=body.detail,
        suspension_type=body.suspension_type,
        severity=body.severity,
        duration_days=body.duration_days,
    )


# =============================================================================
# REGISTRY
# =============================================================================

@router.get(
    "",
    response_model=PaginatedResponse[DoctorResponse],
    summary="List doctors",
)
async def list_doctors(
    actor: Actor,
    service: DoctorServiceDep,
    page: PageParams,
    status_filter: DoctorStatus | None = Query(None, alias="status"),
    specialization: str | None = Query(None, max_length=100),
    sentiment: Sentiment | None = Query(None),
) -> PaginatedResponse[DoctorResponse]:
    doctors, total = await service.list(
        skip=page.skip,
        limit=page.page_size,
        status=status_filter,
        specialization=specialization,
        sentiment=sentiment,
    )
    return PaginatedResponse(
        message="Doctors retrieved",
        data=[DoctorResponse.model_validate(d) for d in doctors],
        pagination=PaginationMeta.from_total(total, page.page, page.page_size),
    )


@router.get(
    "/search",
    response_model=PaginatedResponse[DoctorResponse],
    summary="Search doctors",
    description="Case-insensitive match on name, email, specializations, department, degrees, affiliations and address.",
)
async def search_doctors(
    actor: Actor,
    service: DoctorServiceDep,
    page: PageParams,
    q: str = Query(..., min_length=1, max_length=100),
) -> PaginatedResponse[DoctorResponse]:
    doctors, total = await service.search(q, skip=page.skip, limit=page.page_size)
    return PaginatedResponse(
        message="Search results",
        data=[DoctorResponse.model_validate(d) for d in doctors],
        pagination=PaginationMeta.from_total(total, page.page, page.page_size),
    )


@router.post(
    "",
    response_model=GenericResponse[DoctorResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a doctor directly to the registry",
)
async def create_doctor(
    body: DoctorCreate,
    actor: Actor,
    service: DoctorServiceDep,
) -> GenericResponse[DoctorResponse]:
    doctor = await service.create(body, actor)
    return GenericResponse(message="Doctor created", data=DoctorResponse.model_validate(doctor))


@router.get("/{doctor_id}", response_model=GenericResponse[DoctorResponse], summary="Get doctor")
async def get_doctor(
    doctor_id: str,
    actor: Actor,
    service: DoctorServiceDep,
) -> GenericResponse[DoctorResponse]:
    doctor = await service.get(doctor_id)
    return GenericResponse(message="Doctor retrieved", data=DoctorResponse.model_validate(doctor))


@router.patch("/{doctor_id}", response_model=GenericResponse[DoctorResponse], summary="Edit doctor")
async def update_doctor(
    doctor_id: str,
    body: DoctorUpdate,
    actor: Actor,
    service: DoctorServiceDep,
) -> GenericResponse[DoctorResponse]:
    doctor = await service.update(doctor_id, body, actor)
    return GenericResponse(message="Doctor updated", data=DoctorResponse.model_validate(doctor))


@router.patch(
    "/{doctor_id}/sentiment",
    response_model=GenericResponse[DoctorResponse],
    summary="Set sentiment label or score",
)
async def update_sentiment(
    doctor_id: str,
    body: SentimentUpdate,
    actor: Actor,
    service: DoctorServiceDep,
) -> GenericResponse[DoctorResponse]:
    doctor = await service.update_sentiment(doctor_id, body, actor)
    return GenericResponse(message="Sentiment updated", data=DoctorResponse.model_validate(doctor))


# =============================================================================
# LIFECYCLE
# =============================================================================

@router.put(
    "/{doctor_id}/status",
    response_model=GenericResponse[SuspensionResult],
    summary="Suspend or reinstate a doctor",
    description=(
        "status=suspended requires a suspension body and may delete the doctor "
        "when the strike limit is reached; status=approved lifts a suspension."
    ),
)
async def change_status(
    doctor_id: str,
    body: DoctorStatusChange,
    actor: Actor,
    lifecycle: LifecycleServiceDep,
) -> GenericResponse[SuspensionResult]:
    if body.status == DoctorStatus.SUSPENDED.value:
        if body.suspension is None:
            raise ValidationError(
                message="Suspension details are required",
                errors=[{"field": "suspension", "message": "required when status is suspended"}],
            )
        outcome = await lifecycle.suspend_doctor(doctor_id, _to_request(body.suspension), actor)
        return _suspension_result(outcome)

    doctor = await lifecycle.unsuspend_doctor(doctor_id, actor)
    summary = await lifecycle.suspension_summary(doctor_id)
    return GenericResponse(
        message="Doctor unsuspended",
        data=SuspensionResult(
            deleted=False,
            suspension_count=summary.suspension_count,
            doctor=DoctorResponse.model_validate(doctor),
        ),
    )


@router.post(
    "/{doctor_id}/suspend",
    response_model=GenericResponse[SuspensionResult],
    summary="Suspend a doctor",
)
async def suspend_doctor(
    doctor_id: str,
    body: SuspendRequest,
    actor: Actor,
    lifecycle: LifecycleServiceDep,
) -> GenericResponse[SuspensionResult]:
    outcome = await lifecycle.suspend_doctor(doctor_id, _to_request(body), actor)
    return _suspension_result(outcome)


@router.post(
    "/{doctor_id}/unsuspend",
    response_model=GenericResponse[DoctorResponse],
    summary="Lift a suspension",
)
async def unsuspend_doctor(
    doctor_id: str,
    actor: Actor,
    lifecycle: LifecycleServiceDep,
) -> GenericResponse[DoctorResponse]:
    doctor = await lifecycle.unsuspend_doctor(doctor_id, actor)
    return GenericResponse(message="Doctor unsuspended", data=DoctorResponse.model_validate(doctor))


@router.get(
    "/{doctor_id}/suspensions",
    response_model=GenericResponse[list[SuspensionRecordResponse]],
    summary="Suspension history",
)
async def list_suspensions(
    doctor_id: str,
    actor: Actor,
    lifecycle: LifecycleServiceDep,
) -> GenericResponse[list[SuspensionRecordResponse]]:
    records = await lifecycle.suspension_history(doctor_id)
    return GenericResponse(
        message="Suspension history retrieved",
        data=[SuspensionRecordResponse.model_validate(r) for r in records],
    )


@router.get(
    "/{doctor_id}/suspension-count",
    response_model=GenericResponse[SuspensionSummaryResponse],
    summary="Strike count and thresholds",
)
async def suspension_count(
    doctor_id: str,
    actor: Actor,
    lifecycle: LifecycleServiceDep,
) -> GenericResponse[SuspensionSummaryResponse]:
    summary = await lifecycle.suspension_summary(doctor_id)
    return GenericResponse(
        message="Suspension count retrieved",
        data=SuspensionSummaryResponse.model_validate(summary),
    )


@router.delete(
    "/{doctor_id}",
    response_model=GenericResponse[DeletionResult],
    summary="Delete and blacklist a doctor",
)
async def delete_doctor(
    doctor_id: str,
    actor: AdminActor,
    lifecycle: LifecycleServiceDep,
    reason: BlacklistReason = Query(BlacklistReason.DOCTOR_DELETED),
    description: str | None = Query(None, max_length=2000),
) -> GenericResponse[DeletionResult]:
    entry = await lifecycle.delete_doctor(doctor_id, actor, reason=reason, description=description)
    logger.info("doctor_delete_requested", doctor_id=doctor_id, admin_id=actor.admin_id)
    return GenericResponse(
        message="Doctor deleted and blacklisted",
        data=DeletionResult(doctor_id=doctor_id, blacklist_entry_id=entry.id),
    )
