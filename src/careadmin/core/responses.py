"""
Standardized API Response Schemas.

Every endpoint returns one of these envelopes so the dashboard can rely on
``success``/``message``/``data`` regardless of the resource.
"""
from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ResponseMeta(BaseModel):
    """Metadata included in all API responses."""

    request_id: str | None = Field(
        default=None,
        description="Unique request identifier for tracing"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Response timestamp (UTC)"
    )


class GenericResponse(BaseModel, Generic[T]):
    """
    Generic wrapper for successful API responses.

    Example:
        ```python
        @router.get("/doctors/{doctor_id}", response_model=GenericResponse[DoctorResponse])
        async def get_doctor(doctor_id: str, service: DoctorServiceDep):
            doctor = await service.get(doctor_id)
            return GenericResponse(message="Doctor retrieved", data=doctor)
        ```
    """

    success: bool = Field(default=True, description="Indicates successful response")
    message: str = Field(description="Human-readable response message")
    data: T = Field(description="Response payload")
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses."""

    total: int = Field(description="Total number of items")
    page: int = Field(ge=1, description="Current page number")
    page_size: int = Field(ge=1, le=100, description="Items per page")
    total_pages: int = Field(description="Total number of pages")
    has_next: bool
    has_previous: bool

    @classmethod
    def from_total(cls, total: int, page: int, page_size: int) -> "PaginationMeta":
        """Create pagination meta from total count."""
        total_pages = max(1, (total + page_size - 1) // page_size)
        return cls(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic wrapper for paginated list responses."""

    success: bool = Field(default=True)
    message: str
    data: list[T] = Field(description="List of items")
    pagination: PaginationMeta
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: dict | None = Field(default=None, description="Additional error context")


class ErrorResponse(BaseModel):
    """Error envelope produced by the global exception handlers."""

    success: bool = Field(default=False)
    error: ErrorDetail
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


class HealthCheck(BaseModel):
    """Individual health check result."""

    status: str = Field(description="Component status: healthy/unhealthy/degraded")
    latency_ms: float | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str
    environment: str
    checks: dict[str, HealthCheck] = Field(default_factory=dict)
