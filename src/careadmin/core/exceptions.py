"""
Custom Exception Classes.

Provides a hierarchy of domain-specific exceptions that are automatically
converted to appropriate HTTP responses by the global exception handler.
"""

from typing import Any


class AppException(Exception):
    """
    Base exception for all application-specific errors.

    All custom exceptions should inherit from this class.
    The global exception handler converts these to HTTP responses.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "APP_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }

# ============================================
# 4xx Client Errors
# ============================================

class BadRequestError(AppException):
    """Invalid request data or parameters (400)."""

    def __init__(
        self,
        message: str = "Invalid request",
        error_code: str = "BAD_REQUEST",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=400,
            details=details,
        )

class UnauthorizedError(AppException):
    """Authentication required or failed (401)."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: str = "UNAUTHORIZED",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=401,
            details=details,
        )

class ForbiddenError(AppException):
    """Permission denied (403)."""

    def __init__(
        self,
        message: str = "Permission denied",
        error_code: str = "FORBIDDEN",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=403,
            details=details,
        )

class NotFoundError(AppException):
    """Resource not found (404)."""

    def __init__(
        self,
        message: str = "Resource not found",
        error_code: str = "NOT_FOUND",
        resource_type: str | None = None,
        resource_id: str | int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=404,
            details=details,
        )

class ConflictError(AppException):
    """Resource conflict, e.g., duplicate entry (409)."""

    def __init__(
        self,
        message: str = "Resource conflict",
        error_code: str = "CONFLICT",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=409,
            details=details,
        )

class InvalidStateError(AppException):
    """Operation not allowed from the resource's current status (409)."""

    def __init__(
        self,
        message: str = "Operation not allowed in the current state",
        error_code: str = "INVALID_STATE",
        current_status: str | None = None,
        allowed: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if current_status:
            details["current_status"] = current_status
        if allowed:
            details["allowed"] = allowed
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=409,
            details=details,
        )

class ValidationError(AppException):
    """Data validation failed (422)."""

    def __init__(
        self,
        message: str = "Validation failed",
        error_code: str = "VALIDATION_ERROR",
        errors: list[dict[str, Any]] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if errors:
            details["validation_errors"] = errors
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=422,
            details=details,
        )

# ============================================
# 5xx Server Errors
# ============================================

class InternalServerError(AppException):
    """Internal server error (500)."""

    def __init__(
        self,
        message: str = "Internal server error",
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=500,
            details=details,
        )

# ============================================
# Domain-Specific Exceptions
# ============================================

class DoctorNotFoundError(NotFoundError):
    """Doctor resource not found."""

    def __init__(self, doctor_id: str | None = None, message: str | None = None) -> None:
        super().__init__(
            message=message or f"Doctor not found: {doctor_id}",
            error_code="DOCTOR_NOT_FOUND",
            resource_type="doctor",
            resource_id=doctor_id,
        )

class CandidateNotFoundError(NotFoundError):
    """Pending doctor application not found."""

    def __init__(self, candidate_id: str) -> None:
        super().__init__(
            message=f"Candidate not found: {candidate_id}",
            error_code="CANDIDATE_NOT_FOUND",
            resource_type="candidate",
            resource_id=candidate_id,
        )

class BlacklistEntryNotFoundError(NotFoundError):
    """Blacklist entry not found."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(
            message=f"Blacklist entry not found: {entry_id}",
            error_code="BLACKLIST_ENTRY_NOT_FOUND",
            resource_type="blacklist_entry",
            resource_id=entry_id,
        )

class NotificationNotFoundError(NotFoundError):
    """Admin notification not found."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(
            message=f"Notification not found: {notification_id}",
            error_code="NOTIFICATION_NOT_FOUND",
            resource_type="notification",
            resource_id=notification_id,
        )

class DoctorAlreadyExistsError(ConflictError):
    """Doctor with same email or phone already exists."""

    def __init__(self, email: str | None = None, phone: str | None = None) -> None:
        details: dict[str, Any] = {}

        if email:
            details["email"] = email
        if phone:
            details["phone"] = phone

        if email and phone:
            message = f"Doctor with email '{email}' or phone '{phone}' already exists"
        elif phone:
            message = f"Doctor with phone '{phone}' already exists"
        else:
            message = f"Doctor with email '{email}' already exists"

        super().__init__(
            message=message,
            error_code="DOCTOR_ALREADY_EXISTS",
            details=details,
        )

class CandidateAlreadyExistsError(ConflictError):
    """A pending application with the same email or phone is already on file."""

    def __init__(self, email: str | None = None, phone: str | None = None) -> None:
        details: dict[str, Any] = {}
        if email:
            details["email"] = email
        if phone:
            details["phone"] = phone
        super().__init__(
            message="An application with this email or phone is already pending review",
            error_code="CANDIDATE_ALREADY_EXISTS",
            details=details,
        )

class LicenseConflictError(ConflictError):
    """Licence number already registered to another doctor or candidate."""

    def __init__(self, licenses: list[str], holder_type: str) -> None:
        super().__init__(
            message=f"License already registered to an existing {holder_type}",
            error_code="LICENSE_CONFLICT",
            details={
                "licenses": licenses,
                "holder_type": holder_type,
                "reason": "license_conflict",
            },
        )

class AlreadyBlacklistedError(ConflictError):
    """Credentials already covered by an active blacklist entry."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(
            message="These credentials are already blacklisted",
            error_code="ALREADY_BLACKLISTED",
            details={"existing_entry_id": entry_id},
        )

class ConcurrentModificationError(ConflictError):
    """Row changed by another request between read and write."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            message=f"{resource_type.capitalize()} was modified concurrently, retry the request",
            error_code="CONCURRENT_MODIFICATION",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class BlacklistedCredentialsError(ForbiddenError):
    """Submission matches an active blacklist entry."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            message="Application cannot be accepted: credentials are blacklisted",
            error_code="CREDENTIALS_BLACKLISTED",
            details={"reason": reason},
        )
