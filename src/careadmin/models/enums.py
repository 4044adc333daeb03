"""Shared Enums for the application.

Defines enum types used across models, schemas and services.
"""
from enum import Enum


class UserRole(str, Enum):
    """Admin account role.

    Attributes:
        ADMIN: Full back-office access, including deletions
        OPERATIONAL: Day-to-day review and suspension work
        USER: No back-office access
    """
    ADMIN = "admin"
    OPERATIONAL = "operational"
    USER = "user"


class DoctorStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class CandidateStatus(str, Enum):
    PENDING = "pending"
    REJECTED = "rejected"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class SuspensionType(str, Enum):
    TEMPORARY = "temporary"
    PERMANENT = "permanent"
    INVESTIGATION = "investigation"


class SuspensionSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    CRITICAL = "critical"


class BlacklistReason(str, Enum):
    """Why a set of credentials was blacklisted."""
    DOCTOR_DELETED = "doctor_deleted"
    CANDIDATE_REJECTED_MULTIPLE = "candidate_rejected_multiple"
    LICENSE_CONFLICT = "license_conflict"
    MANUAL = "manual"


class EntityType(str, Enum):
    """Kind of record a blacklist entry was taken from."""
    DOCTOR = "doctor"
    CANDIDATE = "candidate"


class AdminAction(str, Enum):
    """Actions recorded in the admin activity log."""
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CREATE_ADMIN = "CREATE_ADMIN"
    UPDATE_ADMIN = "UPDATE_ADMIN"
    DELETE_ADMIN = "DELETE_ADMIN"
    CREATE_DOCTOR = "CREATE_DOCTOR"
    UPDATE_DOCTOR = "UPDATE_DOCTOR"
    DELETE_DOCTOR = "DELETE_DOCTOR"
    APPROVE_DOCTOR = "APPROVE_DOCTOR"
    REJECT_DOCTOR = "REJECT_DOCTOR"
    SUSPEND_DOCTOR = "SUSPEND_DOCTOR"
    UNSUSPEND_DOCTOR = "UNSUSPEND_DOCTOR"
    SUBMIT_CANDIDATE = "SUBMIT_CANDIDATE"
    ADD_BLACKLIST = "ADD_BLACKLIST"
    UPDATE_BLACKLIST = "UPDATE_BLACKLIST"
    DELETE_BLACKLIST = "DELETE_BLACKLIST"
    SEND_NOTIFICATION = "SEND_NOTIFICATION"
    UPDATE_SETTINGS = "UPDATE_SETTINGS"
    EXPORT_DATA = "EXPORT_DATA"
    SYSTEM_MAINTENANCE = "SYSTEM_MAINTENANCE"


# Hidden from operational staff when listing activity.
ADMIN_ONLY_ACTIONS: frozenset[AdminAction] = frozenset({
    AdminAction.CREATE_ADMIN,
    AdminAction.DELETE_ADMIN,
    AdminAction.EXPORT_DATA,
    AdminAction.SYSTEM_MAINTENANCE,
})


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ALERT = "alert"
    SUCCESS = "success"


class NotificationCategory(str, Enum):
    DOCTORS = "doctors"
    CANDIDATES = "candidates"
    SUSPENSIONS = "suspensions"
    BLACKLIST = "blacklist"
    SECURITY = "security"
    SYSTEM = "system"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
