"""Services package - Business logic layer.

Services are constructed per request around the request's database session.
"""
from .audit_service import ActorContext, AuditService
from .blacklist_service import BlacklistService
from .candidate_service import CandidateService
from .doctor_service import DoctorService
from .lifecycle_service import LifecycleService, SuspensionOutcome, SuspensionRequest
from .notification_service import NotificationService

__all__ = [
    "ActorContext",
    "AuditService",
    "BlacklistService",
    "CandidateService",
    "DoctorService",
    "LifecycleService",
    "NotificationService",
    "SuspensionOutcome",
    "SuspensionRequest",
]
