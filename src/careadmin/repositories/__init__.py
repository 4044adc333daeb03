"""Repositories package - Data access layer."""
from .admin_activity_repository import AdminActivityRepository
from .blacklist_repository import BlacklistRepository
from .doctor_repository import CandidateRepository, DoctorRepository
from .notification_repository import NotificationRepository
from .suspension_repository import SuspensionRepository
from .user_repository import UserRepository

__all__ = [
    "AdminActivityRepository",
    "BlacklistRepository",
    "CandidateRepository",
    "DoctorRepository",
    "NotificationRepository",
    "SuspensionRepository",
    "UserRepository",
]
