"""API v1 endpoints package."""

from . import (
    admin_activities,
    blacklist,
    candidates,
    doctors,
    health,
    notifications,
)

__all__ = [
    "admin_activities",
    "blacklist",
    "candidates",
    "doctors",
    "health",
    "notifications",
]
