"""Models package - SQLAlchemy ORM models."""
from .admin_activity import AdminActivity
from .blacklist import BlacklistEntry
from .doctor import Candidate, Doctor
from .notification import Notification
from .suspension import SuspensionRecord
from .user import User

__all__ = [
    "AdminActivity",
    "BlacklistEntry",
    "Candidate",
    "Doctor",
    "Notification",
    "SuspensionRecord",
    "User",
]
