"""Core package - Configuration, exceptions, security, and shared rules."""
from .config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
