"""API v1 - versioned router.

Router structure
----------------
PUBLIC (no auth):
  /health, /ready, /live  → health checks (liveness, readiness)

BACK OFFICE (admin or operational role; deletions need admin):
  /doctors/*           → registry, edits, suspend / unsuspend / delete
  /candidates/*        → intake, approve, reject
  /blacklist/*         → browse, search, check, maintain
  /admin-activities/*  → audit log and statistics
  /notifications/*     → dashboard alerts

Role checks are declared per endpoint through the ``Actor`` / ``AdminActor``
dependencies, which also resolve the acting admin for the audit log.
"""
from fastapi import APIRouter

from .endpoints import (
    admin_activities,
    blacklist,
    candidates,
    doctors,
    health,
    notifications,
)

router = APIRouter(prefix="/api/v1")

# =========================================================================
# PUBLIC ENDPOINTS
# =========================================================================

router.include_router(health.router, tags=["Health"])

# =========================================================================
# BACK-OFFICE ENDPOINTS
# =========================================================================

router.include_router(doctors.router)
router.include_router(candidates.router)
router.include_router(blacklist.router)
router.include_router(admin_activities.router)
router.include_router(notifications.router)
