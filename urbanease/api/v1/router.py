"""API router aggregator.

All endpoint routers are included here; main.py mounts the result at /api.
"""

from fastapi import APIRouter

from urbanease.api.v1 import admin, auth, business, users

router = APIRouter()

# =============================================================================
# Authentication
# =============================================================================

router.include_router(auth.router, prefix="/auth", tags=["auth"])

# =============================================================================
# Profiles
# =============================================================================

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(business.router, prefix="/business", tags=["business"])

# =============================================================================
# Admin
# =============================================================================

router.include_router(admin.router, prefix="/admin", tags=["admin"])
