"""API v1 routes."""

from fastapi import APIRouter

from tuneshare.api.v1 import auth, health, tracks, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(tracks.router, prefix="/tracks", tags=["tracks"])
