"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from course_advising.api.v1.dependencies (no manual
repo/service construction).
"""

from fastapi import APIRouter

from course_advising.api.v1.endpoints import advising, auth, health, users

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(advising.router, prefix="/advising", tags=["advising"])
