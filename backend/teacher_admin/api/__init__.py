"""
API routes package initialization.
"""

from fastapi import APIRouter

from teacher_admin.api.teachers import router as teachers_router

# Create main API router with v1 versioning
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(teachers_router)

__all__ = ["api_router"]
