"""
API routes package initialization.
"""

from fastapi import APIRouter

from rollbook.api.commands import router as commands_router
from rollbook.api.consultations import router as consultations_router
from rollbook.api.groups import router as groups_router
from rollbook.api.students import router as students_router

# Create main API router with v1 versioning
api_router = APIRouter(prefix="/api/v1")

# Include all sub-routers
api_router.include_router(students_router)
api_router.include_router(groups_router)
api_router.include_router(consultations_router)
api_router.include_router(commands_router)

__all__ = ["api_router"]
