"""API v1 router aggregation."""

from fastapi import APIRouter

from routers.v1.teams import router as teams_router

# Create v1 API router
router = APIRouter(prefix="/v1")

# Include sub-routers
router.include_router(
    teams_router,
    prefix="/teams",
    tags=["Teams"],
)
