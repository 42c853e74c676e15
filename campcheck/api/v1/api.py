# File: campcheck/api/v1/api.py
from fastapi import APIRouter
from campcheck.api.v1.endpoints import activities, live, transitions

# Create main API router
api_router = APIRouter()

api_router.include_router(
    live.router,
    prefix="/events",
    tags=["live-attendance"]
)

api_router.include_router(
    transitions.router,
    prefix="/events",
    tags=["transitions"]
)

api_router.include_router(
    activities.router,
    prefix="/events",
    tags=["activities"]
)
