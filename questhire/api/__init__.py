"""
API routers
"""
from fastapi import APIRouter

from .v1 import agencies, jobs, applications, candidates, shortlists, public

api_router = APIRouter()

api_router.include_router(
    agencies.router,
    prefix="/agencies",
    tags=["Agencies"]
)
api_router.include_router(
    agencies.team_router,
    prefix="/team",
    tags=["Team"]
)
api_router.include_router(
    jobs.router,
    prefix="/jobs",
    tags=["Jobs"]
)
api_router.include_router(
    applications.router,
    prefix="/applications",
    tags=["Applications"]
)
api_router.include_router(
    candidates.router,
    prefix="/candidates",
    tags=["Candidates"]
)
api_router.include_router(
    shortlists.router,
    prefix="/shortlists",
    tags=["Shortlists"]
)
api_router.include_router(
    public.router,
    prefix="/public",
    tags=["Public"]
)
