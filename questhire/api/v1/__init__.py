"""
API v1 routers
"""
from . import agencies, jobs, applications, candidates, shortlists, public

__all__ = [
    "agencies",
    "jobs",
    "applications",
    "candidates",
    "shortlists",
    "public",
]
