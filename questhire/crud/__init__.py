"""
CRUD operations
"""
from .agency import agency_crud, membership_crud
from .job import job_crud
from .candidate import candidate_crud
from .application import application_crud
from .shortlist import shortlist_crud
from .event import event_crud
from .feedback import feedback_crud

__all__ = [
    "agency_crud",
    "membership_crud",
    "job_crud",
    "candidate_crud",
    "application_crud",
    "shortlist_crud",
    "event_crud",
    "feedback_crud",
]
