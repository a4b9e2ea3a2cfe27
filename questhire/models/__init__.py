"""
SQLModel models

Table models and API schemas share one definition per resource.
"""
from .base import SQLModelBase, TimestampMixin
from .agency import (
    Agency, Membership, MembershipRole, AgencyCreate, AgencyResponse,
    MembershipCreate, MembershipResponse, has_minimum_role,
)
from .job import Job, JobStatus, JobCreate, JobUpdate, JobResponse, JobBrief
from .candidate import Candidate, CandidateResponse, CandidateMatch
from .application import (
    Application, ApplicationStatus, ApplicationCreate, ApplicationStatusUpdate,
    BulkStatusUpdate, ApplicationResponse, ApplicationCard, PipelineColumn,
    PipelineResponse, STATUS_ORDER, STATUS_LABELS, TERMINAL_STATUSES, can_transition,
)
from .shortlist import Shortlist, ShortlistItem, ShortlistCreate, ShortlistResponse, ShortlistItemResponse
from .event import EventLog, EventType, EventLogResponse
from .feedback import (
    ClientFeedback, ClientDecision, FeedbackCreate, FeedbackResponse, FeedbackSyncResult,
)

__all__ = [
    # Base
    "SQLModelBase",
    "TimestampMixin",
    # Agency
    "Agency",
    "Membership",
    "MembershipRole",
    "AgencyCreate",
    "AgencyResponse",
    "MembershipCreate",
    "MembershipResponse",
    "has_minimum_role",
    # Job
    "Job",
    "JobStatus",
    "JobCreate",
    "JobUpdate",
    "JobResponse",
    "JobBrief",
    # Candidate
    "Candidate",
    "CandidateResponse",
    "CandidateMatch",
    # Application
    "Application",
    "ApplicationStatus",
    "ApplicationCreate",
    "ApplicationStatusUpdate",
    "BulkStatusUpdate",
    "ApplicationResponse",
    "ApplicationCard",
    "PipelineColumn",
    "PipelineResponse",
    "STATUS_ORDER",
    "STATUS_LABELS",
    "TERMINAL_STATUSES",
    "can_transition",
    # Shortlist
    "Shortlist",
    "ShortlistItem",
    "ShortlistCreate",
    "ShortlistResponse",
    "ShortlistItemResponse",
    # Event
    "EventLog",
    "EventType",
    "EventLogResponse",
    # Feedback
    "ClientFeedback",
    "ClientDecision",
    "FeedbackCreate",
    "FeedbackResponse",
    "FeedbackSyncResult",
]
