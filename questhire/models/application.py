"""
Application model - SQLModel version

An application is one candidate's submission to one job. Its status is the
pipeline column it sits in.
"""
from typing import Optional, List, Dict, Any, TYPE_CHECKING
from datetime import datetime
from enum import Enum
from pydantic import field_validator
from sqlmodel import Field, Relationship, Column, JSON

from questhire.core.config import settings
from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse
from .job import JobBrief

if TYPE_CHECKING:
    from .candidate import Candidate


class ApplicationStatus(str, Enum):
    """Pipeline status, in display order"""
    NEW = "NEW"
    CONTACTED = "CONTACTED"
    QUALIFIED = "QUALIFIED"
    PLACED = "PLACED"
    REJECTED = "REJECTED"


STATUS_ORDER: List[ApplicationStatus] = list(ApplicationStatus)

STATUS_LABELS: Dict[ApplicationStatus, str] = {
    ApplicationStatus.NEW: "New",
    ApplicationStatus.CONTACTED: "Contacted",
    ApplicationStatus.QUALIFIED: "Qualified",
    ApplicationStatus.PLACED: "Placed",
    ApplicationStatus.REJECTED: "Rejected",
}

TERMINAL_STATUSES = frozenset({ApplicationStatus.PLACED, ApplicationStatus.REJECTED})


def check_note_length(value: Optional[str]) -> Optional[str]:
    """Free-text notes are capped by `settings.note_max_length`"""
    if value is not None and len(value) > settings.note_max_length:
        raise ValueError(f"must be at most {settings.note_max_length} characters")
    return value

# Forward-only workflow: one step ahead, or out to REJECTED from any open status
STRICT_TRANSITIONS: Dict[ApplicationStatus, frozenset] = {
    ApplicationStatus.NEW: frozenset({ApplicationStatus.CONTACTED, ApplicationStatus.REJECTED}),
    ApplicationStatus.CONTACTED: frozenset({ApplicationStatus.QUALIFIED, ApplicationStatus.REJECTED}),
    ApplicationStatus.QUALIFIED: frozenset({ApplicationStatus.PLACED, ApplicationStatus.REJECTED}),
    ApplicationStatus.PLACED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}


def can_transition(from_status: str, to_status: str, strict: bool = False) -> bool:
    """
    Whether an application may move between two statuses.

    The default table is permissive: any move to a different status is
    accepted, backwards moves included. With `strict` the forward-only
    table applies.
    """
    source = ApplicationStatus(from_status)
    target = ApplicationStatus(to_status)
    if source == target:
        return False
    if not strict:
        return True
    return target in STRICT_TRANSITIONS[source]


# ==================== Table model ====================

class Application(TimestampMixin, IDMixin, SQLModelBase, table=True):
    """Application table"""
    __tablename__ = "applications"

    agency_id: str = Field(foreign_key="agencies.id", index=True, ondelete="CASCADE")
    job_id: str = Field(foreign_key="jobs.id", index=True, ondelete="CASCADE")
    candidate_id: Optional[str] = Field(
        default=None, foreign_key="candidates.id", index=True, ondelete="SET NULL"
    )

    # Snapshot of what the candidate submitted
    full_name: str = Field(..., max_length=200)
    email: Optional[str] = Field(None, max_length=320)
    phone: Optional[str] = Field(None, max_length=50)
    cv_url: Optional[str] = Field(None, max_length=500)

    status: str = Field(ApplicationStatus.NEW.value, max_length=20, index=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    note: Optional[str] = Field(None, description="Recruiter notes")

    source: str = Field("manual", max_length=50, description="Where the application came from")
    source_metadata: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    candidate: Optional["Candidate"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin"}
    )

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, status={self.status})>"


# ==================== Request schemas ====================

class ApplicationCreate(SQLModelBase):
    """Public application form"""
    full_name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = Field(None, max_length=320)
    phone: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=200)
    cv_url: Optional[str] = Field(None, max_length=500)
    tags: List[str] = Field(default_factory=list)
    message: Optional[str] = Field(None, description="Cover message")
    source_metadata: Optional[Dict[str, Any]] = None

    @field_validator("message")
    @classmethod
    def check_message_length(cls, v: Optional[str]) -> Optional[str]:
        return check_note_length(v)


class ApplicationStatusUpdate(SQLModelBase):
    """Status change from the pipeline"""
    status: ApplicationStatus
    note: Optional[str] = None

    @field_validator("note")
    @classmethod
    def check_note(cls, v: Optional[str]) -> Optional[str]:
        return check_note_length(v)


class BulkStatusUpdate(SQLModelBase):
    application_ids: List[str] = Field(..., min_length=1)
    status: ApplicationStatus


# ==================== Response schemas ====================

class ApplicationResponse(TimestampResponse):
    agency_id: str
    job_id: str
    candidate_id: Optional[str]
    full_name: str
    email: Optional[str]
    phone: Optional[str]
    cv_url: Optional[str]
    status: str
    tags: List[str]
    note: Optional[str]
    source: str
    source_metadata: Optional[Dict[str, Any]] = None


class ApplicationCard(SQLModelBase):
    """Pipeline card"""
    id: str
    candidate_name: str
    candidate_email: Optional[str] = None
    candidate_phone: Optional[str] = None
    candidate_location: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
    tags: List[str] = []
    notes_preview: Optional[str] = None
    cv_url: Optional[str] = None


class PipelineColumn(SQLModelBase):
    status: ApplicationStatus
    label: str
    count: int = 0
    applications: List[ApplicationCard] = []


class PipelineResponse(SQLModelBase):
    job: JobBrief
    columns: List[PipelineColumn]
    total_applications: int
    can_edit: bool = False
