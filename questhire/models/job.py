"""
Job model - SQLModel version

Table model and request/response schemas live side by side.
"""
from typing import Optional, List
from enum import Enum
from sqlmodel import Field, Column, JSON

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class JobStatus(str, Enum):
    """Job publication status"""
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    ARCHIVED = "ARCHIVED"


# ==================== Base fields ====================

class JobBase(SQLModelBase):
    title: str = Field(..., min_length=1, max_length=200, description="Job title", index=True)
    location: Optional[str] = Field(None, max_length=200, description="Location")
    description: Optional[str] = Field(None, description="Job description")
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Skill / sector tags")


# ==================== Table model ====================

class Job(JobBase, TimestampMixin, IDMixin, table=True):
    __tablename__ = "jobs"

    agency_id: str = Field(foreign_key="agencies.id", index=True, ondelete="CASCADE")
    status: str = Field(JobStatus.DRAFT.value, max_length=20, index=True, description="Publication status")

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title={self.title})>"


# ==================== Request schemas ====================

class JobCreate(JobBase):
    status: JobStatus = JobStatus.DRAFT


class JobUpdate(SQLModelBase):
    """All fields optional"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[JobStatus] = None


# ==================== Response schemas ====================

class JobResponse(TimestampResponse):
    agency_id: str
    title: str
    location: Optional[str]
    description: Optional[str]
    tags: List[str]
    status: str
    application_count: int = Field(0, description="Number of applications")


class JobBrief(SQLModelBase):
    """Job header shown above the pipeline"""
    id: str
    title: str
    location: Optional[str]
    status: str
