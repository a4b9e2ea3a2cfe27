"""
Candidate profile model
"""
from typing import Optional, List
from sqlmodel import Field, Column, JSON, UniqueConstraint

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class CandidateBase(SQLModelBase):
    full_name: str = Field(..., min_length=1, max_length=200, index=True)
    email: Optional[str] = Field(None, max_length=320)
    phone: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=200)
    cv_url: Optional[str] = Field(None, max_length=500)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))


class Candidate(CandidateBase, TimestampMixin, IDMixin, table=True):
    """Candidate table, one profile per email within an agency"""
    __tablename__ = "candidates"
    __table_args__ = (
        UniqueConstraint("agency_id", "email", name="uq_candidate_agency_email"),
    )

    agency_id: str = Field(foreign_key="agencies.id", index=True, ondelete="CASCADE")

    def __repr__(self) -> str:
        return f"<Candidate(id={self.id}, full_name={self.full_name})>"


class CandidateResponse(TimestampResponse):
    full_name: str
    email: Optional[str]
    phone: Optional[str]
    location: Optional[str]
    cv_url: Optional[str]
    tags: List[str]


class CandidateMatch(CandidateResponse):
    """Candidate with the tags it shares with a job"""
    matched_tags: List[str] = []
