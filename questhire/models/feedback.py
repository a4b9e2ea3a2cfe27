"""
Client feedback on shared shortlists

One decision per (shortlist, application), submitted through the share link.
"""
from typing import Optional
from datetime import datetime
from enum import Enum
from sqlmodel import Field, UniqueConstraint

from .base import SQLModelBase, TimestampMixin, IDMixin

COMMENT_MAX_LENGTH = 1000


class ClientDecision(str, Enum):
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ClientFeedback(TimestampMixin, IDMixin, SQLModelBase, table=True):
    __tablename__ = "client_feedback"
    __table_args__ = (
        UniqueConstraint("shortlist_id", "application_id", name="uq_feedback_shortlist_application"),
    )

    agency_id: str = Field(foreign_key="agencies.id", index=True, ondelete="CASCADE")
    shortlist_id: str = Field(foreign_key="shortlists.id", index=True, ondelete="CASCADE")
    application_id: str = Field(foreign_key="applications.id", index=True, ondelete="CASCADE")
    decision: str = Field(..., max_length=20)
    comment: Optional[str] = Field(None, max_length=COMMENT_MAX_LENGTH)

    def __repr__(self) -> str:
        return f"<ClientFeedback(application_id={self.application_id}, decision={self.decision})>"


# ==================== Request schemas ====================

class FeedbackCreate(SQLModelBase):
    application_id: str = Field(..., min_length=1)
    decision: ClientDecision
    comment: Optional[str] = Field(None, max_length=COMMENT_MAX_LENGTH)


# ==================== Response schemas ====================

class FeedbackResponse(SQLModelBase):
    application_id: str
    decision: str
    comment: Optional[str] = None
    updated_at: Optional[datetime] = None


class FeedbackSyncResult(SQLModelBase):
    """Outcome of mirroring a client decision onto the application status"""
    synced: bool
    previous_status: Optional[str] = None
    new_status: Optional[str] = None
    reason: str
