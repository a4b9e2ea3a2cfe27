"""
Activity event log
"""
from typing import Optional, Dict, Any
from enum import Enum
from sqlmodel import Field, Column, JSON

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class EventType(str, Enum):
    JOB_CREATED = "JOB_CREATED"
    APPLICATION_CREATED = "APPLICATION_CREATED"
    APPLICATION_STATUS_CHANGED = "APPLICATION_STATUS_CHANGED"
    SHORTLIST_CREATED = "SHORTLIST_CREATED"
    CLIENT_FEEDBACK_SUBMITTED = "CLIENT_FEEDBACK_SUBMITTED"
    APPLICATION_STATUS_SYNCED_FROM_FEEDBACK = "APPLICATION_STATUS_SYNCED_FROM_FEEDBACK"


class EventLog(TimestampMixin, IDMixin, SQLModelBase, table=True):
    __tablename__ = "event_logs"

    agency_id: str = Field(foreign_key="agencies.id", index=True, ondelete="CASCADE")
    user_id: Optional[str] = Field(None, max_length=64)
    job_id: Optional[str] = Field(None, index=True)
    type: str = Field(..., max_length=50, index=True)
    payload: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))


class EventLogResponse(TimestampResponse):
    user_id: Optional[str]
    job_id: Optional[str]
    type: str
    payload: Optional[Dict[str, Any]] = None
