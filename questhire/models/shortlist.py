"""
Shortlist models

A shortlist is an ordered selection of applications for one job, shared with
a client through a token link.
"""
from typing import Optional, List
from sqlmodel import Field, Relationship, UniqueConstraint

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse
from .application import Application


class Shortlist(TimestampMixin, IDMixin, SQLModelBase, table=True):
    __tablename__ = "shortlists"

    agency_id: str = Field(foreign_key="agencies.id", index=True, ondelete="CASCADE")
    job_id: str = Field(foreign_key="jobs.id", index=True, ondelete="CASCADE")
    client_id: Optional[str] = Field(None, max_length=64, index=True)
    name: str = Field(..., max_length=200)
    note: Optional[str] = Field(None, max_length=2000)
    share_token: str = Field(..., max_length=64, unique=True, index=True)

    items: List["ShortlistItem"] = Relationship(
        back_populates="shortlist",
        sa_relationship_kwargs={
            "lazy": "selectin",
            "order_by": "ShortlistItem.order",
            "cascade": "all, delete-orphan",
        },
    )

    def __repr__(self) -> str:
        return f"<Shortlist(id={self.id}, name={self.name})>"


class ShortlistItem(IDMixin, SQLModelBase, table=True):
    __tablename__ = "shortlist_items"
    __table_args__ = (
        UniqueConstraint("shortlist_id", "application_id", name="uq_shortlist_item_application"),
    )

    shortlist_id: str = Field(foreign_key="shortlists.id", index=True, ondelete="CASCADE")
    application_id: str = Field(foreign_key="applications.id", index=True, ondelete="CASCADE")
    order: int = Field(0, description="Position in the shortlist")

    shortlist: Optional[Shortlist] = Relationship(back_populates="items")
    application: Optional[Application] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin"}
    )


# ==================== Request schemas ====================

class ShortlistCreate(SQLModelBase):
    job_id: str
    name: str = Field(..., min_length=1, max_length=200)
    note: Optional[str] = Field(None, max_length=2000)
    client_id: Optional[str] = Field(None, max_length=64)
    application_ids: List[str] = Field(default_factory=list)


# ==================== Response schemas ====================

class ShortlistItemResponse(SQLModelBase):
    application_id: str
    order: int
    candidate_name: Optional[str] = None
    status: Optional[str] = None


class ShortlistResponse(TimestampResponse):
    job_id: str
    client_id: Optional[str]
    name: str
    note: Optional[str]
    share_token: str
    share_url: Optional[str] = None
    items: List[ShortlistItemResponse] = []
