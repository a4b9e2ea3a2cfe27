"""
Agency (tenant) and membership models
"""
import re
from typing import Optional
from enum import Enum
from pydantic import field_validator
from sqlmodel import Field, UniqueConstraint

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse

SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$")


class MembershipRole(str, Enum):
    """Membership roles, lowest to highest"""
    VIEWER = "VIEWER"
    RECRUITER = "RECRUITER"
    ADMIN = "ADMIN"
    OWNER = "OWNER"


ROLE_HIERARCHY = [
    MembershipRole.VIEWER,
    MembershipRole.RECRUITER,
    MembershipRole.ADMIN,
    MembershipRole.OWNER,
]


def has_minimum_role(role: str, required: str) -> bool:
    """Whether `role` is at least `required` in the hierarchy"""
    return ROLE_HIERARCHY.index(MembershipRole(role)) >= ROLE_HIERARCHY.index(MembershipRole(required))


# ==================== Table models ====================

class Agency(TimestampMixin, IDMixin, SQLModelBase, table=True):
    """Agency table"""
    __tablename__ = "agencies"

    name: str = Field(..., max_length=200, description="Agency name")
    slug: str = Field(..., max_length=63, unique=True, index=True, description="Tenant slug")

    def __repr__(self) -> str:
        return f"<Agency(id={self.id}, slug={self.slug})>"


class Membership(TimestampMixin, IDMixin, SQLModelBase, table=True):
    """A user's role within one agency"""
    __tablename__ = "memberships"
    __table_args__ = (
        UniqueConstraint("agency_id", "user_id", name="uq_membership_agency_user"),
    )

    agency_id: str = Field(foreign_key="agencies.id", index=True, ondelete="CASCADE")
    user_id: str = Field(..., max_length=64, index=True)
    role: str = Field(MembershipRole.VIEWER.value, max_length=20)

    def __repr__(self) -> str:
        return f"<Membership(agency_id={self.agency_id}, user_id={self.user_id}, role={self.role})>"


# ==================== Request schemas ====================

class AgencyCreate(SQLModelBase):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=2, max_length=63)

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: str) -> str:
        v = v.lower()
        if not SLUG_PATTERN.match(v):
            raise ValueError("slug may only contain lowercase letters, digits and dashes")
        return v


class MembershipCreate(SQLModelBase):
    user_id: str = Field(..., min_length=1, max_length=64)
    role: MembershipRole = MembershipRole.RECRUITER


# ==================== Response schemas ====================

class AgencyResponse(TimestampResponse):
    name: str
    slug: str


class MembershipResponse(TimestampResponse):
    agency_id: str
    user_id: str
    role: str
    agency_slug: Optional[str] = None
