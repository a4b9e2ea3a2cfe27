"""
Tenant resolution and role checks

The tenant is the agency slug, taken from the tenant header or from the
subdomain of the Host header. The user id header stands in for the session
layer.
"""
from dataclasses import dataclass
from typing import Optional, Callable
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from questhire.crud import agency_crud, membership_crud
from questhire.models.agency import Agency, Membership, MembershipRole, has_minimum_role
from .config import settings
from .database import get_db
from .exceptions import (
    ForbiddenException,
    NotFoundException,
    TenantRequiredException,
    UnauthorizedException,
)


@dataclass
class MembershipContext:
    """Who is acting, and for which agency"""
    agency: Agency
    membership: Membership
    user_id: str

    @property
    def role(self) -> str:
        return self.membership.role

    def can_edit(self) -> bool:
        return has_minimum_role(self.role, MembershipRole.RECRUITER)


def tenant_slug_from_host(host: Optional[str]) -> Optional[str]:
    """`acme.example.com` -> `acme` when the root domain is `example.com`"""
    if not host:
        return None
    hostname = host.split(":")[0].lower()
    root = settings.root_domain.lower()
    if hostname == root or not hostname.endswith("." + root):
        return None
    subdomain = hostname[: -(len(root) + 1)]
    if not subdomain or "." in subdomain or subdomain == "www":
        return None
    return subdomain


def get_tenant_slug(request: Request) -> str:
    slug = request.headers.get(settings.tenant_header) or tenant_slug_from_host(
        request.headers.get("host")
    )
    if not slug:
        raise TenantRequiredException()
    return slug.strip().lower()


def get_current_user_id(request: Request) -> str:
    user_id = request.headers.get(settings.user_header)
    if not user_id:
        raise UnauthorizedException()
    return user_id


async def get_membership_context(
    slug: str = Depends(get_tenant_slug),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> MembershipContext:
    agency = await agency_crud.get_by_slug(db, slug)
    if not agency:
        raise NotFoundException("Agency not found")

    membership = await membership_crud.get_membership(db, agency.id, user_id)
    if not membership:
        raise ForbiddenException("Not a member of this agency")

    return MembershipContext(agency=agency, membership=membership, user_id=user_id)


def require_role(minimum: MembershipRole) -> Callable:
    """
    Dependency factory checking the caller's role

    Usage:
        @router.post("")
        async def create(ctx: MembershipContext = Depends(require_role(MembershipRole.RECRUITER))):
            ...
    """
    async def checker(
        ctx: MembershipContext = Depends(get_membership_context),
    ) -> MembershipContext:
        if not has_minimum_role(ctx.role, minimum):
            raise ForbiddenException(
                f"Role {ctx.role} does not have sufficient permissions. "
                f"Required: {minimum.value} or higher"
            )
        return ctx

    return checker
