"""
Agency and membership CRUD
"""
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from questhire.models.agency import Agency, Membership, MembershipRole
from .base import CRUDBase


class CRUDAgency(CRUDBase[Agency]):

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Optional[Agency]:
        result = await db.execute(
            select(self.model).where(self.model.slug == slug)
        )
        return result.scalar_one_or_none()

    async def create_with_owner(
        self,
        db: AsyncSession,
        *,
        name: str,
        slug: str,
        owner_id: str
    ) -> Agency:
        """Create an agency and make `owner_id` its OWNER"""
        agency = await self.create(db, obj_in={"name": name, "slug": slug})
        await membership_crud.create(db, obj_in={
            "agency_id": agency.id,
            "user_id": owner_id,
            "role": MembershipRole.OWNER.value,
        })
        return agency


class CRUDMembership(CRUDBase[Membership]):

    async def get_membership(
        self,
        db: AsyncSession,
        agency_id: str,
        user_id: str
    ) -> Optional[Membership]:
        result = await db.execute(
            select(self.model).where(
                self.model.agency_id == agency_id,
                self.model.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def get_by_agency(self, db: AsyncSession, agency_id: str) -> List[Membership]:
        result = await db.execute(
            select(self.model)
            .where(self.model.agency_id == agency_id)
            .order_by(self.model.created_at.asc())
        )
        return list(result.scalars().all())


agency_crud = CRUDAgency(Agency)
membership_crud = CRUDMembership(Membership)
