"""
Shortlist CRUD
"""
import secrets
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from questhire.models.shortlist import Shortlist, ShortlistItem, ShortlistCreate
from .base import CRUDBase


def generate_share_token() -> str:
    """URL-safe share token"""
    return secrets.token_urlsafe(12)


class CRUDShortlist(CRUDBase[Shortlist]):

    async def get_detail(
        self,
        db: AsyncSession,
        id: str,
        agency_id: str
    ) -> Optional[Shortlist]:
        result = await db.execute(
            select(self.model)
            .options(selectinload(self.model.items).selectinload(ShortlistItem.application))
            .where(self.model.id == id, self.model.agency_id == agency_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_token(self, db: AsyncSession, share_token: str) -> Optional[Shortlist]:
        result = await db.execute(
            select(self.model)
            .options(selectinload(self.model.items).selectinload(ShortlistItem.application))
            .where(self.model.share_token == share_token)
        )
        return result.scalar_one_or_none()

    async def get_by_agency(
        self,
        db: AsyncSession,
        agency_id: str,
        *,
        job_id: Optional[str] = None
    ) -> List[Shortlist]:
        query = (
            select(self.model)
            .options(selectinload(self.model.items).selectinload(ShortlistItem.application))
            .where(self.model.agency_id == agency_id)
        )
        if job_id:
            query = query.where(self.model.job_id == job_id)
        result = await db.execute(query.order_by(self.model.created_at.desc()))
        return list(result.scalars().all())

    async def create_shortlist(
        self,
        db: AsyncSession,
        *,
        agency_id: str,
        obj_in: ShortlistCreate
    ) -> Shortlist:
        """Create a shortlist whose items keep the order of `application_ids`"""
        shortlist = Shortlist(
            agency_id=agency_id,
            job_id=obj_in.job_id,
            client_id=obj_in.client_id,
            name=obj_in.name,
            note=obj_in.note,
            share_token=generate_share_token(),
        )
        db.add(shortlist)
        await db.flush()

        for index, application_id in enumerate(dict.fromkeys(obj_in.application_ids)):
            db.add(ShortlistItem(
                shortlist_id=shortlist.id,
                application_id=application_id,
                order=index,
            ))
        await db.flush()

        return await self.get_detail(db, shortlist.id, agency_id)


shortlist_crud = CRUDShortlist(Shortlist)
