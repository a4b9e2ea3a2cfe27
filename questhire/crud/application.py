"""
Application CRUD
"""
from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from questhire.models.application import Application
from questhire.models.base import utcnow
from .base import CRUDBase


class CRUDApplication(CRUDBase[Application]):

    async def get_by_job(
        self,
        db: AsyncSession,
        job_id: str
    ) -> List[Application]:
        """All applications of a job with their candidate, newest first"""
        result = await db.execute(
            select(self.model)
            .options(selectinload(self.model.candidate))
            .where(self.model.job_id == job_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        return list(result.scalars().all())

    async def count_by_job(self, db: AsyncSession, job_id: str) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.job_id == job_id)
        )
        return result.scalar() or 0

    async def count_for_job_ids(
        self,
        db: AsyncSession,
        job_id: str,
        ids: List[str]
    ) -> int:
        """How many of `ids` are applications of this job"""
        if not ids:
            return 0
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.job_id == job_id, self.model.id.in_(ids))
        )
        return result.scalar() or 0

    async def exists_for_email(self, db: AsyncSession, job_id: str, email: str) -> bool:
        result = await db.execute(
            select(self.model.id).where(
                self.model.job_id == job_id,
                func.lower(self.model.email) == email.lower()
            )
        )
        return result.first() is not None

    async def update_status(
        self,
        db: AsyncSession,
        *,
        db_obj: Application,
        status: str,
        note: Optional[str] = None
    ) -> Application:
        """Single-row status update; no version check, last write wins"""
        return await self.update(db, db_obj=db_obj, obj_in={"status": status, "note": note})

    async def get_many_for_agency(
        self,
        db: AsyncSession,
        ids: List[str],
        agency_id: str
    ) -> List[Application]:
        """The agency's applications among `ids`; ids of other tenants are left out"""
        if not ids:
            return []
        result = await db.execute(
            select(self.model).where(
                self.model.agency_id == agency_id,
                self.model.id.in_(ids)
            )
        )
        return list(result.scalars().all())

    async def bulk_update_status(
        self,
        db: AsyncSession,
        *,
        db_objs: List[Application],
        status: str
    ) -> int:
        """Set the status of already loaded applications, returns rows updated"""
        now = utcnow()
        for db_obj in db_objs:
            db_obj.status = status
            db_obj.updated_at = now
            db.add(db_obj)
        await db.flush()
        return len(db_objs)


application_crud = CRUDApplication(Application)
