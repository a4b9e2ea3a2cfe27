"""
Job CRUD
"""
from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from questhire.models.job import Job, JobCreate, JobUpdate, JobStatus
from .base import CRUDBase


class CRUDJob(CRUDBase[Job]):

    async def get_by_status(
        self,
        db: AsyncSession,
        agency_id: str,
        status: str,
        *,
        skip: int = 0,
        limit: int = 100
    ) -> List[Job]:
        result = await db.execute(
            select(self.model)
            .where(self.model.agency_id == agency_id, self.model.status == status)
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_status(self, db: AsyncSession, agency_id: str, status: str) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.agency_id == agency_id, self.model.status == status)
        )
        return result.scalar() or 0

    async def create_job(
        self,
        db: AsyncSession,
        *,
        agency_id: str,
        obj_in: JobCreate
    ) -> Job:
        data = obj_in.model_dump()
        data["status"] = obj_in.status.value
        data["agency_id"] = agency_id
        return await self.create(db, obj_in=data)

    async def update_job(
        self,
        db: AsyncSession,
        *,
        db_obj: Job,
        obj_in: JobUpdate
    ) -> Job:
        update_data = obj_in.model_dump(exclude_unset=True)
        if obj_in.status is not None:
            update_data["status"] = obj_in.status.value
        return await self.update(db, db_obj=db_obj, obj_in=update_data)

    async def get_active(self, db: AsyncSession, id: str) -> Optional[Job]:
        """Job open to public applications"""
        result = await db.execute(
            select(self.model).where(self.model.id == id, self.model.status == JobStatus.ACTIVE.value)
        )
        return result.scalar_one_or_none()


job_crud = CRUDJob(Job)
