"""
Event log CRUD
"""
from typing import Optional, List, Dict, Any
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from questhire.models.event import EventLog, EventType
from .base import CRUDBase


class CRUDEventLog(CRUDBase[EventLog]):

    async def log_event(
        self,
        db: AsyncSession,
        *,
        type: EventType,
        agency_id: str,
        user_id: Optional[str] = None,
        job_id: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> EventLog:
        event = await self.create(db, obj_in={
            "type": type.value,
            "agency_id": agency_id,
            "user_id": user_id,
            "job_id": job_id,
            "payload": payload,
        })
        logger.info(f"Event logged: {type.value} | agency={agency_id}")
        return event

    async def get_by_job(
        self,
        db: AsyncSession,
        agency_id: str,
        job_id: str,
        *,
        limit: int = 100
    ) -> List[EventLog]:
        result = await db.execute(
            select(self.model)
            .where(self.model.agency_id == agency_id, self.model.job_id == job_id)
            .order_by(self.model.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())


event_crud = CRUDEventLog(EventLog)
