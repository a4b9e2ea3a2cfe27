"""
Client feedback CRUD
"""
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from questhire.models.base import utcnow
from questhire.models.feedback import ClientFeedback, FeedbackCreate
from .base import CRUDBase


class CRUDClientFeedback(CRUDBase[ClientFeedback]):

    async def get_by_shortlist(self, db: AsyncSession, shortlist_id: str) -> List[ClientFeedback]:
        result = await db.execute(
            select(self.model).where(self.model.shortlist_id == shortlist_id)
        )
        return list(result.scalars().all())

    async def get_for_application(
        self,
        db: AsyncSession,
        shortlist_id: str,
        application_id: str
    ) -> Optional[ClientFeedback]:
        result = await db.execute(
            select(self.model).where(
                self.model.shortlist_id == shortlist_id,
                self.model.application_id == application_id
            )
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        db: AsyncSession,
        *,
        agency_id: str,
        shortlist_id: str,
        obj_in: FeedbackCreate
    ) -> ClientFeedback:
        """One decision per shortlist and application; a new submission replaces the old one"""
        feedback = await self.get_for_application(db, shortlist_id, obj_in.application_id)
        if feedback is None:
            return await self.create(db, obj_in={
                "agency_id": agency_id,
                "shortlist_id": shortlist_id,
                "application_id": obj_in.application_id,
                "decision": obj_in.decision.value,
                "comment": obj_in.comment,
            })

        # comment may be cleared, so fields are set directly rather than through update()
        feedback.decision = obj_in.decision.value
        feedback.comment = obj_in.comment
        feedback.updated_at = utcnow()
        db.add(feedback)
        await db.flush()
        await db.refresh(feedback)
        return feedback


feedback_crud = CRUDClientFeedback(ClientFeedback)
