"""
Candidate CRUD
"""
from typing import Optional, List, Tuple
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from questhire.models.candidate import Candidate
from questhire.models.application import Application
from questhire.models.job import Job
from .base import CRUDBase


class CRUDCandidate(CRUDBase[Candidate]):

    async def get_by_email(
        self,
        db: AsyncSession,
        agency_id: str,
        email: str
    ) -> Optional[Candidate]:
        result = await db.execute(
            select(self.model).where(
                self.model.agency_id == agency_id,
                func.lower(self.model.email) == email.lower()
            )
        )
        return result.scalar_one_or_none()

    async def search(
        self,
        db: AsyncSession,
        agency_id: str,
        q: str,
        *,
        skip: int = 0,
        limit: int = 100
    ) -> Tuple[List[Candidate], int]:
        """Case-insensitive name search, returns (page, total)"""
        condition = (
            (self.model.agency_id == agency_id)
            & self.model.full_name.ilike(f"%{q}%")
        )
        result = await db.execute(
            select(self.model)
            .where(condition)
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        total = await db.execute(
            select(func.count()).select_from(self.model).where(condition)
        )
        return list(result.scalars().all()), total.scalar() or 0

    async def upsert_from_application(
        self,
        db: AsyncSession,
        *,
        agency_id: str,
        full_name: str,
        email: Optional[str],
        phone: Optional[str] = None,
        location: Optional[str] = None,
        cv_url: Optional[str] = None,
        tags: Optional[List[str]] = None
    ) -> Candidate:
        """
        Find the agency's candidate by email or create one.

        An existing profile keeps its values; empty fields are filled from the
        new submission and tags are merged.
        """
        candidate = None
        if email:
            candidate = await self.get_by_email(db, agency_id, email)

        if candidate is None:
            return await self.create(db, obj_in={
                "agency_id": agency_id,
                "full_name": full_name,
                "email": email,
                "phone": phone,
                "location": location,
                "cv_url": cv_url,
                "tags": list(tags or []),
            })

        updates = {
            "phone": candidate.phone or phone,
            "location": candidate.location or location,
            "cv_url": candidate.cv_url or cv_url,
            "tags": list(dict.fromkeys([*candidate.tags, *(tags or [])])),
        }
        return await self.update(db, db_obj=candidate, obj_in=updates)

    async def get_matching(
        self,
        db: AsyncSession,
        job: Job,
        *,
        limit: int = 50
    ) -> List[Tuple[Candidate, List[str]]]:
        """
        Candidates sharing at least one tag with the job.

        Candidates who already applied to the job are left out. Results are
        ordered by number of shared tags, then most recent profile first.
        """
        job_tags = {t.lower(): t for t in job.tags or []}
        if not job_tags:
            return []

        applied = select(Application.candidate_id).where(
            Application.job_id == job.id,
            Application.candidate_id.is_not(None)
        )
        result = await db.execute(
            select(self.model)
            .where(
                self.model.agency_id == job.agency_id,
                self.model.id.not_in(applied)
            )
            .order_by(self.model.created_at.desc())
        )

        matches = []
        for candidate in result.scalars().all():
            shared = [job_tags[t.lower()] for t in candidate.tags or [] if t.lower() in job_tags]
            if shared:
                matches.append((candidate, list(dict.fromkeys(shared))))

        # stable sort keeps the recency order among ties
        matches.sort(key=lambda m: len(m[1]), reverse=True)
        return matches[:limit]


candidate_crud = CRUDCandidate(Candidate)
