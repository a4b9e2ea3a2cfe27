"""
Candidate API
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from questhire.core.database import get_db
from questhire.core.response import paged_response, success_response, PagedResponseModel, ResponseModel
from questhire.core.exceptions import NotFoundException
from questhire.core.security import MembershipContext, get_membership_context
from questhire.crud import candidate_crud
from questhire.models.candidate import CandidateResponse

router = APIRouter()


@router.get("", summary="List candidates", response_model=PagedResponseModel[CandidateResponse])
async def get_candidates(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    q: Optional[str] = Query(None, description="Name search"),
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    skip = (page - 1) * page_size

    if q:
        candidates, total = await candidate_crud.search(
            db, ctx.agency.id, q, skip=skip, limit=page_size
        )
    else:
        candidates = await candidate_crud.get_multi(
            db, agency_id=ctx.agency.id, skip=skip, limit=page_size
        )
        total = await candidate_crud.count(db, agency_id=ctx.agency.id)

    items = [CandidateResponse.model_validate(c).model_dump() for c in candidates]
    return paged_response(items, total, page, page_size)


@router.get("/{candidate_id}", summary="Get candidate", response_model=ResponseModel[CandidateResponse])
async def get_candidate(
    candidate_id: str,
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    candidate = await candidate_crud.get_for_agency(db, candidate_id, ctx.agency.id)
    if not candidate:
        raise NotFoundException(f"Candidate not found: {candidate_id}")
    return success_response(data=CandidateResponse.model_validate(candidate).model_dump())
