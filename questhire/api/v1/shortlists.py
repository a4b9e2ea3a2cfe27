"""
Shortlist API
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from questhire.core.config import settings
from questhire.core.database import get_db
from questhire.core.response import success_response, ResponseModel, DictResponse
from questhire.core.exceptions import NotFoundException, BadRequestException
from questhire.core.security import MembershipContext, get_membership_context, require_role
from questhire.crud import application_crud, event_crud, job_crud, shortlist_crud
from questhire.models.agency import MembershipRole
from questhire.models.event import EventType
from questhire.models.shortlist import (
    Shortlist,
    ShortlistCreate,
    ShortlistItemResponse,
    ShortlistResponse,
)

router = APIRouter()


def build_shortlist_response(shortlist: Shortlist) -> dict:
    response = ShortlistResponse.model_validate(shortlist)
    response.share_url = f"{settings.share_base_url.rstrip('/')}/shortlist/{shortlist.share_token}"
    response.items = [
        ShortlistItemResponse(
            application_id=item.application_id,
            order=item.order,
            candidate_name=item.application.full_name if item.application else None,
            status=item.application.status if item.application else None,
        )
        for item in shortlist.items
    ]
    return response.model_dump()


@router.get("", summary="List shortlists", response_model=DictResponse)
async def get_shortlists(
    job_id: Optional[str] = Query(None, description="Filter by job"),
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    shortlists = await shortlist_crud.get_by_agency(db, ctx.agency.id, job_id=job_id)
    items = [build_shortlist_response(s) for s in shortlists]
    return success_response(data={"items": items, "total": len(items)})


@router.post("", summary="Create shortlist", response_model=ResponseModel[ShortlistResponse])
async def create_shortlist(
    data: ShortlistCreate,
    ctx: MembershipContext = Depends(require_role(MembershipRole.RECRUITER)),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a shortlist from selected applications of one job
    """
    job = await job_crud.get_for_agency(db, data.job_id, ctx.agency.id)
    if not job:
        raise NotFoundException(f"Job not found: {data.job_id}")

    application_ids = list(dict.fromkeys(data.application_ids))
    if application_ids:
        valid = await application_crud.count_for_job_ids(db, job.id, application_ids)
        if valid != len(application_ids):
            raise BadRequestException("Some applications are invalid or don't belong to this job")

    shortlist = await shortlist_crud.create_shortlist(db, agency_id=ctx.agency.id, obj_in=data)

    await event_crud.log_event(
        db,
        type=EventType.SHORTLIST_CREATED,
        agency_id=ctx.agency.id,
        user_id=ctx.user_id,
        job_id=job.id,
        payload={
            "shortlist_id": shortlist.id,
            "name": shortlist.name,
            "application_count": len(application_ids),
        },
    )
    logger.info(f"Shortlist created: {shortlist.id} ({len(application_ids)} items) | job={job.id}")

    return success_response(data=build_shortlist_response(shortlist), message="Shortlist created")


@router.get("/{shortlist_id}", summary="Get shortlist", response_model=ResponseModel[ShortlistResponse])
async def get_shortlist(
    shortlist_id: str,
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    shortlist = await shortlist_crud.get_detail(db, shortlist_id, ctx.agency.id)
    if not shortlist:
        raise NotFoundException(f"Shortlist not found: {shortlist_id}")
    return success_response(data=build_shortlist_response(shortlist))
