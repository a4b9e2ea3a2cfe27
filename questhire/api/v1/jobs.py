"""
Job API, including the pipeline read endpoint
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from questhire.core.database import get_db
from questhire.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
    DictResponse,
)
from questhire.core.exceptions import NotFoundException
from questhire.core.security import MembershipContext, get_membership_context, require_role
from questhire.crud import application_crud, candidate_crud, event_crud, job_crud
from questhire.models.agency import MembershipRole
from questhire.models.application import PipelineResponse
from questhire.models.candidate import CandidateMatch
from questhire.models.event import EventType, EventLogResponse
from questhire.models.job import JobCreate, JobUpdate, JobResponse, JobStatus
from questhire.services import pipeline

router = APIRouter()


@router.get("", summary="List jobs", response_model=PagedResponseModel[JobResponse])
async def get_jobs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[JobStatus] = Query(None, description="Filter by status"),
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    skip = (page - 1) * page_size
    agency_id = ctx.agency.id

    if status:
        jobs = await job_crud.get_by_status(db, agency_id, status.value, skip=skip, limit=page_size)
        total = await job_crud.count_by_status(db, agency_id, status.value)
    else:
        jobs = await job_crud.get_multi(db, agency_id=agency_id, skip=skip, limit=page_size)
        total = await job_crud.count(db, agency_id=agency_id)

    items = []
    for job in jobs:
        item = JobResponse.model_validate(job)
        item.application_count = await application_crud.count_by_job(db, job.id)
        items.append(item.model_dump())

    return paged_response(items, total, page, page_size)


@router.post("", summary="Create job", response_model=ResponseModel[JobResponse])
async def create_job(
    data: JobCreate,
    ctx: MembershipContext = Depends(require_role(MembershipRole.RECRUITER)),
    db: AsyncSession = Depends(get_db),
):
    job = await job_crud.create_job(db, agency_id=ctx.agency.id, obj_in=data)
    await event_crud.log_event(
        db,
        type=EventType.JOB_CREATED,
        agency_id=ctx.agency.id,
        user_id=ctx.user_id,
        job_id=job.id,
        payload={"title": job.title},
    )
    return success_response(
        data=JobResponse.model_validate(job).model_dump(),
        message="Job created"
    )


@router.get("/{job_id}", summary="Get job", response_model=ResponseModel[JobResponse])
async def get_job(
    job_id: str,
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    job = await job_crud.get_for_agency(db, job_id, ctx.agency.id)
    if not job:
        raise NotFoundException(f"Job not found: {job_id}")

    response = JobResponse.model_validate(job)
    response.application_count = await application_crud.count_by_job(db, job.id)
    return success_response(data=response.model_dump())


@router.patch("/{job_id}", summary="Update job", response_model=ResponseModel[JobResponse])
async def update_job(
    job_id: str,
    data: JobUpdate,
    ctx: MembershipContext = Depends(require_role(MembershipRole.RECRUITER)),
    db: AsyncSession = Depends(get_db),
):
    job = await job_crud.get_for_agency(db, job_id, ctx.agency.id)
    if not job:
        raise NotFoundException(f"Job not found: {job_id}")

    job = await job_crud.update_job(db, db_obj=job, obj_in=data)
    return success_response(
        data=JobResponse.model_validate(job).model_dump(),
        message="Job updated"
    )


@router.get(
    "/{job_id}/applications",
    summary="Get job pipeline",
    response_model=ResponseModel[PipelineResponse],
)
async def get_job_pipeline(
    job_id: str,
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Applications of a job grouped by status, one column per status
    """
    data = await pipeline.load_pipeline(db, ctx, job_id)
    return success_response(data=data.model_dump())


@router.get("/{job_id}/activity", summary="Job activity", response_model=DictResponse)
async def get_job_activity(
    job_id: str,
    limit: int = Query(50, ge=1, le=200),
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    job = await job_crud.get_for_agency(db, job_id, ctx.agency.id)
    if not job:
        raise NotFoundException(f"Job not found: {job_id}")

    events = await event_crud.get_by_job(db, ctx.agency.id, job.id, limit=limit)
    items = [EventLogResponse.model_validate(e).model_dump() for e in events]
    return success_response(data={"items": items, "total": len(items)})


@router.get(
    "/{job_id}/matching-candidates",
    summary="Candidates matching the job tags",
    response_model=DictResponse,
)
async def get_matching_candidates(
    job_id: str,
    limit: int = Query(50, ge=1, le=200),
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    job = await job_crud.get_for_agency(db, job_id, ctx.agency.id)
    if not job:
        raise NotFoundException(f"Job not found: {job_id}")

    items = []
    for candidate, matched_tags in await candidate_crud.get_matching(db, job, limit=limit):
        item = CandidateMatch.model_validate(candidate)
        item.matched_tags = matched_tags
        items.append(item.model_dump())
    return success_response(data={"items": items, "total": len(items)})
