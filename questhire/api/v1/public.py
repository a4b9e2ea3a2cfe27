"""
Public API (no membership): application form and shared shortlists
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from questhire.core.database import get_db
from questhire.core.response import success_response, ResponseModel, DictResponse
from questhire.core.exceptions import NotFoundException, ConflictException
from questhire.crud import (
    application_crud, candidate_crud, event_crud, feedback_crud, job_crud, shortlist_crud,
)
from questhire.models.application import ApplicationCreate, ApplicationResponse, ApplicationStatus
from questhire.models.event import EventType
from questhire.models.feedback import FeedbackCreate, FeedbackResponse
from questhire.models.shortlist import Shortlist, ShortlistResponse
from questhire.services import feedback as feedback_service
from .shortlists import build_shortlist_response

router = APIRouter()

PUBLIC_FORM_SOURCE = "public_form"


async def get_shortlist_or_404(db: AsyncSession, share_token: str) -> Shortlist:
    shortlist = await shortlist_crud.get_by_token(db, share_token)
    if not shortlist:
        raise NotFoundException("Shortlist not found")
    return shortlist


@router.post(
    "/jobs/{job_id}/apply",
    summary="Apply to a job",
    response_model=ResponseModel[ApplicationResponse],
)
async def apply_to_job(
    job_id: str,
    data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Public application form; creates the application in NEW
    """
    job = await job_crud.get_active(db, job_id)
    if not job:
        raise NotFoundException(f"Job not found: {job_id}")

    if data.email and await application_crud.exists_for_email(db, job.id, data.email):
        raise ConflictException("You have already applied to this job")

    candidate = await candidate_crud.upsert_from_application(
        db,
        agency_id=job.agency_id,
        full_name=data.full_name,
        email=data.email,
        phone=data.phone,
        location=data.location,
        cv_url=data.cv_url,
        tags=data.tags,
    )

    application = await application_crud.create(db, obj_in={
        "agency_id": job.agency_id,
        "job_id": job.id,
        "candidate_id": candidate.id,
        "full_name": data.full_name,
        "email": data.email,
        "phone": data.phone,
        "cv_url": data.cv_url,
        "tags": list(data.tags),
        "note": data.message,
        "status": ApplicationStatus.NEW.value,
        "source": PUBLIC_FORM_SOURCE,
        "source_metadata": data.source_metadata,
    })

    await event_crud.log_event(
        db,
        type=EventType.APPLICATION_CREATED,
        agency_id=job.agency_id,
        job_id=job.id,
        payload={"application_id": application.id, "candidate_name": application.full_name},
    )
    logger.info(f"Application received: {application.id} | job={job.id}")

    return success_response(
        data=ApplicationResponse.model_validate(application).model_dump(),
        message="Application submitted"
    )


@router.get(
    "/shortlists/{share_token}",
    summary="View a shared shortlist",
    response_model=ResponseModel[ShortlistResponse],
)
async def get_shared_shortlist(
    share_token: str,
    db: AsyncSession = Depends(get_db),
):
    shortlist = await get_shortlist_or_404(db, share_token)
    return success_response(data=build_shortlist_response(shortlist))


@router.get(
    "/shortlists/{share_token}/feedback",
    summary="Client feedback on a shared shortlist",
    response_model=DictResponse,
)
async def get_shortlist_feedback(
    share_token: str,
    db: AsyncSession = Depends(get_db),
):
    shortlist = await get_shortlist_or_404(db, share_token)
    feedback = await feedback_crud.get_by_shortlist(db, shortlist.id)
    return success_response(data={"feedback": feedback_service.feedback_map(feedback)})


@router.post(
    "/shortlists/{share_token}/feedback",
    summary="Submit client feedback",
    response_model=DictResponse,
)
async def submit_shortlist_feedback(
    share_token: str,
    data: FeedbackCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Approve or reject one shortlisted application; a second submission
    replaces the first
    """
    shortlist = await get_shortlist_or_404(db, share_token)
    feedback, sync = await feedback_service.submit_feedback(db, shortlist, data)
    return success_response(
        data={
            "feedback": FeedbackResponse.model_validate(feedback).model_dump(),
            "sync": sync.model_dump(),
        },
        message="Feedback recorded"
    )
