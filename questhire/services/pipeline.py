"""
Pipeline service

Groups a job's applications into status columns and applies status changes.
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from questhire.core.config import settings
from questhire.core.exceptions import ConflictException, NotFoundException
from questhire.core.security import MembershipContext
from questhire.crud import application_crud, event_crud, job_crud
from questhire.models.application import (
    Application,
    ApplicationCard,
    ApplicationStatus,
    ApplicationStatusUpdate,
    PipelineColumn,
    PipelineResponse,
    STATUS_LABELS,
    STATUS_ORDER,
    can_transition,
)
from questhire.models.base import utcnow
from questhire.models.event import EventType
from questhire.models.job import JobBrief


def to_card(application: Application) -> ApplicationCard:
    """Pipeline card; linked candidate profile fields win over the application copy"""
    candidate = application.candidate
    note = application.note
    return ApplicationCard(
        id=application.id,
        candidate_name=(candidate.full_name if candidate else None) or application.full_name,
        candidate_email=(candidate.email if candidate else None) or application.email,
        candidate_phone=(candidate.phone if candidate else None) or application.phone,
        candidate_location=candidate.location if candidate else None,
        status=application.status,
        created_at=application.created_at,
        updated_at=application.updated_at,
        tags=list(application.tags or []),
        notes_preview=note[: settings.notes_preview_length] if note else None,
        cv_url=(candidate.cv_url if candidate else None) or application.cv_url,
    )


def group_by_status(applications: List[Application]) -> List[PipelineColumn]:
    """One column per status in display order, empty columns included"""
    by_status: Dict[str, List[ApplicationCard]] = {s.value: [] for s in STATUS_ORDER}
    for application in applications:
        cards = by_status.get(application.status)
        if cards is not None:
            cards.append(to_card(application))
        else:
            logger.warning(
                f"Application {application.id} has unknown status {application.status!r}, skipped"
            )

    return [
        PipelineColumn(
            status=status,
            label=STATUS_LABELS[status],
            count=len(by_status[status.value]),
            applications=by_status[status.value],
        )
        for status in STATUS_ORDER
    ]


async def load_pipeline(
    db: AsyncSession,
    ctx: MembershipContext,
    job_id: str
) -> PipelineResponse:
    job = await job_crud.get_for_agency(db, job_id, ctx.agency.id)
    if not job:
        raise NotFoundException("Job not found")

    applications = await application_crud.get_by_job(db, job.id)
    return PipelineResponse(
        job=JobBrief.model_validate(job),
        columns=group_by_status(applications),
        total_applications=len(applications),
        can_edit=ctx.can_edit(),
    )


def append_status_note(
    existing: Optional[str],
    previous_status: str,
    new_status: str,
    note: Optional[str],
    *,
    at: Optional[datetime] = None
) -> Optional[str]:
    """
    Append a timestamped status-change entry to the application note.

    Without a note the existing text is returned unchanged.
    """
    if not note:
        return existing
    timestamp = (at or utcnow()).isoformat()
    entry = f"[{timestamp}] Status: {previous_status} → {new_status}\n{note}"
    return f"{existing}\n\n{entry}" if existing else entry


async def change_status(
    db: AsyncSession,
    ctx: MembershipContext,
    application_id: str,
    data: ApplicationStatusUpdate
) -> Application:
    """
    Move one application to a new status.

    Moving to the current status only appends the note. There is no version
    check: concurrent updates of the same row are last-write-wins.
    """
    application = await application_crud.get_for_agency(db, application_id, ctx.agency.id)
    if not application:
        raise NotFoundException("Application not found")

    previous_status = application.status
    new_status = data.status.value

    if previous_status != new_status and not can_transition(
        previous_status, new_status, strict=settings.strict_pipeline_transitions
    ):
        raise ConflictException(
            f"Transition {previous_status} → {new_status} is not allowed",
            data={"from": previous_status, "to": new_status},
        )

    application = await application_crud.update_status(
        db,
        db_obj=application,
        status=new_status,
        note=append_status_note(application.note, previous_status, new_status, data.note),
    )

    await event_crud.log_event(
        db,
        type=EventType.APPLICATION_STATUS_CHANGED,
        agency_id=ctx.agency.id,
        user_id=ctx.user_id,
        job_id=application.job_id,
        payload={
            "application_id": application.id,
            "candidate_name": application.full_name,
            "previous_status": previous_status,
            "new_status": new_status,
        },
    )
    logger.info(
        f"Application status updated: {application.id} {previous_status} → {new_status} "
        f"| user={ctx.user_id}"
    )
    return application


async def bulk_change_status(
    db: AsyncSession,
    ctx: MembershipContext,
    application_ids: List[str],
    status: ApplicationStatus
) -> Tuple[int, List[str]]:
    """
    Move several applications to one status.

    Rows the transition table refuses are skipped and returned, as are rows
    already at the target status. Ids of other agencies are ignored. Each
    moved row gets its own status-change event.

    Returns (updated count, skipped ids).
    """
    ids = list(dict.fromkeys(application_ids))
    found = {a.id: a for a in await application_crud.get_many_for_agency(db, ids, ctx.agency.id)}
    new_status = status.value

    moving: List[Tuple[Application, str]] = []
    skipped: List[str] = []
    for application_id in ids:
        application = found.get(application_id)
        if application is None:
            continue
        if not can_transition(
            application.status, new_status, strict=settings.strict_pipeline_transitions
        ):
            skipped.append(application_id)
            continue
        moving.append((application, application.status))

    updated = await application_crud.bulk_update_status(
        db, db_objs=[application for application, _ in moving], status=new_status
    )

    for application, previous_status in moving:
        await event_crud.log_event(
            db,
            type=EventType.APPLICATION_STATUS_CHANGED,
            agency_id=ctx.agency.id,
            user_id=ctx.user_id,
            job_id=application.job_id,
            payload={
                "application_id": application.id,
                "candidate_name": application.full_name,
                "previous_status": previous_status,
                "new_status": new_status,
                "bulk": True,
            },
        )

    logger.info(
        f"Bulk status update: {updated} application(s) → {new_status}, {len(skipped)} skipped "
        f"| agency={ctx.agency.id}"
    )
    return updated, skipped
