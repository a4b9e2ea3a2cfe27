"""
Client feedback service

Stores the client's decision on a shared shortlist entry and, when
`settings.feedback_sync_enabled` is on, mirrors it onto the application
status. Sync only moves forward and never touches a terminal status.
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from questhire.core.config import settings
from questhire.core.exceptions import BadRequestException
from questhire.crud import application_crud, event_crud, feedback_crud
from questhire.models.application import (
    Application,
    ApplicationStatus,
    STATUS_ORDER,
    TERMINAL_STATUSES,
)
from questhire.models.base import utcnow
from questhire.models.event import EventType
from questhire.models.feedback import (
    ClientDecision,
    ClientFeedback,
    FeedbackCreate,
    FeedbackResponse,
    FeedbackSyncResult,
)
from questhire.models.shortlist import Shortlist

DECISION_STATUS: Dict[ClientDecision, ApplicationStatus] = {
    ClientDecision.APPROVED: ApplicationStatus.QUALIFIED,
    ClientDecision.REJECTED: ApplicationStatus.REJECTED,
}


def blocked_sync_reason(current: str, target: ApplicationStatus) -> Optional[str]:
    """
    Why a feedback sync may not move `current` to `target`, or None when it may.

    Terminal statuses are final. REJECTED is reachable from any open status;
    every other target must lie further along the pipeline.
    """
    source = ApplicationStatus(current)
    if source in TERMINAL_STATUSES:
        return f"Cannot change status of a {source.value.lower()} candidate"
    if target == ApplicationStatus.REJECTED:
        return None
    if STATUS_ORDER.index(target) <= STATUS_ORDER.index(source):
        return f"Cannot regress status from {source.value} to {target.value}"
    return None


def sync_note(existing: Optional[str], shortlist_name: str, *, at: Optional[datetime] = None) -> str:
    entry = (
        f'Status auto-updated from client feedback on shortlist "{shortlist_name}" '
        f"at {(at or utcnow()).isoformat()}"
    )
    return f"{existing}\n\n{entry}" if existing else entry


async def sync_application_status(
    db: AsyncSession,
    shortlist: Shortlist,
    application: Application,
    feedback: ClientFeedback
) -> FeedbackSyncResult:
    if not settings.feedback_sync_enabled:
        return FeedbackSyncResult(synced=False, reason="Feedback sync is disabled")

    target = DECISION_STATUS[ClientDecision(feedback.decision)]
    previous_status = application.status

    reason = blocked_sync_reason(previous_status, target)
    if reason:
        logger.info(
            f"Feedback sync blocked: {application.id} {previous_status} → {target.value} | {reason}"
        )
        return FeedbackSyncResult(synced=False, previous_status=previous_status, reason=reason)

    await application_crud.update_status(
        db,
        db_obj=application,
        status=target.value,
        note=sync_note(application.note, shortlist.name),
    )
    await event_crud.log_event(
        db,
        type=EventType.APPLICATION_STATUS_SYNCED_FROM_FEEDBACK,
        agency_id=shortlist.agency_id,
        job_id=application.job_id,
        payload={
            "application_id": application.id,
            "previous_status": previous_status,
            "new_status": target.value,
            "shortlist_id": shortlist.id,
            "shortlist_name": shortlist.name,
            "client_feedback_id": feedback.id,
            "decision": feedback.decision,
        },
    )
    logger.info(
        f"Application status synced from feedback: {application.id} "
        f"{previous_status} → {target.value} | shortlist={shortlist.id}"
    )
    return FeedbackSyncResult(
        synced=True,
        previous_status=previous_status,
        new_status=target.value,
        reason="Status updated successfully",
    )


def feedback_map(feedback: List[ClientFeedback]) -> Dict[str, dict]:
    """Feedback keyed by application id"""
    return {
        f.application_id: FeedbackResponse.model_validate(f).model_dump()
        for f in feedback
    }


async def submit_feedback(
    db: AsyncSession,
    shortlist: Shortlist,
    data: FeedbackCreate
) -> Tuple[ClientFeedback, FeedbackSyncResult]:
    """Record the client's decision on one shortlisted application"""
    item = next((i for i in shortlist.items if i.application_id == data.application_id), None)
    if item is None or item.application is None:
        raise BadRequestException("Application not found in this shortlist")

    feedback = await feedback_crud.upsert(
        db, agency_id=shortlist.agency_id, shortlist_id=shortlist.id, obj_in=data
    )
    await event_crud.log_event(
        db,
        type=EventType.CLIENT_FEEDBACK_SUBMITTED,
        agency_id=shortlist.agency_id,
        job_id=shortlist.job_id,
        payload={
            "shortlist_id": shortlist.id,
            "application_id": data.application_id,
            "decision": feedback.decision,
            "has_comment": bool(feedback.comment),
        },
    )
    logger.info(
        f"Client feedback received: {data.application_id} {feedback.decision} "
        f"| shortlist={shortlist.id}"
    )

    sync = await sync_application_status(db, shortlist, item.application, feedback)
    return feedback, sync
