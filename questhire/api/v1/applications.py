"""
Application API
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from questhire.core.database import get_db
from questhire.core.response import success_response, ResponseModel, DictResponse
from questhire.core.exceptions import NotFoundException
from questhire.core.security import MembershipContext, get_membership_context, require_role
from questhire.crud import application_crud
from questhire.models.agency import MembershipRole
from questhire.models.application import (
    ApplicationResponse,
    ApplicationStatusUpdate,
    BulkStatusUpdate,
)
from questhire.services import pipeline

router = APIRouter()


@router.patch("/bulk-status", summary="Bulk status update", response_model=DictResponse)
async def bulk_update_status(
    data: BulkStatusUpdate,
    ctx: MembershipContext = Depends(require_role(MembershipRole.RECRUITER)),
    db: AsyncSession = Depends(get_db),
):
    """
    Set one status on many applications.

    Ids of other agencies are ignored; rows the transition table refuses
    come back in `skipped`.
    """
    updated, skipped = await pipeline.bulk_change_status(db, ctx, data.application_ids, data.status)
    return success_response(
        data={"updated": updated, "skipped": skipped},
        message=f"{updated} application(s) updated"
    )


@router.get("/{application_id}", summary="Get application", response_model=ResponseModel[ApplicationResponse])
async def get_application(
    application_id: str,
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    application = await application_crud.get_for_agency(db, application_id, ctx.agency.id)
    if not application:
        raise NotFoundException(f"Application not found: {application_id}")

    return success_response(data=ApplicationResponse.model_validate(application).model_dump())


@router.patch(
    "/{application_id}/status",
    summary="Update application status",
    response_model=ResponseModel[ApplicationResponse],
)
async def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    ctx: MembershipContext = Depends(require_role(MembershipRole.RECRUITER)),
    db: AsyncSession = Depends(get_db),
):
    """
    Move an application to another pipeline column
    """
    application = await pipeline.change_status(db, ctx, application_id, data)
    return success_response(
        data=ApplicationResponse.model_validate(application).model_dump(),
        message="Status updated"
    )
