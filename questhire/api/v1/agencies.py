"""
Agency and team API
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from questhire.core.database import get_db
from questhire.core.response import success_response, ResponseModel, DictResponse
from questhire.core.exceptions import ConflictException, ForbiddenException
from questhire.core.security import (
    MembershipContext,
    get_current_user_id,
    get_membership_context,
    require_role,
)
from questhire.crud import agency_crud, membership_crud
from questhire.models.agency import (
    AgencyCreate,
    AgencyResponse,
    MembershipCreate,
    MembershipResponse,
    MembershipRole,
)

router = APIRouter()
team_router = APIRouter()


@router.post("", summary="Create agency", response_model=ResponseModel[AgencyResponse])
async def create_agency(
    data: AgencyCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Create an agency; the caller becomes its OWNER
    """
    if await agency_crud.get_by_slug(db, data.slug):
        raise ConflictException(f"Agency slug '{data.slug}' is already taken")

    agency = await agency_crud.create_with_owner(
        db, name=data.name, slug=data.slug, owner_id=user_id
    )
    logger.info(f"Agency created: {agency.slug} | owner={user_id}")
    return success_response(
        data=AgencyResponse.model_validate(agency).model_dump(),
        message="Agency created"
    )


@team_router.get("", summary="List team members", response_model=DictResponse)
async def get_team(
    ctx: MembershipContext = Depends(get_membership_context),
    db: AsyncSession = Depends(get_db),
):
    memberships = await membership_crud.get_by_agency(db, ctx.agency.id)
    items = []
    for m in memberships:
        item = MembershipResponse.model_validate(m)
        item.agency_slug = ctx.agency.slug
        items.append(item.model_dump())
    return success_response(data={"items": items, "total": len(items)})


@team_router.post("", summary="Add team member", response_model=ResponseModel[MembershipResponse])
async def add_team_member(
    data: MembershipCreate,
    ctx: MembershipContext = Depends(require_role(MembershipRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """
    Add a member; only an OWNER may grant OWNER
    """
    if data.role == MembershipRole.OWNER and ctx.role != MembershipRole.OWNER.value:
        raise ForbiddenException("Only an owner can add another owner")

    if await membership_crud.get_membership(db, ctx.agency.id, data.user_id):
        raise ConflictException("User is already a member of this agency")

    membership = await membership_crud.create(db, obj_in={
        "agency_id": ctx.agency.id,
        "user_id": data.user_id,
        "role": data.role.value,
    })
    logger.info(f"Team member added: {data.user_id} as {data.role.value} | agency={ctx.agency.id}")

    response = MembershipResponse.model_validate(membership)
    response.agency_slug = ctx.agency.slug
    return success_response(data=response.model_dump(), message="Team member added")
