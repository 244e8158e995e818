"""
Invitations Router - invited users and the sign-up waitlist of a deployment.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.core.db.engine import get_db_util
from dashboard_api.core.pagination import build_paginated_response
from dashboard_api.core.response_interceptor import CustomAPIRoute
from dashboard_api.modules.users.schemas import SortOrder, UserResponse
from .service import InvitationService
from .schemas import (
    AddToWaitlistDto,
    EntrySortKey,
    InvitationListResponse,
    InvitationResponse,
    InviteUserDto,
    WaitlistListResponse,
    WaitlistUserResponse,
)

router = APIRouter(
    prefix="/deployments/{deployment_id}", tags=["invitations"], route_class=CustomAPIRoute
)


@router.get("/invited-users", response_model=InvitationListResponse)
async def get_invited_users(
    deployment_id: int,
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    sort_key: EntrySortKey = Query(EntrySortKey.created_at),
    sort_order: SortOrder = Query(SortOrder.desc),
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    invitations, has_more = await InvitationService.find_invitations(
        db, deployment_id, offset=offset, limit=limit, sort_key=sort_key, sort_order=sort_order
    )
    return build_paginated_response(invitations, has_more)


@router.post("/invited-users", response_model=InvitationResponse)
async def invite_user(
    deployment_id: int,
    dto: InviteUserDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Invite someone to sign up (expires after `expiry_days`, default 7)"""
    return await InvitationService.invite(db, deployment_id, dto)


@router.get("/user-waitlist", response_model=WaitlistListResponse)
async def get_user_waitlist(
    deployment_id: int,
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    sort_key: EntrySortKey = Query(EntrySortKey.created_at),
    sort_order: SortOrder = Query(SortOrder.desc),
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    entries, has_more = await InvitationService.find_waitlist(
        db, deployment_id, offset=offset, limit=limit, sort_key=sort_key, sort_order=sort_order
    )
    return build_paginated_response(entries, has_more)


@router.post("/user-waitlist", response_model=WaitlistUserResponse)
async def add_to_waitlist(
    deployment_id: int,
    dto: AddToWaitlistDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    return await InvitationService.add_to_waitlist(db, deployment_id, dto)


@router.post("/user-waitlist/{waitlist_user_id}/approve", response_model=UserResponse)
async def approve_waitlist_user(
    deployment_id: int,
    waitlist_user_id: int,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Create a user from a waitlist entry"""
    return await InvitationService.approve_waitlist_user(db, deployment_id, waitlist_user_id)
