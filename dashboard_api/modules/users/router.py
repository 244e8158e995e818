"""
Users Router - end users of a deployment.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.core.db.engine import get_db_util
from dashboard_api.core.pagination import build_paginated_response
from dashboard_api.core.response_interceptor import CustomAPIRoute, skip_interceptor
from .service import UsersService
from .schemas import (
    CreateUserDto,
    SortOrder,
    UpdateUserDto,
    UserDetailsResponse,
    UserListResponse,
    UserResponse,
    UserSortKey,
)

router = APIRouter(
    prefix="/deployments/{deployment_id}/users", tags=["users"], route_class=CustomAPIRoute
)


@router.get("", response_model=UserListResponse)
async def get_active_user_list(
    deployment_id: int,
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    sort_key: UserSortKey = Query(UserSortKey.created_at),
    sort_order: SortOrder = Query(SortOrder.desc),
    search: Optional[str] = Query(None, description="Search by name, username, email or phone"),
    disabled: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """
    Page through the users of a deployment.
    `has_more` tells whether another page exists past `offset + limit`.
    """
    users, has_more = await UsersService.find_all(
        db,
        deployment_id,
        offset=offset,
        limit=limit,
        sort_key=sort_key,
        sort_order=sort_order,
        search=search,
        disabled=disabled,
    )
    return build_paginated_response(users, has_more)


@router.post("", response_model=UserResponse)
async def create_user(
    deployment_id: int,
    dto: CreateUserDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Create a user on the deployment"""
    return await UsersService.create(db, deployment_id, dto)


@router.get("/{user_id}/details", response_model=UserDetailsResponse)
async def get_user_details(
    deployment_id: int,
    user_id: int,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Get a user with metadata (excludes soft-deleted users)"""
    return await UsersService.find_one(db, deployment_id, user_id)


@router.patch("/{user_id}", response_model=UserDetailsResponse)
async def update_user(
    deployment_id: int,
    user_id: int,
    dto: UpdateUserDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Update user information"""
    return await UsersService.update(db, deployment_id, user_id, dto)


@router.delete("/{user_id}")
@skip_interceptor
async def delete_user(
    deployment_id: int,
    user_id: int,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Soft delete user"""
    await UsersService.remove(db, deployment_id, user_id)
    return {"message": "User deleted successfully"}
