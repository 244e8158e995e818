"""
Deployments Router - a deployment and its settings blocks.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.core.db.engine import get_db_util
from dashboard_api.core.pagination import build_paginated_response
from dashboard_api.core.response_interceptor import CustomAPIRoute
from .service import DeploymentService
from .schemas import (
    AuthSettingsResponse,
    DeploymentResponse,
    DeploymentWithSettingsResponse,
    DisplaySettingsResponse,
    RestrictionsResponse,
    SocialConnectionListResponse,
    SocialConnectionResponse,
    UpdateAuthSettingsDto,
    UpdateDisplaySettingsDto,
    UpdateMaintenanceModeDto,
    UpdateRestrictionsDto,
    UploadResponse,
    UpsertSocialConnectionDto,
)

router = APIRouter(prefix="/deployments", tags=["deployments"], route_class=CustomAPIRoute)


@router.get("/{deployment_id}", response_model=DeploymentWithSettingsResponse)
async def get_deployment_with_settings(
    deployment_id: int,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Get a deployment with its auth, display and restriction settings"""
    return await DeploymentService.find_with_settings(db, deployment_id)


@router.patch("/{deployment_id}/settings/auth-settings", response_model=AuthSettingsResponse)
async def update_auth_settings(
    deployment_id: int,
    dto: UpdateAuthSettingsDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Partially update the authentication settings"""
    return await DeploymentService.update_auth_settings(db, deployment_id, dto)


@router.patch(
    "/{deployment_id}/settings/display-settings", response_model=DisplaySettingsResponse
)
async def update_display_settings(
    deployment_id: int,
    dto: UpdateDisplaySettingsDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Partially update the display settings"""
    return await DeploymentService.update_display_settings(db, deployment_id, dto)


@router.patch("/{deployment_id}/restrictions", response_model=RestrictionsResponse)
async def update_restrictions(
    deployment_id: int,
    dto: UpdateRestrictionsDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Partially update the sign-up restrictions"""
    return await DeploymentService.update_restrictions(db, deployment_id, dto)


@router.patch("/{deployment_id}/maintenance-mode", response_model=DeploymentResponse)
async def update_maintenance_mode(
    deployment_id: int,
    dto: UpdateMaintenanceModeDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Turn maintenance mode on or off"""
    return await DeploymentService.set_maintenance_mode(db, deployment_id, dto.enabled)


@router.get("/{deployment_id}/social-connections", response_model=SocialConnectionListResponse)
async def get_social_connections(
    deployment_id: int,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """List the OAuth providers configured on the deployment"""
    connections = await DeploymentService.find_social_connections(db, deployment_id)
    return build_paginated_response(connections, has_more=False)


@router.put("/{deployment_id}/social-connections", response_model=SocialConnectionResponse)
async def upsert_social_connection(
    deployment_id: int,
    dto: UpsertSocialConnectionDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Create or update the connection of one OAuth provider"""
    return await DeploymentService.upsert_social_connection(db, deployment_id, dto)


@router.post("/{deployment_id}/upload/{image_type}", response_model=UploadResponse)
async def upload_image(
    deployment_id: int,
    image_type: str,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """
    Upload a logo, favicon or default profile image (multipart, image/* only).
    The matching display setting is updated to the new CDN URL.
    """
    content = await file.read()
    url = await DeploymentService.upload_image(
        db, deployment_id, image_type, content, file.content_type or ""
    )
    return {"url": url}
