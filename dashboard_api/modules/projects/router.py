"""
Projects Router - list, create and delete projects, and promote them to production.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.core.db.engine import get_db_util
from dashboard_api.core.pagination import build_paginated_response
from dashboard_api.core.response_interceptor import CustomAPIRoute, skip_interceptor
from dashboard_api.modules.deployments.schemas import DeploymentResponse
from .service import ProjectService
from .schemas import (
    CreateProductionDeploymentDto,
    CreateProjectDto,
    ProjectListResponse,
    ProjectWithDeploymentsResponse,
)

router = APIRouter(prefix="/projects", tags=["projects"], route_class=CustomAPIRoute)


@router.get("", response_model=ProjectListResponse)
async def get_projects(
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Get all projects with their live deployments, newest first"""
    projects = await ProjectService.find_all(db)
    return build_paginated_response(projects, has_more=False)


@router.post("", response_model=ProjectWithDeploymentsResponse)
async def create_project(
    dto: CreateProjectDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Create a project together with its staging deployment"""
    return await ProjectService.create(db, dto)


@router.delete("/{project_id}")
@skip_interceptor
async def delete_project(
    project_id: int,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Soft delete a project and its deployments (returns custom response format)"""
    await ProjectService.remove(db, project_id)
    return {"message": "Project deleted successfully"}


@router.post("/{project_id}/production-deployment", response_model=DeploymentResponse)
async def create_production_deployment(
    project_id: int,
    dto: CreateProductionDeploymentDto,
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Create the production deployment of a project on a custom domain"""
    return await ProjectService.create_production_deployment(db, project_id, dto)
