"""
ProjectService - projects and the deployments created alongside them.
"""

import base64
import binascii
import logging
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dashboard_api.core.cdn import CdnService
from dashboard_api.core.config import config
from dashboard_api.core.exceptions import BadRequestError, ConflictError, NotFoundError
from dashboard_api.core.utils import utcnow
from dashboard_api.modules.deployments.models import Deployment, DeploymentMode
from dashboard_api.modules.deployments.service import DeploymentService
from .models import Project
from .schemas import CreateProductionDeploymentDto, CreateProjectDto
from .validators import validate_auth_methods, validate_domain_format, validate_project_name

logger = logging.getLogger(__name__)


def _project_to_dict(project: Project, deployments: List[Deployment]) -> dict:
    return {
        "id": project.id,
        "name": project.name,
        "image_url": project.image_url,
        "created_at": project.created_at,
        "updated_at": project.updated_at,
        "deleted_at": project.deleted_at,
        "deployments": deployments,
    }


class ProjectService:
    """
    Project service. Creating a project always creates its staging
    deployment in the same transaction.
    """

    @staticmethod
    async def find_all(db: AsyncSession) -> List[dict]:
        """
        Find all live projects, newest first, each with its live deployments.
        """
        query = (
            select(Project)
            .where(Project.deleted_at.is_(None))
            .options(selectinload(Project.deployments))
            .order_by(Project.id.desc())
        )
        result = await db.execute(query)
        projects = result.scalars().all()

        return [
            _project_to_dict(
                project, [d for d in project.deployments if not d.is_deleted]
            )
            for project in projects
        ]

    @staticmethod
    async def find_one(db: AsyncSession, project_id: int) -> Project:
        result = await db.execute(
            select(Project).where(Project.id == project_id, Project.deleted_at.is_(None))
        )
        project = result.scalar_one_or_none()

        if not project:
            raise NotFoundError("Project", project_id)

        return project

    @staticmethod
    async def create(db: AsyncSession, dto: CreateProjectDto) -> dict:
        """
        Create a project with a staging deployment and default settings.

        Args:
            db: Database session
            dto: Project name, optional base64 logo and enabled auth methods

        Returns:
            Project with its single staging deployment

        Raises:
            BadRequestError: On an invalid name, auth method or logo encoding
        """
        validate_project_name(dto.name)
        validate_auth_methods(dto.methods)

        logo = b""
        if dto.logo:
            try:
                logo = base64.b64decode(dto.logo, validate=True)
            except (binascii.Error, ValueError):
                raise BadRequestError("Logo must be base64 encoded")

        project = Project(name=dto.name.strip(), image_url="")
        db.add(project)
        await db.flush()

        if logo:
            if CdnService.is_configured():
                project.image_url = await CdnService.upload_file(
                    logo, f"projects/{project.id}/logo.png"
                )
            else:
                logger.warning(
                    f"CDN bucket not configured, dropping logo of project {project.id}"
                )

        hostname = await DeploymentService.next_staging_hostname(db)
        deployment = await DeploymentService.create(
            db,
            project,
            mode=DeploymentMode.staging,
            backend_host=f"{hostname}.{config.staging_backend_suffix}",
            frontend_host=f"{hostname}.{config.staging_frontend_suffix}",
            mail_from_host=config.staging_mail_from_host,
            auth_methods=dto.methods,
        )
        await db.refresh(project)

        logger.info(f"Created project {project.id} ({project.name})")
        return _project_to_dict(project, [deployment])

    @staticmethod
    async def create_production_deployment(
        db: AsyncSession, project_id: int, dto: CreateProductionDeploymentDto
    ) -> Deployment:
        """
        Create the production deployment of a project on a custom domain.
        Backend is served from api.<domain>, hosted pages from accounts.<domain>.

        Raises:
            BadRequestError: On an invalid domain or auth method
            NotFoundError: If the project does not exist
            ConflictError: If the project already has a production deployment or
                another deployment uses the domain
        """
        domain = dto.custom_domain.strip().lower()
        validate_domain_format(domain)
        validate_auth_methods(dto.auth_methods)

        project = await ProjectService.find_one(db, project_id)

        existing = await DeploymentService.find_for_project(
            db, project.id, DeploymentMode.production
        )
        if existing:
            raise ConflictError("Project already has a production deployment")

        if await DeploymentService.host_taken(db, f"api.{domain}"):
            raise ConflictError(f"Domain {domain} is already used by another deployment")

        return await DeploymentService.create(
            db,
            project,
            mode=DeploymentMode.production,
            backend_host=f"api.{domain}",
            frontend_host=f"accounts.{domain}",
            mail_from_host=domain,
            auth_methods=dto.auth_methods,
        )

    @staticmethod
    async def remove(db: AsyncSession, project_id: int) -> None:
        """
        Soft delete a project and all of its live deployments.

        Raises:
            NotFoundError: If project not found
        """
        project = await ProjectService.find_one(db, project_id)
        now = utcnow()

        for deployment in await DeploymentService.find_for_project(db, project.id):
            deployment.deleted_at = now

        project.deleted_at = now
        await db.flush()

        logger.info(f"Deleted project {project_id}")
