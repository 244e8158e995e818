"""
DeploymentService - deployments, their settings blocks, social connections
and branding images. Every read filters out soft-deleted deployments and
deployments of soft-deleted projects.
"""

import logging
from typing import TYPE_CHECKING, List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dashboard_api.core.cdn import CdnService
from dashboard_api.core.exceptions import BadRequestError, ExternalServiceError, NotFoundError
from dashboard_api.core.utils import build_publishable_key, generate_random_name

from .defaults import build_auth_settings, build_display_settings, build_restrictions
from .models import (
    Deployment,
    DeploymentAuthSettings,
    DeploymentDisplaySettings,
    DeploymentMode,
    DeploymentRestrictions,
    DeploymentSocialConnection,
    FirstFactor,
    SocialProvider,
)
from .schemas import (
    ImageType,
    UpdateAuthSettingsDto,
    UpdateDisplaySettingsDto,
    UpdateRestrictionsDto,
    UpsertSocialConnectionDto,
)

if TYPE_CHECKING:
    from dashboard_api.modules.projects.models import Project

logger = logging.getLogger(__name__)

# Identifier that has to be enabled for each first factor
FIRST_FACTOR_IDENTIFIER = {
    FirstFactor.email_password: "email_address",
    FirstFactor.email_otp: "email_address",
    FirstFactor.email_magic_link: "email_address",
    FirstFactor.phone_otp: "phone_number",
    FirstFactor.username_password: "username",
}

IMAGE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/x-icon": "ico",
    "image/vnd.microsoft.icon": "ico",
}

# Display setting that points at each uploaded image
IMAGE_SETTINGS = {
    ImageType.logo: "logo_image_url",
    ImageType.favicon: "favicon_image_url",
    ImageType.user_profile: "default_user_profile_image_url",
    ImageType.org_profile: "default_organization_profile_image_url",
}


def _live_deployment_query(deployment_id: int):
    return (
        select(Deployment)
        .where(
            Deployment.id == deployment_id,
            Deployment.deleted_at.is_(None),
            Deployment.project.has(deleted_at=None),
        )
    )


class DeploymentService:
    """
    Deployment service. All methods take the request's AsyncSession;
    the session dependency commits once the handler returns.
    """

    @staticmethod
    async def next_staging_hostname(db: AsyncSession) -> str:
        """
        Pick a "<adjective>-<noun>-<n>" hostname prefix for a staging deployment,
        where n counts the deployments that already used the same name.
        """
        random_name = generate_random_name()
        count = await db.scalar(
            select(func.count(Deployment.id)).where(
                Deployment.backend_host.like(f"{random_name}-%")
            )
        )
        return f"{random_name}-{(count or 0) + 1}"

    @staticmethod
    async def create(
        db: AsyncSession,
        project: "Project",
        mode: DeploymentMode,
        backend_host: str,
        frontend_host: str,
        mail_from_host: str,
        auth_methods: List[str],
    ) -> Deployment:
        """
        Create a deployment with default settings and one enabled social
        connection per OAuth method.

        Args:
            db: Database session
            project: Owning project (already flushed)
            mode: staging or production
            backend_host: Backend API hostname
            frontend_host: Hosted pages hostname
            mail_from_host: Sender domain for outgoing mail
            auth_methods: Enabled auth methods, used to derive auth settings and
                the social connections

        Returns:
            The created deployment, refreshed from the database
        """
        deployment = Deployment(
            project_id=project.id,
            mode=mode,
            maintenance_mode=False,
            backend_host=backend_host,
            frontend_host=frontend_host,
            publishable_key=build_publishable_key(
                backend_host, live=mode == DeploymentMode.production
            ),
            mail_from_host=mail_from_host,
        )
        db.add(deployment)
        await db.flush()

        db.add_all(
            [
                DeploymentAuthSettings(
                    deployment_id=deployment.id, **build_auth_settings(auth_methods)
                ),
                DeploymentDisplaySettings(
                    deployment_id=deployment.id,
                    **build_display_settings(
                        project.name, f"https://{frontend_host}", project.image_url
                    ),
                ),
                DeploymentRestrictions(
                    deployment_id=deployment.id, **build_restrictions()
                ),
            ]
        )
        db.add_all(
            [
                DeploymentSocialConnection(
                    deployment_id=deployment.id,
                    provider=SocialProvider(method),
                    enabled=True,
                    user_defined_scopes=[],
                    credentials={},
                )
                for method in dict.fromkeys(auth_methods)
                if method in SocialProvider.__members__
            ]
        )
        await db.flush()
        await db.refresh(deployment)

        logger.info(
            f"Created {mode.value} deployment {deployment.id} for project {project.id} "
            f"at {backend_host}"
        )
        return deployment

    @staticmethod
    async def find_one(db: AsyncSession, deployment_id: int) -> Deployment:
        """
        Find a live deployment.

        Raises:
            NotFoundError: If the deployment or its project is missing or soft-deleted
        """
        result = await db.execute(_live_deployment_query(deployment_id))
        deployment = result.scalar_one_or_none()

        if not deployment:
            raise NotFoundError("Deployment", deployment_id)

        return deployment

    @staticmethod
    async def find_with_settings(db: AsyncSession, deployment_id: int) -> Deployment:
        """Find a live deployment with all settings blocks eagerly loaded."""
        query = _live_deployment_query(deployment_id).options(
            selectinload(Deployment.auth_settings),
            selectinload(Deployment.display_settings),
            selectinload(Deployment.restrictions),
        )
        result = await db.execute(query)
        deployment = result.scalar_one_or_none()

        if not deployment:
            raise NotFoundError("Deployment", deployment_id)

        return deployment

    @staticmethod
    async def update_auth_settings(
        db: AsyncSession, deployment_id: int, dto: UpdateAuthSettingsDto
    ) -> DeploymentAuthSettings:
        """
        Partially update the auth settings.

        Raises:
            NotFoundError: If deployment or its settings are missing
            BadRequestError: If the update leaves the first factor without its identifier
        """
        deployment = await DeploymentService.find_with_settings(db, deployment_id)
        settings = deployment.auth_settings
        if settings is None:
            raise NotFoundError("Auth settings", deployment_id)

        update_data = dto.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in update_data.items():
            setattr(settings, key, value)

        identifier = FIRST_FACTOR_IDENTIFIER[FirstFactor(settings.first_factor)]
        touched = "first_factor" in update_data or identifier in update_data
        if touched and not getattr(settings, identifier).get("enabled"):
            raise BadRequestError(
                f"First factor {FirstFactor(settings.first_factor).value} requires "
                f"{identifier} to be enabled"
            )

        if "alternate_first_factors" in update_data:
            settings.alternate_first_factors = [
                FirstFactor(factor).value for factor in update_data["alternate_first_factors"]
            ]

        await db.flush()
        await db.refresh(settings)
        return settings

    @staticmethod
    async def update_display_settings(
        db: AsyncSession, deployment_id: int, dto: UpdateDisplaySettingsDto
    ) -> DeploymentDisplaySettings:
        """Partially update the display settings."""
        deployment = await DeploymentService.find_with_settings(db, deployment_id)
        settings = deployment.display_settings
        if settings is None:
            raise NotFoundError("Display settings", deployment_id)

        for key, value in dto.model_dump(exclude_unset=True).items():
            if key == "app_name" and value is None:
                continue
            setattr(settings, key, value)

        await db.flush()
        await db.refresh(settings)
        return settings

    @staticmethod
    async def update_restrictions(
        db: AsyncSession, deployment_id: int, dto: UpdateRestrictionsDto
    ) -> DeploymentRestrictions:
        """Partially update the sign-up restrictions."""
        deployment = await DeploymentService.find_with_settings(db, deployment_id)
        restrictions = deployment.restrictions
        if restrictions is None:
            raise NotFoundError("Restrictions", deployment_id)

        for key, value in dto.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(restrictions, key, value)

        await db.flush()
        await db.refresh(restrictions)
        return restrictions

    @staticmethod
    async def set_maintenance_mode(
        db: AsyncSession, deployment_id: int, enabled: bool
    ) -> Deployment:
        deployment = await DeploymentService.find_one(db, deployment_id)
        deployment.maintenance_mode = enabled
        await db.flush()
        await db.refresh(deployment)

        logger.info(f"Deployment {deployment_id} maintenance mode set to {enabled}")
        return deployment

    @staticmethod
    async def find_for_project(
        db: AsyncSession, project_id: int, mode: Optional[DeploymentMode] = None
    ) -> List[Deployment]:
        query = select(Deployment).where(
            Deployment.project_id == project_id, Deployment.deleted_at.is_(None)
        )
        if mode is not None:
            query = query.where(Deployment.mode == mode)

        result = await db.execute(query.order_by(Deployment.id))
        return list(result.scalars().all())

    @staticmethod
    async def host_taken(db: AsyncSession, backend_host: str) -> bool:
        """Whether any deployment, live or deleted, already uses this backend host."""
        count = await db.scalar(
            select(func.count(Deployment.id)).where(Deployment.backend_host == backend_host)
        )
        return bool(count)

    @staticmethod
    async def find_social_connections(
        db: AsyncSession, deployment_id: int
    ) -> List[DeploymentSocialConnection]:
        await DeploymentService.find_one(db, deployment_id)

        result = await db.execute(
            select(DeploymentSocialConnection)
            .where(
                DeploymentSocialConnection.deployment_id == deployment_id,
                DeploymentSocialConnection.deleted_at.is_(None),
            )
            .order_by(DeploymentSocialConnection.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def upsert_social_connection(
        db: AsyncSession, deployment_id: int, dto: UpsertSocialConnectionDto
    ) -> DeploymentSocialConnection:
        """
        Create or update the connection of `dto.provider`.
        A new connection is enabled unless the request says otherwise.
        """
        await DeploymentService.find_one(db, deployment_id)

        result = await db.execute(
            select(DeploymentSocialConnection).where(
                DeploymentSocialConnection.deployment_id == deployment_id,
                DeploymentSocialConnection.provider == dto.provider,
            )
        )
        connection = result.scalar_one_or_none()

        if connection is None:
            connection = DeploymentSocialConnection(
                deployment_id=deployment_id,
                provider=dto.provider,
                enabled=True,
                user_defined_scopes=[],
                credentials={},
            )
            db.add(connection)
        else:
            connection.deleted_at = None

        if dto.enabled is not None:
            connection.enabled = dto.enabled
        if dto.user_defined_scopes is not None:
            connection.user_defined_scopes = dto.user_defined_scopes
        if dto.credentials is not None:
            # reassign: JSON columns do not track in-place changes
            connection.credentials = {
                **connection.credentials,
                **dto.credentials.model_dump(exclude_unset=True),
            }

        await db.flush()
        await db.refresh(connection)

        logger.info(f"Saved {dto.provider.value} connection of deployment {deployment_id}")
        return connection

    @staticmethod
    async def upload_image(
        db: AsyncSession,
        deployment_id: int,
        image_type: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """
        Upload a branding image to the CDN and point the display settings at it.

        Returns:
            Public CDN URL of the image

        Raises:
            BadRequestError: On an unknown image type, a non-image or an empty file
            ExternalServiceError: If no CDN bucket is configured or the upload fails
        """
        try:
            kind = ImageType(image_type)
        except ValueError:
            raise BadRequestError(
                "Invalid image type. Allowed types: logo, favicon, user-profile, org-profile"
            )

        if not content_type.startswith("image/"):
            raise BadRequestError("Invalid file type. Only images are allowed.")

        extension = IMAGE_EXTENSIONS.get(content_type)
        if extension is None:
            raise BadRequestError(
                "Unsupported image format. Supported formats: JPEG, PNG, GIF, WEBP, ICO"
            )

        if not content:
            raise BadRequestError("No image data provided")

        deployment = await DeploymentService.find_with_settings(db, deployment_id)
        settings = deployment.display_settings
        if settings is None:
            raise NotFoundError("Display settings", deployment_id)

        if not CdnService.is_configured():
            raise ExternalServiceError("CDN", "no bucket configured")

        url = await CdnService.upload_file(
            content,
            f"deployments/{deployment_id}/{kind.value}.{extension}",
            content_type=content_type,
        )
        setattr(settings, IMAGE_SETTINGS[kind], url)
        await db.flush()

        return url
