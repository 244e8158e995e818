"""
UsersService - end users of a deployment.
"""

import logging
from typing import List, Optional, Tuple
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.core.exceptions import BadRequestError, ConflictError, NotFoundError
from dashboard_api.core.pagination import paginate_query
from dashboard_api.core.utils import utcnow
from dashboard_api.modules.deployments.models import DeploymentRestrictions
from dashboard_api.modules.deployments.service import DeploymentService
from .models import DeploymentUser
from .schemas import CreateUserDto, SortOrder, UpdateUserDto, UserSortKey
from .security import get_password_hash

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    UserSortKey.created_at: DeploymentUser.created_at,
    UserSortKey.username: DeploymentUser.username,
    UserSortKey.email: DeploymentUser.email_address,
    UserSortKey.phone_number: DeploymentUser.phone_number,
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class UsersService:
    """
    Users service. Every operation first checks that the deployment is live.
    """

    @staticmethod
    async def find_all(
        db: AsyncSession,
        deployment_id: int,
        offset: int = 0,
        limit: int = 10,
        sort_key: UserSortKey = UserSortKey.created_at,
        sort_order: SortOrder = SortOrder.desc,
        search: Optional[str] = None,
        disabled: Optional[bool] = None,
    ) -> Tuple[List[DeploymentUser], bool]:
        """
        Page through the live users of a deployment.

        Args:
            search: Case-insensitive match on names, username, email or phone
            disabled: Only return users with this disabled flag when given

        Returns:
            Tuple of (users, has_more)
        """
        await DeploymentService.find_one(db, deployment_id)

        query = select(DeploymentUser).where(
            DeploymentUser.deployment_id == deployment_id,
            DeploymentUser.deleted_at.is_(None),
        )

        if search:
            search_pattern = f"%{_escape_like(search)}%"
            query = query.where(
                or_(
                    DeploymentUser.first_name.ilike(search_pattern, escape="\\"),
                    DeploymentUser.last_name.ilike(search_pattern, escape="\\"),
                    DeploymentUser.username.ilike(search_pattern, escape="\\"),
                    DeploymentUser.email_address.ilike(search_pattern, escape="\\"),
                    DeploymentUser.phone_number.ilike(search_pattern, escape="\\"),
                )
            )

        if disabled is not None:
            query = query.where(DeploymentUser.disabled == disabled)

        column = SORT_COLUMNS[sort_key]
        if sort_order == SortOrder.asc:
            query = query.order_by(column.asc(), DeploymentUser.id.asc())
        else:
            query = query.order_by(column.desc(), DeploymentUser.id.desc())

        return await paginate_query(db, query, offset=offset, limit=limit)

    @staticmethod
    async def find_one(db: AsyncSession, deployment_id: int, user_id: int) -> DeploymentUser:
        """
        Find a live user of a live deployment.

        Raises:
            NotFoundError: If the deployment or the user is missing or soft-deleted
        """
        await DeploymentService.find_one(db, deployment_id)

        result = await db.execute(
            select(DeploymentUser).where(
                DeploymentUser.id == user_id,
                DeploymentUser.deployment_id == deployment_id,
                DeploymentUser.deleted_at.is_(None),
            )
        )
        user = result.scalar_one_or_none()

        if not user:
            raise NotFoundError("User", user_id)

        return user

    @staticmethod
    async def ensure_unique(
        db: AsyncSession,
        deployment_id: int,
        email_address: Optional[str] = None,
        username: Optional[str] = None,
        exclude_user_id: Optional[int] = None,
    ) -> None:
        """Raise ConflictError if a live user of the deployment has this email or username."""
        base = select(func.count(DeploymentUser.id)).where(
            DeploymentUser.deployment_id == deployment_id,
            DeploymentUser.deleted_at.is_(None),
        )
        if exclude_user_id is not None:
            base = base.where(DeploymentUser.id != exclude_user_id)

        if email_address is not None:
            taken = await db.scalar(
                base.where(func.lower(DeploymentUser.email_address) == email_address.lower())
            )
            if taken:
                raise ConflictError("A user with this email address already exists")

        if username is not None:
            taken = await db.scalar(
                base.where(func.lower(DeploymentUser.username) == username.lower())
            )
            if taken:
                raise ConflictError("A user with this username already exists")

    @staticmethod
    def _check_restrictions(restrictions: DeploymentRestrictions, dto: CreateUserDto) -> None:
        """
        Apply the sign-up restrictions of a deployment to a new user.
        List entries match either the full email address or its domain.
        """
        email = dto.email_address.lower()
        local_part, _, domain = email.partition("@")

        if restrictions.block_subaddresses and "+" in local_part:
            raise BadRequestError("Email subaddresses are not allowed")

        fields = [email, dto.username, dto.first_name, dto.last_name]
        haystack = " ".join(field.lower() for field in fields if field)
        for keyword in restrictions.banned_keywords:
            if keyword and keyword.lower() in haystack:
                raise BadRequestError(f"Banned keyword: {keyword}")

        candidates = {email, domain}
        if restrictions.blocklist_enabled:
            blocked = {entry.lower() for entry in restrictions.blocklisted_resources}
            if candidates & blocked:
                raise BadRequestError("Email address is blocklisted")

        if restrictions.allowlist_enabled:
            allowed = {entry.lower() for entry in restrictions.allowlisted_resources}
            if not candidates & allowed:
                raise BadRequestError("Email address is not on the allowlist")

    @staticmethod
    async def create(db: AsyncSession, deployment_id: int, dto: CreateUserDto) -> DeploymentUser:
        """
        Create a user, honoring the deployment's password and restriction settings.

        Raises:
            NotFoundError: If the deployment does not exist
            BadRequestError: If the auth settings or the sign-up restrictions reject the user
            ConflictError: If email or username is already taken
        """
        deployment = await DeploymentService.find_with_settings(db, deployment_id)

        auth_settings = deployment.auth_settings
        if auth_settings is not None:
            if auth_settings.username.get("required") and not dto.username:
                raise BadRequestError("Username is required")
            if auth_settings.phone_number.get("required") and not dto.phone_number:
                raise BadRequestError("Phone number is required")

            min_length = auth_settings.password.get("min_length", 8)
            if dto.password is not None and len(dto.password) < min_length:
                raise BadRequestError(f"Password must be at least {min_length} characters")

        if deployment.restrictions is not None:
            UsersService._check_restrictions(deployment.restrictions, dto)

        await UsersService.ensure_unique(
            db, deployment_id, email_address=dto.email_address, username=dto.username
        )

        user = DeploymentUser(
            deployment_id=deployment_id,
            first_name=dto.first_name,
            last_name=dto.last_name,
            username=dto.username,
            email_address=dto.email_address,
            phone_number=dto.phone_number,
            password_hash=get_password_hash(dto.password) if dto.password else None,
            disabled=False,
            public_metadata={},
            private_metadata={},
        )
        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user {user.id} on deployment {deployment_id}")
        return user

    @staticmethod
    async def update(
        db: AsyncSession, deployment_id: int, user_id: int, dto: UpdateUserDto
    ) -> DeploymentUser:
        """
        Update user information. Only fields present in the request change.

        Raises:
            NotFoundError: If user not found
            ConflictError: If the new username is taken
        """
        user = await UsersService.find_one(db, deployment_id, user_id)

        update_data = dto.model_dump(exclude_unset=True)
        if update_data.get("username"):
            await UsersService.ensure_unique(
                db, deployment_id, username=update_data["username"], exclude_user_id=user.id
            )

        for key, value in update_data.items():
            if value is None and key in ("first_name", "last_name", "disabled"):
                continue
            if value is None and key.endswith("_metadata"):
                value = {}
            setattr(user, key, value)

        await db.flush()
        await db.refresh(user)
        return user

    @staticmethod
    async def remove(db: AsyncSession, deployment_id: int, user_id: int) -> None:
        """
        Soft delete a user by setting deleted_at timestamp.

        Raises:
            NotFoundError: If user not found
        """
        user = await UsersService.find_one(db, deployment_id, user_id)
        user.deleted_at = utcnow()
        await db.flush()

        logger.info(f"Deleted user {user_id} from deployment {deployment_id}")
