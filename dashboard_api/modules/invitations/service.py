"""
InvitationService - invitations and the sign-up waitlist of a deployment.
"""

import logging
from datetime import timedelta
from typing import List, Tuple, Type, Union
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.core.exceptions import ConflictError, NotFoundError
from dashboard_api.core.pagination import paginate_query
from dashboard_api.core.utils import utcnow
from dashboard_api.modules.deployments.service import DeploymentService
from dashboard_api.modules.users.models import DeploymentUser
from dashboard_api.modules.users.schemas import SortOrder
from dashboard_api.modules.users.service import UsersService
from .models import DeploymentInvitation, DeploymentWaitlistUser
from .schemas import AddToWaitlistDto, EntrySortKey, InviteUserDto

logger = logging.getLogger(__name__)

Entry = Union[DeploymentInvitation, DeploymentWaitlistUser]


async def _list_entries(
    db: AsyncSession,
    model: Type[Entry],
    deployment_id: int,
    offset: int,
    limit: int,
    sort_key: EntrySortKey,
    sort_order: SortOrder,
) -> Tuple[List[Entry], bool]:
    await DeploymentService.find_one(db, deployment_id)

    column = {
        EntrySortKey.created_at: model.created_at,
        EntrySortKey.email: model.email_address,
        EntrySortKey.first_name: model.first_name,
    }[sort_key]

    query = select(model).where(
        model.deployment_id == deployment_id,
        model.deleted_at.is_(None),
    )
    if sort_order == SortOrder.asc:
        query = query.order_by(column.asc(), model.id.asc())
    else:
        query = query.order_by(column.desc(), model.id.desc())

    return await paginate_query(db, query, offset=offset, limit=limit)


async def _email_listed(
    db: AsyncSession, model: Type[Entry], deployment_id: int, email_address: str
) -> bool:
    query = select(func.count(model.id)).where(
        model.deployment_id == deployment_id,
        model.deleted_at.is_(None),
        func.lower(model.email_address) == email_address.lower(),
    )
    if model is DeploymentInvitation:
        query = query.where(DeploymentInvitation.expiry > utcnow())
    return bool(await db.scalar(query))


class InvitationService:
    """
    Invitations and waitlist entries. Both are soft deleted when they turn
    into a user.
    """

    @staticmethod
    async def find_invitations(
        db: AsyncSession,
        deployment_id: int,
        offset: int = 0,
        limit: int = 10,
        sort_key: EntrySortKey = EntrySortKey.created_at,
        sort_order: SortOrder = SortOrder.desc,
    ) -> Tuple[List[DeploymentInvitation], bool]:
        return await _list_entries(
            db, DeploymentInvitation, deployment_id, offset, limit, sort_key, sort_order
        )

    @staticmethod
    async def find_waitlist(
        db: AsyncSession,
        deployment_id: int,
        offset: int = 0,
        limit: int = 10,
        sort_key: EntrySortKey = EntrySortKey.created_at,
        sort_order: SortOrder = SortOrder.desc,
    ) -> Tuple[List[DeploymentWaitlistUser], bool]:
        return await _list_entries(
            db, DeploymentWaitlistUser, deployment_id, offset, limit, sort_key, sort_order
        )

    @staticmethod
    async def invite(
        db: AsyncSession, deployment_id: int, dto: InviteUserDto
    ) -> DeploymentInvitation:
        """
        Invite someone to sign up.

        Raises:
            NotFoundError: If the deployment does not exist
            ConflictError: If the email already belongs to a user or to a
                pending invitation
        """
        await DeploymentService.find_one(db, deployment_id)
        await UsersService.ensure_unique(db, deployment_id, email_address=dto.email_address)

        if await _email_listed(db, DeploymentInvitation, deployment_id, dto.email_address):
            raise ConflictError("This email address already has a pending invitation")

        invitation = DeploymentInvitation(
            deployment_id=deployment_id,
            first_name=dto.first_name,
            last_name=dto.last_name,
            email_address=dto.email_address,
            expiry=utcnow() + timedelta(days=dto.expiry_days),
        )
        db.add(invitation)
        await db.flush()
        await db.refresh(invitation)

        logger.info(f"Invited {dto.email_address} to deployment {deployment_id}")
        return invitation

    @staticmethod
    async def add_to_waitlist(
        db: AsyncSession, deployment_id: int, dto: AddToWaitlistDto
    ) -> DeploymentWaitlistUser:
        """
        Raises:
            NotFoundError: If the deployment does not exist
            ConflictError: If the email is already a user or already waiting
        """
        await DeploymentService.find_one(db, deployment_id)
        await UsersService.ensure_unique(db, deployment_id, email_address=dto.email_address)

        if await _email_listed(db, DeploymentWaitlistUser, deployment_id, dto.email_address):
            raise ConflictError("This email address is already on the waitlist")

        entry = DeploymentWaitlistUser(
            deployment_id=deployment_id,
            first_name=dto.first_name,
            last_name=dto.last_name,
            email_address=dto.email_address,
        )
        db.add(entry)
        await db.flush()
        await db.refresh(entry)
        return entry

    @staticmethod
    async def approve_waitlist_user(
        db: AsyncSession, deployment_id: int, waitlist_user_id: int
    ) -> DeploymentUser:
        """
        Turn a waitlist entry into a user of the deployment and remove the entry.

        Raises:
            NotFoundError: If the deployment or the entry does not exist
            ConflictError: If a user with the same email signed up meanwhile
        """
        await DeploymentService.find_one(db, deployment_id)

        result = await db.execute(
            select(DeploymentWaitlistUser).where(
                DeploymentWaitlistUser.id == waitlist_user_id,
                DeploymentWaitlistUser.deployment_id == deployment_id,
                DeploymentWaitlistUser.deleted_at.is_(None),
            )
        )
        entry = result.scalar_one_or_none()
        if not entry:
            raise NotFoundError("Waitlist user", waitlist_user_id)

        await UsersService.ensure_unique(db, deployment_id, email_address=entry.email_address)

        user = DeploymentUser(
            deployment_id=deployment_id,
            first_name=entry.first_name,
            last_name=entry.last_name,
            email_address=entry.email_address,
            disabled=False,
            public_metadata={},
            private_metadata={},
        )
        db.add(user)
        entry.deleted_at = utcnow()
        await db.flush()
        await db.refresh(user)

        logger.info(
            f"Approved waitlist entry {waitlist_user_id} as user {user.id} "
            f"on deployment {deployment_id}"
        )
        return user
