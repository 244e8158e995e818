"""
AnalyticsService - user counts and recent signups for a deployment.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.core.exceptions import BadRequestError
from dashboard_api.core.utils import utcnow
from dashboard_api.modules.deployments.service import DeploymentService
from dashboard_api.modules.users.models import DeploymentUser
from .schemas import AnalyticsStatsResponse

DEFAULT_WINDOW = timedelta(days=30)


def _naive_utc(value: datetime) -> datetime:
    # Stored timestamps are naive UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class AnalyticsService:
    """
    Aggregates over the deployment_users table. Soft-deleted users are never counted.
    """

    @staticmethod
    async def get_stats(
        db: AsyncSession,
        deployment_id: int,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
    ) -> AnalyticsStatsResponse:
        """
        Count signups inside [from_date, to_date] and the user totals at to_date.
        The window defaults to the last 30 days.

        Raises:
            NotFoundError: If the deployment does not exist
            BadRequestError: If from_date is after to_date
        """
        await DeploymentService.find_one(db, deployment_id)

        to_date = _naive_utc(to_date) if to_date else utcnow()
        from_date = _naive_utc(from_date) if from_date else to_date - DEFAULT_WINDOW
        if from_date > to_date:
            raise BadRequestError("'from' must not be after 'to'")

        live_users = select(func.count(DeploymentUser.id)).where(
            DeploymentUser.deployment_id == deployment_id,
            DeploymentUser.deleted_at.is_(None),
            DeploymentUser.created_at <= to_date,
        )

        signups = await db.scalar(
            live_users.where(DeploymentUser.created_at >= from_date)
        ) or 0
        total_users = await db.scalar(live_users) or 0
        disabled_users = await db.scalar(
            live_users.where(DeploymentUser.disabled.is_(True))
        ) or 0

        return AnalyticsStatsResponse(
            signups=signups,
            total_users=total_users,
            active_users=total_users - disabled_users,
            disabled_users=disabled_users,
        )

    @staticmethod
    async def get_recent_signups(
        db: AsyncSession, deployment_id: int, limit: int = 10
    ) -> List[DeploymentUser]:
        """Newest live users first"""
        await DeploymentService.find_one(db, deployment_id)

        result = await db.execute(
            select(DeploymentUser)
            .where(
                DeploymentUser.deployment_id == deployment_id,
                DeploymentUser.deleted_at.is_(None),
            )
            .order_by(DeploymentUser.created_at.desc(), DeploymentUser.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
