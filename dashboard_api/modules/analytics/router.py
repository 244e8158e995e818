"""
Analytics Router - user statistics for the deployment dashboard.
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.core.db.engine import get_db_util
from dashboard_api.core.response_interceptor import CustomAPIRoute
from .service import AnalyticsService
from .schemas import AnalyticsStatsResponse, RecentSignupsResponse

router = APIRouter(
    prefix="/deployments/{deployment_id}/analytics",
    tags=["analytics"],
    route_class=CustomAPIRoute,
)


@router.get("/stats", response_model=AnalyticsStatsResponse)
async def get_stats(
    deployment_id: int,
    from_date: Optional[datetime] = Query(None, alias="from"),
    to_date: Optional[datetime] = Query(None, alias="to"),
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """
    Get user counts for the deployment.

    Returns:
        - signups: users created between `from` and `to`
        - total_users: live users created up to `to`
        - active_users / disabled_users: split of total_users by disabled flag
    """
    return await AnalyticsService.get_stats(db, deployment_id, from_date, to_date)


@router.get("/recent-signups", response_model=RecentSignupsResponse)
async def get_recent_signups(
    deployment_id: int,
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db_util, scope="function"),
):
    """Latest signups, newest first"""
    signups = await AnalyticsService.get_recent_signups(db, deployment_id, limit)
    return {"signups": signups}
