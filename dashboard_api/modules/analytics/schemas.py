"""
Analytics DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel, Field
from typing import List
from datetime import datetime


class AnalyticsStatsResponse(BaseModel):
    """User counts for a deployment over a time window"""

    signups: int = Field(..., description="Users created inside the window")
    total_users: int = Field(..., description="Live users created up to the end of the window")
    active_users: int = Field(..., description="Live users that are not disabled")
    disabled_users: int = Field(..., description="Live users that are disabled")


class RecentSignupResponse(BaseModel):
    """Simplified user data for the recent signups list"""

    id: int
    first_name: str
    last_name: str
    email_address: str
    username: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class RecentSignupsResponse(BaseModel):
    signups: List[RecentSignupResponse]
