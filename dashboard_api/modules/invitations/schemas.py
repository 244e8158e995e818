"""
Invitation and waitlist DTOs (Data Transfer Objects)
"""

import enum
from pydantic import BaseModel, Field, field_validator
from typing import List
from datetime import datetime

from dashboard_api.modules.users.schemas import EMAIL_PATTERN


class EntrySortKey(str, enum.Enum):
    created_at = "created_at"
    email = "email"
    first_name = "first_name"


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


class AddToWaitlistDto(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field("", max_length=255)
    email_address: str = Field(..., max_length=320)

    @field_validator("email_address")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class InviteUserDto(AddToWaitlistDto):
    """DTO for inviting someone to sign up; the invitation expires after `expiry_days`"""

    expiry_days: int = Field(7, ge=1, le=365)


class WaitlistUserResponse(BaseModel):
    id: int
    deployment_id: int
    first_name: str
    last_name: str
    email_address: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InvitationResponse(WaitlistUserResponse):
    expiry: datetime


class WaitlistListResponse(BaseModel):
    data: List[WaitlistUserResponse]
    has_more: bool


class InvitationListResponse(BaseModel):
    data: List[InvitationResponse]
    has_more: bool
