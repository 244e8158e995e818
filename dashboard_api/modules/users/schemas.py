"""
Deployment user DTOs (Data Transfer Objects)
"""

import enum
import re
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_PATTERN = re.compile(r"^\+?[0-9]{6,15}$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,64}$")


class UserSortKey(str, enum.Enum):
    created_at = "created_at"
    username = "username"
    email = "email"
    phone_number = "phone_number"


class SortOrder(str, enum.Enum):
    asc = "asc"
    desc = "desc"


def _check_username(value: Optional[str]) -> Optional[str]:
    if value is not None and not USERNAME_PATTERN.match(value):
        raise ValueError(
            "username must be 3-64 characters of letters, digits, '_', '.' or '-'"
        )
    return value


class CreateUserDto(BaseModel):
    """DTO for creating a user on a deployment"""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field("", max_length=255)
    email_address: str = Field(..., max_length=320)
    phone_number: Optional[str] = Field(None, max_length=50)
    username: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)

    @field_validator("email_address")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email address")
        return value

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not PHONE_PATTERN.match(value):
            raise ValueError("Invalid phone number")
        return value

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: Optional[str]) -> Optional[str]:
        return _check_username(value)


class UpdateUserDto(BaseModel):
    """DTO for updating user information"""

    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    username: Optional[str] = None
    disabled: Optional[bool] = None
    public_metadata: Optional[Dict[str, Any]] = None
    private_metadata: Optional[Dict[str, Any]] = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: Optional[str]) -> Optional[str]:
        return _check_username(value)


class UserResponse(BaseModel):
    """Response model for DeploymentUser in lists"""

    id: int
    first_name: str
    last_name: str
    username: Optional[str] = None
    email_address: str
    phone_number: Optional[str] = None
    disabled: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserDetailsResponse(UserResponse):
    """Full user, as shown on the user details page"""

    deployment_id: int
    has_password: bool
    public_metadata: Dict[str, Any]
    private_metadata: Dict[str, Any]
    deleted_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    data: List[UserResponse]
    has_more: bool
