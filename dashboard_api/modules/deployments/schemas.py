"""
Deployment DTOs (Data Transfer Objects)
"""

import enum
import re
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Any, Optional, List
from datetime import datetime

from .models import DeploymentMode, FirstFactor, SecondFactorPolicy, SignUpMode, SocialProvider


HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
COUNTRY_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")


# Nested settings blocks


class IdentifierSetting(BaseModel):
    """Whether an identifier (email, phone, username) is collected and required"""

    enabled: bool = False
    required: bool = False


class PasswordSetting(BaseModel):
    enabled: bool = True
    min_length: int = Field(8, ge=6, le=128)


class CountryRestrictions(BaseModel):
    enabled: bool = False
    country_codes: List[str] = Field(default_factory=list)

    @field_validator("country_codes")
    @classmethod
    def validate_country_codes(cls, value: List[str]) -> List[str]:
        codes = [code.upper() for code in value]
        for code in codes:
            if not COUNTRY_CODE_PATTERN.match(code):
                raise ValueError(f"Invalid country code: {code}")
        return codes


# Responses


class DeploymentResponse(BaseModel):
    """Response model for Deployment entity"""

    id: int
    project_id: int
    mode: DeploymentMode
    maintenance_mode: bool
    backend_host: str
    frontend_host: str
    publishable_key: str
    mail_from_host: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthSettingsResponse(BaseModel):
    email_address: IdentifierSetting
    phone_number: IdentifierSetting
    username: IdentifierSetting
    password: PasswordSetting
    first_factor: FirstFactor
    alternate_first_factors: List[FirstFactor]
    second_factor_policy: SecondFactorPolicy
    multi_session_support: bool
    session_token_lifetime: int
    session_validity_period: int
    session_inactive_timeout: int
    updated_at: datetime

    class Config:
        from_attributes = True


class DisplaySettingsResponse(BaseModel):
    app_name: str
    primary_color: str
    tos_page_url: Optional[str] = None
    privacy_policy_url: Optional[str] = None
    sign_in_page_url: Optional[str] = None
    sign_up_page_url: Optional[str] = None
    after_sign_out_one_page_url: Optional[str] = None
    after_sign_out_all_page_url: Optional[str] = None
    user_profile_url: Optional[str] = None
    logo_image_url: Optional[str] = None
    favicon_image_url: Optional[str] = None
    default_user_profile_image_url: Optional[str] = None
    default_organization_profile_image_url: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class RestrictionsResponse(BaseModel):
    allowlist_enabled: bool
    blocklist_enabled: bool
    block_subaddresses: bool
    block_disposable_emails: bool
    block_voip_numbers: bool
    country_restrictions: CountryRestrictions
    banned_keywords: List[str]
    allowlisted_resources: List[str]
    blocklisted_resources: List[str]
    sign_up_mode: SignUpMode
    updated_at: datetime

    class Config:
        from_attributes = True


class DeploymentWithSettingsResponse(DeploymentResponse):
    """Deployment with all of its settings blocks"""

    auth_settings: Optional[AuthSettingsResponse] = None
    display_settings: Optional[DisplaySettingsResponse] = None
    restrictions: Optional[RestrictionsResponse] = None


# Updates


class UpdateAuthSettingsDto(BaseModel):
    """DTO for a partial update of the authentication settings"""

    email_address: Optional[IdentifierSetting] = None
    phone_number: Optional[IdentifierSetting] = None
    username: Optional[IdentifierSetting] = None
    password: Optional[PasswordSetting] = None
    first_factor: Optional[FirstFactor] = None
    alternate_first_factors: Optional[List[FirstFactor]] = None
    second_factor_policy: Optional[SecondFactorPolicy] = None
    multi_session_support: Optional[bool] = None
    session_token_lifetime: Optional[int] = Field(None, gt=0)
    session_validity_period: Optional[int] = Field(None, gt=0)
    session_inactive_timeout: Optional[int] = Field(None, gt=0)


class UpdateDisplaySettingsDto(BaseModel):
    """DTO for a partial update of the display settings"""

    app_name: Optional[str] = Field(None, min_length=1, max_length=100)
    primary_color: Optional[str] = Field(None, max_length=20)
    tos_page_url: Optional[str] = Field(None, max_length=500)
    privacy_policy_url: Optional[str] = Field(None, max_length=500)
    sign_in_page_url: Optional[str] = Field(None, max_length=500)
    sign_up_page_url: Optional[str] = Field(None, max_length=500)
    after_sign_out_one_page_url: Optional[str] = Field(None, max_length=500)
    after_sign_out_all_page_url: Optional[str] = Field(None, max_length=500)
    user_profile_url: Optional[str] = Field(None, max_length=500)
    logo_image_url: Optional[str] = Field(None, max_length=500)
    favicon_image_url: Optional[str] = Field(None, max_length=500)
    default_user_profile_image_url: Optional[str] = Field(None, max_length=500)
    default_organization_profile_image_url: Optional[str] = Field(None, max_length=500)

    @field_validator("primary_color")
    @classmethod
    def validate_primary_color(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not HEX_COLOR_PATTERN.match(value):
            raise ValueError("primary_color must be a hex color like #1A2B3C")
        return value


class UpdateRestrictionsDto(BaseModel):
    """DTO for a partial update of the sign-up restrictions"""

    allowlist_enabled: Optional[bool] = None
    blocklist_enabled: Optional[bool] = None
    block_subaddresses: Optional[bool] = None
    block_disposable_emails: Optional[bool] = None
    block_voip_numbers: Optional[bool] = None
    country_restrictions: Optional[CountryRestrictions] = None
    banned_keywords: Optional[List[str]] = None
    allowlisted_resources: Optional[List[str]] = None
    blocklisted_resources: Optional[List[str]] = None
    sign_up_mode: Optional[SignUpMode] = None


class UpdateMaintenanceModeDto(BaseModel):
    enabled: bool


# Social connections


class OauthCredentials(BaseModel):
    client_id: str = Field("", max_length=255)
    client_secret: str = Field("", max_length=255)
    redirect_uri: str = Field("", max_length=500)
    scopes: List[str] = Field(default_factory=list)


class PublicOauthCredentials(BaseModel):
    """Credentials as shown to the console; the client secret never leaves the server"""

    client_id: str = ""
    redirect_uri: str = ""
    scopes: List[str] = Field(default_factory=list)
    has_client_secret: bool = False

    @model_validator(mode="before")
    @classmethod
    def hide_client_secret(cls, value: Any) -> Any:
        if isinstance(value, dict) and "client_secret" in value:
            value = dict(value)
            value["has_client_secret"] = bool(value.pop("client_secret"))
        return value


class SocialConnectionResponse(BaseModel):
    id: int
    deployment_id: int
    provider: SocialProvider
    enabled: bool
    user_defined_scopes: List[str]
    credentials: PublicOauthCredentials
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SocialConnectionListResponse(BaseModel):
    data: List[SocialConnectionResponse]
    has_more: bool


class UpsertSocialConnectionDto(BaseModel):
    """
    Create or update the connection of one provider.
    Omitted fields keep their stored value; omitted credential fields too.
    """

    provider: SocialProvider
    enabled: Optional[bool] = None
    user_defined_scopes: Optional[List[str]] = None
    credentials: Optional[OauthCredentials] = None


# Image upload


class ImageType(str, enum.Enum):
    logo = "logo"
    favicon = "favicon"
    user_profile = "user-profile"
    org_profile = "org-profile"


class UploadResponse(BaseModel):
    url: str
