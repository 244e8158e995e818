import enum
from sqlalchemy import Boolean, ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING, List, Optional

from dashboard_api.core.db.base import BaseModel

if TYPE_CHECKING:
    from dashboard_api.modules.projects.models import Project


class DeploymentMode(str, enum.Enum):
    staging = "staging"
    production = "production"


class FirstFactor(str, enum.Enum):
    email_password = "email_password"
    username_password = "username_password"
    email_otp = "email_otp"
    email_magic_link = "email_magic_link"
    phone_otp = "phone_otp"


class SecondFactorPolicy(str, enum.Enum):
    none = "none"
    optional = "optional"
    enforced = "enforced"


class SignUpMode(str, enum.Enum):
    public = "public"
    restricted = "restricted"
    waitlist = "waitlist"


class Deployment(BaseModel):
    """
    One environment (staging or production) of a project.
    Settings live in one-to-one child tables.
    """

    __tablename__ = "deployments"

    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id"), nullable=False, index=True
    )

    mode: Mapped[DeploymentMode] = mapped_column(
        SQLEnum(DeploymentMode, name="deployment_mode_enum", native_enum=False),
        nullable=False,
    )

    maintenance_mode: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    backend_host: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    frontend_host: Mapped[str] = mapped_column(String(255), nullable=False)
    publishable_key: Mapped[str] = mapped_column(String(512), nullable=False)
    mail_from_host: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="deployments")

    auth_settings: Mapped[Optional["DeploymentAuthSettings"]] = relationship(
        "DeploymentAuthSettings",
        back_populates="deployment",
        uselist=False,
        cascade="all, delete-orphan",
    )
    display_settings: Mapped[Optional["DeploymentDisplaySettings"]] = relationship(
        "DeploymentDisplaySettings",
        back_populates="deployment",
        uselist=False,
        cascade="all, delete-orphan",
    )
    restrictions: Mapped[Optional["DeploymentRestrictions"]] = relationship(
        "DeploymentRestrictions",
        back_populates="deployment",
        uselist=False,
        cascade="all, delete-orphan",
    )
    social_connections: Mapped[List["DeploymentSocialConnection"]] = relationship(
        "DeploymentSocialConnection",
        back_populates="deployment",
        cascade="all, delete-orphan",
        order_by="DeploymentSocialConnection.id",
    )

    def __repr__(self) -> str:
        return f"<Deployment(id={self.id}, mode={self.mode.value}, host='{self.backend_host}')>"


class DeploymentAuthSettings(BaseModel):
    """Sign-in/sign-up configuration of a deployment"""

    __tablename__ = "deployment_auth_settings"

    deployment_id: Mapped[int] = mapped_column(
        ForeignKey("deployments.id"), nullable=False, unique=True
    )

    # {"enabled": bool, "required": bool}
    email_address: Mapped[dict] = mapped_column(JSON, nullable=False)
    phone_number: Mapped[dict] = mapped_column(JSON, nullable=False)
    username: Mapped[dict] = mapped_column(JSON, nullable=False)
    # {"enabled": bool, "min_length": int}
    password: Mapped[dict] = mapped_column(JSON, nullable=False)

    first_factor: Mapped[FirstFactor] = mapped_column(
        SQLEnum(FirstFactor, name="first_factor_enum", native_enum=False),
        nullable=False,
        default=FirstFactor.email_password,
    )
    alternate_first_factors: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    second_factor_policy: Mapped[SecondFactorPolicy] = mapped_column(
        SQLEnum(SecondFactorPolicy, name="second_factor_policy_enum", native_enum=False),
        nullable=False,
        default=SecondFactorPolicy.none,
    )

    multi_session_support: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Seconds
    session_token_lifetime: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    session_validity_period: Mapped[int] = mapped_column(Integer, nullable=False, default=604800)
    session_inactive_timeout: Mapped[int] = mapped_column(Integer, nullable=False, default=86400)

    deployment: Mapped["Deployment"] = relationship("Deployment", back_populates="auth_settings")


class DeploymentDisplaySettings(BaseModel):
    """Branding and redirect URLs of a deployment's hosted pages"""

    __tablename__ = "deployment_display_settings"

    deployment_id: Mapped[int] = mapped_column(
        ForeignKey("deployments.id"), nullable=False, unique=True
    )

    app_name: Mapped[str] = mapped_column(String(100), nullable=False)
    primary_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#6366F1")

    tos_page_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    privacy_policy_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    sign_in_page_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    sign_up_page_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    after_sign_out_one_page_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    after_sign_out_all_page_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    user_profile_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    logo_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    favicon_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    default_user_profile_image_url: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True
    )
    default_organization_profile_image_url: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True
    )

    deployment: Mapped["Deployment"] = relationship("Deployment", back_populates="display_settings")


class DeploymentRestrictions(BaseModel):
    """Who may sign up to a deployment"""

    __tablename__ = "deployment_restrictions"

    deployment_id: Mapped[int] = mapped_column(
        ForeignKey("deployments.id"), nullable=False, unique=True
    )

    allowlist_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    blocklist_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    block_subaddresses: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    block_disposable_emails: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    block_voip_numbers: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # {"enabled": bool, "country_codes": [str]}
    country_restrictions: Mapped[dict] = mapped_column(JSON, nullable=False)
    banned_keywords: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    allowlisted_resources: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    blocklisted_resources: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    sign_up_mode: Mapped[SignUpMode] = mapped_column(
        SQLEnum(SignUpMode, name="sign_up_mode_enum", native_enum=False),
        nullable=False,
        default=SignUpMode.public,
    )

    deployment: Mapped["Deployment"] = relationship("Deployment", back_populates="restrictions")


class SocialProvider(str, enum.Enum):
    x_oauth = "x_oauth"
    github_oauth = "github_oauth"
    gitlab_oauth = "gitlab_oauth"
    google_oauth = "google_oauth"
    facebook_oauth = "facebook_oauth"
    microsoft_oauth = "microsoft_oauth"
    linkedin_oauth = "linkedin_oauth"
    discord_oauth = "discord_oauth"
    apple_oauth = "apple_oauth"


class DeploymentSocialConnection(BaseModel):
    """OAuth provider enabled on a deployment, one row per provider"""

    __tablename__ = "deployment_social_connections"
    __table_args__ = (
        UniqueConstraint("deployment_id", "provider", name="uq_social_connection_provider"),
    )

    deployment_id: Mapped[int] = mapped_column(
        ForeignKey("deployments.id"), nullable=False, index=True
    )

    provider: Mapped[SocialProvider] = mapped_column(
        SQLEnum(SocialProvider, name="social_provider_enum", native_enum=False),
        nullable=False,
    )
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    user_defined_scopes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    # {"client_id", "client_secret", "redirect_uri", "scopes"}; empty until configured
    credentials: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    deployment: Mapped["Deployment"] = relationship(
        "Deployment", back_populates="social_connections"
    )
