from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from dashboard_api.core.db.base import BaseModel


class DeploymentInvitation(BaseModel):
    """
    A pending invitation to sign up on a deployment.
    Extends BaseModel which provides: id, created_at, updated_at, deleted_at
    """

    __tablename__ = "deployment_invitations"

    deployment_id: Mapped[int] = mapped_column(
        ForeignKey("deployments.id"), nullable=False, index=True
    )

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email_address: Mapped[str] = mapped_column(String(320), nullable=False, index=True)

    expiry: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<DeploymentInvitation(id={self.id}, email='{self.email_address}')>"


class DeploymentWaitlistUser(BaseModel):
    """Someone waiting for access to a deployment in waitlist sign-up mode"""

    __tablename__ = "deployment_waitlist_users"

    deployment_id: Mapped[int] = mapped_column(
        ForeignKey("deployments.id"), nullable=False, index=True
    )

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email_address: Mapped[str] = mapped_column(String(320), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<DeploymentWaitlistUser(id={self.id}, email='{self.email_address}')>"
