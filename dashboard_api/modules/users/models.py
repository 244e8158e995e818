from sqlalchemy import Boolean, ForeignKey, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional

from dashboard_api.core.db.base import BaseModel


class DeploymentUser(BaseModel):
    """
    An end user registered on a deployment.
    Extends BaseModel which provides: id, created_at, updated_at, deleted_at
    """

    __tablename__ = "deployment_users"

    deployment_id: Mapped[int] = mapped_column(
        ForeignKey("deployments.id"), nullable=False, index=True
    )

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    username: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, default=None, index=True
    )
    email_address: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    phone_number: Mapped[Optional[str]] = mapped_column(
        String(50), nullable=True, default=None
    )

    # bcrypt hash; users created without a password sign in passwordless
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, default=None
    )

    disabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    public_metadata: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    private_metadata: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

    def __repr__(self) -> str:
        return (
            f"<DeploymentUser(id={self.id}, deployment_id={self.deployment_id}, "
            f"email='{self.email_address}')>"
        )
