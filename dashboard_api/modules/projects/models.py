from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from dashboard_api.core.db.base import BaseModel

if TYPE_CHECKING:
    from dashboard_api.modules.deployments.models import Deployment


class Project(BaseModel):
    """
    A console project. Owns one staging deployment and at most one
    production deployment.
    """

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    image_url: Mapped[str] = mapped_column(
        String(500), nullable=False, default="", server_default=""
    )

    # Relationships
    deployments: Mapped[list["Deployment"]] = relationship(
        "Deployment", back_populates="project", order_by="Deployment.id"
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.name}')>"
