# Import all models here so the metadata knows every table
# (create_all and Alembic autogenerate read Base.metadata)

from dashboard_api.core.db.base import Base, BaseModel
from dashboard_api.modules.projects.models import Project
from dashboard_api.modules.deployments.models import (
    Deployment,
    DeploymentAuthSettings,
    DeploymentDisplaySettings,
    DeploymentRestrictions,
    DeploymentSocialConnection,
)
from dashboard_api.modules.users.models import DeploymentUser
from dashboard_api.modules.invitations.models import DeploymentInvitation, DeploymentWaitlistUser

__all__ = [
    "Base",
    "BaseModel",
    "Project",
    "Deployment",
    "DeploymentAuthSettings",
    "DeploymentDisplaySettings",
    "DeploymentRestrictions",
    "DeploymentSocialConnection",
    "DeploymentUser",
    "DeploymentInvitation",
    "DeploymentWaitlistUser",
]
