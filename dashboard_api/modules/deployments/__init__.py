"""Deployments module"""

from .models import Deployment, DeploymentMode
from .service import DeploymentService
from .router import router

__all__ = ["Deployment", "DeploymentMode", "DeploymentService", "router"]
