"""Invitations and waitlist module"""

from .models import DeploymentInvitation, DeploymentWaitlistUser
from .service import InvitationService
from .router import router

__all__ = ["DeploymentInvitation", "DeploymentWaitlistUser", "InvitationService", "router"]
