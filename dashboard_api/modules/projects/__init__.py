"""Projects module"""

from .models import Project
from .service import ProjectService
from .router import router

__all__ = ["Project", "ProjectService", "router"]
