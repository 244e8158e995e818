"""Users module"""

from .models import DeploymentUser
from .service import UsersService
from .schemas import CreateUserDto, UpdateUserDto, UserResponse
from .router import router

__all__ = [
    "DeploymentUser",
    "UsersService",
    "CreateUserDto",
    "UpdateUserDto",
    "UserResponse",
    "router",
]
