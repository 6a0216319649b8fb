"""Application services for the directory bounded context."""

from directory.application.services.role_service import RoleService
from directory.application.services.user_service import UserService

__all__ = [
    "RoleService",
    "UserService",
]
