"""Observability for directory application services."""

from directory.application.observability.role_service_probe import (
    DefaultRoleServiceProbe,
    RoleServiceProbe,
)
from directory.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "DefaultRoleServiceProbe",
    "DefaultUserServiceProbe",
    "RoleServiceProbe",
    "UserServiceProbe",
]
