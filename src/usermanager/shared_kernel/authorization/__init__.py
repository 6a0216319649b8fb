"""Authorization primitives for resource-scoped access control.

This module provides the permission strings, wildcard permission matching,
caller identity and gate used by every directory repository.
"""

from shared_kernel.authorization.exceptions import (
    AuthenticationError,
    AuthorizationDeniedError,
    AuthorizationError,
    DisabledAccountError,
    IncorrectCredentialsError,
)
from shared_kernel.authorization.gate import FilterUnauthorized, PermissionGate
from shared_kernel.authorization.permissions import WildcardPermission
from shared_kernel.authorization.protocols import (
    PermissionEvaluator,
    RolePermissionResolver,
    UserPermissionResolver,
)
from shared_kernel.authorization.subject import Subject
from shared_kernel.authorization.types import (
    Permission,
    ResourceType,
    format_permission,
    format_resource,
)

__all__ = [
    "AuthenticationError",
    "AuthorizationDeniedError",
    "AuthorizationError",
    "DisabledAccountError",
    "FilterUnauthorized",
    "IncorrectCredentialsError",
    "Permission",
    "PermissionEvaluator",
    "PermissionGate",
    "ResourceType",
    "RolePermissionResolver",
    "Subject",
    "UserPermissionResolver",
    "WildcardPermission",
    "format_permission",
    "format_resource",
]
