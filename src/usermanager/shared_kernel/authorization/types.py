"""Authorization type definitions for directory permissions.

Defines resource types and actions that make up the permission strings
checked before every directory operation. These enums ensure type safety
and prevent hardcoded strings across the codebase.
"""

from enum import StrEnum

from shared_kernel.authorization.permissions import (
    PART_DIVIDER,
    SUBPART_DIVIDER,
    WILDCARD,
)

RESERVED_CHARACTERS = frozenset({PART_DIVIDER, SUBPART_DIVIDER, WILDCARD})


class ResourceType(StrEnum):
    """Resource types that appear as the first part of a permission string."""

    USER = "user"
    ROLE = "role"
    PASSWORD = "password"


class Permission(StrEnum):
    """Actions that appear as the last part of a permission string."""

    READ = "read"
    WRITE = "write"
    MODIFY = "modify"


def is_valid_resource_id(resource_id: str) -> bool:
    """Check whether an identifier can be scoped by a permission string.

    An identifier holding a divider or wildcard, or surrounded by
    whitespace, would be parsed into a different scope than the one it
    names.
    """
    return (
        isinstance(resource_id, str)
        and bool(resource_id)
        and resource_id == resource_id.strip()
        and not RESERVED_CHARACTERS.intersection(resource_id)
    )


def format_resource(resource_type: ResourceType, resource_id: str) -> str:
    """Format a resource identifier.

    Raises:
        ValueError: If the identifier cannot be scoped

    Example:
        >>> format_resource(ResourceType.ROLE, "admins")
        "role:admins"
    """
    if not is_valid_resource_id(resource_id):
        raise ValueError(f"Identifier cannot be used in a permission: {resource_id!r}")
    return f"{resource_type}:{resource_id}"


def format_permission(
    resource_type: ResourceType,
    resource_id: str,
    permission: Permission,
) -> str:
    """Format a resource-scoped permission string.

    Args:
        resource_type: The type of resource
        resource_id: The unique identifier for the resource
        permission: The action requested on the resource

    Returns:
        Permission string (e.g., "role:admins:write")

    Raises:
        ValueError: If the identifier cannot be scoped

    Example:
        >>> format_permission(ResourceType.USER, "alice", Permission.READ)
        "user:alice:read"
    """
    return f"{format_resource(resource_type, resource_id)}:{permission}"
