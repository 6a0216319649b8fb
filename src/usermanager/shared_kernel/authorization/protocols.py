"""Authorization protocols.

Defines the interfaces for permission evaluation and permission resolution,
allowing repositories to be tested with any caller identity and realms to
be configured with swappable resolvers.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from shared_kernel.authorization.permissions import WildcardPermission


class PermissionEvaluator(Protocol):
    """Protocol for the caller identity passed to every repository call.

    The primary implementation is Subject, but any object that can answer
    permission checks may be used.
    """

    @property
    def principal(self) -> str | None:
        """The identifier of the caller, if known."""
        ...

    def is_permitted(self, permission: str) -> bool:
        """Check whether the caller holds a permission.

        Args:
            permission: Permission string (e.g., "role:admins:read")

        Returns:
            True if permission is granted, False otherwise
        """
        ...

    def check_permission(self, permission: str) -> None:
        """Require a permission.

        Raises:
            AuthorizationDeniedError: If the permission is not granted
        """
        ...


class RolePermissionResolver(Protocol):
    """Resolves the permissions granted through membership of a role."""

    def resolve_permissions_in_role(self, role: str) -> list[WildcardPermission]:
        """Return the permissions granted to members of ``role``."""
        ...


class UserPermissionResolver(Protocol):
    """Resolves the permissions granted to an authenticated principal."""

    def resolve_permissions(
        self,
        principal: str,
        roles: Collection[str],
    ) -> list[WildcardPermission]:
        """Return the permissions granted to ``principal`` holding ``roles``."""
        ...
