"""Permission gate applied at every repository entry point.

Single-entity operations are gated before any directory I/O. List and read
results are narrowed with the FilterUnauthorized policy, which drops entries
the caller may not read instead of raising, so that existence is not
revealed to unauthorized callers.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from shared_kernel.authorization.exceptions import AuthorizationDeniedError
from shared_kernel.authorization.observability import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from shared_kernel.authorization.protocols import PermissionEvaluator
from shared_kernel.authorization.types import (
    Permission,
    ResourceType,
    format_permission,
    is_valid_resource_id,
)


@dataclass(frozen=True)
class FilterUnauthorized:
    """Silently drop identifiers the caller may not act upon.

    Attributes:
        resource_type: Type of the identifiers being filtered
        permission: Action that must be permitted for an identifier to survive
    """

    resource_type: ResourceType
    permission: Permission = Permission.READ

    def apply(
        self,
        caller: PermissionEvaluator,
        identifiers: Iterable[str],
    ) -> list[str]:
        """Return the permitted identifiers, preserving input order.

        Identifiers that cannot be scoped by a permission are dropped.
        """
        return [
            identifier
            for identifier in identifiers
            if is_valid_resource_id(identifier)
            and caller.is_permitted(
                format_permission(self.resource_type, identifier, self.permission)
            )
        ]


class PermissionGate:
    """Checks resource-scoped permissions on behalf of repositories."""

    def __init__(self, probe: AuthorizationProbe | None = None):
        self._probe = probe or DefaultAuthorizationProbe()

    def permits(
        self,
        caller: PermissionEvaluator,
        resource_type: ResourceType,
        resource_id: str,
        permission: Permission,
    ) -> bool:
        """Probe a permission without raising."""
        if not is_valid_resource_id(resource_id):
            return False
        return caller.is_permitted(
            format_permission(resource_type, resource_id, permission)
        )

    def require(
        self,
        caller: PermissionEvaluator,
        resource_type: ResourceType,
        resource_id: str,
        permission: Permission,
    ) -> None:
        """Require a permission.

        Raises:
            AuthorizationDeniedError: If the caller lacks the permission or
                the identifier cannot be scoped by a permission
        """
        if not is_valid_resource_id(resource_id):
            required = f"{resource_type}:{resource_id!r}:{permission}"
            self._probe.permission_denied(caller.principal, required)
            raise AuthorizationDeniedError(caller.principal, required)

        required = format_permission(resource_type, resource_id, permission)
        try:
            caller.check_permission(required)
        except AuthorizationDeniedError:
            self._probe.permission_denied(caller.principal, required)
            raise

    def filter_unauthorized(
        self,
        caller: PermissionEvaluator,
        resource_type: ResourceType,
        identifiers: Iterable[str],
        permission: Permission = Permission.READ,
    ) -> list[str]:
        """Apply the FilterUnauthorized policy to a list of identifiers."""
        candidates = list(identifiers)
        permitted = FilterUnauthorized(resource_type, permission).apply(
            caller, candidates
        )
        if len(permitted) != len(candidates):
            self._probe.entries_filtered(
                caller.principal,
                str(resource_type),
                len(candidates),
                len(permitted),
            )
        return permitted

    def require_link_change(
        self,
        caller: PermissionEvaluator,
        changed_type: ResourceType,
        changed_id: str,
        linked_type: ResourceType,
        added: Iterable[str],
        removed: Iterable[str],
    ) -> None:
        """Require write access on both sides of a relationship change.

        The changed entity must be writable, as must every linked entity
        being added or removed.

        Raises:
            AuthorizationDeniedError: On the first side that is not writable
        """
        self.require(caller, changed_type, changed_id, Permission.WRITE)
        for linked_id in [*added, *removed]:
            self.require(caller, linked_type, linked_id, Permission.WRITE)
