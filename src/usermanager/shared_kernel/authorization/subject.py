"""Authenticated caller identity.

A Subject carries its principal, its roles and the permissions resolved for
them. It is passed explicitly into every repository call instead of being
looked up from ambient state.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from shared_kernel.authorization.exceptions import AuthorizationDeniedError
from shared_kernel.authorization.permissions import WildcardPermission


@dataclass(frozen=True)
class Subject:
    """An authenticated caller and the permissions it holds.

    Attributes:
        principal: Identifier the caller authenticated with
        roles: Role identifiers the caller is a member of
        permissions: Wildcard permissions granted to the caller
    """

    principal: str | None
    roles: frozenset[str] = field(default_factory=frozenset)
    permissions: tuple[WildcardPermission, ...] = ()

    @classmethod
    def of(
        cls,
        principal: str | None,
        permissions: Iterable[str | WildcardPermission] = (),
        roles: Iterable[str] = (),
    ) -> Subject:
        """Build a subject, parsing any permission given as a string."""
        parsed = tuple(
            p if isinstance(p, WildcardPermission) else WildcardPermission.parse(p)
            for p in permissions
        )
        return cls(principal=principal, roles=frozenset(roles), permissions=parsed)

    @classmethod
    def anonymous(cls) -> Subject:
        """A subject without principal or permissions."""
        return cls(principal=None)

    def is_permitted(self, permission: str) -> bool:
        requested = WildcardPermission.parse(permission)
        return any(granted.implies(requested) for granted in self.permissions)

    def check_permission(self, permission: str) -> None:
        if not self.is_permitted(permission):
            raise AuthorizationDeniedError(self.principal, permission)
