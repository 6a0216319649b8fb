"""LDAP realm: authentication and permission resolution.

A principal authenticates by binding to the directory as its own entry.
Its roles are the role entries whose membership attribute holds its DN,
and its permissions come from the role permission resolver plus the user
permission templates.
"""

from __future__ import annotations

from directory.domain.aggregates import Role, User
from directory.infrastructure.ldap.exceptions import (
    DirectoryAccessDeniedError,
    DirectoryAuthenticationError,
    DirectoryError,
)
from directory.infrastructure.ldap.protocols import AuthenticatingConnectionProvider
from directory.infrastructure.mapping import EntityMapper, NameResolver
from directory.infrastructure.mapping.entities import ROLE_USERS
from directory.infrastructure.mapping.exceptions import MappingError
from directory.infrastructure.observability import DefaultRealmProbe, RealmProbe
from directory.ports.exceptions import EntityInvalidError
from shared_kernel.authorization import (
    AuthenticationError,
    DisabledAccountError,
    IncorrectCredentialsError,
    Subject,
    WildcardPermission,
)
from shared_kernel.authorization.protocols import (
    RolePermissionResolver,
    UserPermissionResolver,
)


class LdapRealm:
    """Authenticates principals against the directory and builds subjects."""

    def __init__(
        self,
        connections: AuthenticatingConnectionProvider,
        mapper: EntityMapper,
        resolver: NameResolver,
        role_permissions: RolePermissionResolver | None = None,
        user_permissions: UserPermissionResolver | None = None,
        probe: RealmProbe | None = None,
    ):
        self._connections = connections
        self._mapper = mapper
        self._resolver = resolver
        self._role_permissions = role_permissions
        self._user_permissions = user_permissions
        self._probe = probe or DefaultRealmProbe()

    def authenticate(self, principal: str, credentials: str) -> None:
        """Bind to the directory as ``principal``.

        Raises:
            IncorrectCredentialsError: If the credentials are empty or rejected
            DisabledAccountError: If the directory refuses the account access
            AuthenticationError: For any other failure
        """
        if not principal or not credentials:
            # An empty password would be an unauthenticated bind
            self._probe.authentication_failed(str(principal), "empty_credentials")
            raise IncorrectCredentialsError("Principal and credentials are required")

        try:
            user_dn = self._resolver.qualified_name(principal, User)
            with self._connections.open_as(user_dn, credentials):
                pass
        except MappingError as e:
            self._probe.authentication_failed(principal, "invalid_principal")
            raise AuthenticationError(f"Invalid principal: {principal!r}") from e
        except DirectoryAuthenticationError as e:
            self._probe.authentication_failed(principal, "incorrect_credentials")
            raise IncorrectCredentialsError(f"Incorrect credentials for {principal!r}") from e
        except DirectoryAccessDeniedError as e:
            self._probe.authentication_failed(principal, "account_disabled")
            raise DisabledAccountError(f"Account {principal!r} may not log in") from e
        except DirectoryError as e:
            self._probe.authentication_failed(principal, "directory_error")
            raise AuthenticationError(f"Could not authenticate {principal!r}") from e

        self._probe.authentication_succeeded(principal)

    def resolve_subject(self, principal: str) -> Subject:
        """Find the roles of ``principal`` and resolve its permissions.

        Raises:
            AuthenticationError: If the roles cannot be read from the directory
        """
        try:
            user_dn = self._resolver.qualified_name(principal, User)
            members_attribute = self._mapper.resolve_attribute(Role, ROLE_USERS)
            with self._connections.open() as connection:
                names = connection.search(
                    self._resolver.subtree_name(Role),
                    {members_attribute: [user_dn]},
                )
            roles = sorted({self._resolver.short_name(dn, Role) for dn in names})
        except (MappingError, EntityInvalidError, DirectoryError) as e:
            raise AuthenticationError(f"Could not resolve roles of {principal!r}") from e

        permissions: list[WildcardPermission] = []
        if self._role_permissions is not None:
            for role in roles:
                permissions.extend(self._role_permissions.resolve_permissions_in_role(role))
        if self._user_permissions is not None:
            permissions.extend(self._user_permissions.resolve_permissions(principal, roles))

        self._probe.subject_resolved(principal, len(roles), len(permissions))
        return Subject(
            principal=principal,
            roles=frozenset(roles),
            permissions=tuple(permissions),
        )

    def login(self, principal: str, credentials: str) -> Subject:
        """Authenticate ``principal`` and return its subject."""
        self.authenticate(principal, credentials)
        return self.resolve_subject(principal)
