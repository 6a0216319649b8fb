"""LDAP implementation of the user repository."""

from __future__ import annotations

import base64
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from directory.domain.aggregates import User
from directory.infrastructure.ldap.exceptions import (
    DirectoryError,
    NameAlreadyBoundError,
    NameNotFoundError,
)
from directory.infrastructure.ldap.protocols import (
    ConnectionProvider,
    DirectoryConnection,
    ModificationOp,
)
from directory.infrastructure.mapping import EntityMapper, NameResolver
from directory.infrastructure.mapping.entities import USER_PASSWORD
from directory.infrastructure.mapping.exceptions import MappingError
from directory.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from directory.ports.exceptions import (
    EntityAlreadyExistsError,
    EntityInvalidError,
    EntityNotFoundError,
    RepositoryError,
)
from shared_kernel.authorization import (
    Permission,
    PermissionEvaluator,
    PermissionGate,
    ResourceType,
)


def _require_argument(name: str, value: Any) -> None:
    if value is None:
        raise ValueError(f"{name} must not be None")


def format_password(algorithm: str, digest: bytes) -> str:
    """Format a password hash as ``{ALGORITHM}base64(digest)``."""
    return f"{{{algorithm}}}{base64.b64encode(digest).decode('ascii')}"


class LdapUserRepository:
    """Permission-scoped user persistence in an LDAP directory."""

    def __init__(
        self,
        connections: ConnectionProvider,
        mapper: EntityMapper,
        resolver: NameResolver,
        gate: PermissionGate | None = None,
        probe: UserRepositoryProbe | None = None,
    ):
        self._connections = connections
        self._mapper = mapper
        self._resolver = resolver
        self._gate = gate or PermissionGate()
        self._probe = probe or DefaultUserRepositoryProbe()

    @contextmanager
    def _translate(self, operation: str, user_id: str | None) -> Iterator[None]:
        """Translate directory and mapping failures into repository errors."""
        try:
            yield
        except NameNotFoundError as e:
            self._probe.user_not_found(str(user_id))
            raise EntityNotFoundError(f"User '{user_id}' not found") from e
        except NameAlreadyBoundError as e:
            self._probe.user_already_exists(str(user_id))
            raise EntityAlreadyExistsError(f"User '{user_id}' already exists") from e
        except MappingError as e:
            self._probe.operation_failed(operation, user_id, e)
            raise EntityInvalidError(f"User '{user_id}' cannot be mapped: {e}") from e
        except DirectoryError as e:
            self._probe.operation_failed(operation, user_id, e)
            raise RepositoryError(f"{operation} failed for user '{user_id}'") from e

    def _user_dn(self, identifier: str) -> str:
        return self._resolver.qualified_name(identifier, User)

    def _load(self, connection: DirectoryConnection, identifier: str) -> User:
        attributes = connection.get_attributes(self._user_dn(identifier))
        return self._mapper.from_attributes(User, attributes)

    def _user_identifiers(
        self, connection: DirectoryConnection, caller: PermissionEvaluator
    ) -> list[str]:
        names = connection.list(self._resolver.subtree_name(User))
        identifiers = (self._resolver.short_name(dn, User) for dn in names)
        return sorted(set(self._gate.filter_unauthorized(caller, ResourceType.USER, identifiers)))

    def contains_user(self, caller: PermissionEvaluator, identifier: str) -> bool:
        """Check whether a user exists and is readable by the caller.

        Unreadable users are reported as absent.
        """
        _require_argument("identifier", identifier)
        if not self._gate.permits(caller, ResourceType.USER, identifier, Permission.READ):
            return False

        with (
            self._translate("contains_user", identifier),
            self._connections.open() as connection,
        ):
            try:
                connection.get_attributes(self._user_dn(identifier))
            except NameNotFoundError:
                return False
        return True

    def create_user(self, caller: PermissionEvaluator, user: User) -> None:
        _require_argument("user", user)
        _require_argument("user.identifier", user.identifier)
        self._gate.require(caller, ResourceType.USER, user.identifier, Permission.WRITE)

        with (
            self._translate("create_user", user.identifier),
            self._connections.open() as connection,
        ):
            attributes = {
                **self._mapper.to_attributes(user),
                **self._mapper.object_class_attribute(User),
            }
            # Empty attributes cannot be added
            connection.bind(
                self._resolver.qualified_name_of(user),
                {name: values for name, values in attributes.items() if values},
            )

        self._probe.user_created(user.identifier)

    def delete_user(self, caller: PermissionEvaluator, identifier: str) -> None:
        _require_argument("identifier", identifier)
        self._gate.require(caller, ResourceType.USER, identifier, Permission.WRITE)

        with (
            self._translate("delete_user", identifier),
            self._connections.open() as connection,
        ):
            connection.unbind(self._user_dn(identifier))

        self._probe.user_deleted(identifier)

    def get_user(self, caller: PermissionEvaluator, identifier: str) -> User:
        _require_argument("identifier", identifier)
        self._gate.require(caller, ResourceType.USER, identifier, Permission.READ)

        with (
            self._translate("get_user", identifier),
            self._connections.open() as connection,
        ):
            user = self._load(connection, identifier)

        self._probe.user_retrieved(identifier)
        return user

    def get_user_identifiers(self, caller: PermissionEvaluator) -> list[str]:
        with (
            self._translate("get_user_identifiers", None),
            self._connections.open() as connection,
        ):
            identifiers = self._user_identifiers(connection, caller)

        self._probe.users_listed(len(identifiers))
        return identifiers

    def get_users(self, caller: PermissionEvaluator) -> list[User]:
        with (
            self._translate("get_users", None),
            self._connections.open() as connection,
        ):
            users = [
                self._load(connection, identifier)
                for identifier in self._user_identifiers(connection, caller)
            ]

        self._probe.users_listed(len(users))
        return users

    def get_user_unsecured(self, identifier: str) -> User:
        """Retrieve a user without a permission check.

        Used by the realm and other system code that acts before a caller
        identity exists. Every access is logged.
        """
        _require_argument("identifier", identifier)
        self._probe.unsecured_user_access(identifier)

        with (
            self._translate("get_user_unsecured", identifier),
            self._connections.open() as connection,
        ):
            return self._load(connection, identifier)

    def update_user(self, caller: PermissionEvaluator, user: User) -> None:
        """Replace all mapped attributes of the user."""
        _require_argument("user", user)
        _require_argument("user.identifier", user.identifier)
        self._gate.require(caller, ResourceType.USER, user.identifier, Permission.WRITE)

        with (
            self._translate("update_user", user.identifier),
            self._connections.open() as connection,
        ):
            connection.modify_attributes(
                self._resolver.qualified_name_of(user),
                ModificationOp.REPLACE,
                {
                    **self._mapper.to_attributes(user),
                    **self._mapper.object_class_attribute(User),
                },
            )

        self._probe.user_updated(user.identifier)

    def update_user_password(
        self,
        caller: PermissionEvaluator,
        identifier: str,
        algorithm: str,
        digest: bytes,
    ) -> None:
        """Replace the stored password hash of a user."""
        _require_argument("identifier", identifier)
        _require_argument("algorithm", algorithm)
        _require_argument("digest", digest)
        self._gate.require(caller, ResourceType.PASSWORD, identifier, Permission.MODIFY)

        with (
            self._translate("update_user_password", identifier),
            self._connections.open() as connection,
        ):
            connection.modify_attributes(
                self._user_dn(identifier),
                ModificationOp.REPLACE,
                {
                    self._mapper.resolve_attribute(User, USER_PASSWORD): [
                        format_password(algorithm, digest)
                    ]
                },
            )

        self._probe.user_password_updated(identifier, algorithm)
