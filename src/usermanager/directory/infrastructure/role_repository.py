"""LDAP implementation of the role repository.

Every operation checks the caller's permissions, opens one directory
connection for the duration of the call and translates directory failures
into repository errors. Membership is stored on the role entry as the DNs
of its users.

Membership changes issue one modify per added or removed link, with no
locking across calls. A link that is already in the requested state is
treated as applied.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from directory.domain.aggregates import Role, User
from directory.infrastructure.ldap.exceptions import (
    AttributeValueExistsError,
    DirectoryError,
    NameAlreadyBoundError,
    NameNotFoundError,
    NoSuchAttributeError,
)
from directory.infrastructure.ldap.protocols import (
    ConnectionProvider,
    DirectoryConnection,
    ModificationOp,
)
from directory.infrastructure.mapping import EntityMapper, NameResolver
from directory.infrastructure.mapping.entities import ROLE_USERS
from directory.infrastructure.mapping.exceptions import MappingError
from directory.infrastructure.observability import (
    DefaultRoleRepositoryProbe,
    RoleRepositoryProbe,
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


class LdapRoleRepository:
    """Permission-scoped role persistence in an LDAP directory."""

    def __init__(
        self,
        connections: ConnectionProvider,
        mapper: EntityMapper,
        resolver: NameResolver,
        gate: PermissionGate | None = None,
        probe: RoleRepositoryProbe | None = None,
    ):
        self._connections = connections
        self._mapper = mapper
        self._resolver = resolver
        self._gate = gate or PermissionGate()
        self._probe = probe or DefaultRoleRepositoryProbe()

    @contextmanager
    def _translate(self, operation: str, role_id: str | None) -> Iterator[None]:
        """Translate directory and mapping failures into repository errors."""
        try:
            yield
        except NameNotFoundError as e:
            self._probe.role_not_found(str(role_id))
            raise EntityNotFoundError(f"Role '{role_id}' not found") from e
        except NameAlreadyBoundError as e:
            self._probe.role_already_exists(str(role_id))
            raise EntityAlreadyExistsError(f"Role '{role_id}' already exists") from e
        except MappingError as e:
            self._probe.operation_failed(operation, role_id, e)
            raise EntityInvalidError(f"Role '{role_id}' cannot be mapped: {e}") from e
        except DirectoryError as e:
            self._probe.operation_failed(operation, role_id, e)
            raise RepositoryError(f"{operation} failed for role '{role_id}'") from e

    @property
    def _users_attribute(self) -> str:
        return self._mapper.resolve_attribute(Role, ROLE_USERS)

    def _role_dn(self, identifier: str) -> str:
        return self._resolver.qualified_name(identifier, Role)

    def _user_dn(self, identifier: str) -> str:
        return self._resolver.qualified_name(identifier, User)

    def _readable(
        self,
        caller: PermissionEvaluator,
        resource_type: ResourceType,
        identifiers: Iterable[str],
    ) -> list[str]:
        """Deduplicated, sorted identifiers the caller may read."""
        return sorted(set(self._gate.filter_unauthorized(caller, resource_type, identifiers)))

    def _load(
        self,
        connection: DirectoryConnection,
        caller: PermissionEvaluator,
        identifier: str,
    ) -> Role:
        attributes = connection.get_attributes(self._role_dn(identifier))
        role = self._mapper.from_attributes(Role, attributes)
        role.users = self._readable(caller, ResourceType.USER, role.users)
        return role

    def _current_users(self, connection: DirectoryConnection, identifier: str) -> list[str]:
        """All members of a role, unfiltered."""
        attributes = connection.get_attributes(self._role_dn(identifier))
        role = self._mapper.from_attributes_filtered(Role, attributes, True, {ROLE_USERS})
        return role.users

    def _role_identifiers(
        self, connection: DirectoryConnection, caller: PermissionEvaluator
    ) -> list[str]:
        names = connection.list(self._resolver.subtree_name(Role))
        return self._readable(
            caller,
            ResourceType.ROLE,
            (self._resolver.short_name(dn, Role) for dn in names),
        )

    def _link(
        self,
        connection: DirectoryConnection,
        role_id: str,
        user_id: str,
        operation: ModificationOp,
    ) -> None:
        """Add or remove one membership link on the role entry."""
        try:
            connection.modify_attributes(
                self._role_dn(role_id),
                operation,
                {self._users_attribute: [self._user_dn(user_id)]},
            )
        except (AttributeValueExistsError, NoSuchAttributeError):
            self._probe.membership_already_applied(role_id, user_id, operation.value)

    def _replace(
        self,
        connection: DirectoryConnection,
        role: Role,
        attributes: dict[str, list[str]],
    ) -> None:
        connection.modify_attributes(
            self._resolver.qualified_name_of(role), ModificationOp.REPLACE, attributes
        )

    def create_role(self, caller: PermissionEvaluator, role: Role) -> None:
        """Create a role entry.

        Creating a role with members requires write access on every member.
        """
        _require_argument("role", role)
        _require_argument("role.identifier", role.identifier)
        self._gate.require_link_change(
            caller, ResourceType.ROLE, role.identifier, ResourceType.USER, role.users, ()
        )

        with (
            self._translate("create_role", role.identifier),
            self._connections.open() as connection,
        ):
            attributes = {
                **self._mapper.to_attributes(role),
                **self._mapper.object_class_attribute(Role),
            }
            # Empty attributes cannot be added
            connection.bind(
                self._resolver.qualified_name_of(role),
                {name: values for name, values in attributes.items() if values},
            )

        self._probe.role_created(role.identifier, len(role.users))

    def delete_role(self, caller: PermissionEvaluator, identifier: str) -> None:
        _require_argument("identifier", identifier)
        self._gate.require(caller, ResourceType.ROLE, identifier, Permission.WRITE)

        with (
            self._translate("delete_role", identifier),
            self._connections.open() as connection,
        ):
            connection.unbind(self._role_dn(identifier))

        self._probe.role_deleted(identifier)

    def get_role(self, caller: PermissionEvaluator, identifier: str) -> Role:
        """Retrieve a role with the members the caller may read."""
        _require_argument("identifier", identifier)
        self._gate.require(caller, ResourceType.ROLE, identifier, Permission.READ)

        with (
            self._translate("get_role", identifier),
            self._connections.open() as connection,
        ):
            role = self._load(connection, caller, identifier)

        self._probe.role_retrieved(identifier, len(role.users))
        return role

    def get_role_identifiers(self, caller: PermissionEvaluator) -> list[str]:
        with (
            self._translate("get_role_identifiers", None),
            self._connections.open() as connection,
        ):
            identifiers = self._role_identifiers(connection, caller)

        self._probe.roles_listed(len(identifiers))
        return identifiers

    def get_roles(self, caller: PermissionEvaluator) -> list[Role]:
        with (
            self._translate("get_roles", None),
            self._connections.open() as connection,
        ):
            roles = [
                self._load(connection, caller, identifier)
                for identifier in self._role_identifiers(connection, caller)
            ]

        self._probe.roles_listed(len(roles))
        return roles

    def get_roles_for_user(
        self, caller: PermissionEvaluator, user_identifier: str
    ) -> list[str]:
        """Identifiers of the readable roles holding the user as a member.

        Searches the role subtree on the membership attribute, since the
        relation is stored on the role entries only.
        """
        _require_argument("user_identifier", user_identifier)
        self._gate.require(caller, ResourceType.USER, user_identifier, Permission.READ)

        with (
            self._translate("get_roles_for_user", None),
            self._connections.open() as connection,
        ):
            names = connection.search(
                self._resolver.subtree_name(Role),
                {self._users_attribute: [self._user_dn(user_identifier)]},
            )
            return self._readable(
                caller,
                ResourceType.ROLE,
                (self._resolver.short_name(dn, Role) for dn in names),
            )

    def set_roles_for_user(
        self,
        caller: PermissionEvaluator,
        user_identifier: str,
        role_identifiers: list[str],
    ) -> None:
        """Make the user a member of exactly the given roles.

        Roles the caller may not read are left untouched.
        """
        _require_argument("user_identifier", user_identifier)
        _require_argument("role_identifiers", role_identifiers)
        self._gate.require(caller, ResourceType.USER, user_identifier, Permission.WRITE)

        with (
            self._translate("set_roles_for_user", None),
            self._connections.open() as connection,
        ):
            names = connection.search(
                self._resolver.subtree_name(Role),
                {self._users_attribute: [self._user_dn(user_identifier)]},
            )
            current = set(
                self._readable(
                    caller,
                    ResourceType.ROLE,
                    (self._resolver.short_name(dn, Role) for dn in names),
                )
            )
            desired = set(role_identifiers)
            added = sorted(desired - current)
            removed = sorted(current - desired)
            self._gate.require_link_change(
                caller, ResourceType.USER, user_identifier, ResourceType.ROLE, added, removed
            )

            for role_id in added:
                with self._translate("set_roles_for_user", role_id):
                    self._link(connection, role_id, user_identifier, ModificationOp.ADD)
            for role_id in removed:
                with self._translate("set_roles_for_user", role_id):
                    self._link(connection, role_id, user_identifier, ModificationOp.REMOVE)

        for role_id in added:
            self._probe.role_members_changed(role_id, 1, 0)
        for role_id in removed:
            self._probe.role_members_changed(role_id, 0, 1)

    def get_role_users(self, caller: PermissionEvaluator, identifier: str) -> list[str]:
        _require_argument("identifier", identifier)
        self._gate.require(caller, ResourceType.ROLE, identifier, Permission.READ)

        with (
            self._translate("get_role_users", identifier),
            self._connections.open() as connection,
        ):
            users = self._current_users(connection, identifier)

        return self._readable(caller, ResourceType.USER, users)

    def set_role_users(
        self,
        caller: PermissionEvaluator,
        identifier: str,
        user_identifiers: list[str],
    ) -> None:
        """Make exactly the given users members of the role.

        Members the caller may not read are left untouched.
        """
        _require_argument("identifier", identifier)
        _require_argument("user_identifiers", user_identifiers)
        self._gate.require(caller, ResourceType.ROLE, identifier, Permission.WRITE)

        with (
            self._translate("set_role_users", identifier),
            self._connections.open() as connection,
        ):
            current = set(
                self._readable(
                    caller,
                    ResourceType.USER,
                    self._current_users(connection, identifier),
                )
            )
            desired = set(user_identifiers)
            added = sorted(desired - current)
            removed = sorted(current - desired)
            self._gate.require_link_change(
                caller, ResourceType.ROLE, identifier, ResourceType.USER, added, removed
            )

            for user_id in added:
                self._link(connection, identifier, user_id, ModificationOp.ADD)
            for user_id in removed:
                self._link(connection, identifier, user_id, ModificationOp.REMOVE)

        self._probe.role_members_changed(identifier, len(added), len(removed))

    def _require_member_change(
        self,
        connection: DirectoryConnection,
        caller: PermissionEvaluator,
        role: Role,
    ) -> None:
        current = set(self._current_users(connection, role.identifier))
        desired = set(role.users)
        self._gate.require_link_change(
            caller,
            ResourceType.ROLE,
            role.identifier,
            ResourceType.USER,
            sorted(desired - current),
            sorted(current - desired),
        )

    def update_role(self, caller: PermissionEvaluator, role: Role) -> None:
        """Replace all mapped attributes of the role, members included."""
        _require_argument("role", role)
        _require_argument("role.identifier", role.identifier)
        self._gate.require(caller, ResourceType.ROLE, role.identifier, Permission.WRITE)

        with (
            self._translate("update_role", role.identifier),
            self._connections.open() as connection,
        ):
            self._require_member_change(connection, caller, role)
            self._replace(
                connection,
                role,
                {
                    **self._mapper.to_attributes(role),
                    **self._mapper.object_class_attribute(Role),
                },
            )

        self._probe.role_updated(role.identifier, "all")

    def update_role_no_users(self, caller: PermissionEvaluator, role: Role) -> None:
        """Replace all mapped attributes of the role except its members."""
        _require_argument("role", role)
        _require_argument("role.identifier", role.identifier)
        self._gate.require(caller, ResourceType.ROLE, role.identifier, Permission.WRITE)

        with (
            self._translate("update_role_no_users", role.identifier),
            self._connections.open() as connection,
        ):
            self._replace(
                connection,
                role,
                {
                    **self._mapper.to_attributes_filtered(role, False, {ROLE_USERS}),
                    **self._mapper.object_class_attribute(Role),
                },
            )

        self._probe.role_updated(role.identifier, "attributes")

    def update_role_users(self, caller: PermissionEvaluator, role: Role) -> None:
        """Replace only the members of the role."""
        _require_argument("role", role)
        _require_argument("role.identifier", role.identifier)
        self._gate.require(caller, ResourceType.ROLE, role.identifier, Permission.WRITE)

        with (
            self._translate("update_role_users", role.identifier),
            self._connections.open() as connection,
        ):
            self._require_member_change(connection, caller, role)
            self._replace(
                connection,
                role,
                self._mapper.to_attributes_filtered(role, True, {ROLE_USERS}),
            )

        self._probe.role_updated(role.identifier, "users")
