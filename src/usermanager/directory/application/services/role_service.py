"""Role application service for the directory bounded context.

Exposes role management to the web layer. Repository failures surface as
ServiceError; authorization denials propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from directory.application.observability import DefaultRoleServiceProbe, RoleServiceProbe
from directory.domain.aggregates import Role, User
from directory.ports.exceptions import RepositoryError, ServiceError
from directory.ports.repositories import IRoleRepository, IUserRepository
from shared_kernel.authorization.protocols import PermissionEvaluator


class RoleService:
    """Application service for role management."""

    def __init__(
        self,
        role_repository: IRoleRepository,
        user_repository: IUserRepository,
        probe: RoleServiceProbe | None = None,
    ):
        """Initialize RoleService with dependencies.

        Args:
            role_repository: Repository for role persistence and membership
            user_repository: Repository for looking up candidate members
            probe: Optional domain probe for observability
        """
        self._role_repository = role_repository
        self._user_repository = user_repository
        self._probe = probe or DefaultRoleServiceProbe()

    @contextmanager
    def _translate(self, operation: str, caller: PermissionEvaluator) -> Iterator[None]:
        try:
            yield
        except RepositoryError as e:
            self._probe.operation_failed(operation, caller.principal, e)
            raise ServiceError(f"{operation} failed: {e}") from e

    def create_role(self, caller: PermissionEvaluator, role: Role) -> None:
        with self._translate("create_role", caller):
            self._role_repository.create_role(caller, role)
        self._probe.role_created(str(role.identifier), caller.principal)

    def delete_role(self, caller: PermissionEvaluator, identifier: str) -> None:
        with self._translate("delete_role", caller):
            self._role_repository.delete_role(caller, identifier)
        self._probe.role_deleted(identifier, caller.principal)

    def get_role(self, caller: PermissionEvaluator, identifier: str) -> Role:
        with self._translate("get_role", caller):
            return self._role_repository.get_role(caller, identifier)

    def get_roles(self, caller: PermissionEvaluator) -> list[Role]:
        with self._translate("get_roles", caller):
            return self._role_repository.get_roles(caller)

    def get_role_users(self, caller: PermissionEvaluator, role_identifier: str) -> list[str]:
        with self._translate("get_role_users", caller):
            return self._role_repository.get_role_users(caller, role_identifier)

    def get_user(self, caller: PermissionEvaluator, identifier: str) -> User:
        with self._translate("get_user", caller):
            return self._user_repository.get_user(caller, identifier)

    def get_user_identifiers(self, caller: PermissionEvaluator) -> list[str]:
        with self._translate("get_user_identifiers", caller):
            return self._user_repository.get_user_identifiers(caller)

    def get_users(self, caller: PermissionEvaluator) -> list[User]:
        with self._translate("get_users", caller):
            return self._user_repository.get_users(caller)

    def set_role_users(
        self,
        caller: PermissionEvaluator,
        role_identifier: str,
        user_identifiers: list[str],
    ) -> None:
        with self._translate("set_role_users", caller):
            self._role_repository.set_role_users(caller, role_identifier, user_identifiers)
        self._probe.role_users_set(role_identifier, len(user_identifiers), caller.principal)

    def update_role(self, caller: PermissionEvaluator, role: Role) -> None:
        """Update the attributes of a role, leaving its members untouched.

        Membership is maintained through set_role_users.
        """
        with self._translate("update_role", caller):
            self._role_repository.update_role_no_users(caller, role)
        self._probe.role_updated(str(role.identifier), caller.principal)
