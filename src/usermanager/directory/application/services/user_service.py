"""User application service for the directory bounded context.

Exposes user management to the web layer. Repository failures surface as
ServiceError; authorization denials propagate unchanged.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from contextlib import contextmanager

from directory.application.observability import DefaultUserServiceProbe, UserServiceProbe
from directory.domain.aggregates import Role, User
from directory.ports.exceptions import RepositoryError, ServiceError
from directory.ports.repositories import IRoleRepository, IUserRepository
from shared_kernel.authorization.protocols import PermissionEvaluator

PASSWORD_ALGORITHM = "SHA"


class UserService:
    """Application service for user management."""

    def __init__(
        self,
        user_repository: IUserRepository,
        role_repository: IRoleRepository,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            role_repository: Repository for role lookup and membership
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._role_repository = role_repository
        self._probe = probe or DefaultUserServiceProbe()

    @contextmanager
    def _translate(self, operation: str, caller: PermissionEvaluator) -> Iterator[None]:
        try:
            yield
        except RepositoryError as e:
            self._probe.operation_failed(operation, caller.principal, e)
            raise ServiceError(f"{operation} failed: {e}") from e

    def create_user(self, caller: PermissionEvaluator, user: User) -> None:
        with self._translate("create_user", caller):
            self._user_repository.create_user(caller, user)
        self._probe.user_created(str(user.identifier), caller.principal)

    def delete_user(self, caller: PermissionEvaluator, identifier: str) -> None:
        with self._translate("delete_user", caller):
            self._user_repository.delete_user(caller, identifier)
        self._probe.user_deleted(identifier, caller.principal)

    def get_role(self, caller: PermissionEvaluator, identifier: str) -> Role:
        with self._translate("get_role", caller):
            return self._role_repository.get_role(caller, identifier)

    def get_role_identifiers(self, caller: PermissionEvaluator) -> list[str]:
        with self._translate("get_role_identifiers", caller):
            return self._role_repository.get_role_identifiers(caller)

    def get_roles(self, caller: PermissionEvaluator) -> list[Role]:
        with self._translate("get_roles", caller):
            return self._role_repository.get_roles(caller)

    def get_user(self, caller: PermissionEvaluator, identifier: str) -> User:
        with self._translate("get_user", caller):
            return self._user_repository.get_user(caller, identifier)

    def get_user_roles(self, caller: PermissionEvaluator, user_identifier: str) -> list[str]:
        with self._translate("get_user_roles", caller):
            return self._role_repository.get_roles_for_user(caller, user_identifier)

    def get_users(self, caller: PermissionEvaluator) -> list[User]:
        with self._translate("get_users", caller):
            return self._user_repository.get_users(caller)

    def set_user_roles(
        self,
        caller: PermissionEvaluator,
        user_identifier: str,
        role_identifiers: list[str],
    ) -> None:
        with self._translate("set_user_roles", caller):
            self._role_repository.set_roles_for_user(caller, user_identifier, role_identifiers)
        self._probe.user_roles_set(user_identifier, len(role_identifiers), caller.principal)

    def update_password(
        self,
        caller: PermissionEvaluator,
        identifier: str,
        password: str,
    ) -> None:
        """Store a new password as an unsalted SHA-1 hash.

        Raises:
            ValueError: If the password is empty
            ServiceError: If the password cannot be stored
        """
        if not password:
            raise ValueError("password must not be empty")
        digest = hashlib.sha1(password.encode("utf-8")).digest()
        with self._translate("update_password", caller):
            self._user_repository.update_user_password(
                caller, identifier, PASSWORD_ALGORITHM, digest
            )
        self._probe.password_updated(identifier, caller.principal)

    def update_user(self, caller: PermissionEvaluator, user: User) -> None:
        with self._translate("update_user", caller):
            self._user_repository.update_user(caller, user)
        self._probe.user_updated(str(user.identifier), caller.principal)
