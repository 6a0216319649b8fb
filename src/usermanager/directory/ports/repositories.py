"""Repository protocols (ports) for the directory bounded context.

Every operation takes the caller as its first argument. Implementations
check the caller's permissions before touching the directory and filter
list results down to the entries the caller may read.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from directory.domain.aggregates import Role, User

from shared_kernel.authorization.protocols import PermissionEvaluator


@runtime_checkable
class IRoleRepository(Protocol):
    """Repository for Role persistence and role membership."""

    def create_role(self, caller: PermissionEvaluator, role: Role) -> None:
        """Create a role entry, members included.

        Raises:
            AuthorizationDeniedError: If the caller may not write the role
            EntityAlreadyExistsError: If the role already exists
        """
        ...

    def delete_role(self, caller: PermissionEvaluator, identifier: str) -> None:
        """Delete a role entry.

        Raises:
            AuthorizationDeniedError: If the caller may not write the role
            EntityNotFoundError: If the role does not exist
        """
        ...

    def get_role(self, caller: PermissionEvaluator, identifier: str) -> Role:
        """Retrieve a role.

        Members the caller may not read are left out of ``users``.

        Raises:
            AuthorizationDeniedError: If the caller may not read the role
            EntityNotFoundError: If the role does not exist
        """
        ...

    def get_role_identifiers(self, caller: PermissionEvaluator) -> list[str]:
        """List identifiers of all roles the caller may read, sorted."""
        ...

    def get_roles(self, caller: PermissionEvaluator) -> list[Role]:
        """List all roles the caller may read, sorted by identifier."""
        ...

    def get_roles_for_user(
        self, caller: PermissionEvaluator, user_identifier: str
    ) -> list[str]:
        """List identifiers of readable roles the user is a member of."""
        ...

    def set_roles_for_user(
        self,
        caller: PermissionEvaluator,
        user_identifier: str,
        role_identifiers: list[str],
    ) -> None:
        """Make the user a member of exactly the given roles."""
        ...

    def get_role_users(self, caller: PermissionEvaluator, identifier: str) -> list[str]:
        """List identifiers of readable users that are members of the role."""
        ...

    def set_role_users(
        self,
        caller: PermissionEvaluator,
        identifier: str,
        user_identifiers: list[str],
    ) -> None:
        """Make exactly the given users members of the role."""
        ...

    def update_role(self, caller: PermissionEvaluator, role: Role) -> None:
        """Replace all mapped attributes of the role, members included."""
        ...

    def update_role_no_users(self, caller: PermissionEvaluator, role: Role) -> None:
        """Replace all mapped attributes of the role except its members."""
        ...

    def update_role_users(self, caller: PermissionEvaluator, role: Role) -> None:
        """Replace only the members of the role."""
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User persistence."""

    def contains_user(self, caller: PermissionEvaluator, identifier: str) -> bool:
        """Check whether a readable user exists.

        Returns False when the caller may not read the user.
        """
        ...

    def create_user(self, caller: PermissionEvaluator, user: User) -> None:
        """Create a user entry.

        Raises:
            AuthorizationDeniedError: If the caller may not write the user
            EntityAlreadyExistsError: If the user already exists
        """
        ...

    def delete_user(self, caller: PermissionEvaluator, identifier: str) -> None:
        """Delete a user entry.

        Raises:
            AuthorizationDeniedError: If the caller may not write the user
            EntityNotFoundError: If the user does not exist
        """
        ...

    def get_user(self, caller: PermissionEvaluator, identifier: str) -> User:
        """Retrieve a user.

        Raises:
            AuthorizationDeniedError: If the caller may not read the user
            EntityNotFoundError: If the user does not exist
        """
        ...

    def get_user_identifiers(self, caller: PermissionEvaluator) -> list[str]:
        """List identifiers of all users the caller may read, sorted."""
        ...

    def get_users(self, caller: PermissionEvaluator) -> list[User]:
        """List all users the caller may read, sorted by identifier."""
        ...

    def get_user_unsecured(self, identifier: str) -> User:
        """Retrieve a user without a permission check, for system use.

        Raises:
            EntityNotFoundError: If the user does not exist
        """
        ...

    def update_user(self, caller: PermissionEvaluator, user: User) -> None:
        """Replace all mapped attributes of the user."""
        ...

    def update_user_password(
        self,
        caller: PermissionEvaluator,
        identifier: str,
        algorithm: str,
        digest: bytes,
    ) -> None:
        """Replace the stored password with ``{algorithm}base64(digest)``.

        Raises:
            AuthorizationDeniedError: If the caller may not modify the password
            EntityNotFoundError: If the user does not exist
        """
        ...
