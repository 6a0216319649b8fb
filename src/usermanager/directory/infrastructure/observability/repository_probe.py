"""Domain probe for directory repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to role and user repository operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RoleRepositoryProbe(Protocol):
    """Domain probe for role repository operations."""

    def role_created(self, role_id: str, member_count: int) -> None:
        """Record that a role was created."""
        ...

    def role_deleted(self, role_id: str) -> None:
        """Record that a role was deleted."""
        ...

    def role_retrieved(self, role_id: str, member_count: int) -> None:
        """Record that a role was retrieved with its readable members."""
        ...

    def role_not_found(self, role_id: str) -> None:
        """Record that a role was not found."""
        ...

    def role_already_exists(self, role_id: str) -> None:
        """Record that creating a role collided with an existing entry."""
        ...

    def role_updated(self, role_id: str, scope: str) -> None:
        """Record that role attributes were replaced."""
        ...

    def role_members_changed(self, role_id: str, added: int, removed: int) -> None:
        """Record that role membership links were added or removed."""
        ...

    def membership_already_applied(self, role_id: str, user_id: str, operation: str) -> None:
        """Record that a membership change found the link already in place."""
        ...

    def roles_listed(self, count: int) -> None:
        """Record that roles were listed."""
        ...

    def operation_failed(self, operation: str, role_id: str | None, error: Exception) -> None:
        """Record that a directory operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> RoleRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_created(self, user_id: str) -> None:
        """Record that a user was created."""
        ...

    def user_deleted(self, user_id: str) -> None:
        """Record that a user was deleted."""
        ...

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        ...

    def user_already_exists(self, user_id: str) -> None:
        """Record that creating a user collided with an existing entry."""
        ...

    def user_updated(self, user_id: str) -> None:
        """Record that user attributes were replaced."""
        ...

    def user_password_updated(self, user_id: str, algorithm: str) -> None:
        """Record that a user's password was replaced."""
        ...

    def users_listed(self, count: int) -> None:
        """Record that users were listed."""
        ...

    def unsecured_user_access(self, user_id: str) -> None:
        """Record that a user was read without a permission check."""
        ...

    def operation_failed(self, operation: str, user_id: str | None, error: Exception) -> None:
        """Record that a directory operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class _StructlogProbe:
    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()


class DefaultRoleRepositoryProbe(_StructlogProbe):
    """Default implementation of RoleRepositoryProbe using structlog."""

    def with_context(self, context: ObservationContext) -> DefaultRoleRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultRoleRepositoryProbe(logger=self._logger, context=context)

    def role_created(self, role_id: str, member_count: int) -> None:
        """Record that a role was created."""
        self._logger.info(
            "role_created",
            role_id=role_id,
            member_count=member_count,
            **self._get_context_kwargs(),
        )

    def role_deleted(self, role_id: str) -> None:
        """Record that a role was deleted."""
        self._logger.info(
            "role_deleted",
            role_id=role_id,
            **self._get_context_kwargs(),
        )

    def role_retrieved(self, role_id: str, member_count: int) -> None:
        """Record that a role was retrieved with its readable members."""
        self._logger.debug(
            "role_retrieved",
            role_id=role_id,
            member_count=member_count,
            **self._get_context_kwargs(),
        )

    def role_not_found(self, role_id: str) -> None:
        """Record that a role was not found."""
        self._logger.debug(
            "role_not_found",
            role_id=role_id,
            **self._get_context_kwargs(),
        )

    def role_already_exists(self, role_id: str) -> None:
        """Record that creating a role collided with an existing entry."""
        self._logger.warning(
            "role_already_exists",
            role_id=role_id,
            **self._get_context_kwargs(),
        )

    def role_updated(self, role_id: str, scope: str) -> None:
        """Record that role attributes were replaced."""
        self._logger.info(
            "role_updated",
            role_id=role_id,
            scope=scope,
            **self._get_context_kwargs(),
        )

    def role_members_changed(self, role_id: str, added: int, removed: int) -> None:
        """Record that role membership links were added or removed."""
        self._logger.info(
            "role_members_changed",
            role_id=role_id,
            added=added,
            removed=removed,
            **self._get_context_kwargs(),
        )

    def membership_already_applied(self, role_id: str, user_id: str, operation: str) -> None:
        """Record that a membership change found the link already in place."""
        self._logger.debug(
            "membership_already_applied",
            role_id=role_id,
            user_id=user_id,
            operation=operation,
            **self._get_context_kwargs(),
        )

    def roles_listed(self, count: int) -> None:
        """Record that roles were listed."""
        self._logger.debug(
            "roles_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, role_id: str | None, error: Exception) -> None:
        """Record that a directory operation failed."""
        self._logger.error(
            "role_operation_failed",
            operation=operation,
            role_id=role_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )


class DefaultUserRepositoryProbe(_StructlogProbe):
    """Default implementation of UserRepositoryProbe using structlog."""

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_created(self, user_id: str) -> None:
        """Record that a user was created."""
        self._logger.info(
            "user_created",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str) -> None:
        """Record that a user was deleted."""
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        self._logger.debug(
            "user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_already_exists(self, user_id: str) -> None:
        """Record that creating a user collided with an existing entry."""
        self._logger.warning(
            "user_already_exists",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_updated(self, user_id: str) -> None:
        """Record that user attributes were replaced."""
        self._logger.info(
            "user_updated",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_password_updated(self, user_id: str, algorithm: str) -> None:
        """Record that a user's password was replaced."""
        self._logger.info(
            "user_password_updated",
            user_id=user_id,
            algorithm=algorithm,
            **self._get_context_kwargs(),
        )

    def users_listed(self, count: int) -> None:
        """Record that users were listed."""
        self._logger.debug(
            "users_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def unsecured_user_access(self, user_id: str) -> None:
        """Record that a user was read without a permission check."""
        self._logger.info(
            "unsecured_user_access",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, user_id: str | None, error: Exception) -> None:
        """Record that a directory operation failed."""
        self._logger.error(
            "user_operation_failed",
            operation=operation,
            user_id=user_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
