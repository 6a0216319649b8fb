"""Domain probe for user service operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user service operations."""

    def user_created(self, user_id: str, principal: str | None) -> None:
        """Record that a user was created."""
        ...

    def user_deleted(self, user_id: str, principal: str | None) -> None:
        """Record that a user was deleted."""
        ...

    def user_updated(self, user_id: str, principal: str | None) -> None:
        """Record that a user was updated."""
        ...

    def user_roles_set(self, user_id: str, role_count: int, principal: str | None) -> None:
        """Record that the roles of a user were set."""
        ...

    def password_updated(self, user_id: str, principal: str | None) -> None:
        """Record that a user's password was changed."""
        ...

    def operation_failed(self, operation: str, principal: str | None, error: Exception) -> None:
        """Record that a user service operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_created(self, user_id: str, principal: str | None) -> None:
        """Record that a user was created."""
        self._logger.info(
            "user_service_user_created",
            user_id=user_id,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str, principal: str | None) -> None:
        """Record that a user was deleted."""
        self._logger.info(
            "user_service_user_deleted",
            user_id=user_id,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def user_updated(self, user_id: str, principal: str | None) -> None:
        """Record that a user was updated."""
        self._logger.info(
            "user_service_user_updated",
            user_id=user_id,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def user_roles_set(self, user_id: str, role_count: int, principal: str | None) -> None:
        """Record that the roles of a user were set."""
        self._logger.info(
            "user_service_roles_set",
            user_id=user_id,
            role_count=role_count,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def password_updated(self, user_id: str, principal: str | None) -> None:
        """Record that a user's password was changed."""
        self._logger.info(
            "user_service_password_updated",
            user_id=user_id,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, principal: str | None, error: Exception) -> None:
        """Record that a user service operation failed."""
        self._logger.error(
            "user_service_operation_failed",
            operation=operation,
            principal=principal,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
