"""Domain probe for role service operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RoleServiceProbe(Protocol):
    """Domain probe for role service operations."""

    def role_created(self, role_id: str, principal: str | None) -> None:
        """Record that a role was created."""
        ...

    def role_deleted(self, role_id: str, principal: str | None) -> None:
        """Record that a role was deleted."""
        ...

    def role_updated(self, role_id: str, principal: str | None) -> None:
        """Record that role attributes were updated."""
        ...

    def role_users_set(self, role_id: str, user_count: int, principal: str | None) -> None:
        """Record that the members of a role were set."""
        ...

    def operation_failed(self, operation: str, principal: str | None, error: Exception) -> None:
        """Record that a role service operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> RoleServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRoleServiceProbe:
    """Default implementation of RoleServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultRoleServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultRoleServiceProbe(logger=self._logger, context=context)

    def role_created(self, role_id: str, principal: str | None) -> None:
        """Record that a role was created."""
        self._logger.info(
            "role_service_role_created",
            role_id=role_id,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def role_deleted(self, role_id: str, principal: str | None) -> None:
        """Record that a role was deleted."""
        self._logger.info(
            "role_service_role_deleted",
            role_id=role_id,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def role_updated(self, role_id: str, principal: str | None) -> None:
        """Record that role attributes were updated."""
        self._logger.info(
            "role_service_role_updated",
            role_id=role_id,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def role_users_set(self, role_id: str, user_count: int, principal: str | None) -> None:
        """Record that the members of a role were set."""
        self._logger.info(
            "role_service_users_set",
            role_id=role_id,
            user_count=user_count,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, principal: str | None, error: Exception) -> None:
        """Record that a role service operation failed."""
        self._logger.error(
            "role_service_operation_failed",
            operation=operation,
            principal=principal,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
