"""Domain probe for realm authentication."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RealmProbe(Protocol):
    """Domain probe for authentication and permission resolution."""

    def authentication_succeeded(self, principal: str) -> None:
        """Record that a principal authenticated."""
        ...

    def authentication_failed(self, principal: str, reason: str) -> None:
        """Record that a principal failed to authenticate."""
        ...

    def subject_resolved(self, principal: str, role_count: int, permission_count: int) -> None:
        """Record that roles and permissions were resolved for a principal."""
        ...

    def with_context(self, context: ObservationContext) -> RealmProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRealmProbe:
    """Default implementation of RealmProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultRealmProbe:
        """Create a new probe with observation context bound."""
        return DefaultRealmProbe(logger=self._logger, context=context)

    def authentication_succeeded(self, principal: str) -> None:
        """Record that a principal authenticated."""
        self._logger.info(
            "authentication_succeeded",
            principal=principal,
            **self._get_context_kwargs(),
        )

    def authentication_failed(self, principal: str, reason: str) -> None:
        """Record that a principal failed to authenticate."""
        self._logger.warning(
            "authentication_failed",
            principal=principal,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def subject_resolved(self, principal: str, role_count: int, permission_count: int) -> None:
        """Record that roles and permissions were resolved for a principal."""
        self._logger.debug(
            "subject_resolved",
            principal=principal,
            role_count=role_count,
            permission_count=permission_count,
            **self._get_context_kwargs(),
        )
