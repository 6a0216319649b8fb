"""Domain probe for authorization operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to permission checks, result filtering
and permission resolution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthorizationProbe(Protocol):
    """Domain probe for authorization operations."""

    def permission_denied(self, principal: str | None, permission: str) -> None:
        """Record that a permission check was denied."""
        ...

    def entries_filtered(
        self,
        principal: str | None,
        resource_type: str,
        candidate_count: int,
        permitted_count: int,
    ) -> None:
        """Record that list results were filtered down to permitted entries."""
        ...

    def permissions_loaded(self, source: str, entry_count: int) -> None:
        """Record that permission definitions were loaded."""
        ...

    def permissions_resolved(self, principal: str, permission_count: int) -> None:
        """Record that permissions were resolved for a principal."""
        ...

    def permission_template_skipped(self, principal: str, template: str, value: str) -> None:
        """Record that a template was not expanded for an unscopable value."""
        ...

    def with_context(self, context: ObservationContext) -> AuthorizationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthorizationProbe:
    """Default implementation of AuthorizationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthorizationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthorizationProbe(logger=self._logger, context=context)

    def permission_denied(self, principal: str | None, permission: str) -> None:
        """Record that a permission check was denied."""
        self._logger.warning(
            "permission_denied",
            principal=principal,
            permission=permission,
            **self._get_context_kwargs(),
        )

    def entries_filtered(
        self,
        principal: str | None,
        resource_type: str,
        candidate_count: int,
        permitted_count: int,
    ) -> None:
        """Record that list results were filtered down to permitted entries."""
        self._logger.debug(
            "entries_filtered",
            principal=principal,
            resource_type=resource_type,
            candidate_count=candidate_count,
            permitted_count=permitted_count,
            **self._get_context_kwargs(),
        )

    def permissions_loaded(self, source: str, entry_count: int) -> None:
        """Record that permission definitions were loaded."""
        self._logger.info(
            "permissions_loaded",
            source=source,
            entry_count=entry_count,
            **self._get_context_kwargs(),
        )

    def permissions_resolved(self, principal: str, permission_count: int) -> None:
        """Record that permissions were resolved for a principal."""
        self._logger.debug(
            "permissions_resolved",
            principal=principal,
            permission_count=permission_count,
            **self._get_context_kwargs(),
        )

    def permission_template_skipped(self, principal: str, template: str, value: str) -> None:
        """Record that a template was not expanded for an unscopable value."""
        self._logger.warning(
            "permission_template_skipped",
            principal=principal,
            template=template,
            value=value,
            **self._get_context_kwargs(),
        )
