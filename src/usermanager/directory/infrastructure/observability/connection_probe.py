"""Domain probe for directory connections.

Following Domain-Oriented Observability patterns, this probe captures
connection lifecycle events and failed directory operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for directory connection operations."""

    def connection_opened(self, user: str | None) -> None:
        """Record that a connection was opened and bound."""
        ...

    def connection_bind_failed(self, user: str | None, result_code: int | None) -> None:
        """Record that binding a new connection failed."""
        ...

    def connection_release_failed(self, error: Exception) -> None:
        """Record that releasing a connection failed."""
        ...

    def operation_failed(
        self,
        operation: str,
        dn: str,
        result_code: int | None,
        description: str | None,
    ) -> None:
        """Record that a directory operation returned an error result."""
        ...

    def binary_attribute_skipped(self, dn: str, attribute: str) -> None:
        """Record that an attribute with non-text values was left out."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def connection_opened(self, user: str | None) -> None:
        """Record that a connection was opened and bound."""
        self._logger.debug(
            "directory_connection_opened",
            user=user,
            **self._get_context_kwargs(),
        )

    def connection_bind_failed(self, user: str | None, result_code: int | None) -> None:
        """Record that binding a new connection failed."""
        self._logger.warning(
            "directory_connection_bind_failed",
            user=user,
            result_code=result_code,
            **self._get_context_kwargs(),
        )

    def connection_release_failed(self, error: Exception) -> None:
        """Record that releasing a connection failed."""
        self._logger.warning(
            "directory_connection_release_failed",
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def operation_failed(
        self,
        operation: str,
        dn: str,
        result_code: int | None,
        description: str | None,
    ) -> None:
        """Record that a directory operation returned an error result."""
        self._logger.debug(
            "directory_operation_failed",
            operation=operation,
            dn=dn,
            result_code=result_code,
            description=description,
            **self._get_context_kwargs(),
        )

    def binary_attribute_skipped(self, dn: str, attribute: str) -> None:
        """Record that an attribute with non-text values was left out."""
        self._logger.debug(
            "directory_binary_attribute_skipped",
            dn=dn,
            attribute=attribute,
            **self._get_context_kwargs(),
        )
