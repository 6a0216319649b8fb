"""Domain probe for entity mapping operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MappingProbe(Protocol):
    """Domain probe for entity to attribute mapping."""

    def property_unmapped(self, entity: str, property_name: str) -> None:
        """Record that a property was skipped for lack of an attribute mapping."""
        ...

    def mapping_failed(self, entity: str, operation: str, error: Exception) -> None:
        """Record that mapping an entity failed."""
        ...

    def with_context(self, context: ObservationContext) -> MappingProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMappingProbe:
    """Default implementation of MappingProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultMappingProbe:
        """Create a new probe with observation context bound."""
        return DefaultMappingProbe(logger=self._logger, context=context)

    def property_unmapped(self, entity: str, property_name: str) -> None:
        """Record that a property was skipped for lack of an attribute mapping."""
        self._logger.debug(
            "property_unmapped",
            entity=entity,
            property=property_name,
            **self._get_context_kwargs(),
        )

    def mapping_failed(self, entity: str, operation: str, error: Exception) -> None:
        """Record that mapping an entity failed."""
        self._logger.error(
            "entity_mapping_failed",
            entity=entity,
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
