"""Entity to directory attribute mapping.

Walks the registered properties of an entity and maps each one to every
attribute name configured for it. Properties without a configured attribute
are skipped, which allows partial schemas. Inbound, the first configured
attribute name is read and attribute names match case-insensitively.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping, Sequence
from typing import Any

from directory.infrastructure.mapping.attribute_codec import AttributeCodec
from directory.infrastructure.mapping.descriptors import (
    EntityDescriptor,
    EntityRegistry,
    PropertyDescriptor,
)
from directory.infrastructure.mapping.exceptions import (
    MappingError,
    UnmappedEntityError,
)
from directory.infrastructure.mapping.tables import MappingTables
from directory.infrastructure.observability import DefaultMappingProbe, MappingProbe
from directory.ports.exceptions import EntityInvalidError

OBJECT_CLASS = "objectClass"

PropertyFilter = Callable[[PropertyDescriptor], bool]


def _select_all(prop: PropertyDescriptor) -> bool:
    return True


def _select(including: bool, property_names: Collection[str]) -> PropertyFilter:
    def selected(prop: PropertyDescriptor) -> bool:
        return (prop.name in property_names) == including

    return selected


class EntityMapper:
    """Maps entities to attribute sets and back."""

    def __init__(
        self,
        registry: EntityRegistry,
        tables: MappingTables,
        codec: AttributeCodec,
        probe: MappingProbe | None = None,
    ):
        self._registry = registry
        self._tables = tables
        self._codec = codec
        self._probe = probe or DefaultMappingProbe()

    def _descriptor(self, entity_type: type) -> EntityDescriptor:
        descriptor = self._registry.for_type(entity_type)
        self._tables.object_classes_for(descriptor.name)
        return descriptor

    def _failed(self, entity_type: type, operation: str, error: MappingError) -> EntityInvalidError:
        name = getattr(entity_type, "__name__", str(entity_type))
        self._probe.mapping_failed(name, operation, error)
        return EntityInvalidError(f"Cannot map {name} ({operation}): {error}")

    def to_attributes(self, entity: Any) -> dict[str, list[str]]:
        """Produce the attributes of every mapped property.

        Raises:
            EntityInvalidError: If the entity cannot be mapped
        """
        return self._to_attributes(entity, _select_all)

    def to_attributes_filtered(
        self,
        entity: Any,
        including: bool,
        property_names: Collection[str],
    ) -> dict[str, list[str]]:
        """Like to_attributes, restricted to properties whose membership in
        ``property_names`` equals ``including``."""
        return self._to_attributes(entity, _select(including, property_names))

    def _to_attributes(self, entity: Any, selected: PropertyFilter) -> dict[str, list[str]]:
        try:
            descriptor = self._descriptor(type(entity))
            attributes: dict[str, list[str]] = {}
            for prop in descriptor.properties:
                if not selected(prop):
                    continue
                names = self._tables.attribute_names(descriptor.name, prop.name)
                if not names:
                    self._probe.property_unmapped(descriptor.name, prop.name)
                    continue
                values = self._codec.encode(prop, entity)
                for name in names:
                    attributes[name] = list(values)
            return attributes
        except MappingError as e:
            raise self._failed(type(entity), "to_attributes", e) from e

    def from_attributes(
        self,
        entity_type: type,
        attributes: Mapping[str, Sequence[str] | str],
    ) -> Any:
        """Create an entity from directory attributes.

        Raises:
            EntityInvalidError: If the attributes cannot be mapped
        """
        return self._from_attributes(entity_type, attributes, _select_all)

    def from_attributes_filtered(
        self,
        entity_type: type,
        attributes: Mapping[str, Sequence[str] | str],
        including: bool,
        property_names: Collection[str],
    ) -> Any:
        """Like from_attributes, restricted to properties whose membership in
        ``property_names`` equals ``including``."""
        return self._from_attributes(
            entity_type, attributes, _select(including, property_names)
        )

    def _from_attributes(
        self,
        entity_type: type,
        attributes: Mapping[str, Sequence[str] | str],
        selected: PropertyFilter,
    ) -> Any:
        by_name = {name.lower(): values for name, values in attributes.items()}
        try:
            descriptor = self._descriptor(entity_type)
            entity = descriptor.create()
            for prop in descriptor.properties:
                if not selected(prop):
                    continue
                names = self._tables.attribute_names(descriptor.name, prop.name)
                if not names:
                    self._probe.property_unmapped(descriptor.name, prop.name)
                    continue
                raw = by_name.get(names[0].lower())
                if raw is None:
                    continue
                values = [raw] if isinstance(raw, str) else list(raw)
                self._codec.decode(prop, entity, values)
            return entity
        except MappingError as e:
            raise self._failed(entity_type, "from_attributes", e) from e

    def object_class_attribute(self, entity_type: type) -> dict[str, list[str]]:
        """The objectClass attribute tagged on created entries.

        Raises:
            EntityInvalidError: If the type is undescribed or has no object classes
        """
        try:
            descriptor = self._descriptor(entity_type)
            return {OBJECT_CLASS: list(self._tables.object_classes_for(descriptor.name))}
        except MappingError as e:
            raise self._failed(entity_type, "object_class_attribute", e) from e

    def resolve_attribute(self, entity_type: type, property_name: str) -> str:
        """First attribute name mapped for a property.

        The property does not need to be declared on the entity, which is how
        write-only attributes such as passwords are mapped.

        Raises:
            EntityInvalidError: If the type is undescribed or the property unmapped
        """
        try:
            descriptor = self._descriptor(entity_type)
            names = self._tables.attribute_names(descriptor.name, property_name)
            if not names:
                raise UnmappedEntityError(
                    f"Property '{descriptor.name}.{property_name}' is not mapped"
                )
            return names[0]
        except MappingError as e:
            raise self._failed(entity_type, "resolve_attribute", e) from e
