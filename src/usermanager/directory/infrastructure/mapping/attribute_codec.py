"""Conversion of a single property to and from attribute values."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from directory.infrastructure.mapping.conversion import StringConverter
from directory.infrastructure.mapping.descriptors import (
    EntityRegistry,
    PropertyDescriptor,
)
from directory.infrastructure.mapping.name_resolver import NameResolver


class AttributeCodec:
    """Encodes and decodes property values as directory strings.

    Relation values are identifiers in the domain and distinguished names in
    the directory; the codec rewrites them through the name resolver.
    """

    def __init__(
        self,
        registry: EntityRegistry,
        resolver: NameResolver,
        converter: StringConverter | None = None,
    ):
        self._registry = registry
        self._resolver = resolver
        self._converter = converter or StringConverter()

    def _related_type(self, prop: PropertyDescriptor) -> type:
        return self._registry.by_name(prop.related_entity).entity_type  # type: ignore[arg-type]

    def encode(self, prop: PropertyDescriptor, instance: Any) -> list[str]:
        """Convert the property value of ``instance`` to attribute values.

        Raises:
            ConversionFailedError: If any value cannot be converted
            InvalidNameError: If a related identifier cannot form a DN
        """
        encoded = []
        for value in prop.values(instance):
            text = self._converter.to_string(prop.value_type, value)
            if prop.kind.is_relation:
                text = self._resolver.qualified_name(text, self._related_type(prop))
            encoded.append(text)
        return encoded

    def decode(self, prop: PropertyDescriptor, instance: Any, values: Sequence[str]) -> None:
        """Assign attribute values to the property of ``instance``.

        All values are converted before anything is assigned. Scalars take
        the first value; an empty value list leaves the property untouched.

        Raises:
            ConversionFailedError: If any value cannot be converted
            InvalidNameError: If a relation value is not a valid DN
        """
        converted = []
        for text in values:
            if prop.kind.is_relation:
                text = self._resolver.short_name(text, self._related_type(prop))
            converted.append(self._converter.to_instance(prop.value_type, text))

        if prop.kind.is_collection:
            prop.set(instance, [])
            for value in converted:
                prop.add(instance, value)
        elif converted:
            prop.set(instance, converted[0])
