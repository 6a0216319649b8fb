"""Entity to directory mapping layer."""

from directory.infrastructure.mapping.attribute_codec import AttributeCodec
from directory.infrastructure.mapping.conversion import StringConverter
from directory.infrastructure.mapping.descriptors import (
    EntityDescriptor,
    EntityRegistry,
    PropertyDescriptor,
    PropertyKind,
)
from directory.infrastructure.mapping.entity_mapper import EntityMapper
from directory.infrastructure.mapping.name_resolver import NameResolver
from directory.infrastructure.mapping.tables import MappingTables

__all__ = [
    "AttributeCodec",
    "EntityDescriptor",
    "EntityMapper",
    "EntityRegistry",
    "MappingTables",
    "NameResolver",
    "PropertyDescriptor",
    "PropertyKind",
    "StringConverter",
]
