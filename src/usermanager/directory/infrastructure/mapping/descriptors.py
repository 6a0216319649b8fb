"""Entity and property descriptors.

Descriptors are built once from an explicit registration table and never
change afterwards. The kind of every property is resolved at registration
so the mapping layer can dispatch on it without probing values at runtime.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from directory.infrastructure.mapping.exceptions import (
    UnmappedEntityError,
    ValueAccessError,
)


class PropertyKind(Enum):
    """How a property holds its value."""

    SCALAR = "scalar"
    COLLECTION = "collection"
    RELATION = "relation"
    COLLECTION_RELATION = "collection_relation"

    @property
    def is_collection(self) -> bool:
        return self in (PropertyKind.COLLECTION, PropertyKind.COLLECTION_RELATION)

    @property
    def is_relation(self) -> bool:
        return self in (PropertyKind.RELATION, PropertyKind.COLLECTION_RELATION)


def _attribute_getter(name: str) -> Callable[[Any], Any]:
    def getter(instance: Any) -> Any:
        return getattr(instance, name)

    return getter


def _attribute_setter(name: str) -> Callable[[Any, Any], None]:
    def setter(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    return setter


@dataclass(frozen=True)
class PropertyDescriptor:
    """Metadata and accessors for one property of an entity.

    Attributes:
        name: Property name, also the attribute name on instances
        value_type: Type of a single value (the element type for collections)
        kind: Cardinality and relation tag
        related_entity: Name of the related entity for relation kinds
    """

    name: str
    value_type: type
    kind: PropertyKind = PropertyKind.SCALAR
    related_entity: str | None = None
    getter: Callable[[Any], Any] = field(default=None, compare=False, repr=False)  # type: ignore[assignment]
    setter: Callable[[Any, Any], None] = field(default=None, compare=False, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.kind.is_relation and not self.related_entity:
            raise ValueError(f"Relation property '{self.name}' must name its entity")
        if self.getter is None:
            object.__setattr__(self, "getter", _attribute_getter(self.name))
        if self.setter is None:
            object.__setattr__(self, "setter", _attribute_setter(self.name))

    @classmethod
    def scalar(cls, name: str, value_type: type = str) -> PropertyDescriptor:
        return cls(name=name, value_type=value_type)

    @classmethod
    def collection(cls, name: str, value_type: type = str) -> PropertyDescriptor:
        return cls(name=name, value_type=value_type, kind=PropertyKind.COLLECTION)

    @classmethod
    def relation(cls, name: str, related_entity: str) -> PropertyDescriptor:
        return cls(
            name=name,
            value_type=str,
            kind=PropertyKind.RELATION,
            related_entity=related_entity,
        )

    @classmethod
    def collection_relation(cls, name: str, related_entity: str) -> PropertyDescriptor:
        return cls(
            name=name,
            value_type=str,
            kind=PropertyKind.COLLECTION_RELATION,
            related_entity=related_entity,
        )

    def get(self, instance: Any) -> Any:
        """Read the property value from an instance.

        Raises:
            ValueAccessError: If the value cannot be read
        """
        try:
            return self.getter(instance)
        except (AttributeError, TypeError) as e:
            raise ValueAccessError(f"Cannot read '{self.name}' of {instance!r}") from e

    def set(self, instance: Any, value: Any) -> None:
        """Assign the property value on an instance.

        Raises:
            ValueAccessError: If the value cannot be written
        """
        try:
            self.setter(instance, value)
        except (AttributeError, TypeError) as e:
            raise ValueAccessError(f"Cannot write '{self.name}' of {instance!r}") from e

    def add(self, instance: Any, value: Any) -> None:
        """Append one value to a collection property.

        Raises:
            ValueAccessError: If the property is not a collection or cannot be read
        """
        if not self.kind.is_collection:
            raise ValueAccessError(f"Property '{self.name}' is not a collection")
        current = self.get(instance)
        if current is None:
            self.set(instance, [value])
            return
        try:
            current.append(value)
        except AttributeError as e:
            raise ValueAccessError(f"Cannot add to '{self.name}' of {instance!r}") from e

    def values(self, instance: Any) -> list[Any]:
        """Read the property as a list of values, empty when unset."""
        value = self.get(instance)
        if value is None:
            return []
        if self.kind.is_collection:
            return list(value)
        return [value]


@dataclass(frozen=True)
class EntityDescriptor:
    """Metadata for a mapped entity type.

    Attributes:
        name: Entity name used as the prefix in mapping tables
        entity_type: The Python class of the entity
        properties: Ordered property descriptors
        key: Name of the key property, if the entity is keyed
        factory: Creates an empty instance, defaults to ``entity_type()``
    """

    name: str
    entity_type: type
    properties: tuple[PropertyDescriptor, ...]
    key: str | None = None
    factory: Callable[[], Any] = field(default=None, compare=False, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        names = [prop.name for prop in self.properties]
        if len(set(names)) != len(names):
            raise ValueError(f"Entity '{self.name}' declares a property twice")
        if self.key is not None:
            key_property = self.property_named(self.key)
            if key_property.kind is not PropertyKind.SCALAR or key_property.value_type is not str:
                raise ValueError(
                    f"Key property '{self.name}.{self.key}' must be a single-valued str"
                )
        if self.factory is None:
            object.__setattr__(self, "factory", self.entity_type)

    def property_named(self, name: str) -> PropertyDescriptor:
        """Get a property descriptor by name.

        Raises:
            ValueError: If the entity declares no such property
        """
        for prop in self.properties:
            if prop.name == name:
                return prop
        raise ValueError(f"Entity '{self.name}' has no property '{name}'")

    @property
    def key_property(self) -> PropertyDescriptor:
        """The key property descriptor.

        Raises:
            UnmappedEntityError: If the entity is not keyed
        """
        if self.key is None:
            raise UnmappedEntityError(f"Entity '{self.name}' has no key property")
        return self.property_named(self.key)

    def create(self) -> Any:
        """Create a new, empty instance.

        Raises:
            ValueAccessError: If the factory fails
        """
        try:
            return self.factory()
        except TypeError as e:
            raise ValueAccessError(f"Cannot create an instance of '{self.name}'") from e


class EntityRegistry:
    """Lookup of entity descriptors by type and by name."""

    def __init__(self, descriptors: Iterable[EntityDescriptor]):
        self._by_type: dict[type, EntityDescriptor] = {}
        self._by_name: dict[str, EntityDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.entity_type in self._by_type or descriptor.name in self._by_name:
                raise ValueError(f"Entity '{descriptor.name}' is registered twice")
            self._by_type[descriptor.entity_type] = descriptor
            self._by_name[descriptor.name] = descriptor

    def for_type(self, entity_type: type) -> EntityDescriptor:
        """Get the descriptor of a type.

        Raises:
            UnmappedEntityError: If the type is not registered
        """
        try:
            return self._by_type[entity_type]
        except KeyError:
            raise UnmappedEntityError(f"Type {entity_type!r} is not described") from None

    def by_name(self, name: str) -> EntityDescriptor:
        """Get the descriptor registered under an entity name.

        Raises:
            UnmappedEntityError: If no entity has that name
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise UnmappedEntityError(f"Entity '{name}' is not described") from None
