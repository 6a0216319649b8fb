"""Mapping tables loaded from configuration.

Tables are read once and exposed read-only. Every list-valued entry is
written in configuration as a comma separated string.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from ldap3.core.exceptions import LDAPInvalidDnError
from ldap3.utils.dn import parse_dn

from directory.infrastructure.mapping.exceptions import (
    InvalidNameError,
    UnmappedEntityError,
)
from infrastructure.settings import MappingSettings


def _split(value: str | Sequence[str]) -> tuple[str, ...]:
    items = value.split(",") if isinstance(value, str) else value
    return tuple(item.strip() for item in items if item.strip())


@dataclass(frozen=True)
class MappingTables:
    """Object-class, attribute and subtree tables.

    Attributes:
        attribute_mapping: "<entity>.<property>" to attribute names
        object_classes: Entity name to object classes of created entries
        subtrees: Entity name to base DN
    """

    attribute_mapping: Mapping[str, tuple[str, ...]]
    object_classes: Mapping[str, tuple[str, ...]]
    subtrees: Mapping[str, str]

    @classmethod
    def from_config(
        cls,
        object_classes: Mapping[str, str | Sequence[str]],
        attribute_mapping: Mapping[str, str | Sequence[str]],
        subtrees: Mapping[str, str],
    ) -> MappingTables:
        """Build the tables from raw configuration values.

        Raises:
            ValueError: If an object-class entry is empty
            InvalidNameError: If a subtree is not a valid DN
        """
        classes = {name: _split(value) for name, value in object_classes.items()}
        for name, values in classes.items():
            if not values:
                raise ValueError(f"Entity '{name}' must have at least one object class")

        attributes = {key: _split(value) for key, value in attribute_mapping.items()}
        # Empty entries mean the property is not mapped
        attributes = {key: value for key, value in attributes.items() if value}

        parsed_subtrees: dict[str, str] = {}
        for name, dn in subtrees.items():
            dn = dn.strip()
            if dn:
                try:
                    parse_dn(dn)
                except LDAPInvalidDnError as e:
                    raise InvalidNameError(f"Invalid subtree for '{name}': {dn}") from e
            parsed_subtrees[name] = dn

        return cls(
            attribute_mapping=MappingProxyType(attributes),
            object_classes=MappingProxyType(classes),
            subtrees=MappingProxyType(parsed_subtrees),
        )

    @classmethod
    def from_settings(cls, settings: MappingSettings) -> MappingTables:
        return cls.from_config(
            object_classes=settings.object_classes,
            attribute_mapping=settings.attribute_mapping,
            subtrees=settings.subtrees,
        )

    def attribute_names(self, entity_name: str, property_name: str) -> tuple[str, ...]:
        """Attribute names a property maps to, empty when unmapped."""
        return self.attribute_mapping.get(f"{entity_name}.{property_name}", ())

    def object_classes_for(self, entity_name: str) -> tuple[str, ...]:
        """Object classes of an entity.

        Raises:
            UnmappedEntityError: If the entity has no object classes
        """
        try:
            return self.object_classes[entity_name]
        except KeyError:
            raise UnmappedEntityError(f"Entity '{entity_name}' has no object classes") from None

    def subtree(self, entity_name: str) -> str:
        """Base DN of an entity.

        Raises:
            UnmappedEntityError: If the entity has no subtree
        """
        try:
            return self.subtrees[entity_name]
        except KeyError:
            raise UnmappedEntityError(f"Entity '{entity_name}' has no subtree") from None
