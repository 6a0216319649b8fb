"""Distinguished name construction and parsing.

A qualified name is the entity's subtree with one relative name component
``<key attribute>=<identifier>`` in front of it. The short name of a DN is
the value of its most specific component whose type is one of the entity's
key attributes.
"""

from __future__ import annotations

from string import hexdigits
from typing import Any

from ldap3.core.exceptions import LDAPInvalidDnError
from ldap3.utils.dn import escape_rdn, parse_dn

from directory.infrastructure.mapping.descriptors import EntityRegistry
from directory.infrastructure.mapping.exceptions import (
    InvalidNameError,
    UnmappedEntityError,
)
from directory.infrastructure.mapping.tables import MappingTables


def _unescape(value: str) -> str:
    """Undo RFC 4514 escaping of an attribute value."""
    if "\\" not in value:
        return value

    decoded = bytearray()
    index = 0
    while index < len(value):
        char = value[index]
        if char == "\\" and index + 1 < len(value):
            pair = value[index + 1 : index + 3]
            if len(pair) == 2 and all(c in hexdigits for c in pair):
                decoded += bytes.fromhex(pair)
                index += 3
                continue
            decoded += value[index + 1].encode("utf-8")
            index += 2
            continue
        decoded += char.encode("utf-8")
        index += 1
    return decoded.decode("utf-8", errors="replace")


class NameResolver:
    """Builds and parses the distinguished names of mapped entities."""

    def __init__(self, registry: EntityRegistry, tables: MappingTables):
        self._registry = registry
        self._tables = tables

    def key_attributes(self, entity_type: type) -> tuple[str, ...]:
        """Attribute names the key property of a type maps to.

        Raises:
            UnmappedEntityError: If the type is unkeyed or its key is unmapped
        """
        descriptor = self._registry.for_type(entity_type)
        names = self._tables.attribute_names(descriptor.name, descriptor.key_property.name)
        if not names:
            raise UnmappedEntityError(f"Key of entity '{descriptor.name}' is not mapped")
        return names

    def subtree_name(self, entity_type: type) -> str:
        """Base DN under which all entries of a type are stored.

        Raises:
            UnmappedEntityError: If the type has no subtree
        """
        descriptor = self._registry.for_type(entity_type)
        return self._tables.subtree(descriptor.name)

    def qualified_name(self, identifier: str, entity_type: type) -> str:
        """Build the DN of the entry with ``identifier``.

        Raises:
            InvalidNameError: If the identifier cannot be used in a DN
            UnmappedEntityError: If the type has no subtree or key mapping
        """
        if not isinstance(identifier, str) or not identifier:
            raise InvalidNameError(f"Invalid identifier: {identifier!r}")
        if "\x00" in identifier:
            raise InvalidNameError("Identifier must not contain NUL characters")
        if identifier != identifier.strip():
            # Escaped edge spaces do not survive parse_dn
            raise InvalidNameError(
                f"Identifier must not start or end with whitespace: {identifier!r}"
            )

        key_attribute = self.key_attributes(entity_type)[0]
        subtree = self.subtree_name(entity_type)
        rdn = f"{key_attribute}={escape_rdn(identifier)}"
        return f"{rdn},{subtree}" if subtree else rdn

    def qualified_name_of(self, entity: Any) -> str:
        """Build the DN of an entity from its key property.

        Raises:
            ValueAccessError: If the key cannot be read
            InvalidNameError: If the key is empty or malformed
            UnmappedEntityError: If the type has no subtree or key mapping
        """
        descriptor = self._registry.for_type(type(entity))
        identifier = descriptor.key_property.get(entity)
        return self.qualified_name(identifier, type(entity))

    def short_name(self, dn: str, entity_type: type) -> str:
        """Reduce a DN to the identifier of the entry it names.

        Returns the input unchanged when no component carries a key attribute.

        Raises:
            InvalidNameError: If the DN cannot be parsed
            UnmappedEntityError: If the type has no key mapping
        """
        keys = {name.lower() for name in self.key_attributes(entity_type)}
        if not isinstance(dn, str):
            raise InvalidNameError(f"Invalid distinguished name: {dn!r}")
        try:
            components = parse_dn(dn, escape=False, strip=True)
        except LDAPInvalidDnError as e:
            raise InvalidNameError(f"Invalid distinguished name: {dn!r}") from e

        # parse_dn lists the most specific component first
        for attribute_type, value, _separator in components:
            if attribute_type.lower() in keys:
                return _unescape(value)
        return dn
