"""Fixtures for the directory bounded context.

Provides the mapping layer configured for the example directory layout and
an in-memory directory that behaves like an LDAP server for the operations
the repositories use.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager

import pytest
from ldap3.utils.dn import parse_dn

from directory.infrastructure.ldap.exceptions import (
    AttributeValueExistsError,
    NameAlreadyBoundError,
    NameNotFoundError,
    NoSuchAttributeError,
)
from directory.infrastructure.ldap.protocols import ModificationOp
from directory.infrastructure.mapping import (
    AttributeCodec,
    EntityMapper,
    MappingTables,
    NameResolver,
    StringConverter,
)
from directory.infrastructure.mapping.entities import default_registry


class InMemoryDirectory:
    """Dictionary backed directory implementing ConnectionProvider and
    DirectoryConnection.

    Names and attribute names match case-insensitively, as in LDAP.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, dict[str, list[str]]]] = {}
        self.opened = 0
        self.released = 0

    @contextmanager
    def open(self) -> Iterator["InMemoryDirectory"]:
        self.opened += 1
        try:
            yield self
        finally:
            self.released += 1

    def add_entry(self, dn: str, attributes: Mapping[str, Sequence[str]]) -> None:
        self._entries[dn.lower()] = (dn, {k: list(v) for k, v in attributes.items()})

    def has_entry(self, dn: str) -> bool:
        return dn.lower() in self._entries

    def entry(self, dn: str) -> dict[str, list[str]]:
        return self._entry(dn)

    def snapshot(self) -> dict[str, dict[str, list[str]]]:
        return {
            key: {name: list(values) for name, values in attributes.items()}
            for key, (_dn, attributes) in self._entries.items()
        }

    def _entry(self, dn: str) -> dict[str, list[str]]:
        try:
            return self._entries[dn.lower()][1]
        except KeyError:
            raise NameNotFoundError(f"No entry named '{dn}'", result_code=32) from None

    @staticmethod
    def _attribute_key(entry: Mapping[str, list[str]], name: str) -> str | None:
        for key in entry:
            if key.lower() == name.lower():
                return key
        return None

    def bind(self, dn: str, attributes: Mapping[str, Sequence[str]]) -> None:
        if self.has_entry(dn):
            raise NameAlreadyBoundError(f"Entry '{dn}' exists", result_code=68)
        self.add_entry(dn, attributes)

    def unbind(self, dn: str) -> None:
        self._entry(dn)
        del self._entries[dn.lower()]

    def get_attributes(self, dn: str) -> dict[str, list[str]]:
        return {name: list(values) for name, values in self._entry(dn).items()}

    def modify_attributes(
        self,
        dn: str,
        operation: ModificationOp,
        attributes: Mapping[str, Sequence[str]],
    ) -> None:
        entry = self._entry(dn)
        for name, values in attributes.items():
            key = self._attribute_key(entry, name)
            if operation is ModificationOp.REPLACE:
                if key is not None:
                    del entry[key]
                if values:
                    entry[name] = list(values)
            elif operation is ModificationOp.ADD:
                current = entry.setdefault(key or name, [])
                lowered = [v.lower() for v in current]
                for value in values:
                    if value.lower() in lowered:
                        raise AttributeValueExistsError(f"{name}={value} exists", result_code=20)
                current.extend(values)
            else:
                if key is None:
                    raise NoSuchAttributeError(f"No attribute {name}", result_code=16)
                current = entry[key]
                for value in values:
                    matches = [v for v in current if v.lower() == value.lower()]
                    if not matches:
                        raise NoSuchAttributeError(f"No value {name}={value}", result_code=16)
                    current.remove(matches[0])
                if not current:
                    del entry[key]

    def _children(self, base_dn: str) -> list[tuple[str, dict[str, list[str]]]]:
        self._entry(base_dn)
        depth = len(parse_dn(base_dn))
        suffix = "," + base_dn.lower()
        return [
            (dn, attributes)
            for key, (dn, attributes) in self._entries.items()
            if key.endswith(suffix) and len(parse_dn(dn)) == depth + 1
        ]

    def list(self, base_dn: str) -> list[str]:
        return [dn for dn, _attributes in self._children(base_dn)]

    def search(self, base_dn: str, matching: Mapping[str, Sequence[str]]) -> list[str]:
        found = []
        for dn, attributes in self._children(base_dn):
            held = {
                name.lower(): {v.lower() for v in values}
                for name, values in attributes.items()
            }
            if all(
                value.lower() in held.get(name.lower(), set())
                for name, values in matching.items()
                for value in values
            ):
                found.append(dn)
        return found


@pytest.fixture
def mapping_tables() -> MappingTables:
    """Tables for users and roles under dc=example, keyed on cn."""
    return MappingTables.from_config(
        object_classes={
            "user": "top,person,organizationalPerson,inetOrgPerson",
            "role": "top,groupOfNames",
        },
        attribute_mapping={
            "user.identifier": "cn",
            "user.display_name": "displayName",
            "user.first_name": "givenName",
            "user.last_name": "sn",
            "user.mail": "mail",
            "user.password": "userPassword",
            "role.identifier": "cn",
            "role.display_name": "displayName",
            "role.users": "users",
        },
        subtrees={
            "user": "ou=users,dc=example",
            "role": "ou=roles,dc=example",
        },
    )


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def name_resolver(registry, mapping_tables) -> NameResolver:
    return NameResolver(registry, mapping_tables)


@pytest.fixture
def attribute_codec(registry, name_resolver) -> AttributeCodec:
    return AttributeCodec(registry, name_resolver, StringConverter())


@pytest.fixture
def entity_mapper(registry, mapping_tables, attribute_codec) -> EntityMapper:
    return EntityMapper(registry, mapping_tables, attribute_codec)


@pytest.fixture
def directory() -> InMemoryDirectory:
    """An empty directory holding only the user and role subtrees."""
    fake = InMemoryDirectory()
    fake.add_entry("dc=example", {"objectClass": ["domain"], "dc": ["example"]})
    fake.add_entry("ou=users,dc=example", {"objectClass": ["organizationalUnit"], "ou": ["users"]})
    fake.add_entry("ou=roles,dc=example", {"objectClass": ["organizationalUnit"], "ou": ["roles"]})
    return fake
