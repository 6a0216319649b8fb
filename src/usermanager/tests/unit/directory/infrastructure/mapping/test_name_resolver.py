"""Unit tests for NameResolver."""

import pytest

from directory.domain.aggregates import Role, User
from directory.infrastructure.mapping import MappingTables, NameResolver
from directory.infrastructure.mapping.exceptions import (
    InvalidNameError,
    UnmappedEntityError,
)


class TestQualifiedName:
    """Tests for NameResolver.qualified_name."""

    def test_builds_dn_under_subtree(self, name_resolver):
        assert name_resolver.qualified_name("admins", Role) == "cn=admins,ou=roles,dc=example"

    def test_qualified_name_of_entity(self, name_resolver):
        assert (
            name_resolver.qualified_name_of(User("alice"))
            == "cn=alice,ou=users,dc=example"
        )

    def test_escapes_special_characters(self, name_resolver):
        dn = name_resolver.qualified_name("Smith, John", User)
        assert dn == "cn=Smith\\, John,ou=users,dc=example"

    @pytest.mark.parametrize(
        "identifier", ["", None, 42, "a\x00b", " lead", "trail ", " ", "tab\t"]
    )
    def test_rejects_invalid_identifier(self, name_resolver, identifier):
        with pytest.raises(InvalidNameError):
            name_resolver.qualified_name(identifier, Role)

    def test_unmapped_key(self, registry):
        tables = MappingTables.from_config(
            object_classes={"role": "groupOfNames"},
            attribute_mapping={},
            subtrees={"role": "ou=roles,dc=example"},
        )

        with pytest.raises(UnmappedEntityError):
            NameResolver(registry, tables).qualified_name("admins", Role)

    def test_empty_subtree_yields_bare_rdn(self, registry):
        tables = MappingTables.from_config(
            object_classes={"role": "groupOfNames"},
            attribute_mapping={"role.identifier": "cn"},
            subtrees={"role": ""},
        )

        assert NameResolver(registry, tables).qualified_name("admins", Role) == "cn=admins"


class TestShortName:
    """Tests for NameResolver.short_name."""

    def test_reduces_dn_to_identifier(self, name_resolver):
        assert name_resolver.short_name("cn=admins,ou=roles,dc=example", Role) == "admins"

    def test_key_attribute_matches_case_insensitively(self, name_resolver):
        assert name_resolver.short_name("CN=Admins,OU=Roles,DC=example", Role) == "Admins"

    def test_takes_most_specific_key_component(self, name_resolver):
        assert name_resolver.short_name("cn=alice,cn=staff,dc=example", User) == "alice"

    def test_returns_input_without_key_component(self, name_resolver):
        assert name_resolver.short_name("ou=roles,dc=example", Role) == "ou=roles,dc=example"

    @pytest.mark.parametrize(
        "identifier", ["Smith, John", "#x", "a=b", "a+b", 'q"x', "inner space"]
    )
    def test_round_trips_escaped_identifier(self, name_resolver, identifier):
        dn = name_resolver.qualified_name(identifier, User)

        assert name_resolver.short_name(dn, User) == identifier

    def test_rejects_malformed_dn(self, name_resolver):
        with pytest.raises(InvalidNameError):
            name_resolver.short_name("no equals sign", Role)

    def test_rejects_non_string(self, name_resolver):
        with pytest.raises(InvalidNameError):
            name_resolver.short_name(None, Role)

    def test_subtree_name(self, name_resolver):
        assert name_resolver.subtree_name(User) == "ou=users,dc=example"
