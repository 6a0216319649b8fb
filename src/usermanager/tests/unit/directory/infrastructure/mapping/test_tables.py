"""Unit tests for MappingTables."""

import pytest

from directory.infrastructure.mapping import MappingTables
from directory.infrastructure.mapping.exceptions import (
    InvalidNameError,
    UnmappedEntityError,
)
from infrastructure.settings import MappingSettings


def build(**overrides):
    config = {
        "object_classes": {"role": "top, groupOfNames"},
        "attribute_mapping": {"role.identifier": "cn", "role.users": "member,uniqueMember"},
        "subtrees": {"role": "ou=roles,dc=example"},
    }
    config.update(overrides)
    return MappingTables.from_config(**config)


class TestFromConfig:
    """Tests for MappingTables.from_config."""

    def test_splits_comma_lists(self):
        tables = build()

        assert tables.object_classes_for("role") == ("top", "groupOfNames")
        assert tables.attribute_names("role", "users") == ("member", "uniqueMember")

    def test_accepts_sequences(self):
        tables = build(object_classes={"role": ["top", "groupOfNames"]})
        assert tables.object_classes_for("role") == ("top", "groupOfNames")

    def test_empty_object_classes_rejected(self):
        with pytest.raises(ValueError):
            build(object_classes={"role": " , "})

    def test_empty_attribute_entry_is_unmapped(self):
        tables = build(attribute_mapping={"role.identifier": "cn", "role.users": ""})
        assert tables.attribute_names("role", "users") == ()

    def test_invalid_subtree_rejected(self):
        with pytest.raises(InvalidNameError):
            build(subtrees={"role": "not a dn"})

    def test_tables_are_read_only(self):
        tables = build()
        with pytest.raises(TypeError):
            tables.subtrees["user"] = "ou=users"  # type: ignore[index]

    def test_from_settings(self):
        tables = MappingTables.from_settings(MappingSettings(_env_file=None))
        assert tables.subtree("role") == "ou=roles,dc=example"


class TestLookups:
    """Tests for table lookups."""

    def test_unmapped_property(self):
        assert build().attribute_names("role", "display_name") == ()

    def test_missing_object_classes(self):
        with pytest.raises(UnmappedEntityError):
            build().object_classes_for("user")

    def test_missing_subtree(self):
        with pytest.raises(UnmappedEntityError):
            build().subtree("user")
