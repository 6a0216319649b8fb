"""Unit tests for authorization types and utilities."""

import pytest

from shared_kernel.authorization.types import (
    Permission,
    ResourceType,
    format_permission,
    format_resource,
    is_valid_resource_id,
)


class TestResourceType:
    """Tests for ResourceType enum."""

    def test_has_directory_resource_types(self):
        """Users, roles and passwords are protected resources."""
        assert ResourceType.USER == "user"
        assert ResourceType.ROLE == "role"
        assert ResourceType.PASSWORD == "password"

    def test_resource_types_are_lowercase(self):
        """Test that all resource types are lowercase strings."""
        for resource_type in ResourceType:
            assert resource_type.islower()
            assert isinstance(resource_type, str)


class TestPermission:
    """Tests for Permission enum."""

    def test_has_actions(self):
        assert Permission.READ == "read"
        assert Permission.WRITE == "write"
        assert Permission.MODIFY == "modify"


class TestFormatting:
    """Tests for permission string formatting."""

    def test_format_resource(self):
        """Resource should be formatted as type:id."""
        assert format_resource(ResourceType.ROLE, "admins") == "role:admins"

    def test_format_permission(self):
        """Permission should be formatted as type:id:action."""
        assert (
            format_permission(ResourceType.USER, "alice", Permission.READ)
            == "user:alice:read"
        )

    def test_format_password_permission(self):
        """Password changes use the modify action on the password resource."""
        assert (
            format_permission(ResourceType.PASSWORD, "alice", Permission.MODIFY)
            == "password:alice:modify"
        )

    @pytest.mark.parametrize(
        "resource_id", ["alice:read", "mallory,admin", "*", "", " alice", "alice "]
    )
    def test_rejects_identifiers_that_change_the_scope(self, resource_id):
        """Dividers, wildcards and edge whitespace would widen the permission."""
        assert not is_valid_resource_id(resource_id)
        with pytest.raises(ValueError):
            format_permission(ResourceType.USER, resource_id, Permission.WRITE)

    def test_accepts_plain_identifiers(self):
        assert is_valid_resource_id("Smith John")
        assert is_valid_resource_id("o'brien.1")
