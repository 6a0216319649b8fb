"""Unit tests for the file based permission resolvers."""

from unittest.mock import create_autospec

import pytest

from shared_kernel.authorization import WildcardPermission
from shared_kernel.authorization.observability import AuthorizationProbe
from shared_kernel.authorization.resolvers import (
    FileUserPermissionResolver,
    PropertyRolePermissionResolver,
)


def texts(permissions):
    return [str(permission) for permission in permissions]


@pytest.fixture
def probe():
    return create_autospec(AuthorizationProbe, instance=True)


class TestPropertyRolePermissionResolver:
    """Tests for PropertyRolePermissionResolver."""

    def test_resolves_configured_role(self):
        resolver = PropertyRolePermissionResolver({"admins": ["role:*", "user:*"]})

        assert resolver.resolve_permissions_in_role("admins") == [
            WildcardPermission.parse("role:*"),
            WildcardPermission.parse("user:*"),
        ]

    def test_unknown_role_has_no_permissions(self):
        resolver = PropertyRolePermissionResolver({"admins": ["role:*"]})

        assert resolver.resolve_permissions_in_role("auditors") == []

    def test_from_file(self, tmp_path, probe):
        path = tmp_path / "roles.properties"
        path.write_text(
            "# role permissions\n"
            "\n"
            "admins = role:*, user:*\n"
            "auditors=user:*:read\n"
        )

        resolver = PropertyRolePermissionResolver.from_file(path, probe=probe)

        assert texts(resolver.resolve_permissions_in_role("admins")) == ["role:*", "user:*"]
        assert texts(resolver.resolve_permissions_in_role("auditors")) == ["user:*:read"]
        probe.permissions_loaded.assert_called_once_with(str(path), 2)

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="Could not read"):
            PropertyRolePermissionResolver.from_file(tmp_path / "missing.properties")

    def test_rejects_malformed_permission(self):
        with pytest.raises(ValueError):
            PropertyRolePermissionResolver({"admins": ["role::read"]})


class TestFileUserPermissionResolver:
    """Tests for FileUserPermissionResolver."""

    def test_expands_user_placeholder(self):
        resolver = FileUserPermissionResolver(["user:${user}:read"])

        assert texts(resolver.resolve_permissions("alice", [])) == ["user:alice:read"]

    def test_expands_roles_placeholder_per_role(self):
        resolver = FileUserPermissionResolver(["role:${roles}:read"])

        result = resolver.resolve_permissions("alice", ["admins", "auditors"])

        assert texts(result) == ["role:admins:read", "role:auditors:read"]

    def test_roles_placeholder_without_roles_yields_nothing(self):
        resolver = FileUserPermissionResolver(["role:${roles}:read", "password:${user}"])

        assert texts(resolver.resolve_permissions("alice", [])) == ["password:alice"]

    def test_records_resolution(self, probe):
        resolver = FileUserPermissionResolver(["user:${user}:read"], probe=probe)

        resolver.resolve_permissions("alice", [])

        probe.permissions_resolved.assert_called_once_with("alice", 1)

    def test_from_file_skips_comments(self, tmp_path):
        path = tmp_path / "users.txt"
        path.write_text("# own entry\nuser:${user}:read\n\npassword:${user}:modify\n")

        resolver = FileUserPermissionResolver.from_file(path)

        assert resolver.templates == ["user:${user}:read", "password:${user}:modify"]

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="Could not read"):
            FileUserPermissionResolver.from_file(tmp_path / "missing.txt")

    def test_skips_user_templates_for_unscopable_principal(self, probe):
        resolver = FileUserPermissionResolver(
            ["user:${user}:write", "role:public:read"], probe=probe
        )

        result = resolver.resolve_permissions("mallory,admin", [])

        assert texts(result) == ["role:public:read"]
        probe.permission_template_skipped.assert_called_once_with(
            "mallory,admin", "user:${user}:write", "mallory,admin"
        )

    def test_skipped_principal_gains_no_foreign_scope(self):
        resolver = FileUserPermissionResolver(["user:${user}:write"])

        permissions = resolver.resolve_permissions("mallory,admin", [])

        requested = WildcardPermission.parse("user:admin:write")
        assert not any(p.implies(requested) for p in permissions)

    def test_skips_unscopable_roles(self, probe):
        resolver = FileUserPermissionResolver(["role:${roles}:read"], probe=probe)

        result = resolver.resolve_permissions("alice", ["admins", "x:*"])

        assert texts(result) == ["role:admins:read"]
        probe.permission_template_skipped.assert_called_once_with(
            "alice", "role:${roles}:read", "x:*"
        )
