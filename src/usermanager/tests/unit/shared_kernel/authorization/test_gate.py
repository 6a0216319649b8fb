"""Unit tests for PermissionGate and the FilterUnauthorized policy."""

from unittest.mock import create_autospec

import pytest

from shared_kernel.authorization import (
    AuthorizationDeniedError,
    FilterUnauthorized,
    Permission,
    PermissionGate,
    ResourceType,
    Subject,
)
from shared_kernel.authorization.observability import AuthorizationProbe


@pytest.fixture
def probe():
    return create_autospec(AuthorizationProbe, instance=True)


@pytest.fixture
def gate(probe):
    return PermissionGate(probe=probe)


class TestFilterUnauthorized:
    """Tests for the FilterUnauthorized policy."""

    def test_keeps_permitted_in_input_order(self):
        caller = Subject.of("bob", ["role:b:read", "role:a:read"])

        result = FilterUnauthorized(ResourceType.ROLE).apply(caller, ["b", "c", "a"])

        assert result == ["b", "a"]

    def test_uses_requested_permission(self):
        caller = Subject.of("bob", ["role:*:read"])

        result = FilterUnauthorized(ResourceType.ROLE, Permission.WRITE).apply(
            caller, ["a"]
        )

        assert result == []


class TestRequire:
    """Tests for PermissionGate.require."""

    def test_passes_when_permitted(self, gate, probe):
        caller = Subject.of("bob", ["role:admins:write"])

        gate.require(caller, ResourceType.ROLE, "admins", Permission.WRITE)

        probe.permission_denied.assert_not_called()

    def test_raises_and_records_denial(self, gate, probe):
        caller = Subject.of("bob", ["role:admins:read"])

        with pytest.raises(AuthorizationDeniedError):
            gate.require(caller, ResourceType.ROLE, "admins", Permission.WRITE)

        probe.permission_denied.assert_called_once_with("bob", "role:admins:write")

    def test_permits_does_not_raise(self, gate, nobody):
        assert gate.permits(nobody, ResourceType.USER, "alice", Permission.READ) is False


class TestFilter:
    """Tests for PermissionGate.filter_unauthorized."""

    def test_records_when_entries_dropped(self, gate, probe):
        caller = Subject.of("bob", ["user:alice:read"])

        result = gate.filter_unauthorized(caller, ResourceType.USER, ["alice", "carol"])

        assert result == ["alice"]
        probe.entries_filtered.assert_called_once_with("bob", "user", 2, 1)

    def test_silent_when_nothing_dropped(self, gate, probe, admin):
        result = gate.filter_unauthorized(admin, ResourceType.USER, iter(["alice"]))

        assert result == ["alice"]
        probe.entries_filtered.assert_not_called()


class TestRequireLinkChange:
    """Tests for PermissionGate.require_link_change."""

    def test_requires_write_on_changed_entity(self, gate):
        caller = Subject.of("bob", ["user:*:write"])

        with pytest.raises(AuthorizationDeniedError) as exc_info:
            gate.require_link_change(
                caller, ResourceType.ROLE, "admins", ResourceType.USER, ["alice"], []
            )

        assert exc_info.value.permission == "role:admins:write"

    def test_requires_write_on_every_linked_entity(self, gate):
        caller = Subject.of("bob", ["role:admins:write", "user:alice:write"])

        with pytest.raises(AuthorizationDeniedError) as exc_info:
            gate.require_link_change(
                caller, ResourceType.ROLE, "admins", ResourceType.USER, ["alice"], ["carol"]
            )

        assert exc_info.value.permission == "user:carol:write"

    def test_passes_with_write_on_both_sides(self, gate):
        caller = Subject.of("bob", ["role:admins:write", "user:*:write"])

        gate.require_link_change(
            caller, ResourceType.ROLE, "admins", ResourceType.USER, ["alice"], ["carol"]
        )


class TestUnscopableIdentifiers:
    """Identifiers holding permission syntax are never permitted."""

    def test_require_denies_identifier_extending_a_grant(self, gate, probe):
        caller = Subject.of("bob", ["user:alice:read"])

        with pytest.raises(AuthorizationDeniedError):
            gate.require(caller, ResourceType.USER, "alice:read", Permission.WRITE)

        probe.permission_denied.assert_called_once()

    def test_require_denies_even_with_wildcard_grant(self, gate, admin):
        with pytest.raises(AuthorizationDeniedError):
            gate.require(admin, ResourceType.USER, "alice,bob", Permission.WRITE)

    def test_permits_is_false(self, gate, admin):
        assert gate.permits(admin, ResourceType.ROLE, "*", Permission.READ) is False

    def test_filter_drops_them(self, gate, admin):
        result = gate.filter_unauthorized(
            admin, ResourceType.ROLE, ["admins", "ou=roles,dc=example", "a:b"]
        )

        assert result == ["admins"]
