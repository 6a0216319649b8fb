"""Unit tests for LdapUserRepository."""

import base64
import hashlib
from unittest.mock import create_autospec

import pytest

from directory.domain.aggregates import User
from directory.infrastructure.observability import UserRepositoryProbe
from directory.infrastructure.user_repository import LdapUserRepository, format_password
from directory.ports.exceptions import (
    EntityAlreadyExistsError,
    EntityNotFoundError,
)
from directory.ports.repositories import IUserRepository
from shared_kernel.authorization import AuthorizationDeniedError, Subject

USERS = "ou=users,dc=example"


def user_dn(identifier):
    return f"cn={identifier},{USERS}"


def seed_user(directory, identifier, **attributes):
    entry = {
        "objectClass": ["top", "person", "organizationalPerson", "inetOrgPerson"],
        "cn": [identifier],
    }
    entry.update({name: [value] for name, value in attributes.items()})
    directory.add_entry(user_dn(identifier), entry)


@pytest.fixture
def probe():
    return create_autospec(UserRepositoryProbe, instance=True)


@pytest.fixture
def repository(directory, entity_mapper, name_resolver, probe):
    return LdapUserRepository(directory, entity_mapper, name_resolver, probe=probe)


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_implements_protocol(self, repository):
        """Repository should implement IUserRepository protocol."""
        assert isinstance(repository, IUserRepository)


class TestFormatPassword:
    """Tests for the stored password format."""

    def test_prefixes_algorithm_and_encodes_digest(self):
        digest = hashlib.sha1(b"secret").digest()

        assert format_password("SHA", digest) == "{SHA}" + base64.b64encode(digest).decode()


class TestContainsUser:
    """Tests for contains_user."""

    def test_existing_user(self, repository, directory, admin):
        seed_user(directory, "alice")
        assert repository.contains_user(admin, "alice") is True

    def test_missing_user(self, repository, admin):
        assert repository.contains_user(admin, "alice") is False

    def test_unreadable_user_reported_absent(self, repository, directory, nobody):
        seed_user(directory, "alice")

        assert repository.contains_user(nobody, "alice") is False
        assert directory.opened == 0


class TestCreateUser:
    """Tests for create_user."""

    def test_stores_mapped_attributes(self, repository, directory, admin, probe):
        repository.create_user(admin, User("alice", "Alice A.", "Alice", "A.", "alice@example.org"))

        entry = directory.entry(user_dn("alice"))
        assert entry["cn"] == ["alice"]
        assert entry["displayName"] == ["Alice A."]
        assert entry["givenName"] == ["Alice"]
        assert entry["sn"] == ["A."]
        assert entry["mail"] == ["alice@example.org"]
        assert entry["objectClass"] == ["top", "person", "organizationalPerson", "inetOrgPerson"]
        probe.user_created.assert_called_once_with("alice")

    def test_omits_empty_attributes(self, repository, directory, admin):
        repository.create_user(admin, User("alice"))

        assert set(directory.entry(user_dn("alice"))) == {"cn", "objectClass"}

    def test_existing_user(self, repository, directory, admin):
        seed_user(directory, "alice", mail="alice@example.org")
        before = directory.snapshot()

        with pytest.raises(EntityAlreadyExistsError):
            repository.create_user(admin, User("alice", mail="other@example.org"))

        assert directory.snapshot() == before

    def test_requires_write(self, repository, directory):
        caller = Subject.of("bob", ["user:alice:read"])

        with pytest.raises(AuthorizationDeniedError):
            repository.create_user(caller, User("alice"))

        assert not directory.has_entry(user_dn("alice"))

    def test_identifier_cannot_extend_a_narrower_grant(self, repository, directory):
        caller = Subject.of("bob", ["user:alice:read"])

        with pytest.raises(AuthorizationDeniedError):
            repository.create_user(caller, User("alice:read"))

        assert not directory.has_entry(user_dn("alice:read"))


class TestDeleteUser:
    """Tests for delete_user."""

    def test_removes_entry(self, repository, directory, admin):
        seed_user(directory, "alice")

        repository.delete_user(admin, "alice")

        assert not directory.has_entry(user_dn("alice"))

    def test_missing_user(self, repository, admin, probe):
        with pytest.raises(EntityNotFoundError):
            repository.delete_user(admin, "alice")

        probe.user_not_found.assert_called_once_with("alice")


class TestGetUser:
    """Tests for get_user and get_user_unsecured."""

    def test_returns_user(self, repository, directory):
        seed_user(directory, "alice", displayName="Alice A.", mail="alice@example.org")
        caller = Subject.of("alice", ["user:alice:read"])

        assert repository.get_user(caller, "alice") == User(
            "alice", "Alice A.", mail="alice@example.org"
        )

    def test_password_is_never_read_back(self, repository, directory, admin):
        seed_user(directory, "alice", userPassword="{SHA}abc")

        assert repository.get_user(admin, "alice") == User("alice")

    def test_requires_read(self, repository, directory):
        seed_user(directory, "alice")
        caller = Subject.of("bob", ["user:bob:read"])

        with pytest.raises(AuthorizationDeniedError):
            repository.get_user(caller, "alice")

    def test_missing_user(self, repository, admin):
        with pytest.raises(EntityNotFoundError):
            repository.get_user(admin, "alice")

    def test_unsecured_access_is_recorded(self, repository, directory, probe):
        seed_user(directory, "alice")

        assert repository.get_user_unsecured("alice") == User("alice")
        probe.unsecured_user_access.assert_called_once_with("alice")


class TestListUsers:
    """Tests for get_user_identifiers and get_users."""

    def test_identifiers_filtered_and_sorted(self, repository, directory):
        for identifier in ("carol", "alice", "bob"):
            seed_user(directory, identifier)
        caller = Subject.of("bob", ["user:bob,carol:read"])

        assert repository.get_user_identifiers(caller) == ["bob", "carol"]

    def test_get_users(self, repository, directory, admin, probe):
        seed_user(directory, "bob", mail="bob@example.org")
        seed_user(directory, "alice")

        assert repository.get_users(admin) == [
            User("alice"),
            User("bob", mail="bob@example.org"),
        ]
        probe.users_listed.assert_called_once_with(2)


class TestUpdateUser:
    """Tests for update_user."""

    def test_replaces_mapped_attributes(self, repository, directory, admin):
        seed_user(directory, "alice", displayName="Alice", mail="alice@example.org")

        repository.update_user(admin, User("alice", "Alice A."))

        assert repository.get_user(admin, "alice") == User("alice", "Alice A.")

    def test_keeps_password(self, repository, directory, admin):
        seed_user(directory, "alice", userPassword="{SHA}abc")

        repository.update_user(admin, User("alice", "Alice"))

        assert directory.entry(user_dn("alice"))["userPassword"] == ["{SHA}abc"]

    def test_missing_user(self, repository, directory, admin):
        before = directory.snapshot()

        with pytest.raises(EntityNotFoundError):
            repository.update_user(admin, User("alice", "Alice"))

        assert directory.snapshot() == before

    def test_requires_write(self, repository, directory):
        seed_user(directory, "alice", displayName="Alice")
        caller = Subject.of("alice", ["user:alice:read"])

        with pytest.raises(AuthorizationDeniedError):
            repository.update_user(caller, User("alice", "Mallory"))


class TestUpdateUserPassword:
    """Tests for update_user_password."""

    def test_stores_formatted_hash(self, repository, directory, probe):
        seed_user(directory, "alice")
        caller = Subject.of("alice", ["password:alice:modify"])
        digest = hashlib.sha1(b"secret").digest()

        repository.update_user_password(caller, "alice", "SHA", digest)

        assert directory.entry(user_dn("alice"))["userPassword"] == [
            format_password("SHA", digest)
        ]
        probe.user_password_updated.assert_called_once_with("alice", "SHA")

    def test_requires_modify_on_password(self, repository, directory):
        """Write access on the user does not grant a password change."""
        seed_user(directory, "alice")
        caller = Subject.of("bob", ["user:alice:*"])

        with pytest.raises(AuthorizationDeniedError):
            repository.update_user_password(caller, "alice", "SHA", b"digest")

        assert "userPassword" not in directory.entry(user_dn("alice"))

    def test_missing_user(self, repository, admin):
        with pytest.raises(EntityNotFoundError):
            repository.update_user_password(admin, "alice", "SHA", b"digest")
