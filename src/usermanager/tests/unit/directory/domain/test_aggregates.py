"""Unit tests for the User and Role aggregates."""

from directory.domain.aggregates import Role, User


class TestUser:
    """Tests for User aggregate."""

    def test_empty_user_has_no_attributes(self):
        user = User()
        assert user.identifier is None
        assert user.mail is None

    def test_equality_by_value(self):
        assert User("alice", "Alice") == User("alice", "Alice")
        assert User("alice", "Alice") != User("alice", "Alice A.")

    def test_str(self):
        assert str(User("alice")) == "User(alice)"


class TestRole:
    """Tests for Role aggregate."""

    def test_users_default_to_fresh_list(self):
        """Each role should own its member list."""
        first, second = Role("a"), Role("b")
        first.users.append("alice")

        assert second.users == []

    def test_equality_includes_users(self):
        assert Role("admins", "Admins", ["alice"]) == Role("admins", "Admins", ["alice"])
        assert Role("admins", "Admins", ["alice"]) != Role("admins", "Admins", [])

    def test_str(self):
        assert str(Role("admins")) == "Role(admins)"
