"""Unit tests for ObservationContext."""

import pytest

from shared_kernel.observability_context import ObservationContext


class TestObservationContext:
    """Tests for ObservationContext."""

    def test_as_dict_omits_unset_fields(self):
        """Only populated fields should be emitted as log context."""
        context = ObservationContext(request_id="req-1")

        assert context.as_dict() == {"request_id": "req-1"}

    def test_as_dict_merges_extra(self):
        """Extra metadata should be flattened into the context."""
        context = ObservationContext(
            caller="alice",
            directory_url="ldap://localhost",
            extra={"operation": "get_role"},
        )

        assert context.as_dict() == {
            "caller": "alice",
            "directory_url": "ldap://localhost",
            "operation": "get_role",
        }

    def test_is_immutable(self):
        """Context should be frozen once created."""
        context = ObservationContext(caller="alice")

        with pytest.raises(AttributeError):
            context.caller = "bob"  # type: ignore[misc]
