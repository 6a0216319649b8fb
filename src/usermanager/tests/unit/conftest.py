"""Unit test fixtures shared across bounded contexts."""

import pytest

from shared_kernel.authorization import Subject


@pytest.fixture
def admin() -> Subject:
    """A caller holding every permission."""
    return Subject.of("admin", ["*"])


@pytest.fixture
def nobody() -> Subject:
    """A caller holding no permission at all."""
    return Subject.of("nobody", [])
