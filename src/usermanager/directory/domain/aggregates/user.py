"""User aggregate for the directory context."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A person stored in the directory.

    Users are transient value objects: the repositories own their persisted
    lifecycle. Role membership is stored on the role entry and projected
    through the role repository rather than held here.
    """

    identifier: str | None = None
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    mail: str | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.identifier})"
