"""Role aggregate for the directory context."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Role:
    """A named group of users stored in the directory.

    ``users`` holds user identifiers. In the directory the relation is
    stored as the distinguished names of the members on the role entry.
    """

    identifier: str | None = None
    display_name: str | None = None
    users: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Return string representation."""
        return f"Role({self.identifier})"
