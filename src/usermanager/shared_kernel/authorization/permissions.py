"""Wildcard permissions.

A permission is a colon separated list of parts, each part a comma
separated set of subparts. ``*`` matches anything in its position and a
permission with fewer parts implies every permission that extends it:
``role:*`` implies ``role:admins:write``, ``user:alice,bob:read`` implies
``user:bob:read``. Matching is case-insensitive.
"""

from __future__ import annotations

from dataclasses import dataclass

WILDCARD = "*"
PART_DIVIDER = ":"
SUBPART_DIVIDER = ","


@dataclass(frozen=True)
class WildcardPermission:
    """A parsed wildcard permission.

    Attributes:
        text: The permission as written
        parts: Parsed subpart sets, one per part
    """

    text: str
    parts: tuple[frozenset[str], ...]

    @classmethod
    def parse(cls, text: str) -> WildcardPermission:
        """Parse a permission string.

        Raises:
            ValueError: If the string is empty or has empty parts
        """
        stripped = text.strip() if text else ""
        if not stripped:
            raise ValueError("Wildcard permission must not be empty")

        parts: list[frozenset[str]] = []
        for part in stripped.split(PART_DIVIDER):
            subparts = frozenset(
                sub.strip().lower() for sub in part.split(SUBPART_DIVIDER) if sub.strip()
            )
            if not subparts:
                raise ValueError(f"Wildcard permission has an empty part: {text!r}")
            parts.append(subparts)

        return cls(text=stripped, parts=tuple(parts))

    def implies(self, other: WildcardPermission) -> bool:
        """Check whether this permission grants ``other``."""
        for index, other_part in enumerate(other.parts):
            if index >= len(self.parts):
                return True
            part = self.parts[index]
            if WILDCARD not in part and not other_part <= part:
                return False

        for part in self.parts[len(other.parts) :]:
            if WILDCARD not in part:
                return False
        return True

    def __str__(self) -> str:
        return self.text
