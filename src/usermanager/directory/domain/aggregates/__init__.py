"""Aggregates for the directory bounded context."""

from directory.domain.aggregates.role import Role
from directory.domain.aggregates.user import User

__all__ = [
    "Role",
    "User",
]
