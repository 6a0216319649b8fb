"""Authentication and authorization exceptions.

Shared across bounded contexts so that a denial raised deep inside a
repository can be told apart from a missing entity by every caller.
"""

from __future__ import annotations


class AuthorizationError(Exception):
    """Base exception for authorization failures."""

    pass


class AuthorizationDeniedError(AuthorizationError):
    """Raised when a caller lacks the permission required for an operation."""

    def __init__(self, principal: str | None, permission: str):
        self.principal = principal
        self.permission = permission
        super().__init__(f"Principal {principal!r} is not permitted: {permission}")


class AuthenticationError(Exception):
    """Raised when a principal cannot be authenticated."""

    pass


class IncorrectCredentialsError(AuthenticationError):
    """Raised when the directory rejects the supplied credentials."""

    pass


class DisabledAccountError(AuthenticationError):
    """Raised when the directory refuses the account access."""

    pass
