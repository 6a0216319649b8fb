"""Directory protocol exceptions.

Raised by the LDAP connection adapter with the result code the server
returned. Repositories translate these into the repository error taxonomy.
"""

from __future__ import annotations


class DirectoryError(Exception):
    """Base exception for directory operation failures."""

    def __init__(self, message: str, result_code: int | None = None):
        self.result_code = result_code
        super().__init__(message)


class NameNotFoundError(DirectoryError):
    """Raised when the named entry does not exist."""

    pass


class NameAlreadyBoundError(DirectoryError):
    """Raised when adding an entry whose name already exists."""

    pass


class AttributeValueExistsError(DirectoryError):
    """Raised when adding an attribute value that is already present."""

    pass


class NoSuchAttributeError(DirectoryError):
    """Raised when removing an attribute value that is not present."""

    pass


class DirectoryAuthenticationError(DirectoryError):
    """Raised when the directory rejects bind credentials."""

    pass


class DirectoryAccessDeniedError(DirectoryError):
    """Raised when the bound account lacks access rights."""

    pass
