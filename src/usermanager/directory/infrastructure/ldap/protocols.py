"""Directory connection protocols.

Repositories depend on these protocols rather than on ldap3 so they can be
exercised against an in-memory directory.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from contextlib import AbstractContextManager
from enum import Enum
from typing import Protocol

# Attribute name -> values
Attributes = Mapping[str, Sequence[str]]


class ModificationOp(Enum):
    """How modify_attributes applies the given values."""

    ADD = "add"
    REPLACE = "replace"
    REMOVE = "remove"


class DirectoryConnection(Protocol):
    """A connection scoped to a single repository operation.

    Every method raises a DirectoryError subclass on failure.
    """

    def bind(self, dn: str, attributes: Attributes) -> None:
        """Create a new entry named ``dn`` with ``attributes``.

        Raises:
            NameAlreadyBoundError: If the entry already exists
        """
        ...

    def unbind(self, dn: str) -> None:
        """Remove the entry named ``dn``.

        Raises:
            NameNotFoundError: If the entry does not exist
        """
        ...

    def get_attributes(self, dn: str) -> dict[str, list[str]]:
        """Read all attributes of an entry.

        Raises:
            NameNotFoundError: If the entry does not exist
        """
        ...

    def modify_attributes(
        self,
        dn: str,
        operation: ModificationOp,
        attributes: Attributes,
    ) -> None:
        """Add, replace or remove attribute values of an entry.

        A REPLACE with no values removes the attribute.

        Raises:
            NameNotFoundError: If the entry does not exist
            AttributeValueExistsError: If an added value is already present
            NoSuchAttributeError: If a removed value is not present
        """
        ...

    def list(self, base_dn: str) -> list[str]:
        """Names of the entries directly below ``base_dn``."""
        ...

    def search(self, base_dn: str, matching: Attributes) -> list[str]:
        """Names of the entries directly below ``base_dn`` holding all given values."""
        ...


class ConnectionProvider(Protocol):
    """Opens directory connections, released when the context exits."""

    def open(self) -> AbstractContextManager[DirectoryConnection]:
        """Open a connection bound as the system account."""
        ...


class AuthenticatingConnectionProvider(ConnectionProvider, Protocol):
    """A connection provider that can also bind as a given account."""

    def open_as(
        self,
        user: str,
        password: str,
    ) -> AbstractContextManager[DirectoryConnection]:
        """Open a connection bound as ``user``.

        Raises:
            DirectoryAuthenticationError: If the credentials are rejected
            DirectoryAccessDeniedError: If the account may not bind
        """
        ...
