"""LDAP directory access over ldap3."""

from directory.infrastructure.ldap.connection import (
    LdapConnectionFactory,
    LdapDirectoryConnection,
)
from directory.infrastructure.ldap.exceptions import (
    AttributeValueExistsError,
    DirectoryAccessDeniedError,
    DirectoryAuthenticationError,
    DirectoryError,
    NameAlreadyBoundError,
    NameNotFoundError,
    NoSuchAttributeError,
)
from directory.infrastructure.ldap.protocols import (
    AuthenticatingConnectionProvider,
    ConnectionProvider,
    DirectoryConnection,
    ModificationOp,
)

__all__ = [
    "AttributeValueExistsError",
    "AuthenticatingConnectionProvider",
    "ConnectionProvider",
    "DirectoryAccessDeniedError",
    "DirectoryAuthenticationError",
    "DirectoryConnection",
    "DirectoryError",
    "LdapConnectionFactory",
    "LdapDirectoryConnection",
    "ModificationOp",
    "NameAlreadyBoundError",
    "NameNotFoundError",
    "NoSuchAttributeError",
]
