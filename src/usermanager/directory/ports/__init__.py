"""Ports (interfaces) for the directory bounded context.

Ports define the contracts for repositories without specifying
implementation details. This allows for dependency inversion and makes the
application layer independent of the LDAP infrastructure.
"""

from directory.ports.exceptions import (
    EntityAlreadyExistsError,
    EntityInvalidError,
    EntityNotFoundError,
    RepositoryError,
    ServiceError,
)
from directory.ports.repositories import IRoleRepository, IUserRepository

__all__ = [
    "EntityAlreadyExistsError",
    "EntityInvalidError",
    "EntityNotFoundError",
    "IRoleRepository",
    "IUserRepository",
    "RepositoryError",
    "ServiceError",
]
