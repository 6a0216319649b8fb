"""Observability for directory infrastructure."""

from directory.infrastructure.observability.connection_probe import (
    ConnectionProbe,
    DefaultConnectionProbe,
)
from directory.infrastructure.observability.mapping_probe import (
    DefaultMappingProbe,
    MappingProbe,
)
from directory.infrastructure.observability.realm_probe import (
    DefaultRealmProbe,
    RealmProbe,
)
from directory.infrastructure.observability.repository_probe import (
    DefaultRoleRepositoryProbe,
    DefaultUserRepositoryProbe,
    RoleRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "ConnectionProbe",
    "DefaultConnectionProbe",
    "DefaultMappingProbe",
    "DefaultRealmProbe",
    "DefaultRoleRepositoryProbe",
    "DefaultUserRepositoryProbe",
    "MappingProbe",
    "RealmProbe",
    "RoleRepositoryProbe",
    "UserRepositoryProbe",
]
