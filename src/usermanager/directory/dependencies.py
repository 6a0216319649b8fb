"""Wiring of the directory bounded context.

Builds the mapping layer, connection factory, repositories, services and
realm from application settings. Stateless collaborators are cached so the
mapping tables are loaded once per process.
"""

from __future__ import annotations

from functools import lru_cache

from directory.application.observability import (
    DefaultRoleServiceProbe,
    DefaultUserServiceProbe,
)
from directory.application.services import RoleService, UserService
from directory.infrastructure.ldap import LdapConnectionFactory
from directory.infrastructure.mapping import (
    AttributeCodec,
    EntityMapper,
    EntityRegistry,
    MappingTables,
    NameResolver,
    StringConverter,
)
from directory.infrastructure.mapping.entities import default_registry
from directory.infrastructure.realm import LdapRealm
from directory.infrastructure.role_repository import LdapRoleRepository
from directory.infrastructure.user_repository import LdapUserRepository
from infrastructure.logging import configure_logging
from infrastructure.settings import (
    get_directory_settings,
    get_mapping_settings,
    get_security_settings,
    get_settings,
)
from shared_kernel.authorization import PermissionGate
from shared_kernel.authorization.resolvers import (
    FileUserPermissionResolver,
    PropertyRolePermissionResolver,
)


def init_logging() -> None:
    """Configure structlog from application settings."""
    configure_logging(debug=get_settings().debug)


@lru_cache
def get_entity_registry() -> EntityRegistry:
    """Get the registry of mapped entities."""
    return default_registry()


@lru_cache
def get_mapping_tables() -> MappingTables:
    """Get mapping tables loaded from settings."""
    return MappingTables.from_settings(get_mapping_settings())


@lru_cache
def get_name_resolver() -> NameResolver:
    """Get the distinguished name resolver."""
    return NameResolver(get_entity_registry(), get_mapping_tables())


@lru_cache
def get_entity_mapper() -> EntityMapper:
    """Get the entity mapper."""
    registry = get_entity_registry()
    codec = AttributeCodec(registry, get_name_resolver(), StringConverter())
    return EntityMapper(registry, get_mapping_tables(), codec)


@lru_cache
def get_connection_factory() -> LdapConnectionFactory:
    """Get the directory connection factory."""
    return LdapConnectionFactory.from_settings(get_directory_settings())


def get_permission_gate() -> PermissionGate:
    """Get a permission gate."""
    return PermissionGate()


def get_role_repository() -> LdapRoleRepository:
    """Get the role repository."""
    return LdapRoleRepository(
        connections=get_connection_factory(),
        mapper=get_entity_mapper(),
        resolver=get_name_resolver(),
        gate=get_permission_gate(),
    )


def get_user_repository() -> LdapUserRepository:
    """Get the user repository."""
    return LdapUserRepository(
        connections=get_connection_factory(),
        mapper=get_entity_mapper(),
        resolver=get_name_resolver(),
        gate=get_permission_gate(),
    )


def get_role_service() -> RoleService:
    """Get the role application service."""
    return RoleService(
        role_repository=get_role_repository(),
        user_repository=get_user_repository(),
        probe=DefaultRoleServiceProbe(),
    )


def get_user_service() -> UserService:
    """Get the user application service."""
    return UserService(
        user_repository=get_user_repository(),
        role_repository=get_role_repository(),
        probe=DefaultUserServiceProbe(),
    )


@lru_cache
def get_role_permission_resolver() -> PropertyRolePermissionResolver | None:
    """Get the role permission resolver, if a permission file is configured."""
    path = get_security_settings().role_permissions_file
    if path is None:
        return None
    return PropertyRolePermissionResolver.from_file(path)


@lru_cache
def get_user_permission_resolver() -> FileUserPermissionResolver | None:
    """Get the user permission resolver, if a template file is configured."""
    path = get_security_settings().user_permissions_file
    if path is None:
        return None
    return FileUserPermissionResolver.from_file(path)


def get_realm() -> LdapRealm:
    """Get the LDAP realm."""
    return LdapRealm(
        connections=get_connection_factory(),
        mapper=get_entity_mapper(),
        resolver=get_name_resolver(),
        role_permissions=get_role_permission_resolver(),
        user_permissions=get_user_permission_resolver(),
    )
