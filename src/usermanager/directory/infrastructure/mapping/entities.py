"""Registration table of the mapped directory entities."""

from __future__ import annotations

from directory.domain.aggregates import Role, User
from directory.infrastructure.mapping.descriptors import (
    EntityDescriptor,
    EntityRegistry,
    PropertyDescriptor,
)

USER_ENTITY = "user"
ROLE_ENTITY = "role"

USER_DESCRIPTOR = EntityDescriptor(
    name=USER_ENTITY,
    entity_type=User,
    key="identifier",
    properties=(
        PropertyDescriptor.scalar("identifier"),
        PropertyDescriptor.scalar("display_name"),
        PropertyDescriptor.scalar("first_name"),
        PropertyDescriptor.scalar("last_name"),
        PropertyDescriptor.scalar("mail"),
    ),
)

ROLE_DESCRIPTOR = EntityDescriptor(
    name=ROLE_ENTITY,
    entity_type=Role,
    key="identifier",
    properties=(
        PropertyDescriptor.scalar("identifier"),
        PropertyDescriptor.scalar("display_name"),
        PropertyDescriptor.collection_relation("users", related_entity=USER_ENTITY),
    ),
)

# Relation properties excluded from plain attribute edits
ROLE_USERS = "users"

# Mapped attribute without an entity property, written but never read back
USER_PASSWORD = "password"


def default_registry() -> EntityRegistry:
    """Registry holding the user and role descriptors."""
    return EntityRegistry([USER_DESCRIPTOR, ROLE_DESCRIPTOR])
