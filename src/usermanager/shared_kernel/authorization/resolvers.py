"""File based permission resolvers.

Role permissions come from a properties-style file::

    # role = permission,permission
    admins = role:*,user:*
    auditors = user:*:read

User permissions come from a template file, one permission per line, where
``${user}`` is replaced with the principal and a line containing
``${roles}`` yields one permission per role the principal holds::

    user:${user}:read
    role:${roles}:read
"""

from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from pathlib import Path

from shared_kernel.authorization.observability import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from shared_kernel.authorization.permissions import WildcardPermission
from shared_kernel.authorization.types import is_valid_resource_id

COMMENT = "#"
USER_PLACEHOLDER = "${user}"
ROLES_PLACEHOLDER = "${roles}"


def _content_lines(text: str) -> list[str]:
    lines = []
    for raw in text.splitlines():
        line = raw.strip()
        if line and not line.startswith(COMMENT):
            lines.append(line)
    return lines


class PropertyRolePermissionResolver:
    """Grants permissions per role name from a static mapping."""

    def __init__(
        self,
        mapping: Mapping[str, Sequence[str]],
        probe: AuthorizationProbe | None = None,
    ):
        self._probe = probe or DefaultAuthorizationProbe()
        self._mapping: dict[str, list[WildcardPermission]] = {
            role.strip(): [WildcardPermission.parse(p) for p in permissions]
            for role, permissions in mapping.items()
        }

    @classmethod
    def from_file(
        cls,
        path: Path,
        probe: AuthorizationProbe | None = None,
    ) -> PropertyRolePermissionResolver:
        """Load role permissions from a properties-style file.

        Raises:
            ValueError: If the file cannot be read or holds a malformed permission
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValueError(f"Could not read role permissions from {path}") from e

        mapping: dict[str, list[str]] = {}
        for line in _content_lines(text):
            role, _, values = line.partition("=")
            mapping[role.strip()] = [v.strip() for v in values.split(",") if v.strip()]

        resolver = cls(mapping, probe=probe)
        resolver._probe.permissions_loaded(str(path), len(mapping))
        return resolver

    def resolve_permissions_in_role(self, role: str) -> list[WildcardPermission]:
        return list(self._mapping.get(role, []))


class FileUserPermissionResolver:
    """Grants every principal a list of permission templates."""

    def __init__(
        self,
        templates: Sequence[str],
        probe: AuthorizationProbe | None = None,
    ):
        self._templates = list(templates)
        self._probe = probe or DefaultAuthorizationProbe()

    @classmethod
    def from_file(
        cls,
        path: Path,
        probe: AuthorizationProbe | None = None,
    ) -> FileUserPermissionResolver:
        """Load permission templates, skipping blank lines and comments.

        Raises:
            ValueError: If the file cannot be read
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValueError(f"Could not read user permissions from {path}") from e

        resolver = cls(_content_lines(text), probe=probe)
        resolver._probe.permissions_loaded(str(path), len(resolver._templates))
        return resolver

    @property
    def templates(self) -> list[str]:
        return list(self._templates)

    def resolve_permissions(
        self,
        principal: str,
        roles: Collection[str],
    ) -> list[WildcardPermission]:
        """Expand the templates for a principal and its roles.

        A template is skipped for a principal or role whose name cannot be
        scoped by a permission, since substituting it would grant a
        different scope.
        """
        result: list[WildcardPermission] = []
        for template in self._templates:
            if USER_PLACEHOLDER in template and not is_valid_resource_id(principal):
                self._probe.permission_template_skipped(principal, template, principal)
                continue
            permission = template.replace(USER_PLACEHOLDER, principal)
            if ROLES_PLACEHOLDER not in permission:
                result.append(WildcardPermission.parse(permission))
                continue
            for role in roles:
                if not is_valid_resource_id(role):
                    self._probe.permission_template_skipped(principal, template, role)
                    continue
                result.append(
                    WildcardPermission.parse(permission.replace(ROLES_PLACEHOLDER, role))
                )

        self._probe.permissions_resolved(principal, len(result))
        return result
