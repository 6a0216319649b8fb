"""LDAP directory connections over ldap3.

Connections are created with ``raise_exceptions=False`` and every operation
result is checked explicitly, translating LDAP result codes into the
directory exception hierarchy.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from ldap3 import (
    ALL_ATTRIBUTES,
    BASE,
    LEVEL,
    MODIFY_ADD,
    MODIFY_DELETE,
    MODIFY_REPLACE,
    SYNC,
    Connection,
    Server,
)
from ldap3.core.exceptions import LDAPException
from ldap3.core.results import (
    RESULT_ATTRIBUTE_OR_VALUE_EXISTS,
    RESULT_ENTRY_ALREADY_EXISTS,
    RESULT_INSUFFICIENT_ACCESS_RIGHTS,
    RESULT_INVALID_CREDENTIALS,
    RESULT_NO_SUCH_ATTRIBUTE,
    RESULT_NO_SUCH_OBJECT,
    RESULT_SUCCESS,
)
from ldap3.utils.conv import escape_filter_chars

from directory.infrastructure.ldap.exceptions import (
    AttributeValueExistsError,
    DirectoryAccessDeniedError,
    DirectoryAuthenticationError,
    DirectoryError,
    NameAlreadyBoundError,
    NameNotFoundError,
    NoSuchAttributeError,
)
from directory.infrastructure.ldap.protocols import Attributes, ModificationOp
from directory.infrastructure.observability import (
    ConnectionProbe,
    DefaultConnectionProbe,
)
from infrastructure.settings import DirectorySettings

ANY_ENTRY = "(objectClass=*)"

_MODIFICATIONS = {
    ModificationOp.ADD: MODIFY_ADD,
    ModificationOp.REPLACE: MODIFY_REPLACE,
    ModificationOp.REMOVE: MODIFY_DELETE,
}

_ERRORS: dict[int, type[DirectoryError]] = {
    RESULT_NO_SUCH_OBJECT: NameNotFoundError,
    RESULT_ENTRY_ALREADY_EXISTS: NameAlreadyBoundError,
    RESULT_ATTRIBUTE_OR_VALUE_EXISTS: AttributeValueExistsError,
    RESULT_NO_SUCH_ATTRIBUTE: NoSuchAttributeError,
    RESULT_INVALID_CREDENTIALS: DirectoryAuthenticationError,
    RESULT_INSUFFICIENT_ACCESS_RIGHTS: DirectoryAccessDeniedError,
}


def _as_text(value: Any) -> str | None:
    """Decode a raw attribute value, or None if it is not UTF-8 text."""
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    return str(value)


def _equality_filter(matching: Attributes) -> str:
    assertions = [
        f"({name}={escape_filter_chars(value)})"
        for name, values in matching.items()
        for value in values
    ]
    if not assertions:
        return ANY_ENTRY
    if len(assertions) == 1:
        return assertions[0]
    return f"(&{''.join(assertions)})"


class LdapDirectoryConnection:
    """DirectoryConnection implementation wrapping a bound ldap3 Connection."""

    def __init__(self, connection: Connection, probe: ConnectionProbe | None = None):
        self._connection = connection
        self._probe = probe or DefaultConnectionProbe()

    def _check(self, operation: str, dn: str, succeeded: bool) -> None:
        if succeeded:
            return
        result = self._connection.result or {}
        code = result.get("result")
        description = result.get("description")
        self._probe.operation_failed(operation, dn, code, description)
        error_type = _ERRORS.get(code, DirectoryError)
        raise error_type(
            f"{operation} of '{dn}' failed: {description} {result.get('message', '')}".strip(),
            result_code=code,
        )

    def _search(self, base_dn: str, search_filter: str, scope: str) -> list[dict[str, Any]]:
        try:
            succeeded = self._connection.search(
                base_dn, search_filter, scope, attributes=ALL_ATTRIBUTES
            )
        except LDAPException as e:
            raise DirectoryError(f"search of '{base_dn}' failed") from e
        if not succeeded and (self._connection.result or {}).get("result") == RESULT_SUCCESS:
            # No entries matched
            return []
        self._check("search", base_dn, succeeded)
        return [
            entry
            for entry in self._connection.response or []
            if "dn" in entry and entry.get("type", "searchResEntry") == "searchResEntry"
        ]

    def _entry_attributes(self, entry: Mapping[str, Any]) -> dict[str, list[str]]:
        """Extract the text attributes of a search result entry.

        Attributes holding binary values, such as photos or certificates,
        are left out.
        """
        raw = entry.get("raw_attributes") or entry.get("attributes") or {}
        attributes: dict[str, list[str]] = {}
        for name, values in raw.items():
            if not isinstance(values, (list, tuple)):
                values = [values]
            decoded = [_as_text(v) for v in values]
            if None in decoded:
                self._probe.binary_attribute_skipped(entry["dn"], name)
                continue
            attributes[name] = decoded
        return attributes

    def _children(self, base_dn: str, search_filter: str) -> list[str]:
        base = base_dn.lower()
        # The ldap3 mock strategy also returns the base entry for LEVEL scope
        return [
            entry["dn"]
            for entry in self._search(base_dn, search_filter, LEVEL)
            if entry["dn"].lower() != base
        ]

    def bind(self, dn: str, attributes: Attributes) -> None:
        try:
            succeeded = self._connection.add(
                dn, attributes={name: list(values) for name, values in attributes.items()}
            )
        except LDAPException as e:
            raise DirectoryError(f"add of '{dn}' failed") from e
        self._check("add", dn, succeeded)

    def unbind(self, dn: str) -> None:
        try:
            succeeded = self._connection.delete(dn)
        except LDAPException as e:
            raise DirectoryError(f"delete of '{dn}' failed") from e
        self._check("delete", dn, succeeded)

    def get_attributes(self, dn: str) -> dict[str, list[str]]:
        entries = self._search(dn, ANY_ENTRY, BASE)
        if not entries:
            raise NameNotFoundError(f"No entry named '{dn}'", result_code=RESULT_NO_SUCH_OBJECT)
        return self._entry_attributes(entries[0])

    def modify_attributes(
        self,
        dn: str,
        operation: ModificationOp,
        attributes: Attributes,
    ) -> None:
        changes = {
            name: [(_MODIFICATIONS[operation], list(values))]
            for name, values in attributes.items()
        }
        try:
            succeeded = self._connection.modify(dn, changes)
        except LDAPException as e:
            raise DirectoryError(f"modify of '{dn}' failed") from e
        self._check("modify", dn, succeeded)

    def list(self, base_dn: str) -> list[str]:
        return self._children(base_dn, ANY_ENTRY)

    def search(self, base_dn: str, matching: Attributes) -> list[str]:
        return self._children(base_dn, _equality_filter(matching))


class LdapConnectionFactory:
    """Opens ldap3 connections scoped to a single operation.

    Connections are bound on open and unbound when the context exits. Unbind
    failures are reported to the probe and never propagated.
    """

    def __init__(
        self,
        server: Server,
        user: str | None = None,
        password: str | None = None,
        client_strategy: str = SYNC,
        receive_timeout: int | None = None,
        probe: ConnectionProbe | None = None,
    ):
        self._server = server
        self._user = user
        self._password = password
        self._client_strategy = client_strategy
        self._receive_timeout = receive_timeout
        self._probe = probe or DefaultConnectionProbe()

    @classmethod
    def from_settings(
        cls,
        settings: DirectorySettings,
        probe: ConnectionProbe | None = None,
    ) -> LdapConnectionFactory:
        server = Server(settings.url, connect_timeout=settings.connect_timeout)
        return cls(
            server,
            user=settings.system_user,
            password=settings.system_password.get_secret_value() or None,
            receive_timeout=settings.receive_timeout,
            probe=probe,
        )

    @contextmanager
    def open(self) -> Iterator[LdapDirectoryConnection]:
        with self._open(self._user, self._password) as connection:
            yield connection

    @contextmanager
    def open_as(self, user: str, password: str) -> Iterator[LdapDirectoryConnection]:
        with self._open(user, password) as connection:
            yield connection

    @contextmanager
    def _open(
        self, user: str | None, password: str | None
    ) -> Iterator[LdapDirectoryConnection]:
        connection = Connection(
            self._server,
            user=user,
            password=password,
            client_strategy=self._client_strategy,
            raise_exceptions=False,
            receive_timeout=self._receive_timeout,
        )
        try:
            bound = connection.bind()
        except LDAPException as e:
            self._probe.connection_bind_failed(user, None)
            raise DirectoryError(f"Could not connect to {self._server}") from e

        if not bound:
            code = (connection.result or {}).get("result")
            self._probe.connection_bind_failed(user, code)
            self._release(connection)
            error_type = _ERRORS.get(code, DirectoryError)
            raise error_type(f"Bind as '{user}' failed", result_code=code)

        self._probe.connection_opened(user)
        try:
            yield LdapDirectoryConnection(connection, probe=self._probe)
        finally:
            self._release(connection)

    def _release(self, connection: Connection) -> None:
        try:
            connection.unbind()
        except LDAPException as e:
            self._probe.connection_release_failed(e)
