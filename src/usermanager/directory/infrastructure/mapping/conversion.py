"""Typed conversion between Python values and directory strings.

Uses pydantic TypeAdapters in lax mode so that any type pydantic can
validate from a string can be stored as a directory attribute value.
"""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from directory.infrastructure.mapping.exceptions import ConversionFailedError

# LDAP boolean syntax
_TRUE = "TRUE"
_FALSE = "FALSE"


class StringConverter:
    """Converts values of a given type to and from strings."""

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def _adapter(self, value_type: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(value_type)
        if adapter is None:
            adapter = TypeAdapter(value_type)
            self._adapters[value_type] = adapter
        return adapter

    def to_string(self, value_type: Any, value: Any) -> str:
        """Convert a value of ``value_type`` to its string form.

        Raises:
            ConversionFailedError: If the value cannot be serialized
        """
        if value is None:
            raise ConversionFailedError(f"Cannot convert None to {value_type!r}")
        if value_type is bool:
            if not isinstance(value, bool):
                raise ConversionFailedError(f"Expected a bool, got {value!r}")
            return _TRUE if value else _FALSE
        if value_type is str:
            if not isinstance(value, str):
                raise ConversionFailedError(f"Expected a str, got {value!r}")
            return value

        try:
            dumped = self._adapter(value_type).dump_python(value, mode="json")
        except (PydanticSerializationError, ValueError, TypeError) as e:
            raise ConversionFailedError(
                f"Cannot convert {value!r} to a string as {value_type!r}"
            ) from e
        return dumped if isinstance(dumped, str) else str(dumped)

    def to_instance(self, value_type: Any, text: str) -> Any:
        """Convert a string to an instance of ``value_type``.

        Raises:
            ConversionFailedError: If the string is not a valid ``value_type``
        """
        if value_type is bool:
            upper = text.strip().upper()
            if upper == _TRUE:
                return True
            if upper == _FALSE:
                return False
            raise ConversionFailedError(f"Cannot convert {text!r} to a bool")

        try:
            return self._adapter(value_type).validate_python(text)
        except ValidationError as e:
            raise ConversionFailedError(
                f"Cannot convert {text!r} to {value_type!r}"
            ) from e
