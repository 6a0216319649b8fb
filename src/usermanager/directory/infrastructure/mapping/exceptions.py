"""Exceptions raised by the entity to directory mapping layer.

Repositories translate every MappingError into EntityInvalidError, chaining
the original cause.
"""


class MappingError(Exception):
    """Base exception for mapping failures."""

    pass


class InvalidNameError(MappingError):
    """Raised when an identifier or distinguished name is malformed."""

    pass


class UnmappedEntityError(MappingError):
    """Raised when a type has no descriptor, subtree or key mapping."""

    pass


class ConversionFailedError(MappingError):
    """Raised when a value cannot be converted to or from its string form."""

    pass


class ValueAccessError(MappingError):
    """Raised when a property cannot be read from or written to an instance."""

    pass
