"""Repository and service exceptions for the directory bounded context.

These exceptions represent failures that can occur during repository
operations. Directory protocol errors are translated into this taxonomy at
the repository boundary; nothing escapes as a raw transport exception.
Authorization denials are not part of it and propagate as
AuthorizationDeniedError from the shared kernel.
"""


class RepositoryError(Exception):
    """Raised when a directory operation fails for any other reason.

    Base class for the more specific repository errors, so callers can catch
    every recoverable repository failure at once.
    """

    pass


class EntityNotFoundError(RepositoryError):
    """Raised when the target entry does not exist in the directory."""

    pass


class EntityAlreadyExistsError(RepositoryError):
    """Raised when creating an entry whose name is already bound."""

    pass


class EntityInvalidError(RepositoryError):
    """Raised when an entity cannot be mapped to or from directory attributes.

    This indicates a schema or mapping defect: an undescribed or unmapped
    type, a value that cannot be converted, or a malformed name. The
    original cause is always chained.
    """

    pass


class ServiceError(Exception):
    """Raised by application services when a repository operation fails.

    The web layer consuming the services handles this single error type.
    """

    pass
