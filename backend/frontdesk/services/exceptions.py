"""Base service exceptions.

These exceptions are raised by the service layer and should be caught
by the API layer and converted to appropriate HTTP responses.
"""


class ServiceError(Exception):
    """Base service exception."""

    pass


class NotFoundError(ServiceError):
    """Resource not found."""

    pass


class ValidationError(ServiceError):
    """Validation error."""

    pass


class ConflictError(ServiceError):
    """Request conflicts with the current state of stored data."""

    pass


class RecordAlreadyExists(ConflictError):
    """Insert hit a unique constraint (e.g. an issued number already in use).

    Correct sequencing never produces this; it signals two issuances that
    raced incorrectly, for example against a misconfigured counter store.
    """

    pass
