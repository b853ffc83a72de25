"""Registration domain exceptions."""

from frontdesk.services.exceptions import NotFoundError, ValidationError


class RegistrationNotFound(NotFoundError):
    """Registration not found."""

    def __init__(self, message: str = "Registration not found.") -> None:
        super().__init__(message)


class RegistrationDeleted(ValidationError):
    """Operation not allowed on a soft-deleted registration."""

    pass
