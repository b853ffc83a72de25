"""Patient domain exceptions."""

from frontdesk.services.exceptions import ConflictError, NotFoundError, ValidationError


class PatientNotFound(NotFoundError):
    """Patient not found (or soft-deleted where an active patient is required)."""

    def __init__(self, message: str = "Patient not found."):
        super().__init__(message)


class PatientDeleted(ValidationError):
    """Operation not allowed on a soft-deleted patient."""

    pass


class PatientHasRegistrations(ConflictError):
    """Patient cannot be hard-deleted while registrations reference it."""

    def __init__(self) -> None:
        super().__init__("Cannot delete a patient with existing registrations.")


class InvalidGender(ValidationError):
    """Gender is not one of the accepted values."""

    def __init__(self) -> None:
        super().__init__("Gender must be Male or Female.")
