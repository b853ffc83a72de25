"""Registration (visit) services."""

from frontdesk.services.registrations.exceptions import RegistrationDeleted, RegistrationNotFound
from frontdesk.services.registrations.registration_service import RegistrationFilters, RegistrationService

__all__ = [
    "RegistrationDeleted",
    "RegistrationFilters",
    "RegistrationNotFound",
    "RegistrationService",
]
