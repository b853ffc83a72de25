"""Patient record services."""

from frontdesk.services.patients.exceptions import (
    InvalidGender,
    PatientDeleted,
    PatientHasRegistrations,
    PatientNotFound,
)
from frontdesk.services.patients.patient_service import PatientDetails, PatientService, normalize_gender

__all__ = [
    "InvalidGender",
    "PatientDeleted",
    "PatientDetails",
    "PatientHasRegistrations",
    "PatientNotFound",
    "PatientService",
    "normalize_gender",
]
