"""API schemas for registration endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, field_serializer

from frontdesk.api.v1.patients.schemas import PatientCreateRequest
from frontdesk.api.v1.schemas import RequestModel
from frontdesk.models.patient import Patient
from frontdesk.models.registration import Registration
from frontdesk.utils.datetime_utils import to_api_timezone

# =============================================================================
# Request Schemas
# =============================================================================


class RegistrationCreateRequest(RequestModel):
    """New registration for an existing patient (patient_id) or a new one (patient).

    ``registration_no`` is accepted only so that a client-supplied number can
    be rejected with a clear message.
    """

    registration_date: datetime
    patient_id: int | None = None
    patient: PatientCreateRequest | None = None
    notes: str | None = None
    registration_no: str | None = None


class RegistrationUpdateRequest(RequestModel):
    """Partial registration update."""

    patient_id: int | None = None
    registration_date: datetime | None = None
    notes: str | None = None


# =============================================================================
# Response Schemas
# =============================================================================


class RegistrationResponse(BaseModel):
    """Registration with the patient columns the front desk lists alongside it."""

    id: int
    registration_no: str
    patient_id: int
    registration_date: datetime
    notes: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None

    full_name: str
    medical_record_no: str
    date_of_birth: date
    gender: str | None
    phone: str | None
    address: str | None

    @field_serializer("registration_date", "created_at", "updated_at", "deleted_at")
    def serialize_datetime(self, dt: datetime | None) -> str | None:
        """Serialize datetimes in API timezone."""
        localized = to_api_timezone(dt)
        return localized.isoformat() if localized is not None else None

    @classmethod
    def from_model(cls, registration: Registration, patient: Patient) -> "RegistrationResponse":
        """Create response from Registration and its Patient."""
        return cls(
            id=registration.id,  # type: ignore[arg-type]
            registration_no=registration.registration_no,
            patient_id=registration.patient_id,
            registration_date=registration.registration_date,
            notes=registration.notes,
            created_at=registration.created_at,
            updated_at=registration.updated_at,
            deleted_at=registration.deleted_at,
            full_name=patient.full_name,
            medical_record_no=patient.medical_record_no,
            date_of_birth=patient.date_of_birth,
            gender=patient.gender,
            phone=patient.phone,
            address=patient.address,
        )
