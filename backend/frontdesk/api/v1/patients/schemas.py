"""API schemas for patient endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_serializer

from frontdesk.api.v1.schemas import RequestModel
from frontdesk.models.patient import Patient
from frontdesk.services.patients import PatientDetails
from frontdesk.utils.datetime_utils import to_api_timezone

# =============================================================================
# Request Schemas
# =============================================================================


class PatientCreateRequest(RequestModel):
    """New patient. The medical record number is always system-generated."""

    full_name: str = Field(min_length=1)
    date_of_birth: date
    gender: str | None = None
    phone: str | None = None
    address: str | None = None
    photo_url: str | None = None

    def to_details(self) -> PatientDetails:
        return PatientDetails(
            full_name=self.full_name,
            date_of_birth=self.date_of_birth,
            gender=self.gender,
            phone=self.phone,
            address=self.address,
            photo_url=self.photo_url,
        )


class PatientUpdateRequest(RequestModel):
    """Partial patient update; only fields present in the body are considered."""

    full_name: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    phone: str | None = None
    address: str | None = None
    photo_url: str | None = None


# =============================================================================
# Response Schemas
# =============================================================================


class PatientResponse(BaseModel):
    """Patient response schema."""

    id: int
    medical_record_no: str
    full_name: str
    date_of_birth: date
    gender: str | None
    phone: str | None
    address: str | None
    photo_url: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    latest_registration_date: datetime | None = None

    @field_serializer("created_at", "updated_at", "deleted_at", "latest_registration_date")
    def serialize_datetime(self, dt: datetime | None) -> str | None:
        """Serialize datetimes in API timezone."""
        localized = to_api_timezone(dt)
        return localized.isoformat() if localized is not None else None

    @classmethod
    def from_model(cls, patient: Patient, latest_registration_date: datetime | None = None) -> "PatientResponse":
        """Create response from Patient model."""
        return cls(
            id=patient.id,  # type: ignore[arg-type]
            medical_record_no=patient.medical_record_no,
            full_name=patient.full_name,
            date_of_birth=patient.date_of_birth,
            gender=patient.gender,
            phone=patient.phone,
            address=patient.address,
            photo_url=patient.photo_url,
            created_at=patient.created_at,
            updated_at=patient.updated_at,
            deleted_at=patient.deleted_at,
            latest_registration_date=latest_registration_date,
        )
