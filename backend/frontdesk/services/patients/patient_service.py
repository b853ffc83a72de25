"""Patient management service.

Creating a patient issues its medical record number (RM) inside the same
transaction as the patient insert, so a failed insert never consumes a number.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import structlog
from sqlalchemy import and_, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from frontdesk.models.enums import Gender, SequenceType
from frontdesk.models.patient import Patient
from frontdesk.models.registration import Registration
from frontdesk.services.exceptions import ValidationError
from frontdesk.services.patients.exceptions import (
    InvalidGender,
    PatientDeleted,
    PatientHasRegistrations,
    PatientNotFound,
)
from frontdesk.services.sequences import SequenceGenerator
from frontdesk.services.transactions import unit_of_work
from frontdesk.utils.datetime_utils import utc_now
from frontdesk.utils.pagination import clamp_limit

logger = structlog.get_logger(__name__)

MEDICAL_RECORD_CONFLICT = "Medical record number already exists."

UPDATABLE_FIELDS = frozenset({"full_name", "date_of_birth", "gender", "phone", "address", "photo_url"})


@dataclass
class PatientDetails:
    """Input for a new patient."""

    full_name: str
    date_of_birth: date
    gender: str | None = None
    phone: str | None = None
    address: str | None = None
    photo_url: str | None = None


def normalize_gender(value: str | None) -> str | None:
    """Trim the value; empty means unknown. Anything else must be a Gender value."""
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    if trimmed not in {g.value for g in Gender}:
        raise InvalidGender()
    return trimmed


class PatientService:
    """Service for patient record operations."""

    def __init__(self, session: AsyncSession, sequences: SequenceGenerator):
        self.session = session
        self.sequences = sequences

    async def add_patient(self, details: PatientDetails, now: datetime | None = None) -> Patient:
        """Issue an RM number and stage the patient in the current transaction.

        Does not commit. Used by create_patient and by registration creation
        with an inline new patient.
        """
        full_name = details.full_name.strip()
        if not full_name:
            raise ValidationError("fullName and dateOfBirth are required.")
        gender = normalize_gender(details.gender)

        medical_record_no = await self.sequences.issue(SequenceType.MEDICAL_RECORD, now, self.session)
        patient = Patient(
            medical_record_no=medical_record_no,
            full_name=full_name,
            date_of_birth=details.date_of_birth,
            gender=gender,
            phone=details.phone,
            address=details.address,
            photo_url=details.photo_url,
        )
        self.session.add(patient)
        await self.session.flush()
        return patient

    async def create_patient(self, details: PatientDetails, now: datetime | None = None) -> Patient:
        """Create a patient with a freshly issued medical record number."""
        async with unit_of_work(self.session, conflict_message=MEDICAL_RECORD_CONFLICT):
            patient = await self.add_patient(details, now)

        logger.info("Created patient", patient_id=patient.id, medical_record_no=patient.medical_record_no)
        return patient

    async def list_patients(
        self,
        *,
        name: str | None = None,
        dob: date | None = None,
        rm: str | None = None,
        limit: int | None = None,
    ) -> list[tuple[Patient, datetime | None]]:
        """List active patients with their latest active registration date.

        Most recently registered first; patients never registered go last,
        newest first.
        """
        latest_registration = func.max(Registration.registration_date).label("latest_registration_date")
        conditions: list[Any] = [Patient.deleted_at.is_(None)]  # type: ignore[union-attr]
        if name:
            conditions.append(Patient.full_name.ilike(f"%{name}%"))  # type: ignore[attr-defined]
        if dob:
            conditions.append(Patient.date_of_birth == dob)
        if rm:
            conditions.append(Patient.medical_record_no.ilike(f"%{rm}%"))  # type: ignore[attr-defined]

        statement = (
            select(Patient, latest_registration)
            .outerjoin(
                Registration,
                and_(
                    Registration.patient_id == Patient.id,
                    Registration.deleted_at.is_(None),  # type: ignore[union-attr]
                ),
            )
            .where(*conditions)
            .group_by(Patient.id)
            .order_by(latest_registration.desc().nulls_last(), Patient.created_at.desc())  # type: ignore[attr-defined]
            .limit(clamp_limit(limit))
        )
        result = await self.session.execute(statement)
        return [(patient, latest) for patient, latest in result.all()]

    async def get_patient(self, patient_id: int) -> Patient:
        """Get a patient by id, soft-deleted ones included."""
        patient = await self.session.get(Patient, patient_id)
        if patient is None:
            raise PatientNotFound()
        return patient

    async def get_active_patient(self, patient_id: int) -> Patient:
        """Get a patient by id; soft-deleted patients count as not found."""
        statement = select(Patient).where(Patient.id == patient_id, Patient.deleted_at.is_(None))  # type: ignore[union-attr]
        result = await self.session.execute(statement)
        patient = result.scalars().first()
        if patient is None:
            raise PatientNotFound()
        return patient

    async def update_patient(self, patient_id: int, changes: Mapping[str, Any]) -> Patient:
        """Apply a partial update. The medical record number is never changed.

        ``full_name`` and ``date_of_birth`` are only applied when non-empty;
        the optional fields are applied whenever present, including None.
        """
        async with unit_of_work(self.session, conflict_message=MEDICAL_RECORD_CONFLICT):
            patient = await self.get_patient(patient_id)
            if patient.is_deleted:
                raise PatientDeleted("Cannot update a soft-deleted patient. Please undo the delete.")

            updates: dict[str, Any] = {}
            full_name = changes.get("full_name")
            if isinstance(full_name, str) and full_name.strip():
                updates["full_name"] = full_name.strip()
            if changes.get("date_of_birth"):
                updates["date_of_birth"] = changes["date_of_birth"]
            for field in ("phone", "address", "photo_url"):
                if field in changes:
                    updates[field] = changes[field]
            if "gender" in changes:
                updates["gender"] = normalize_gender(changes["gender"])

            unknown = set(changes) - UPDATABLE_FIELDS
            if unknown:
                logger.debug("Ignoring non-updatable patient fields", fields=sorted(unknown))
            if not updates:
                raise ValidationError("No fields to update.")

            for field, value in updates.items():
                setattr(patient, field, value)
            patient.updated_at = utc_now()

        logger.info("Updated patient", patient_id=patient_id, fields=sorted(updates))
        return patient

    async def set_deleted(self, patient_id: int, deleted: bool) -> Patient:
        """Soft-delete (deleted=True) or restore (deleted=False) a patient."""
        async with unit_of_work(self.session, conflict_message=MEDICAL_RECORD_CONFLICT):
            patient = await self.get_patient(patient_id)
            now = utc_now()
            patient.deleted_at = now if deleted else None
            patient.updated_at = now

        logger.info("Patient soft-delete toggled", patient_id=patient_id, deleted=deleted)
        return patient

    async def delete_patient(self, patient_id: int) -> Patient:
        """Permanently delete a patient that has no registrations."""
        async with unit_of_work(self.session, conflict_message=MEDICAL_RECORD_CONFLICT):
            patient = await self.get_patient(patient_id)

            statement = select(Registration.id).where(Registration.patient_id == patient_id).limit(1)
            result = await self.session.execute(statement)
            if result.first() is not None:
                raise PatientHasRegistrations()

            await self.session.delete(patient)

        logger.info("Deleted patient", patient_id=patient_id, medical_record_no=patient.medical_record_no)
        return patient
