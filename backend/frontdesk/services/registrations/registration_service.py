"""Registration (visit) management service.

A registration may be created for an existing patient or together with a
new one. Either way the patient's RM number, the registration's REG number
and both inserts commit or roll back as one transaction.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

import structlog
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from frontdesk.models.enums import SequenceType
from frontdesk.models.patient import Patient
from frontdesk.models.registration import Registration
from frontdesk.services.exceptions import ValidationError
from frontdesk.services.patients import PatientDetails, PatientNotFound, PatientService
from frontdesk.services.registrations.exceptions import RegistrationDeleted, RegistrationNotFound
from frontdesk.services.sequences import SequenceGenerator
from frontdesk.services.transactions import unit_of_work
from frontdesk.utils.datetime_utils import ensure_utc, utc_day_start, utc_now
from frontdesk.utils.pagination import clamp_limit

logger = structlog.get_logger(__name__)

REGISTRATION_CONFLICT = "Registration number already exists."

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass
class RegistrationFilters:
    """Search options for list_registrations.

    ``queue`` is a single search box matched against patient name, RM and REG
    (and date of birth when it looks like YYYY-MM-DD). When set, the
    individual ``reg``/``rm``/``name``/``dob`` filters are ignored.
    ``start`` and ``end`` are inclusive UTC days.
    """

    queue: str | None = None
    reg: str | None = None
    rm: str | None = None
    name: str | None = None
    dob: date | None = None
    start: date | None = None
    end: date | None = None
    deleted_only: bool = False
    include_deleted: bool = False
    limit: int | None = None


def _parse_iso_date(value: str) -> date | None:
    if not ISO_DATE_PATTERN.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class RegistrationService:
    """Service for registration operations."""

    def __init__(self, session: AsyncSession, sequences: SequenceGenerator):
        self.session = session
        self.sequences = sequences
        self.patients = PatientService(session, sequences)

    async def create_registration(
        self,
        *,
        registration_date: datetime,
        patient_id: int | None = None,
        patient: PatientDetails | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> tuple[Registration, Patient]:
        """Register a visit, optionally creating the patient first.

        Returns (registration, patient).
        """
        if patient_id is None and patient is None:
            raise ValidationError("patientId (or patient) and registrationDate are required.")

        async with unit_of_work(self.session, conflict_message=REGISTRATION_CONFLICT):
            if patient is not None:
                new_patient = await self.patients.add_patient(patient, now)
                assert new_patient.id is not None
                patient_id = new_patient.id

            assert patient_id is not None
            owner = await self.patients.get_active_patient(patient_id)

            registration_no = await self.sequences.issue(SequenceType.REGISTRATION, now, self.session)
            registration = Registration(
                registration_no=registration_no,
                patient_id=patient_id,
                registration_date=ensure_utc(registration_date),
                notes=notes,
            )
            self.session.add(registration)
            await self.session.flush()

        logger.info(
            "Created registration",
            registration_id=registration.id,
            registration_no=registration.registration_no,
            patient_id=patient_id,
            new_patient=patient is not None,
        )
        return registration, owner

    async def list_registrations(self, filters: RegistrationFilters) -> list[tuple[Registration, Patient]]:
        """List registrations of active patients, newest registration_date first."""
        conditions: list[Any] = [Patient.deleted_at.is_(None)]  # type: ignore[union-attr]
        if filters.deleted_only and not filters.include_deleted:
            conditions.append(Registration.deleted_at.is_not(None))  # type: ignore[union-attr]
        elif not filters.include_deleted:
            conditions.append(Registration.deleted_at.is_(None))  # type: ignore[union-attr]

        queue = filters.queue.strip() if filters.queue else ""
        if queue:
            pattern = f"%{queue}%"
            matches: list[Any] = [
                Patient.full_name.ilike(pattern),  # type: ignore[attr-defined]
                Patient.medical_record_no.ilike(pattern),  # type: ignore[attr-defined]
                Registration.registration_no.ilike(pattern),  # type: ignore[attr-defined]
            ]
            queue_date = _parse_iso_date(queue)
            if queue_date is not None:
                matches.append(Patient.date_of_birth == queue_date)
            conditions.append(or_(*matches))
        else:
            if filters.reg:
                conditions.append(Registration.registration_no.ilike(f"%{filters.reg}%"))  # type: ignore[attr-defined]
            if filters.rm:
                conditions.append(Patient.medical_record_no.ilike(f"%{filters.rm}%"))  # type: ignore[attr-defined]
            if filters.name:
                conditions.append(Patient.full_name.ilike(f"%{filters.name}%"))  # type: ignore[attr-defined]
            if filters.dob:
                conditions.append(Patient.date_of_birth == filters.dob)

        if filters.start:
            conditions.append(Registration.registration_date >= utc_day_start(filters.start))  # type: ignore[operator]
        if filters.end:
            conditions.append(Registration.registration_date < utc_day_start(filters.end + timedelta(days=1)))  # type: ignore[operator]

        statement = (
            select(Registration, Patient)
            .join(Patient, Patient.id == Registration.patient_id)  # type: ignore[arg-type]
            .where(*conditions)
            .order_by(Registration.registration_date.desc())  # type: ignore[attr-defined]
            .limit(clamp_limit(filters.limit))
        )
        result = await self.session.execute(statement)
        return [(registration, owner) for registration, owner in result.all()]

    async def get_registration(self, registration_id: int) -> tuple[Registration, Patient]:
        """Get a registration (soft-deleted ones included) with its patient."""
        statement = (
            select(Registration, Patient)
            .join(Patient, Patient.id == Registration.patient_id)  # type: ignore[arg-type]
            .where(Registration.id == registration_id)
        )
        result = await self.session.execute(statement)
        row = result.first()
        if row is None:
            raise RegistrationNotFound()
        registration, owner = row
        return registration, owner

    async def update_registration(
        self, registration_id: int, changes: Mapping[str, Any]
    ) -> tuple[Registration, Patient]:
        """Apply a partial update. The registration number is never changed."""
        async with unit_of_work(self.session, conflict_message=REGISTRATION_CONFLICT):
            registration, owner = await self.get_registration(registration_id)
            if registration.is_deleted:
                raise RegistrationDeleted("Registration is already deleted.")

            updated: list[str] = []
            new_patient_id = changes.get("patient_id")
            if new_patient_id:
                owner = await self.patients.get_active_patient(new_patient_id)
                registration.patient_id = new_patient_id
                updated.append("patient_id")
            if changes.get("registration_date"):
                registration.registration_date = ensure_utc(changes["registration_date"])
                updated.append("registration_date")
            if "notes" in changes:
                registration.notes = changes["notes"]
                updated.append("notes")
            if not updated:
                raise ValidationError("No fields to update.")

            registration.updated_at = utc_now()

        logger.info("Updated registration", registration_id=registration_id, fields=updated)
        return registration, owner

    async def set_deleted(self, registration_id: int, deleted: bool) -> tuple[Registration, Patient]:
        """Soft-delete or restore a registration. Its patient must be active."""
        async with unit_of_work(self.session, conflict_message=REGISTRATION_CONFLICT):
            registration, owner = await self.get_registration(registration_id)
            if owner.is_deleted:
                raise PatientNotFound("Patient not found or deleted.")

            now = utc_now()
            registration.deleted_at = now if deleted else None
            registration.updated_at = now

        logger.info("Registration soft-delete toggled", registration_id=registration_id, deleted=deleted)
        return registration, owner

    async def delete_registration(self, registration_id: int) -> tuple[Registration, Patient]:
        """Permanently delete a registration. Its REG number is not reissued."""
        async with unit_of_work(self.session, conflict_message=REGISTRATION_CONFLICT):
            registration, owner = await self.get_registration(registration_id)
            await self.session.delete(registration)

        logger.info(
            "Deleted registration",
            registration_id=registration_id,
            registration_no=registration.registration_no,
        )
        return registration, owner
