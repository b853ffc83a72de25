"""PatientService: RM issuance inside the patient transaction, search and lifecycle rules."""

from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.models import Patient
from frontdesk.models.enums import SequenceType
from frontdesk.services.exceptions import RecordAlreadyExists, ValidationError
from frontdesk.services.patients import (
    InvalidGender,
    PatientDeleted,
    PatientDetails,
    PatientHasRegistrations,
    PatientNotFound,
    PatientService,
    normalize_gender,
)
from frontdesk.services.registrations import RegistrationService
from frontdesk.services.sequences import SequenceGenerator, get_counter
from tests.conftest import DAY


@pytest.fixture
def service(session: AsyncSession, generator: SequenceGenerator) -> PatientService:
    return PatientService(session, generator)


def _details(name: str = "Siti Rahma", **overrides: object) -> PatientDetails:
    fields: dict[str, object] = {"full_name": name, "date_of_birth": date(1990, 4, 2), **overrides}
    return PatientDetails(**fields)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, None), ("", None), ("   ", None), ("Male", "Male"), (" Female ", "Female")],
)
def test_normalize_gender(value: str | None, expected: str | None) -> None:
    assert normalize_gender(value) == expected


@pytest.mark.parametrize("value", ["male", "Other", "M"])
def test_normalize_gender_rejects_unknown(value: str) -> None:
    with pytest.raises(InvalidGender):
        normalize_gender(value)


async def test_create_patient_issues_medical_record_number(service: PatientService, session: AsyncSession) -> None:
    first = await service.create_patient(_details(gender="Female"), now=DAY)
    second = await service.create_patient(_details("Budi Santoso"), now=DAY)

    assert first.medical_record_no == "251212001"
    assert second.medical_record_no == "251212002"
    assert first.gender == "Female"
    assert first.id is not None
    assert await get_counter(session, DAY.date(), SequenceType.MEDICAL_RECORD) == 2


async def test_create_patient_trims_name(service: PatientService) -> None:
    patient = await service.create_patient(_details("  Dewi  "), now=DAY)
    assert patient.full_name == "Dewi"


async def test_invalid_input_does_not_consume_a_number(service: PatientService, session: AsyncSession) -> None:
    with pytest.raises(InvalidGender):
        await service.create_patient(_details(gender="Unknown"), now=DAY)
    with pytest.raises(ValidationError):
        await service.create_patient(_details("   "), now=DAY)

    assert await get_counter(session, DAY.date(), SequenceType.MEDICAL_RECORD) is None
    assert (await service.create_patient(_details(), now=DAY)).medical_record_no == "251212001"


async def test_duplicate_number_rolls_back_counter(service: PatientService, session: AsyncSession) -> None:
    # A record imported with a number the counter has not issued yet
    session.add(Patient(medical_record_no="251212001", full_name="Imported", date_of_birth=date(1970, 1, 1)))
    await session.commit()

    with pytest.raises(RecordAlreadyExists):
        await service.create_patient(_details(), now=DAY)

    assert await get_counter(session, DAY.date(), SequenceType.MEDICAL_RECORD) is None


async def test_list_orders_by_latest_registration(
    service: PatientService, session: AsyncSession, generator: SequenceGenerator
) -> None:
    never_registered = await service.create_patient(_details("Ahmad"), now=DAY)
    earlier = await service.create_patient(_details("Bayu"), now=DAY)
    later = await service.create_patient(_details("Citra"), now=DAY)

    registrations = RegistrationService(session, generator)
    await registrations.create_registration(registration_date=DAY, patient_id=earlier.id, now=DAY)
    await registrations.create_registration(registration_date=DAY + timedelta(hours=2), patient_id=later.id, now=DAY)

    rows = await service.list_patients()

    assert [patient.id for patient, _ in rows] == [later.id, earlier.id, never_registered.id]
    latest = {patient.id: latest for patient, latest in rows}
    assert latest[never_registered.id] is None
    assert latest[later.id] is not None


async def test_list_filters(service: PatientService) -> None:
    siti = await service.create_patient(_details("Siti Rahma"), now=DAY)
    await service.create_patient(_details("Budi Santoso", date_of_birth=date(1985, 1, 1)), now=DAY)

    assert [p.id for p, _ in await service.list_patients(name="rahma")] == [siti.id]
    assert [p.id for p, _ in await service.list_patients(dob=date(1990, 4, 2))] == [siti.id]
    assert [p.id for p, _ in await service.list_patients(rm="212001")] == [siti.id]
    assert len(await service.list_patients(limit=1)) == 1


async def test_list_hides_soft_deleted(service: PatientService) -> None:
    patient = await service.create_patient(_details(), now=DAY)
    await service.set_deleted(patient.id, True)  # type: ignore[arg-type]

    assert await service.list_patients() == []
    # Detail lookups still find it
    assert (await service.get_patient(patient.id)).is_deleted  # type: ignore[arg-type]


async def test_get_missing_patient(service: PatientService) -> None:
    with pytest.raises(PatientNotFound):
        await service.get_patient(404)


async def test_update_patient(service: PatientService) -> None:
    patient = await service.create_patient(_details(phone="0811"), now=DAY)

    updated = await service.update_patient(
        patient.id,  # type: ignore[arg-type]
        {"full_name": " Siti R. ", "phone": None, "gender": "Female", "medical_record_no": "999"},
    )

    assert updated.full_name == "Siti R."
    assert updated.phone is None
    assert updated.gender == "Female"
    assert updated.medical_record_no == "251212001"


async def test_update_ignores_blank_required_fields(service: PatientService) -> None:
    patient = await service.create_patient(_details(), now=DAY)

    with pytest.raises(ValidationError, match="No fields to update"):
        await service.update_patient(patient.id, {"full_name": "  ", "date_of_birth": None})  # type: ignore[arg-type]


async def test_update_rejects_soft_deleted(service: PatientService) -> None:
    patient_id = (await service.create_patient(_details(), now=DAY)).id
    assert patient_id is not None
    await service.set_deleted(patient_id, True)

    with pytest.raises(PatientDeleted):
        await service.update_patient(patient_id, {"phone": "0812"})

    restored = await service.set_deleted(patient_id, False)
    assert restored.deleted_at is None
    assert (await service.update_patient(patient_id, {"phone": "0812"})).phone == "0812"


async def test_delete_refused_with_registrations(
    service: PatientService, session: AsyncSession, generator: SequenceGenerator
) -> None:
    registrations = RegistrationService(session, generator)
    patient_id = (await service.create_patient(_details(), now=DAY)).id
    assert patient_id is not None
    registration, _ = await registrations.create_registration(registration_date=DAY, patient_id=patient_id, now=DAY)
    registration_id = registration.id
    assert registration_id is not None

    with pytest.raises(PatientHasRegistrations):
        await service.delete_patient(patient_id)

    # Soft-deleted registrations still block a hard delete
    await registrations.set_deleted(registration_id, True)
    with pytest.raises(PatientHasRegistrations):
        await service.delete_patient(patient_id)


async def test_delete_patient(service: PatientService) -> None:
    patient = await service.create_patient(_details(), now=DAY)

    await service.delete_patient(patient.id)  # type: ignore[arg-type]

    with pytest.raises(PatientNotFound):
        await service.get_patient(patient.id)  # type: ignore[arg-type]
    # The number is not reissued
    assert (await service.create_patient(_details(), now=DAY)).medical_record_no == "251212002"

