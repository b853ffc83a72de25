"""Dashboard aggregates."""

from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.services.patients import PatientDetails, PatientService
from frontdesk.services.registrations import RegistrationService
from frontdesk.services.sequences import SequenceGenerator
from frontdesk.services.stats_service import RECENT_LIMIT, StatsService
from tests.conftest import DAY


async def test_empty_dashboard(session: AsyncSession) -> None:
    dashboard = await StatsService(session).get_dashboard(DAY)

    assert (dashboard.total_patients, dashboard.total_registrations, dashboard.today_registrations) == (0, 0, 0)
    assert dashboard.recent_registrations == []
    assert dashboard.latest_patients == []


async def test_dashboard_counts_active_records(session: AsyncSession, generator: SequenceGenerator) -> None:
    patients = PatientService(session, generator)
    registrations = RegistrationService(session, generator)

    patient_ids = []
    for index in range(RECENT_LIMIT + 2):
        patient = await patients.create_patient(
            PatientDetails(full_name=f"Patient {index}", date_of_birth=date(1990, 1, 1)), now=DAY
        )
        assert patient.id is not None
        patient_ids.append(patient.id)
    await patients.set_deleted(patient_ids[-1], True)

    await registrations.create_registration(registration_date=DAY, patient_id=patient_ids[0], now=DAY)
    await registrations.create_registration(
        registration_date=DAY + timedelta(hours=3), patient_id=patient_ids[1], now=DAY
    )
    await registrations.create_registration(
        registration_date=DAY - timedelta(days=1), patient_id=patient_ids[2], now=DAY
    )
    deleted, _ = await registrations.create_registration(
        registration_date=DAY, patient_id=patient_ids[3], now=DAY
    )
    assert deleted.id is not None
    await registrations.set_deleted(deleted.id, True)

    dashboard = await StatsService(session).get_dashboard(DAY)

    assert dashboard.total_patients == RECENT_LIMIT + 1
    assert dashboard.total_registrations == 3
    assert dashboard.today_registrations == 2
    assert [registration.registration_no for registration, _ in dashboard.recent_registrations] == [
        "251212000002",
        "251212000001",
        "251212000003",
    ]
    assert dashboard.recent_registrations[1][1].full_name == "Patient 0"
    assert len(dashboard.latest_patients) == RECENT_LIMIT
    assert all(not patient.is_deleted for patient in dashboard.latest_patients)
