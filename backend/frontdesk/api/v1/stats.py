"""Dashboard statistics endpoint."""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, field_serializer

from frontdesk.api.v1.dependencies import StatsServiceDep
from frontdesk.utils.datetime_utils import to_api_timezone

router = APIRouter(tags=["stats"])


class StatsCounts(BaseModel):
    total_patients: int
    total_registrations: int
    today_registrations: int


class RecentRegistration(BaseModel):
    id: int
    registration_no: str
    registration_date: datetime
    full_name: str
    medical_record_no: str

    @field_serializer("registration_date")
    def serialize_registration_date(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        localized_dt = to_api_timezone(dt)
        assert localized_dt is not None
        return localized_dt.isoformat()


class LatestPatient(BaseModel):
    id: int
    full_name: str
    medical_record_no: str
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        localized_dt = to_api_timezone(dt)
        assert localized_dt is not None
        return localized_dt.isoformat()


class StatsResponse(BaseModel):
    stats: StatsCounts
    recent_activity: list[RecentRegistration]
    latest_patients: list[LatestPatient]


@router.get("/stats", response_model=StatsResponse, operation_id="getStats")
async def get_stats(service: StatsServiceDep) -> StatsResponse:
    """Counts, the five latest registrations and the five newest patients."""
    dashboard = await service.get_dashboard()
    return StatsResponse(
        stats=StatsCounts(
            total_patients=dashboard.total_patients,
            total_registrations=dashboard.total_registrations,
            today_registrations=dashboard.today_registrations,
        ),
        recent_activity=[
            RecentRegistration(
                id=registration.id,  # type: ignore[arg-type]
                registration_no=registration.registration_no,
                registration_date=registration.registration_date,
                full_name=patient.full_name,
                medical_record_no=patient.medical_record_no,
            )
            for registration, patient in dashboard.recent_registrations
        ],
        latest_patients=[
            LatestPatient(
                id=patient.id,  # type: ignore[arg-type]
                full_name=patient.full_name,
                medical_record_no=patient.medical_record_no,
                created_at=patient.created_at,
            )
            for patient in dashboard.latest_patients
        ],
    )
