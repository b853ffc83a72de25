"""Dashboard statistics service."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from frontdesk.models.patient import Patient
from frontdesk.models.registration import Registration
from frontdesk.utils.datetime_utils import utc_date, utc_day_start

RECENT_LIMIT = 5


@dataclass
class DashboardStats:
    total_patients: int
    total_registrations: int
    today_registrations: int
    recent_registrations: list[tuple[Registration, Patient]]
    latest_patients: list[Patient]


class StatsService:
    """Read-only aggregate queries for the front-desk dashboard."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _count(self, statement: object) -> int:
        result = await self.session.execute(statement)  # type: ignore[call-overload]
        return result.scalar() or 0

    async def get_dashboard(self, now: datetime | None = None) -> DashboardStats:
        today_start = utc_day_start(utc_date(now))
        tomorrow_start = today_start + timedelta(days=1)
        active_registration = Registration.deleted_at.is_(None)  # type: ignore[union-attr]

        total_patients = await self._count(
            select(func.count()).select_from(Patient).where(Patient.deleted_at.is_(None))  # type: ignore[union-attr]
        )
        total_registrations = await self._count(
            select(func.count()).select_from(Registration).where(active_registration)
        )
        today_registrations = await self._count(
            select(func.count())
            .select_from(Registration)
            .where(
                active_registration,
                Registration.registration_date >= today_start,  # type: ignore[operator]
                Registration.registration_date < tomorrow_start,  # type: ignore[operator]
            )
        )

        recent_result = await self.session.execute(
            select(Registration, Patient)
            .join(Patient, Patient.id == Registration.patient_id)  # type: ignore[arg-type]
            .where(active_registration)
            .order_by(Registration.registration_date.desc())  # type: ignore[attr-defined]
            .limit(RECENT_LIMIT)
        )
        latest_result = await self.session.execute(
            select(Patient)
            .where(Patient.deleted_at.is_(None))  # type: ignore[union-attr]
            .order_by(Patient.created_at.desc())  # type: ignore[attr-defined]
            .limit(RECENT_LIMIT)
        )

        return DashboardStats(
            total_patients=total_patients,
            total_registrations=total_registrations,
            today_registrations=today_registrations,
            recent_registrations=[(registration, owner) for registration, owner in recent_result.all()],
            latest_patients=list(latest_result.scalars().all()),
        )
