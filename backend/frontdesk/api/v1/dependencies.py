"""FastAPI dependencies for service injection."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.db import async_session_maker, get_session
from frontdesk.services.patients import PatientService
from frontdesk.services.registrations import RegistrationService
from frontdesk.services.sequences import SequenceGenerator
from frontdesk.services.stats_service import StatsService


def get_sequence_generator() -> SequenceGenerator:
    """Get a SequenceGenerator bound to the application's session maker."""
    return SequenceGenerator(async_session_maker)


SessionDep = Annotated[AsyncSession, Depends(get_session)]
SequenceGeneratorDep = Annotated[SequenceGenerator, Depends(get_sequence_generator)]


async def get_patient_service(session: SessionDep, sequences: SequenceGeneratorDep) -> PatientService:
    """Get a PatientService instance with the current session."""
    return PatientService(session, sequences)


async def get_registration_service(session: SessionDep, sequences: SequenceGeneratorDep) -> RegistrationService:
    """Get a RegistrationService instance with the current session."""
    return RegistrationService(session, sequences)


async def get_stats_service(session: SessionDep) -> StatsService:
    """Get a StatsService instance with the current session."""
    return StatsService(session)


# Type aliases for cleaner endpoint signatures
PatientServiceDep = Annotated[PatientService, Depends(get_patient_service)]
RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]
StatsServiceDep = Annotated[StatsService, Depends(get_stats_service)]
