"""Registration CRUD API endpoints."""

from datetime import date
from typing import Annotated

import structlog
from fastapi import APIRouter, HTTPException, Query, status

from frontdesk.api.v1.dependencies import RegistrationServiceDep
from frontdesk.api.v1.registrations.schemas import (
    RegistrationCreateRequest,
    RegistrationResponse,
    RegistrationUpdateRequest,
)
from frontdesk.api.v1.schemas import SoftDeleteRequest
from frontdesk.services.exceptions import ConflictError, NotFoundError, ValidationError
from frontdesk.services.registrations import RegistrationFilters

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["registrations"])


@router.post(
    "/registrations",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createRegistration",
)
async def create_registration(
    body: RegistrationCreateRequest,
    service: RegistrationServiceDep,
) -> RegistrationResponse:
    """Register a visit. Pass ``patient`` instead of ``patientId`` to create the patient too.

    Registration and medical record numbers are issued by the server in the
    same transaction as the inserts.
    """
    if body.registration_no:
        logger.info("Rejected client-supplied registration number", registration_no=body.registration_no)
        raise HTTPException(status_code=400, detail="registrationNo is system-generated and cannot be provided.")

    try:
        registration, patient = await service.create_registration(
            registration_date=body.registration_date,
            patient_id=body.patient_id,
            patient=body.patient.to_details() if body.patient else None,
            notes=body.notes,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        logger.warning("Registration creation conflict", error=str(e))
        raise HTTPException(status_code=409, detail=str(e))
    return RegistrationResponse.from_model(registration, patient)


@router.get("/registrations", response_model=list[RegistrationResponse], operation_id="listRegistrations")
async def list_registrations(
    service: RegistrationServiceDep,
    queue: str | None = None,
    reg: str | None = None,
    rm: str | None = None,
    name: str | None = None,
    dob: date | None = None,
    start: date | None = None,
    end: date | None = None,
    deleted_only: Annotated[bool, Query(alias="deletedOnly")] = False,
    include_deleted: Annotated[bool, Query(alias="includeDeleted")] = False,
    limit: int = 100,
) -> list[RegistrationResponse]:
    """Search registrations, newest registration date first."""
    rows = await service.list_registrations(
        RegistrationFilters(
            queue=queue,
            reg=reg,
            rm=rm,
            name=name,
            dob=dob,
            start=start,
            end=end,
            deleted_only=deleted_only,
            include_deleted=include_deleted,
            limit=limit,
        )
    )
    return [RegistrationResponse.from_model(registration, patient) for registration, patient in rows]


@router.get(
    "/registrations/{registration_id}",
    response_model=RegistrationResponse,
    operation_id="getRegistration",
)
async def get_registration(registration_id: int, service: RegistrationServiceDep) -> RegistrationResponse:
    """Get a single registration."""
    try:
        registration, patient = await service.get_registration(registration_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return RegistrationResponse.from_model(registration, patient)


@router.put(
    "/registrations/{registration_id}",
    response_model=RegistrationResponse,
    operation_id="updateRegistration",
)
async def update_registration(
    registration_id: int,
    body: RegistrationUpdateRequest,
    service: RegistrationServiceDep,
) -> RegistrationResponse:
    """Update a registration. The registration number cannot be changed."""
    try:
        registration, patient = await service.update_registration(
            registration_id, body.model_dump(exclude_unset=True)
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return RegistrationResponse.from_model(registration, patient)


@router.patch(
    "/registrations/{registration_id}",
    response_model=RegistrationResponse,
    operation_id="softDeleteRegistration",
)
async def soft_delete_registration(
    registration_id: int,
    body: SoftDeleteRequest,
    service: RegistrationServiceDep,
) -> RegistrationResponse:
    """Soft-delete or restore a registration."""
    try:
        registration, patient = await service.set_deleted(registration_id, body.deleted)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return RegistrationResponse.from_model(registration, patient)


@router.delete(
    "/registrations/{registration_id}",
    response_model=RegistrationResponse,
    operation_id="deleteRegistration",
)
async def delete_registration(registration_id: int, service: RegistrationServiceDep) -> RegistrationResponse:
    """Permanently delete a registration."""
    try:
        registration, patient = await service.delete_registration(registration_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return RegistrationResponse.from_model(registration, patient)
