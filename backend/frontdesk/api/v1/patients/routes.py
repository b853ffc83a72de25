"""Patient CRUD API endpoints."""

from datetime import date

import structlog
from fastapi import APIRouter, HTTPException, status

from frontdesk.api.v1.dependencies import PatientServiceDep
from frontdesk.api.v1.patients.schemas import PatientCreateRequest, PatientResponse, PatientUpdateRequest
from frontdesk.api.v1.schemas import SoftDeleteRequest
from frontdesk.services.exceptions import ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["patients"])


@router.post(
    "/patients",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createPatient",
)
async def create_patient(body: PatientCreateRequest, service: PatientServiceDep) -> PatientResponse:
    """Create a patient. The medical record number is issued by the server."""
    try:
        patient = await service.create_patient(body.to_details())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        logger.warning("Patient creation conflict", error=str(e))
        raise HTTPException(status_code=409, detail=str(e))
    return PatientResponse.from_model(patient)


@router.get("/patients", response_model=list[PatientResponse], operation_id="listPatients")
async def list_patients(
    service: PatientServiceDep,
    name: str | None = None,
    dob: date | None = None,
    rm: str | None = None,
    limit: int = 100,
) -> list[PatientResponse]:
    """Search active patients, most recently registered first."""
    rows = await service.list_patients(name=name, dob=dob, rm=rm, limit=limit)
    return [PatientResponse.from_model(patient, latest) for patient, latest in rows]


@router.get("/patients/{patient_id}", response_model=PatientResponse, operation_id="getPatient")
async def get_patient(patient_id: int, service: PatientServiceDep) -> PatientResponse:
    """Get a single patient."""
    try:
        patient = await service.get_patient(patient_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return PatientResponse.from_model(patient)


@router.put("/patients/{patient_id}", response_model=PatientResponse, operation_id="updatePatient")
async def update_patient(
    patient_id: int,
    body: PatientUpdateRequest,
    service: PatientServiceDep,
) -> PatientResponse:
    """Update patient details. The medical record number cannot be changed."""
    try:
        patient = await service.update_patient(patient_id, body.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return PatientResponse.from_model(patient)


@router.patch("/patients/{patient_id}", response_model=PatientResponse, operation_id="softDeletePatient")
async def soft_delete_patient(
    patient_id: int,
    body: SoftDeleteRequest,
    service: PatientServiceDep,
) -> PatientResponse:
    """Soft-delete or restore a patient."""
    try:
        patient = await service.set_deleted(patient_id, body.deleted)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return PatientResponse.from_model(patient)


@router.delete("/patients/{patient_id}", response_model=PatientResponse, operation_id="deletePatient")
async def delete_patient(patient_id: int, service: PatientServiceDep) -> PatientResponse:
    """Permanently delete a patient without registrations."""
    try:
        patient = await service.delete_patient(patient_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        logger.info("Refused patient delete", patient_id=patient_id, reason=str(e))
        raise HTTPException(status_code=409, detail=str(e))
    return PatientResponse.from_model(patient)
