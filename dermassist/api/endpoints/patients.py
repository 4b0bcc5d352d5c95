"""
Patient API Endpoints
Registry of patients seen by the health worker, with case history
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from database import RecordStore, get_diagnosis_store, get_patient_store
from dermassist.schemas.diagnosis import DiagnosisRecord
from dermassist.schemas.patient import Patient, PatientCreate, PatientUpdate
from dermassist.services.statistics import patient_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["Patients"])


async def _get_patient_or_404(store: RecordStore[Patient], patient_id: int) -> Patient:
    patient = await store.find(patient_id)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Patient not found"
        )
    return patient


@router.get("")
async def list_patients(
    search: Optional[str] = None,
    village: Optional[str] = None,
    limit: int = Query(10, ge=0),
    offset: int = Query(0, ge=0),
    store: RecordStore[Patient] = Depends(get_patient_store),
):
    """List patients, optionally filtered by name/village search or exact village"""
    patients = await store.list()

    if search:
        needle = search.lower()
        patients = [
            p for p in patients
            if needle in p.name.lower() or needle in p.village.lower()
        ]

    if village:
        patients = [p for p in patients if p.village.lower() == village.lower()]

    page = patients[offset:offset + limit]

    return {
        "success": True,
        "patients": [p.model_dump(by_alias=True, mode="json") for p in page],
        "total": len(patients),
        "limit": limit,
        "offset": offset,
    }


@router.get("/stats/summary")
async def get_patient_stats(store: RecordStore[Patient] = Depends(get_patient_store)):
    patients = await store.list()
    return {
        "success": True,
        "stats": patient_summary(patients),
    }


@router.get("/{patient_id}")
async def get_patient(patient_id: int, store: RecordStore[Patient] = Depends(get_patient_store)):
    patient = await _get_patient_or_404(store, patient_id)
    return {
        "success": True,
        "patient": patient.model_dump(by_alias=True, mode="json"),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_patient(
    request: PatientCreate,
    store: RecordStore[Patient] = Depends(get_patient_store),
):
    """Register a patient; name must be unique within a village"""
    if not request.name or request.age is None or not request.gender or not request.village:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields: name, age, gender, village"
        )

    existing = [
        p for p in await store.list()
        if p.name.lower() == request.name.lower() and p.village.lower() == request.village.lower()
    ]
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Patient with this name already exists in the village"
        )

    now = datetime.now(timezone.utc)
    patient = await store.insert(
        lambda patient_id: Patient(
            id=patient_id,
            name=request.name,
            age=request.age,
            gender=request.gender,
            village=request.village,
            phone=request.phone or None,
            cases=[],
            created_at=now,
            updated_at=now,
        )
    )
    logger.info(f"Registered patient {patient.id} in {patient.village}")

    return {
        "success": True,
        "patient": patient.model_dump(by_alias=True, mode="json"),
    }


@router.put("/{patient_id}")
async def update_patient(
    patient_id: int,
    request: PatientUpdate,
    store: RecordStore[Patient] = Depends(get_patient_store),
):
    await _get_patient_or_404(store, patient_id)

    changes = {
        field: value
        for field, value in request.model_dump(exclude_unset=True).items()
        if field == "phone" or value
    }
    changes["updated_at"] = datetime.now(timezone.utc)
    patient = await store.update(patient_id, **changes)

    return {
        "success": True,
        "patient": patient.model_dump(by_alias=True, mode="json"),
    }


@router.get("/{patient_id}/history")
async def get_patient_history(
    patient_id: int,
    store: RecordStore[Patient] = Depends(get_patient_store),
    diagnoses: RecordStore[DiagnosisRecord] = Depends(get_diagnosis_store),
):
    """Cases submitted for this patient, matched by name"""
    patient = await _get_patient_or_404(store, patient_id)

    history = [
        {
            "id": record.id,
            "condition": record.analysis.primary_condition,
            "date": record.created_at.date().isoformat(),
            "status": record.status.value,
            "severity": record.analysis.severity.value,
        }
        for record in await diagnoses.list()
        if record.patient_data.name.lower() == patient.name.lower()
    ]

    return {
        "success": True,
        "patient": {
            "id": patient.id,
            "name": patient.name,
            "age": patient.age,
            "gender": patient.gender,
            "village": patient.village,
        },
        "history": history,
    }
