"""
Diagnosis API Endpoints
Case submission with image upload, listing and status updates
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from database import RecordStore, get_diagnosis_store
from dermassist.core.error_handling import AppException, ValidationException
from dermassist.schemas.diagnosis import DiagnosisRecord, StatusUpdate
from dermassist.services.diagnosis_ai import DiagnosisAIService, get_diagnosis_ai_service
from dermassist.services.diagnosis_service import (
    build_patient_context,
    create_diagnosis,
    parse_status,
    update_status,
)
from dermassist.services.image_processing import process_upload, remove_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/diagnosis", tags=["Diagnosis"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_case(
    name: Optional[str] = Form(None),
    age: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    symptoms: Optional[str] = Form(None),
    duration: Optional[str] = Form(None),
    severity: Optional[str] = Form(None),
    fever: Optional[str] = Form(None),
    nearby_cases: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    store: RecordStore[DiagnosisRecord] = Depends(get_diagnosis_store),
    ai_service: DiagnosisAIService = Depends(get_diagnosis_ai_service),
):
    """
    Submit a case: validate patient data, store the photo, analyze it and
    persist the diagnosis. Model failures never fail the request; the
    keyword fallback answers instead.
    """
    patient = build_patient_context({
        "name": name,
        "age": age,
        "gender": gender,
        "symptoms": symptoms,
        "duration": duration,
        "severity": severity,
        "fever": fever,
        "nearby_cases": nearby_cases,
    })

    if image is None or not image.filename:
        raise ValidationException("Image file is required")

    processed = await process_upload(image)

    try:
        logger.info(f"Starting AI analysis for patient: {patient.name}")
        analysis = await ai_service.analyze(processed.data, patient)
        record = await create_diagnosis(store, patient, processed.url, analysis)
    except Exception as e:
        remove_image(processed)
        logger.error(f"Diagnosis creation error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create diagnosis"
        )

    return {
        "success": True,
        "diagnosis": record.to_public(),
    }


@router.get("")
async def list_diagnoses(
    limit: int = Query(10, ge=0),
    offset: int = Query(0, ge=0),
    store: RecordStore[DiagnosisRecord] = Depends(get_diagnosis_store),
):
    """Paginated diagnosis summaries in submission order"""
    diagnoses = await store.list()
    page = diagnoses[offset:offset + limit]

    return {
        "success": True,
        "diagnoses": [record.to_summary() for record in page],
        "total": len(diagnoses),
        "limit": limit,
        "offset": offset,
    }


@router.get("/{diagnosis_id}")
async def get_diagnosis(
    diagnosis_id: int,
    store: RecordStore[DiagnosisRecord] = Depends(get_diagnosis_store),
):
    record = await store.find(diagnosis_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Diagnosis not found"
        )

    return {
        "success": True,
        "diagnosis": record.model_dump(by_alias=True, mode="json"),
    }


@router.put("/{diagnosis_id}/status")
async def change_status(
    diagnosis_id: int,
    request: StatusUpdate,
    store: RecordStore[DiagnosisRecord] = Depends(get_diagnosis_store),
):
    """Move a diagnosis to Pending, Completed, Referred or Under Treatment"""
    try:
        if not await store.find(diagnosis_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Diagnosis not found"
            )

        new_status = parse_status(request.status)
        record = await update_status(store, diagnosis_id, new_status)
        if not record:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Diagnosis not found"
            )

        logger.info(f"Diagnosis {diagnosis_id} status changed to {new_status.value}")

        return {
            "success": True,
            "message": "Status updated successfully",
            "diagnosis": {
                "id": record.id,
                "status": record.status.value,
                "updatedAt": record.updated_at.isoformat(),
            },
        }

    except (HTTPException, AppException):
        raise
    except Exception as e:
        logger.error(f"Status update error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Status update failed"
        )
