"""
Diagnosis Service
Assembles diagnosis records from a patient context and an analysis, and
applies status changes made later by health workers.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from database import RecordStore
from dermassist.core.error_handling import ValidationException
from dermassist.schemas.diagnosis import (
    DiagnosisAnalysis,
    DiagnosisRecord,
    DiagnosisStatus,
    PatientContext,
)

logger = logging.getLogger(__name__)

PATIENT_REQUIRED_FIELDS = ("name", "age", "gender", "symptoms", "duration")


def build_patient_context(form: dict) -> PatientContext:
    """
    Validate submitted patient fields.
    Raises ValidationException listing the missing or invalid fields.
    """
    missing = [field for field in PATIENT_REQUIRED_FIELDS if not str(form.get(field) or "").strip()]
    if missing:
        raise ValidationException(
            "Missing required fields: name, age, gender, symptoms, duration",
            {"missing": missing},
        )

    try:
        return PatientContext(**form)
    except ValidationError as e:
        invalid = sorted({str(error["loc"][0]) for error in e.errors() if error["loc"]})
        raise ValidationException("Invalid patient data", {"invalid": invalid}) from e


def initial_status(analysis: DiagnosisAnalysis) -> DiagnosisStatus:
    return DiagnosisStatus.REFERRED if analysis.referral_needed else DiagnosisStatus.COMPLETED


async def create_diagnosis(
    store: RecordStore[DiagnosisRecord],
    patient: PatientContext,
    image_url: str,
    analysis: DiagnosisAnalysis,
) -> DiagnosisRecord:
    """Persist a new record; id comes from the store's counter"""
    now = datetime.now(timezone.utc)

    record = await store.insert(
        lambda record_id: DiagnosisRecord(
            id=record_id,
            patient_data=patient,
            image_url=image_url,
            analysis=analysis,
            status=initial_status(analysis),
            created_at=now,
            updated_at=now,
        )
    )

    logger.info(
        f"Diagnosis {record.id} completed for patient: {patient.name}, "
        f"condition: {analysis.primary_condition}, status: {record.status.value}"
    )
    return record


def parse_status(value: Optional[str]) -> DiagnosisStatus:
    try:
        return DiagnosisStatus(value)
    except ValueError as e:
        raise ValidationException(
            "Invalid status",
            {"allowed": [status.value for status in DiagnosisStatus]},
        ) from e


async def update_status(
    store: RecordStore[DiagnosisRecord],
    diagnosis_id: int,
    status: DiagnosisStatus,
) -> Optional[DiagnosisRecord]:
    """Any status may move to any other; returns None for an unknown id"""
    return await store.update(
        diagnosis_id,
        status=status,
        updated_at=datetime.now(timezone.utc),
    )
