"""
Pytest configuration and fixtures
"""
import io
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import httpx
import openai
from httpx import AsyncClient, ASGITransport
from PIL import Image

from config import settings
from database import (
    InMemoryStore,
    get_diagnosis_store,
    get_outbreak_store,
    get_patient_store,
    get_report_store,
)
from dermassist.schemas.community import Outbreak
from dermassist.schemas.diagnosis import PatientContext
from dermassist.schemas.patient import Patient
from dermassist.schemas.report import Report
from dermassist.services.diagnosis_ai import DiagnosisAIService, get_diagnosis_ai_service
from dermassist.services.seed_data import SEED_OUTBREAKS, SEED_PATIENTS, SEED_REPORTS
from main import app


def make_completion(content):
    """Shape of an OpenAI chat completion, as far as the service reads it"""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


def make_ai_service(content=None, error=None, timeout=5.0) -> DiagnosisAIService:
    """
    DiagnosisAIService over a mocked client that either answers with
    `content` or raises `error`
    """
    client = Mock()
    if error is not None:
        client.chat.completions.create = AsyncMock(side_effect=error)
    else:
        client.chat.completions.create = AsyncMock(return_value=make_completion(content))
    return DiagnosisAIService(client=client, model="test-model", timeout=timeout)


def connection_error():
    return openai.APIConnectionError(
        request=httpx.Request("POST", "https://inference.test/v1/chat/completions")
    )


def image_bytes(size=(64, 48), fmt="JPEG", color=(200, 60, 60)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def patient() -> PatientContext:
    return PatientContext(
        name="Sunita Devi",
        age=34,
        gender="Female",
        symptoms="red itchy ring-shaped rash spreading on arm for 2 weeks",
        duration="1-2 weeks",
        fever="none",
    )


@pytest.fixture
def jpeg_bytes() -> bytes:
    return image_bytes()


@pytest.fixture
def failing_ai_service() -> DiagnosisAIService:
    return make_ai_service(error=connection_error())


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def stores() -> SimpleNamespace:
    """Fresh stores per test, seeded the same way as the app's"""
    return SimpleNamespace(
        diagnoses=InMemoryStore(),
        patients=InMemoryStore(Patient.model_validate(item) for item in SEED_PATIENTS),
        reports=InMemoryStore(Report.model_validate(item) for item in SEED_REPORTS),
        outbreaks=InMemoryStore(Outbreak.model_validate(item) for item in SEED_OUTBREAKS),
    )


@pytest.fixture
async def client(stores, failing_ai_service, upload_dir):
    """
    HTTP client over the app with isolated stores and an AI model that is
    always unreachable; tests replace the AI override when they need answers
    """
    app.dependency_overrides[get_diagnosis_store] = lambda: stores.diagnoses
    app.dependency_overrides[get_patient_store] = lambda: stores.patients
    app.dependency_overrides[get_report_store] = lambda: stores.reports
    app.dependency_overrides[get_outbreak_store] = lambda: stores.outbreaks
    app.dependency_overrides[get_diagnosis_ai_service] = lambda: failing_ai_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
