"""
In-memory record stores

Every collection the API serves (diagnoses, patients, reports, outbreaks)
lives in a RecordStore. The process keeps one InMemoryStore per collection;
routes receive them through the get_*_store dependencies so tests can swap
in fresh stores with app.dependency_overrides.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from pydantic import BaseModel

from dermassist.schemas.community import Outbreak
from dermassist.schemas.diagnosis import DiagnosisRecord
from dermassist.schemas.patient import Patient
from dermassist.schemas.report import Report
from dermassist.services.seed_data import SEED_OUTBREAKS, SEED_PATIENTS, SEED_REPORTS

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class RecordStore(ABC, Generic[T]):
    """Storage contract used by services: insert / find / update / list"""

    @abstractmethod
    async def insert(self, build: Callable[[int], T]) -> T:
        """Allocate the next id, build the record with it and store it"""

    @abstractmethod
    async def find(self, record_id: int) -> Optional[T]:
        ...

    @abstractmethod
    async def update(self, record_id: int, **changes: Any) -> Optional[T]:
        """Apply field changes; returns None when the id is unknown"""

    @abstractmethod
    async def list(self) -> List[T]:
        """All records in insertion (id) order"""


class InMemoryStore(RecordStore[T]):
    """
    Dict-backed store with a monotonic id counter.

    Ids come from the counter only, never from the collection size, so they
    stay unique even if records are seeded with gaps. Writes hold a lock;
    reads do not.
    """

    def __init__(self, seed: Iterable[T] = ()):
        self._records: Dict[int, T] = {}
        for record in seed:
            self._records[record.id] = record
        self._next_id = max(self._records, default=0) + 1
        self._lock = asyncio.Lock()

    async def insert(self, build: Callable[[int], T]) -> T:
        async with self._lock:
            record_id = self._next_id
            record = build(record_id)
            self._records[record_id] = record
            self._next_id += 1
        return record

    async def find(self, record_id: int) -> Optional[T]:
        return self._records.get(record_id)

    async def update(self, record_id: int, **changes: Any) -> Optional[T]:
        async with self._lock:
            record = self._records.get(record_id)
            if record is None:
                return None
            updated = record.model_copy(update=changes)
            self._records[record_id] = updated
        return updated

    async def list(self) -> List[T]:
        return [self._records[key] for key in sorted(self._records)]

    def __len__(self) -> int:
        return len(self._records)


diagnosis_store: InMemoryStore[DiagnosisRecord] = InMemoryStore()
patient_store: InMemoryStore[Patient] = InMemoryStore(
    Patient.model_validate(item) for item in SEED_PATIENTS
)
report_store: InMemoryStore[Report] = InMemoryStore(
    Report.model_validate(item) for item in SEED_REPORTS
)
outbreak_store: InMemoryStore[Outbreak] = InMemoryStore(
    Outbreak.model_validate(item) for item in SEED_OUTBREAKS
)


# Dependencies for FastAPI routes
def get_diagnosis_store() -> RecordStore[DiagnosisRecord]:
    return diagnosis_store


def get_patient_store() -> RecordStore[Patient]:
    return patient_store


def get_report_store() -> RecordStore[Report]:
    return report_store


def get_outbreak_store() -> RecordStore[Outbreak]:
    return outbreak_store
