"""
Pydantic schemas for patients registered by a health worker
"""

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from dermassist.schemas.diagnosis import CamelModel


class Patient(CamelModel):
    id: int
    name: str
    age: int
    gender: str
    village: str
    phone: Optional[str] = None
    cases: List[int] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class PatientCreate(BaseModel):
    """Request to register a patient; required fields are checked by the endpoint"""
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=130)
    gender: Optional[str] = None
    village: Optional[str] = None
    phone: Optional[str] = None


class PatientUpdate(BaseModel):
    """Partial update; only provided fields change"""
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=130)
    gender: Optional[str] = None
    village: Optional[str] = None
    phone: Optional[str] = None
