"""
Pydantic schemas for village-level community health data
"""

from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel

from dermassist.schemas.diagnosis import CamelModel


class Village(CamelModel):
    name: str
    population: int
    active_cases: int
    recovered_cases: int
    common_condition: str
    risk_level: str
    last_updated: date


class Outbreak(CamelModel):
    id: int
    condition: str
    village: str
    cases: int
    severity: str = "Medium"
    recommendation: str = "Monitor situation closely"
    reported_date: date
    status: str = "Active"
    last_updated: Optional[datetime] = None


class OutbreakCreate(BaseModel):
    """Required fields are checked by the endpoint so the client gets a 400"""
    condition: Optional[str] = None
    village: Optional[str] = None
    cases: Optional[int] = None
    severity: Optional[str] = None
    recommendation: Optional[str] = None


class Trend(CamelModel):
    condition: str
    trend: str
    change: str
    period: str
    current_cases: int
    previous_cases: int
