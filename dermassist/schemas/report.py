"""
Pydantic schemas for diagnostic and referral reports
"""

from typing import List, Optional
from datetime import date
from pydantic import BaseModel, Field

from dermassist.schemas.diagnosis import CamelModel


class Report(CamelModel):
    id: int
    patient_name: str
    condition: str
    report_date: date = Field(..., alias="date")
    status: str
    report_type: str = Field(..., alias="type")
    confidence: Optional[int] = None
    severity: Optional[str] = None


class DateRange(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None


class ReportExportRequest(CamelModel):
    format: str = "json"
    date_range: Optional[DateRange] = None
    conditions: Optional[List[str]] = None
