"""
Pydantic schemas for skin-condition diagnoses
"""

from enum import Enum
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"


class RiskLevel(str, Enum):
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class DiagnosisStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    REFERRED = "Referred"
    UNDER_TREATMENT = "Under Treatment"


# Lowest to highest, used when escalating
SEVERITY_ORDER = [Severity.MILD, Severity.MODERATE, Severity.SEVERE]
RISK_ORDER = [RiskLevel.GREEN, RiskLevel.YELLOW, RiskLevel.RED]


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys, as the web client expects"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatientContext(BaseModel):
    """Patient and symptom data submitted with one case"""
    name: str = Field(..., description="Patient name")
    age: int = Field(..., ge=0, le=130)
    gender: str
    symptoms: str = Field(..., description="Free-text symptom description")
    duration: str = Field(..., description="How long the condition has been present, e.g. '1-2 weeks'")
    severity: Optional[str] = Field(None, description="Pain/discomfort level")
    fever: Optional[str] = Field(None, description="Fever or systemic symptoms, 'none' if absent")
    nearby_cases: Optional[str] = Field(None, description="Similar cases in family or village")

    @field_validator("name", "gender", "symptoms", "duration")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("severity", "fever", "nearby_cases")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class DiagnosisAnalysis(CamelModel):
    """Normalised analysis, from the AI model or the keyword fallback"""
    primary_condition: str
    confidence: int = Field(..., ge=0, le=100)
    severity: Severity
    risk_level: RiskLevel
    treatment: str
    referral_needed: bool = False
    reasoning: str = "AI analysis completed"
    recommendations: List[str] = Field(default_factory=list)
    follow_up: str = "Follow up as needed"
    warning_signs: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def red_risk_requires_referral(self):
        if self.risk_level == RiskLevel.RED:
            self.referral_needed = True
        return self


class DiagnosisRecord(CamelModel):
    """A submitted case with its analysis"""
    id: int
    patient_data: PatientContext
    image_url: str
    analysis: DiagnosisAnalysis
    status: DiagnosisStatus
    created_at: datetime
    updated_at: datetime

    def to_public(self) -> dict:
        """Projection returned to the client right after submission"""
        return {
            "id": self.id,
            "patientName": self.patient_data.name,
            "primaryCondition": self.analysis.primary_condition,
            "confidence": self.analysis.confidence,
            "severity": self.analysis.severity.value,
            "riskLevel": self.analysis.risk_level.value,
            "treatment": self.analysis.treatment,
            "referralNeeded": self.analysis.referral_needed,
            "recommendations": self.analysis.recommendations,
            "followUp": self.analysis.follow_up,
            "warningSigns": self.analysis.warning_signs,
            "reasoning": self.analysis.reasoning,
            "imageUrl": self.image_url,
            "createdAt": self.created_at.isoformat(),
        }

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "patientName": self.patient_data.name,
            "primaryCondition": self.analysis.primary_condition,
            "severity": self.analysis.severity.value,
            "riskLevel": self.analysis.risk_level.value,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }


class StatusUpdate(BaseModel):
    status: Optional[str] = None
