"""
Keyword-based fallback diagnosis

Used whenever the AI model cannot be reached or returns something unusable.
The result depends only on the patient context, so the same case always gets
the same answer.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from dermassist.schemas.diagnosis import (
    DiagnosisAnalysis,
    PatientContext,
    RiskLevel,
    RISK_ORDER,
    Severity,
    SEVERITY_ORDER,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FallbackCondition:
    condition: str
    confidence: int
    severity: Severity
    risk_level: RiskLevel
    treatment: str
    keywords: Tuple[str, ...]

    def score(self, symptoms: str) -> int:
        """Number of keywords found in the (lower-cased) symptom text"""
        return sum(1 for keyword in self.keywords if keyword in symptoms)


# Order matters: ties go to the earlier entry, and the first entry is the default
FALLBACK_CONDITIONS: Tuple[FallbackCondition, ...] = (
    FallbackCondition(
        condition="Fungal Infection (Dermatophytosis)",
        confidence=75,
        severity=Severity.MODERATE,
        risk_level=RiskLevel.YELLOW,
        treatment="Apply antifungal cream (Clotrimazole) twice daily for 2-3 weeks",
        keywords=("itchy", "ring", "circular", "scaling", "red"),
    ),
    FallbackCondition(
        condition="Contact Dermatitis",
        confidence=70,
        severity=Severity.MILD,
        risk_level=RiskLevel.GREEN,
        treatment="Avoid irritants, apply moisturizer, use mild soap",
        keywords=("rash", "irritation", "contact", "soap", "detergent"),
    ),
    FallbackCondition(
        condition="Bacterial Skin Infection",
        confidence=80,
        severity=Severity.MODERATE,
        risk_level=RiskLevel.YELLOW,
        treatment="Clean with antiseptic, apply antibiotic ointment",
        keywords=("pus", "wound", "cut", "swollen", "warm", "fever"),
    ),
    FallbackCondition(
        condition="Scabies",
        confidence=85,
        severity=Severity.MODERATE,
        risk_level=RiskLevel.YELLOW,
        treatment="Apply permethrin cream, wash all clothing and bedding",
        keywords=("itchy", "night", "burrow", "family", "spread"),
    ),
)

FALLBACK_REASONING = (
    "Analysis based on symptom patterns and clinical guidelines "
    "(AI service temporarily unavailable)"
)

FALLBACK_RECOMMENDATIONS = [
    "Keep the affected area clean and dry",
    "Follow prescribed treatment regimen",
    "Monitor for improvement over 3-5 days",
    "Return if condition worsens or spreads",
]

FALLBACK_WARNING_SIGNS = [
    "Spreading rash or infection",
    "Development of fever",
    "Increased pain or swelling",
    "No improvement after 5 days of treatment",
]


def select_condition(symptoms: str) -> FallbackCondition:
    """Pick the table entry with the strictly highest keyword score"""
    text = symptoms.lower()
    best = FALLBACK_CONDITIONS[0]
    best_score = 0
    for candidate in FALLBACK_CONDITIONS:
        candidate_score = candidate.score(text)
        if candidate_score > best_score:
            best = candidate
            best_score = candidate_score
    return best


def _fever_reported(fever: Optional[str]) -> bool:
    return bool(fever) and fever.strip().lower() not in ("", "none")


def _long_standing(duration: Optional[str]) -> bool:
    return bool(duration) and "month" in duration.lower()


def _at_least(value, floor, order):
    return value if order.index(value) >= order.index(floor) else floor


def classify_symptoms(patient: PatientContext) -> DiagnosisAnalysis:
    """
    Deterministic diagnosis from symptom keywords.

    Fever (anything other than "none") or a duration measured in months
    raises the result to at least Moderate / YELLOW. Never raises.
    """
    match = select_condition(patient.symptoms)
    severity = match.severity
    risk_level = match.risk_level

    if _fever_reported(patient.fever) or _long_standing(patient.duration):
        severity = _at_least(severity, Severity.MODERATE, SEVERITY_ORDER)
        risk_level = _at_least(risk_level, RiskLevel.YELLOW, RISK_ORDER)

    logger.info(f"Fallback classifier selected '{match.condition}' ({risk_level.value})")

    return DiagnosisAnalysis(
        primary_condition=match.condition,
        confidence=match.confidence,
        severity=severity,
        risk_level=risk_level,
        treatment=match.treatment,
        referral_needed=risk_level == RiskLevel.RED,
        reasoning=FALLBACK_REASONING,
        recommendations=list(FALLBACK_RECOMMENDATIONS),
        follow_up="Refer to PHC immediately" if risk_level == RiskLevel.RED else "Review in 3-5 days",
        warning_signs=list(FALLBACK_WARNING_SIGNS),
    )
