"""
Aggregate statistics for dashboards (patients, reports, community)
"""

from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from dermassist.schemas.community import Outbreak, Village
from dermassist.schemas.patient import Patient
from dermassist.schemas.report import Report


def patient_summary(patients: List[Patient], now: Optional[datetime] = None) -> Dict:
    now = now or datetime.now(timezone.utc)
    week_ago = now - timedelta(days=7)

    return {
        "total": len(patients),
        "byGender": {
            "male": sum(1 for p in patients if p.gender.lower() == "male"),
            "female": sum(1 for p in patients if p.gender.lower() == "female"),
        },
        "byVillage": dict(Counter(p.village for p in patients)),
        "recentlyAdded": sum(1 for p in patients if p.created_at > week_ago),
    }


def _severity_breakdown(reports: List[Report]) -> Dict[str, int]:
    return {
        "mild": sum(1 for r in reports if r.severity == "Mild"),
        "moderate": sum(1 for r in reports if r.severity == "Moderate"),
        "severe": sum(1 for r in reports if r.severity == "Severe"),
    }


def monthly_report_stats(reports: List[Report], today: Optional[date] = None) -> Dict:
    """Statistics for reports dated in the calendar month of `today`"""
    today = today or date.today()
    monthly = [
        r for r in reports
        if r.report_date.year == today.year and r.report_date.month == today.month
    ]

    average_confidence = 0
    if monthly:
        average_confidence = round(sum(r.confidence or 0 for r in monthly) / len(monthly))

    return {
        "totalReports": len(monthly),
        "diagnosticReports": sum(1 for r in monthly if r.report_type == "Diagnostic Report"),
        "referralReports": sum(1 for r in monthly if r.report_type == "Referral Report"),
        "completedCases": sum(1 for r in monthly if r.status == "Completed"),
        "averageConfidence": average_confidence,
        "severityBreakdown": _severity_breakdown(monthly),
        "conditionBreakdown": dict(Counter(r.condition for r in monthly)),
    }


def weekly_report_stats(reports: List[Report], today: Optional[date] = None) -> Dict:
    """Statistics for reports dated within the last 7 days"""
    today = today or date.today()
    week_ago = today - timedelta(days=7)
    weekly = [r for r in reports if r.report_date > week_ago]

    most_common = "None"
    if weekly:
        # most_common keeps first-seen order on ties
        most_common = Counter(r.condition for r in weekly).most_common(1)[0][0]

    return {
        "totalReports": len(weekly),
        "newCases": len(weekly),
        "averagePerDay": round(len(weekly) / 7, 1),
        "mostCommonCondition": most_common,
    }


def filter_reports_for_export(
    reports: List[Report],
    start: Optional[date] = None,
    end: Optional[date] = None,
    conditions: Optional[List[str]] = None,
) -> List[Report]:
    selected = reports
    if start and end:
        selected = [r for r in selected if start <= r.report_date <= end]
    if conditions:
        selected = [r for r in selected if r.condition in conditions]
    return selected


def community_overview(villages: List[Village], outbreaks: List[Outbreak]) -> Dict:
    active = sum(v.active_cases for v in villages)
    recovered = sum(v.recovered_cases for v in villages)

    return {
        "overview": {
            "totalCases": active + recovered,
            "activeCases": active,
            "recoveredCases": recovered,
            "outbreakAlerts": sum(1 for o in outbreaks if o.status == "Active"),
            "villagesCovered": len(villages),
            "totalPopulation": sum(v.population for v in villages),
        },
        "villages": [v.model_dump(by_alias=True, mode="json") for v in villages],
        "riskDistribution": {
            "high": sum(1 for v in villages if v.risk_level == "High"),
            "medium": sum(1 for v in villages if v.risk_level == "Medium"),
            "low": sum(1 for v in villages if v.risk_level == "Low"),
        },
    }
