"""
Report endpoint and statistics tests
"""
import pytest
from datetime import date, timedelta

from dermassist.schemas.report import Report
from dermassist.services.statistics import monthly_report_stats, weekly_report_stats


def make_report(report_id, condition, report_date, **overrides):
    fields = {
        "id": report_id,
        "patient_name": "Test",
        "condition": condition,
        "report_date": report_date,
        "status": "Completed",
        "report_type": "Diagnostic Report",
        "confidence": 80,
        "severity": "Moderate",
    }
    fields.update(overrides)
    return Report(**fields)


@pytest.mark.unit
class TestReportStatistics:
    """Test suite for report aggregation"""

    def test_monthly_stats(self):
        today = date(2025, 3, 20)
        reports = [
            make_report(1, "Scabies", date(2025, 3, 2), confidence=90, severity="Severe"),
            make_report(2, "Scabies", date(2025, 3, 18), report_type="Referral Report", status="Under Review"),
            make_report(3, "Eczema", date(2025, 3, 19), confidence=None, severity="Mild"),
            make_report(4, "Scabies", date(2025, 2, 27)),
        ]

        stats = monthly_report_stats(reports, today)

        assert stats["totalReports"] == 3
        assert stats["diagnosticReports"] == 2
        assert stats["referralReports"] == 1
        assert stats["completedCases"] == 2
        assert stats["averageConfidence"] == 57
        assert stats["severityBreakdown"] == {"mild": 1, "moderate": 1, "severe": 1}
        assert stats["conditionBreakdown"] == {"Scabies": 2, "Eczema": 1}

    def test_monthly_stats_empty(self):
        stats = monthly_report_stats([], date(2025, 3, 20))
        assert stats["averageConfidence"] == 0

    def test_weekly_stats(self):
        today = date(2025, 3, 20)
        reports = [
            make_report(1, "Eczema", today),
            make_report(2, "Scabies", today - timedelta(days=2)),
            make_report(3, "Scabies", today - timedelta(days=6)),
            make_report(4, "Scabies", today - timedelta(days=7)),
        ]

        stats = weekly_report_stats(reports, today)

        assert stats["totalReports"] == 3
        assert stats["newCases"] == 3
        assert stats["averagePerDay"] == 0.4
        assert stats["mostCommonCondition"] == "Scabies"

    def test_weekly_stats_empty(self):
        assert weekly_report_stats([], date(2025, 3, 20))["mostCommonCondition"] == "None"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_reports_filtered(client):
    response = await client.get("/api/reports", params={"status": "Under Review"})

    data = response.json()
    assert data["total"] == 1
    assert data["reports"][0]["patientName"] == "Priya Sharma"
    assert data["reports"][0]["type"] == "Diagnostic Report"
    assert data["reports"][0]["date"] == "2024-01-14"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_monthly_endpoint_counts_current_month(client, stores):
    today = date.today()
    await stores.reports.insert(lambda report_id: make_report(report_id, "Scabies", today))

    response = await client.get("/api/reports/monthly")

    data = response.json()
    assert data["month"] == today.month
    assert data["year"] == today.year
    assert data["stats"]["totalReports"] == 1
    assert data["stats"]["conditionBreakdown"] == {"Scabies": 1}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_weekly_endpoint(client):
    response = await client.get("/api/reports/weekly")

    data = response.json()
    assert data["period"] == "7 days"
    assert data["stats"]["totalReports"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_report(client):
    assert (await client.get("/api/reports/1")).json()["report"]["condition"] == "Fungal Infection"
    assert (await client.get("/api/reports/9")).status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_export_reports(client):
    response = await client.post(
        "/api/reports/export",
        json={
            "format": "csv",
            "dateRange": {"start": "2024-01-15", "end": "2024-01-31"},
            "conditions": ["Fungal Infection"],
        },
    )

    data = response.json()
    assert data["format"] == "csv"
    assert data["exportedCount"] == 1
    assert data["data"][0]["id"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_export_without_filters(client):
    response = await client.post("/api/reports/export", json={})
    assert response.json()["exportedCount"] == 2
