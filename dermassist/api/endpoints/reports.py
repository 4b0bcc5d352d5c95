"""
Reports API Endpoints
"""

import logging
from datetime import datetime, timezone, date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from database import RecordStore, get_report_store
from dermassist.schemas.report import Report, ReportExportRequest
from dermassist.services.statistics import (
    filter_reports_for_export,
    monthly_report_stats,
    weekly_report_stats,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def _dump(report: Report) -> dict:
    return report.model_dump(by_alias=True, mode="json")


@router.get("")
async def list_reports(
    limit: int = Query(10, ge=0),
    offset: int = Query(0, ge=0),
    report_status: Optional[str] = Query(None, alias="status"),
    report_type: Optional[str] = Query(None, alias="type"),
    store: RecordStore[Report] = Depends(get_report_store),
):
    reports = await store.list()

    if report_status:
        reports = [r for r in reports if r.status == report_status]
    if report_type:
        reports = [r for r in reports if r.report_type == report_type]

    page = reports[offset:offset + limit]

    return {
        "success": True,
        "reports": [_dump(r) for r in page],
        "total": len(reports),
        "limit": limit,
        "offset": offset,
    }


@router.get("/monthly")
async def get_monthly_stats(store: RecordStore[Report] = Depends(get_report_store)):
    today = date.today()
    return {
        "success": True,
        "month": today.month,
        "year": today.year,
        "stats": monthly_report_stats(await store.list(), today),
    }


@router.get("/weekly")
async def get_weekly_stats(store: RecordStore[Report] = Depends(get_report_store)):
    return {
        "success": True,
        "period": "7 days",
        "stats": weekly_report_stats(await store.list()),
    }


@router.get("/{report_id}")
async def get_report(report_id: int, store: RecordStore[Report] = Depends(get_report_store)):
    report = await store.find(report_id)
    if not report:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found"
        )
    return {
        "success": True,
        "report": _dump(report),
    }


@router.post("/export")
async def export_reports(
    request: ReportExportRequest,
    store: RecordStore[Report] = Depends(get_report_store),
):
    """
    Export reports filtered by date range and conditions.
    Only JSON payloads are produced; `format` is echoed back.
    """
    date_range = request.date_range
    exported = filter_reports_for_export(
        await store.list(),
        start=date_range.start if date_range else None,
        end=date_range.end if date_range else None,
        conditions=request.conditions,
    )
    logger.info(f"Exporting {len(exported)} reports as {request.format}")

    return {
        "success": True,
        "format": request.format,
        "exportedCount": len(exported),
        "data": [_dump(r) for r in exported],
        "generatedAt": datetime.now(timezone.utc).isoformat(),
    }
