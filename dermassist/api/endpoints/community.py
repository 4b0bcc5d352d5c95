"""
Community Health API Endpoints
Village statistics, outbreak alerts and disease trends
"""

import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from database import RecordStore, get_outbreak_store
from dermassist.schemas.community import Outbreak, OutbreakCreate, Trend, Village
from dermassist.schemas.diagnosis import StatusUpdate
from dermassist.services.seed_data import (
    COMMUNITY_RECOMMENDATIONS,
    SEED_TRENDS,
    SEED_VILLAGES,
    VILLAGE_RISK_FACTORS,
)
from dermassist.services.statistics import community_overview

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/community", tags=["Community"])

VILLAGES = [Village.model_validate(item) for item in SEED_VILLAGES]
TRENDS = [Trend.model_validate(item) for item in SEED_TRENDS]

OUTBREAK_STATUSES = ["Active", "Monitoring", "Resolved", "Escalated"]


def _dump(model) -> dict:
    return model.model_dump(by_alias=True, mode="json", exclude_none=True)


@router.get("/stats")
async def get_community_stats(store: RecordStore[Outbreak] = Depends(get_outbreak_store)):
    return {
        "success": True,
        "stats": community_overview(VILLAGES, await store.list()),
        "lastUpdated": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/outbreaks")
async def list_outbreaks(
    status: str = "Active",
    store: RecordStore[Outbreak] = Depends(get_outbreak_store),
):
    """Outbreaks with the given status, or every outbreak for status=all"""
    outbreaks = [
        o for o in await store.list()
        if status == "all" or o.status == status
    ]
    return {
        "success": True,
        "outbreaks": [_dump(o) for o in outbreaks],
        "total": len(outbreaks),
    }


@router.post("/outbreaks", status_code=201)
async def report_outbreak(
    request: OutbreakCreate,
    store: RecordStore[Outbreak] = Depends(get_outbreak_store),
):
    if not request.condition or not request.village or not request.cases:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: condition, village, cases"
        )

    outbreak = await store.insert(
        lambda outbreak_id: Outbreak(
            id=outbreak_id,
            condition=request.condition,
            village=request.village,
            cases=request.cases,
            severity=request.severity or "Medium",
            recommendation=request.recommendation or "Monitor situation closely",
            reported_date=date.today(),
            status="Active",
        )
    )
    logger.warning(f"Outbreak reported: {outbreak.condition} in {outbreak.village} ({outbreak.cases} cases)")

    return {
        "success": True,
        "outbreak": _dump(outbreak),
        "message": "Outbreak reported successfully",
    }


@router.put("/outbreaks/{outbreak_id}/status")
async def update_outbreak_status(
    outbreak_id: int,
    request: StatusUpdate,
    store: RecordStore[Outbreak] = Depends(get_outbreak_store),
):
    if not await store.find(outbreak_id):
        raise HTTPException(
            status_code=404,
            detail="Outbreak not found"
        )

    if request.status not in OUTBREAK_STATUSES:
        raise HTTPException(
            status_code=400,
            detail="Invalid status"
        )

    outbreak = await store.update(
        outbreak_id,
        status=request.status,
        last_updated=datetime.now(timezone.utc),
    )

    return {
        "success": True,
        "outbreak": _dump(outbreak),
        "message": "Outbreak status updated successfully",
    }


@router.get("/trends")
async def get_trends(period: str = "week"):
    return {
        "success": True,
        "trends": [_dump(t) for t in TRENDS],
        "period": period,
        "calculatedAt": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/villages/{name}")
async def get_village(name: str, store: RecordStore[Outbreak] = Depends(get_outbreak_store)):
    village = next((v for v in VILLAGES if v.name.lower() == name.lower()), None)
    if not village:
        raise HTTPException(
            status_code=404,
            detail="Village not found"
        )

    outbreaks = [o for o in await store.list() if o.village.lower() == name.lower()]

    return {
        "success": True,
        "village": {
            **_dump(village),
            "outbreaks": [_dump(o) for o in outbreaks],
            "riskFactors": VILLAGE_RISK_FACTORS,
        },
    }


@router.get("/recommendations")
async def get_recommendations():
    return {
        "success": True,
        "recommendations": COMMUNITY_RECOMMENDATIONS,
        "generatedAt": datetime.now(timezone.utc).isoformat(),
    }
