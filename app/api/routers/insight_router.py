"""
app/api/routers/insight_router.py

Insight generation endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_loaded_session
from app.services.dashboard_session import DashboardSession
from app.services.insight_service import InsightGenerationError, InsightService, get_insight_service
from llm_synthesis.schema import InsightReport

router = APIRouter(tags=["insights"])


@router.post("/sessions/{session_id}/insights", response_model=InsightReport)
def generate_insights(
    session: DashboardSession = Depends(get_loaded_session),
    service: InsightService = Depends(get_insight_service),
) -> InsightReport:
    """
    Generate insights for the currently filtered records.
    """

    view = session.apply_filter()
    try:
        report = service.generate(metrics=view.metrics, filter_state=view.filter_state)
    except InsightGenerationError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    session.record_insights(report, descriptor=view.descriptor)
    return report
