"""
app/api/routers/export_router.py

Report export endpoint.

GET /sessions/{session_id}/export?format=json|csv

The report covers the session's currently filtered records and, when
present, the most recently generated insights.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from app.api.dependencies import get_loaded_session
from app.services.dashboard_session import DashboardSession
from app.services.report_export_service import ReportExportService, get_report_export_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["export"])

_VALID_FORMATS = frozenset({"csv", "json"})


@router.get("/sessions/{session_id}/export", summary="Export the dashboard report")
def export_report(
    output_format: str = Query(
        default="json",
        alias="format",
        description='Output format: "json" or "csv" (file download).',
    ),
    session: DashboardSession = Depends(get_loaded_session),
    service: ReportExportService = Depends(get_report_export_service),
) -> Response:
    if output_format not in _VALID_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid format {output_format!r}. Must be one of: {sorted(_VALID_FORMATS)}.",
        )

    view = session.apply_filter()
    report = service.build_report(
        records=view.records,
        metrics=view.metrics,
        insights=view.insights,
    )
    logger.info("Report export format=%r rows=%d", output_format, len(report["raw_data"]))

    if output_format == "csv":
        return Response(
            content=service.to_csv(report),
            media_type="text/csv; charset=utf-8",
            headers={
                "Content-Disposition": 'attachment; filename="analytics-report.csv"',
                "X-Row-Count": str(len(report["raw_data"])),
            },
        )
    return Response(content=service.to_json(report), media_type="application/json")
