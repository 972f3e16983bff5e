"""
app/api/routers/analytics_router.py

Filter, metrics and chart aggregation endpoints over the session's
normalized dataset.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_loaded_session
from app.schemas.dashboard import (
    ColumnAggregationResponse,
    ColumnCatalogResponse,
    FilteredDatasetResponse,
    FilterStateRequest,
    GroupTotalResponse,
    MetricsResponse,
)
from app.services.aggregation_service import AggregationService
from app.services.dashboard_session import DashboardSession, FilteredView

router = APIRouter(tags=["analytics"])

_aggregation = AggregationService()


def _filtered_response(view: FilteredView) -> FilteredDatasetResponse:
    return FilteredDatasetResponse(
        filter=FilterStateRequest.from_domain(view.filter_state),
        records=[record.to_dict() for record in view.records],
        metrics=MetricsResponse.from_domain(view.metrics),
    )


@router.get("/sessions/{session_id}/filter", response_model=FilterStateRequest)
def get_filter(
    session: DashboardSession = Depends(get_loaded_session),
) -> FilterStateRequest:
    return FilterStateRequest.from_domain(session.filter_state())


@router.put("/sessions/{session_id}/filter", response_model=FilteredDatasetResponse)
def update_filter(
    body: FilterStateRequest,
    session: DashboardSession = Depends(get_loaded_session),
) -> FilteredDatasetResponse:
    """
    Replace the session filter and return the filtered records with metrics.
    """

    session.update_filter(body.to_domain())
    return _filtered_response(session.apply_filter())


@router.get("/sessions/{session_id}/metrics", response_model=MetricsResponse)
def get_metrics(
    session: DashboardSession = Depends(get_loaded_session),
) -> MetricsResponse:
    return MetricsResponse.from_domain(session.apply_filter().metrics)


@router.get("/sessions/{session_id}/columns", response_model=ColumnCatalogResponse)
def get_columns(
    session: DashboardSession = Depends(get_loaded_session),
) -> ColumnCatalogResponse:
    catalog = _aggregation.column_catalog(session.normalized_dataset())
    return ColumnCatalogResponse(numeric=list(catalog.numeric), text=list(catalog.text))


@router.get("/sessions/{session_id}/aggregate", response_model=ColumnAggregationResponse)
def aggregate_by_column(
    x_column: str = Query(..., alias="x", description="Column whose distinct values form the groups."),
    y_column: str = Query(default="sales", alias="y", description="Column summed per group."),
    limit: int | None = Query(default=None, ge=1, description="Keep only the top groups."),
    session: DashboardSession = Depends(get_loaded_session),
) -> ColumnAggregationResponse:
    """
    Sum one column per distinct value of another over the filtered records.
    """

    known = _aggregation.column_catalog(session.normalized_dataset()).names
    unknown = [name for name in (x_column, y_column) if name not in known]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown column(s) {unknown}. Must be one of: {list(known)}.",
        )

    view = session.apply_filter()
    groups = _aggregation.aggregate_by_column(view.records, x_column, y_column, limit=limit)
    return ColumnAggregationResponse(
        x_column=x_column,
        y_column=y_column,
        groups=[GroupTotalResponse(key=g.key, total=g.total, share=g.share) for g in groups],
    )
