"""
app/services package marker.
"""

from app.services.aggregation_service import AggregationService
from app.services.csv_ingestion_service import (
    CSVIngestionService,
    IngestionResult,
    get_csv_ingestion_service,
)
from app.services.dashboard_session import (
    DashboardSession,
    DashboardSessionStore,
    SessionNotFoundError,
    get_session_store,
)
from app.services.insight_service import (
    InsightGenerationError,
    InsightService,
    get_insight_service,
)
from app.services.report_export_service import ReportExportService, get_report_export_service

__all__ = [
    "AggregationService",
    "CSVIngestionService",
    "DashboardSession",
    "DashboardSessionStore",
    "IngestionResult",
    "InsightGenerationError",
    "InsightService",
    "ReportExportService",
    "SessionNotFoundError",
    "get_csv_ingestion_service",
    "get_insight_service",
    "get_report_export_service",
    "get_session_store",
]
