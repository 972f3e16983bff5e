"""
app/schemas package marker.
"""

from app.schemas.dashboard import (
    ColumnAggregationResponse,
    ColumnCatalogResponse,
    DatasetDescriptorResponse,
    FilteredDatasetResponse,
    FilterOptionsResponse,
    FilterStateRequest,
    MetricsResponse,
    SessionCreatedResponse,
)

__all__ = [
    "ColumnAggregationResponse",
    "ColumnCatalogResponse",
    "DatasetDescriptorResponse",
    "FilteredDatasetResponse",
    "FilterOptionsResponse",
    "FilterStateRequest",
    "MetricsResponse",
    "SessionCreatedResponse",
]
