"""
app/domain package marker.
"""

from app.domain.dataset import (
    CanonicalRecord,
    ColumnProfile,
    ColumnType,
    DatasetDescriptor,
    DateRange,
    FieldMapping,
    FilterState,
    GroupTotal,
    MetricsSummary,
)
from app.domain.errors import CsvParseError, DatasetIngestionError, EmptyDatasetError

__all__ = [
    "CanonicalRecord",
    "ColumnProfile",
    "ColumnType",
    "CsvParseError",
    "DatasetDescriptor",
    "DatasetIngestionError",
    "DateRange",
    "EmptyDatasetError",
    "FieldMapping",
    "FilterState",
    "GroupTotal",
    "MetricsSummary",
]
