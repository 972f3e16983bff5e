"""
app/services/dataset_descriptor.py

Packages upload metadata once normalization has succeeded.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from app.domain.dataset import CanonicalRecord, ColumnProfile, DatasetDescriptor


def build_dataset_descriptor(
    *,
    file_name: str,
    records: Sequence[CanonicalRecord],
    columns: Sequence[ColumnProfile],
    uploaded_at: datetime | None = None,
) -> DatasetDescriptor:
    return DatasetDescriptor(
        file_name=file_name,
        row_count=len(records),
        columns=tuple(columns),
        upload_timestamp=uploaded_at or datetime.now(tz=timezone.utc),
    )
