"""
app/profilers/column_profiler.py

Per-column type inference for raw uploaded rows.
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.domain.dataset import ColumnProfile, ColumnType, RawRow, RawScalar
from app.domain.errors import EmptyDatasetError
from app.parsers.csv_parser import coerce_cell
from app.parsers.date_parser import looks_like_date

logger = logging.getLogger(__name__)


def infer_column_type(first_sample: RawScalar) -> ColumnType:
    """
    Infer a column type from its first non-null sample only.

    Numeric-looking text counts as a number so rows that bypassed the
    parser's dynamic typing profile the same way.
    """

    if isinstance(first_sample, bool):
        return ColumnType.STRING
    if isinstance(first_sample, (int, float)):
        return ColumnType.NUMBER
    if isinstance(first_sample, str):
        if isinstance(coerce_cell(first_sample), (int, float)):
            return ColumnType.NUMBER
        if looks_like_date(first_sample):
            return ColumnType.DATE
    return ColumnType.STRING


class ColumnProfiler:
    """
    Builds one ColumnProfile per column of the first raw row.
    """

    def __init__(self, *, sample_scan_limit: int = 10, sample_size: int = 5) -> None:
        self._sample_scan_limit = max(1, sample_scan_limit)
        self._sample_size = max(1, min(sample_size, self._sample_scan_limit))

    def profile(self, rows: Sequence[RawRow]) -> tuple[ColumnProfile, ...]:
        """
        Profile every column found in the first row.

        Raises:
            EmptyDatasetError: When *rows* is empty.
        """

        if not rows:
            raise EmptyDatasetError("CSV file is empty or has no valid data rows")

        profiles = tuple(self._profile_column(name, rows) for name in rows[0].keys())
        logger.debug(
            "Profiled columns %s",
            {profile.name: profile.inferred_type.value for profile in profiles},
        )
        return profiles

    def _profile_column(self, name: str, rows: Sequence[RawRow]) -> ColumnProfile:
        samples: list[RawScalar] = []
        for row in rows:
            value = row.get(name)
            if value is None:
                continue
            samples.append(value)
            if len(samples) >= self._sample_scan_limit:
                break

        if not samples:
            return ColumnProfile(name=name, inferred_type=ColumnType.STRING, sample_values=())

        return ColumnProfile(
            name=name,
            inferred_type=infer_column_type(samples[0]),
            sample_values=tuple(samples[: self._sample_size]),
        )
