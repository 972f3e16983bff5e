"""
app/services/csv_ingestion_service.py

Service layer for the one-shot CSV normalization pass.

    raw CSV -> CSVParser -> ColumnProfiler -> FieldMapper
            -> RecordNormalizer -> canonical records + DatasetDescriptor

Only whole-file problems are raised (CsvParseError / EmptyDatasetError).
Per-row anomalies are resolved by the normalizer's fallback policy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from functools import lru_cache
from typing import BinaryIO, Sequence

from app.config import get_csv_ingestion_settings
from app.domain.dataset import (
    CanonicalRecord,
    ColumnProfile,
    DatasetDescriptor,
    FieldMapping,
    RawRow,
)
from app.domain.errors import CsvParseError, DatasetIngestionError, EmptyDatasetError
from app.mappers.field_mapper import FieldMapper
from app.normalizers.record_normalizer import RecordNormalizer
from app.parsers.csv_parser import CSVParser, ParseResult
from app.profilers.column_profiler import ColumnProfiler
from app.services.dataset_descriptor import build_dataset_descriptor

logger = logging.getLogger(__name__)

EMPTY_DATASET_MESSAGE = "CSV file is empty or has no valid data rows"


@dataclass(frozen=True)
class IngestionResult:
    """
    Everything produced by one successful upload.
    """

    records: tuple[CanonicalRecord, ...]
    descriptor: DatasetDescriptor
    mapping: FieldMapping
    profiles: tuple[ColumnProfile, ...]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CSVIngestionService:
    """
    Coordinates CSV parsing, profiling, mapping, and normalization.
    """

    def __init__(
        self,
        *,
        parser: CSVParser | None = None,
        profiler: ColumnProfiler | None = None,
        mapper: FieldMapper | None = None,
        normalizer: RecordNormalizer | None = None,
    ) -> None:
        self._parser = parser or CSVParser()
        self._profiler = profiler or ColumnProfiler()
        self._mapper = mapper or FieldMapper()
        self._normalizer = normalizer or RecordNormalizer()

    def ingest_csv(
        self,
        *,
        stream: BinaryIO,
        file_name: str,
        today: date | None = None,
        uploaded_at: datetime | None = None,
    ) -> IngestionResult:
        """
        Parse and normalize one uploaded CSV.

        Raises:
            CsvParseError: Malformed CSV or parser-reported row errors.
            EmptyDatasetError: Header present but no data rows.
        """
        try:
            parsed = self._parser.parse(stream)
        except CsvParseError as exc:
            logger.warning("CSV upload rejected file=%r: %s", file_name, exc)
            raise
        return self.ingest_parsed(
            parsed=parsed,
            file_name=file_name,
            today=today,
            uploaded_at=uploaded_at,
        )

    def ingest_parsed(
        self,
        *,
        parsed: ParseResult,
        file_name: str,
        today: date | None = None,
        uploaded_at: datetime | None = None,
    ) -> IngestionResult:
        """
        Continue the pass from a parser completion result.
        """
        try:
            self._check_parse_result(parsed)
            return self.ingest_rows(
                rows=parsed.rows,
                file_name=file_name,
                today=today,
                uploaded_at=uploaded_at,
            )
        except DatasetIngestionError as exc:
            logger.warning("CSV upload rejected file=%r: %s", file_name, exc)
            raise

    def ingest_rows(
        self,
        *,
        rows: Sequence[RawRow],
        file_name: str,
        today: date | None = None,
        uploaded_at: datetime | None = None,
    ) -> IngestionResult:
        """
        Profile, map and normalize already-parsed raw rows.
        """
        profiles = self._profiler.profile(rows)
        mapping = self._mapper.resolve(profiles)
        records = self._normalizer.normalize(rows, mapping, today=today)
        descriptor = build_dataset_descriptor(
            file_name=file_name,
            records=records,
            columns=profiles,
            uploaded_at=uploaded_at,
        )

        logger.info(
            "CSV upload normalized file=%r rows=%d mapping=%s unmapped=%s",
            file_name,
            descriptor.row_count,
            mapping.role_to_source(),
            list(mapping.unmapped_roles()),
        )
        return IngestionResult(
            records=tuple(records),
            descriptor=descriptor,
            mapping=mapping,
            profiles=profiles,
        )

    @staticmethod
    def _check_parse_result(parsed: ParseResult) -> None:
        if parsed.parse_errors:
            raise CsvParseError(f"CSV parsing errors: {', '.join(parsed.parse_errors)}")
        if not parsed.rows:
            raise EmptyDatasetError(EMPTY_DATASET_MESSAGE)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_csv_ingestion_service() -> CSVIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_csv_ingestion_settings()
    return CSVIngestionService(
        profiler=ColumnProfiler(
            sample_scan_limit=settings.sample_scan_limit,
            sample_size=settings.sample_size,
        ),
        normalizer=RecordNormalizer(
            fallback_mode=settings.sales_fallback_mode,
            random_fallback_max=settings.sales_random_fallback_max,
        ),
    )
