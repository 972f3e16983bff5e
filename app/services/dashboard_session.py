"""
app/services/dashboard_session.py

Per-user dashboard state: the active normalized dataset, its filter and
the most recent generated insights.

All of it lives in one frozen SessionSnapshot that is swapped in a single
assignment, so readers always see records, descriptor, filter and insights
from the same upload. A failed upload leaves the previous snapshot active.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from functools import lru_cache
from typing import BinaryIO

from app.config import get_session_settings
from app.domain.dataset import CanonicalRecord, DatasetDescriptor, FilterState, MetricsSummary
from app.services.aggregation_service import AggregationService, default_filter_state
from app.services.csv_ingestion_service import (
    CSVIngestionService,
    IngestionResult,
    get_csv_ingestion_service,
)
from llm_synthesis.schema import InsightReport

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """
    Raised when a session id is not known to the store.
    """


def _empty_filter() -> FilterState:
    return default_filter_state(())


@dataclass(frozen=True)
class SessionSnapshot:
    records: tuple[CanonicalRecord, ...] = ()
    descriptor: DatasetDescriptor | None = None
    filter_state: FilterState = field(default_factory=_empty_filter)
    insights: InsightReport | None = None


@dataclass(frozen=True)
class FilterOptions:
    regions: tuple[str, ...]
    products: tuple[str, ...]
    categories: tuple[str, ...]


@dataclass(frozen=True)
class FilteredView:
    """
    Filtered records and metrics, plus the snapshot parts they came from.
    """

    records: list[CanonicalRecord]
    metrics: MetricsSummary
    filter_state: FilterState
    descriptor: DatasetDescriptor | None = None
    insights: InsightReport | None = None


def _distinct(values: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


class DashboardSession:
    """
    Holds one active dataset and its filter state.
    """

    def __init__(
        self,
        *,
        ingestion_service: CSVIngestionService | None = None,
        aggregation_service: AggregationService | None = None,
    ) -> None:
        self._ingestion = ingestion_service or get_csv_ingestion_service()
        self._aggregation = aggregation_service or AggregationService()
        self._state = SessionSnapshot()
        self._lock = threading.Lock()

    def snapshot(self) -> SessionSnapshot:
        return self._state

    def normalized_dataset(self) -> tuple[CanonicalRecord, ...]:
        return self._state.records

    def dataset_descriptor(self) -> DatasetDescriptor | None:
        return self._state.descriptor

    def filter_state(self) -> FilterState:
        return self._state.filter_state

    def has_dataset(self) -> bool:
        return self._state.descriptor is not None

    def upload(
        self,
        *,
        stream: BinaryIO,
        file_name: str,
        today: date | None = None,
        uploaded_at: datetime | None = None,
    ) -> DatasetDescriptor:
        """
        Ingest *stream* and replace the active dataset on success.

        Ingestion errors propagate and leave the session unchanged.
        """
        result = self._ingestion.ingest_csv(
            stream=stream,
            file_name=file_name,
            today=today,
            uploaded_at=uploaded_at,
        )
        self.load(result)
        return result.descriptor

    def load(self, result: IngestionResult) -> None:
        """
        Replace the dataset, reset the filter to the new full date span and
        drop insights generated for the previous dataset.
        """
        state = SessionSnapshot(
            records=result.records,
            descriptor=result.descriptor,
            filter_state=default_filter_state(result.records),
        )
        with self._lock:
            self._state = state

    def update_filter(self, filter_state: FilterState) -> None:
        with self._lock:
            self._state = replace(self._state, filter_state=filter_state)

    def apply_filter(self, filter_state: FilterState | None = None) -> FilteredView:
        """
        Filter the active dataset with *filter_state* (or the current one).
        """
        state = self._state
        effective = filter_state or state.filter_state
        records, metrics = self._aggregation.apply_filter(state.records, effective)
        return FilteredView(
            records=records,
            metrics=metrics,
            filter_state=effective,
            descriptor=state.descriptor,
            insights=state.insights,
        )

    def record_insights(
        self,
        report: InsightReport,
        *,
        descriptor: DatasetDescriptor | None = None,
    ) -> bool:
        """
        Store *report* as the latest insights.

        When *descriptor* is given the report is kept only if that dataset is
        still the active one. Returns whether the report was stored.
        """
        with self._lock:
            if descriptor is not None and self._state.descriptor is not descriptor:
                logger.info("Discarding insights generated for a replaced dataset")
                return False
            self._state = replace(self._state, insights=report)
        return True

    def latest_insights(self) -> InsightReport | None:
        return self._state.insights

    def available_options(self) -> FilterOptions:
        records = self._state.records
        return FilterOptions(
            regions=_distinct([record.region for record in records]),
            products=_distinct([record.product for record in records]),
            categories=_distinct([record.category for record in records]),
        )


class DashboardSessionStore:
    """
    Thread-safe in-memory registry of dashboard sessions.

    Holds at most *max_sessions*; creating one more evicts the least
    recently used session.
    """

    def __init__(self, *, max_sessions: int = 1000) -> None:
        self._max_sessions = max(1, max_sessions)
        self._sessions: OrderedDict[str, DashboardSession] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self) -> tuple[str, DashboardSession]:
        session_id = uuid.uuid4().hex
        session = DashboardSession()
        evicted: list[str] = []
        with self._lock:
            self._sessions[session_id] = session
            while len(self._sessions) > self._max_sessions:
                oldest_id, _ = self._sessions.popitem(last=False)
                evicted.append(oldest_id)
        logger.info("Dashboard session created id=%s", session_id)
        for oldest_id in evicted:
            logger.info("Dashboard session evicted id=%s", oldest_id)
        return session_id, session

    def get(self, session_id: str) -> DashboardSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is None:
            raise SessionNotFoundError(session_id)
        logger.info("Dashboard session deleted id=%s", session_id)


@lru_cache(maxsize=1)
def get_session_store() -> DashboardSessionStore:
    return DashboardSessionStore(max_sessions=get_session_settings().max_sessions)
