"""
app/services/aggregation_service.py

Filtering and metric aggregation over normalized records.

Translates a CanonicalRecord sequence and a FilterState into the filtered
subsequence plus a MetricsSummary consumed by charts, exports and the
insight generator.

Metric definitions
------------------
total_sales          sum of ``sales`` over the filtered records
average_daily_sales  total_sales / filtered count; ``0.0`` when empty
growth_rate          records sorted by date, split at ``n // 2``;
                     ``(second - first) / first * 100``, ``0.0`` when the
                     first half sums to zero
group totals         per-key sums ordered by descending total
column aggregation   sum of any column per distinct value of another;
                     non-numeric cells count as 0

No state is kept between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Sequence

from app.domain.dataset import (
    CanonicalRecord,
    DateRange,
    FilterState,
    GroupTotal,
    MetricsSummary,
)
from app.normalizers.record_normalizer import coerce_number, stringify

logger = logging.getLogger(__name__)

BLANK_GROUP_LABEL = "(blank)"


@dataclass(frozen=True)
class ColumnCatalog:
    """
    Chartable columns of a record set, by the type of the first record's value.
    """

    numeric: tuple[str, ...] = ()
    text: tuple[str, ...] = ()

    @property
    def names(self) -> tuple[str, ...]:
        return self.numeric + self.text


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _sum_sales(records: Iterable[CanonicalRecord]) -> float:
    return float(sum(record.sales for record in records))


def sort_by_date(records: Sequence[CanonicalRecord]) -> list[CanonicalRecord]:
    """Stable ascending sort by record date."""
    return sorted(records, key=lambda record: record.date)


def full_date_span(records: Sequence[CanonicalRecord]) -> DateRange | None:
    """Smallest inclusive range covering every record, or None when empty."""
    if not records:
        return None
    days = [record.day for record in records]
    return DateRange(start=min(days), end=max(days))


def default_filter_state(records: Sequence[CanonicalRecord], *, today: date | None = None) -> FilterState:
    """
    Filter covering the full date span with no categorical restriction.
    """
    span = full_date_span(records)
    if span is None:
        current = today or date.today()
        span = DateRange(start=current, end=current)
    return FilterState(date_range=span)


def top_n(groups: Sequence[GroupTotal], n: int) -> list[GroupTotal]:
    return list(groups[: max(0, n)])


def _group_label(value: Any) -> str:
    if value is None:
        return BLANK_GROUP_LABEL
    return stringify(value) or BLANK_GROUP_LABEL


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AggregationService:
    """
    Applies filters and computes metrics. All methods are pure.
    """

    def filter_records(
        self,
        records: Sequence[CanonicalRecord],
        filter_state: FilterState,
    ) -> list[CanonicalRecord]:
        """
        Return records matching every filter condition, in input order.
        """
        return [record for record in records if filter_state.matches(record)]

    def compute_growth_rate(self, records: Sequence[CanonicalRecord]) -> float:
        """
        Period-over-period growth in percent between the two date-ordered halves.
        """
        ordered = sort_by_date(records)
        midpoint = len(ordered) // 2
        first_half = _sum_sales(ordered[:midpoint])
        second_half = _sum_sales(ordered[midpoint:])
        if first_half == 0:
            return 0.0
        return (second_half - first_half) / first_half * 100

    def group_totals(
        self,
        records: Sequence[CanonicalRecord],
        key: Callable[[CanonicalRecord], str],
    ) -> tuple[GroupTotal, ...]:
        """
        Sum sales per distinct key, ordered by descending total.

        Ties keep first-appearance order.
        """
        totals: dict[str, float] = {}
        for record in records:
            group = key(record)
            totals[group] = totals.get(group, 0.0) + record.sales

        grand_total = sum(totals.values())
        ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        return tuple(
            GroupTotal(
                key=group,
                total=total,
                share=(total / grand_total * 100) if grand_total else 0.0,
            )
            for group, total in ordered
        )

    def column_catalog(self, records: Sequence[CanonicalRecord]) -> ColumnCatalog:
        """
        Classify the first record's columns as numeric or text.

        Canonical columns are included alongside the original ones.
        """
        if not records:
            return ColumnCatalog()
        numeric: list[str] = []
        text: list[str] = []
        for name, value in records[0].to_dict().items():
            if isinstance(value, bool):
                continue
            if isinstance(value, (int, float)):
                numeric.append(name)
            elif isinstance(value, str):
                text.append(name)
        return ColumnCatalog(numeric=tuple(numeric), text=tuple(text))

    def aggregate_by_column(
        self,
        records: Sequence[CanonicalRecord],
        x_column: str,
        y_column: str,
        *,
        limit: int | None = None,
    ) -> tuple[GroupTotal, ...]:
        """
        Sum *y_column* per distinct value of *x_column*, descending.

        Cells of *y_column* that are missing or not numeric count as 0.
        Shares are taken over all groups before *limit* is applied.
        """
        totals: dict[str, float] = {}
        for record in records:
            row = record.to_dict()
            group = _group_label(row.get(x_column))
            totals[group] = totals.get(group, 0.0) + (coerce_number(row.get(y_column)) or 0.0)

        grand_total = sum(totals.values())
        ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        if limit is not None:
            ordered = ordered[: max(0, limit)]
        return tuple(
            GroupTotal(
                key=group,
                total=total,
                share=(total / grand_total * 100) if grand_total else 0.0,
            )
            for group, total in ordered
        )

    def daily_sales(self, records: Sequence[CanonicalRecord]) -> tuple[tuple[str, float], ...]:
        totals: dict[str, float] = {}
        for record in records:
            totals[record.date] = totals.get(record.date, 0.0) + record.sales
        return tuple(sorted(totals.items()))

    def compute_metrics(
        self,
        records: Sequence[CanonicalRecord],
        *,
        dataset_size: int | None = None,
    ) -> MetricsSummary:
        """
        Compute a MetricsSummary over *records*.

        *dataset_size* is the unfiltered record count used for
        ``dataset_share``; defaults to ``len(records)``.
        """
        count = len(records)
        total = _sum_sales(records)
        base = count if dataset_size is None else dataset_size

        summary = MetricsSummary(
            total_sales=total,
            average_daily_sales=(total / count) if count else 0.0,
            growth_rate=self.compute_growth_rate(records),
            record_count=count,
            unique_products=len({record.product for record in records}),
            dataset_share=(count / base * 100) if base else 0.0,
            date_range=full_date_span(records),
            sales_by_region=self.group_totals(records, lambda record: record.region),
            sales_by_product=self.group_totals(records, lambda record: record.product),
            sales_by_category=self.group_totals(records, lambda record: record.category),
            daily_sales=self.daily_sales(records),
        )
        logger.debug(
            "compute_metrics records=%d total=%.4f growth=%.4f",
            count,
            summary.total_sales,
            summary.growth_rate,
        )
        return summary

    def apply_filter(
        self,
        records: Sequence[CanonicalRecord],
        filter_state: FilterState,
    ) -> tuple[list[CanonicalRecord], MetricsSummary]:
        """
        Filter *records* and compute metrics over the result.
        """
        filtered = self.filter_records(records, filter_state)
        return filtered, self.compute_metrics(filtered, dataset_size=len(records))
