"""
app/domain/dataset.py

Domain models for the uploaded sales dataset and its canonical records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Union

RawScalar = Union[str, int, float, None]
RawRow = Mapping[str, RawScalar]

CANONICAL_ROLES: tuple[str, ...] = (
    "date",
    "sales",
    "region",
    "product",
    "category",
)


class ColumnType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class ColumnProfile:
    """
    Inferred type and a small sample for one source column.
    """

    name: str
    inferred_type: ColumnType
    sample_values: tuple[RawScalar, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.inferred_type.value,
            "samples": list(self.sample_values),
        }


@dataclass(frozen=True)
class FieldMapping:
    """
    Source column chosen for each canonical role.

    ``None`` means the role is unmapped and its fallback applies.
    ``sales_fallback`` is the first Number column, used when the sales
    cell of a row cannot be coerced.
    """

    date: str | None = None
    sales: str | None = None
    region: str | None = None
    product: str | None = None
    category: str | None = None
    sales_fallback: str | None = None
    match_strategies: Mapping[str, str] = field(default_factory=dict)

    def role_to_source(self) -> dict[str, str | None]:
        return {role: getattr(self, role) for role in CANONICAL_ROLES}

    def unmapped_roles(self) -> tuple[str, ...]:
        return tuple(role for role in CANONICAL_ROLES if getattr(self, role) is None)


@dataclass(frozen=True)
class CanonicalRecord:
    """
    One normalized sales row. ``extra`` preserves the original columns.
    """

    date: str
    sales: float
    region: str
    product: str
    category: str
    extra: Mapping[str, RawScalar] = field(default_factory=dict)

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload.update(
            date=self.date,
            sales=self.sales,
            region=self.region,
            product=self.product,
            category=self.category,
        )
        return payload


@dataclass(frozen=True)
class DatasetDescriptor:
    file_name: str
    row_count: int
    columns: tuple[ColumnProfile, ...]
    upload_timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "row_count": self.row_count,
            "columns": [column.to_dict() for column in self.columns],
            "upload_timestamp": self.upload_timestamp.isoformat(),
        }


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive calendar date range.
    """

    start: date
    end: date

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


@dataclass(frozen=True)
class FilterState:
    """
    Declarative dashboard filter. Empty selections mean no restriction.
    """

    date_range: DateRange
    regions: frozenset[str] = frozenset()
    products: frozenset[str] = frozenset()
    categories: frozenset[str] = frozenset()

    def matches(self, record: CanonicalRecord) -> bool:
        return (
            self.date_range.contains(record.day)
            and (not self.regions or record.region in self.regions)
            and (not self.products or record.product in self.products)
            and (not self.categories or record.category in self.categories)
        )

    def describe(self) -> dict[str, str]:
        return {
            "date_range": f"{self.date_range.start.isoformat()} to {self.date_range.end.isoformat()}",
            "regions": ", ".join(sorted(self.regions)) or "All",
            "products": ", ".join(sorted(self.products)) or "All",
            "categories": ", ".join(sorted(self.categories)) or "All",
        }


@dataclass(frozen=True)
class GroupTotal:
    key: str
    total: float
    share: float


@dataclass(frozen=True)
class MetricsSummary:
    """
    Derived statistics over a filtered record set.
    """

    total_sales: float
    average_daily_sales: float
    growth_rate: float
    record_count: int
    unique_products: int
    dataset_share: float
    date_range: DateRange | None
    sales_by_region: tuple[GroupTotal, ...] = ()
    sales_by_product: tuple[GroupTotal, ...] = ()
    sales_by_category: tuple[GroupTotal, ...] = ()
    daily_sales: tuple[tuple[str, float], ...] = ()

    @property
    def top_region(self) -> GroupTotal | None:
        return self.sales_by_region[0] if self.sales_by_region else None

    @property
    def top_product(self) -> GroupTotal | None:
        return self.sales_by_product[0] if self.sales_by_product else None
