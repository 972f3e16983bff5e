"""
app/schemas/dashboard.py

Request and response schemas for dashboard session endpoints.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from app.domain.dataset import DatasetDescriptor, DateRange, FilterState, MetricsSummary


class SessionCreatedResponse(BaseModel):
    session_id: str


class ColumnProfileResponse(BaseModel):
    name: str
    type: str
    samples: list[Any] = Field(default_factory=list)


class DatasetDescriptorResponse(BaseModel):
    """
    API response model for the active dataset metadata.
    """

    file_name: str
    row_count: int = Field(..., ge=0)
    columns: list[ColumnProfileResponse] = Field(default_factory=list)
    upload_timestamp: datetime

    @classmethod
    def from_domain(cls, descriptor: DatasetDescriptor) -> "DatasetDescriptorResponse":
        return cls(
            file_name=descriptor.file_name,
            row_count=descriptor.row_count,
            columns=[ColumnProfileResponse(**column.to_dict()) for column in descriptor.columns],
            upload_timestamp=descriptor.upload_timestamp,
        )


class DateRangeSchema(BaseModel):
    start: date
    end: date

    @model_validator(mode="after")
    def _check_order(self) -> "DateRangeSchema":
        if self.start > self.end:
            raise ValueError("start must not be later than end.")
        return self


class FilterStateRequest(BaseModel):
    """
    Filter body. Empty lists mean no restriction.
    """

    date_range: DateRangeSchema
    regions: list[str] = Field(default_factory=list)
    products: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)

    def to_domain(self) -> FilterState:
        return FilterState(
            date_range=DateRange(start=self.date_range.start, end=self.date_range.end),
            regions=frozenset(self.regions),
            products=frozenset(self.products),
            categories=frozenset(self.categories),
        )

    @classmethod
    def from_domain(cls, filter_state: FilterState) -> "FilterStateRequest":
        return cls(
            date_range=DateRangeSchema(
                start=filter_state.date_range.start,
                end=filter_state.date_range.end,
            ),
            regions=sorted(filter_state.regions),
            products=sorted(filter_state.products),
            categories=sorted(filter_state.categories),
        )


class GroupTotalResponse(BaseModel):
    key: str
    total: float
    share: float


class DailySalesResponse(BaseModel):
    date: str
    sales: float


class MetricsResponse(BaseModel):
    """
    API response model for metrics over the filtered records.
    """

    total_sales: float
    average_daily_sales: float
    growth_rate: float
    record_count: int = Field(..., ge=0)
    unique_products: int = Field(..., ge=0)
    dataset_share: float
    date_range: DateRangeSchema | None = None
    sales_by_region: list[GroupTotalResponse] = Field(default_factory=list)
    sales_by_product: list[GroupTotalResponse] = Field(default_factory=list)
    sales_by_category: list[GroupTotalResponse] = Field(default_factory=list)
    daily_sales: list[DailySalesResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, metrics: MetricsSummary) -> "MetricsResponse":
        return cls(
            total_sales=metrics.total_sales,
            average_daily_sales=metrics.average_daily_sales,
            growth_rate=metrics.growth_rate,
            record_count=metrics.record_count,
            unique_products=metrics.unique_products,
            dataset_share=metrics.dataset_share,
            date_range=(
                DateRangeSchema(start=metrics.date_range.start, end=metrics.date_range.end)
                if metrics.date_range is not None
                else None
            ),
            sales_by_region=[GroupTotalResponse(key=g.key, total=g.total, share=g.share) for g in metrics.sales_by_region],
            sales_by_product=[GroupTotalResponse(key=g.key, total=g.total, share=g.share) for g in metrics.sales_by_product],
            sales_by_category=[GroupTotalResponse(key=g.key, total=g.total, share=g.share) for g in metrics.sales_by_category],
            daily_sales=[DailySalesResponse(date=day, sales=total) for day, total in metrics.daily_sales],
        )


class FilteredDatasetResponse(BaseModel):
    filter: FilterStateRequest
    records: list[dict[str, Any]] = Field(default_factory=list)
    metrics: MetricsResponse


class FilterOptionsResponse(BaseModel):
    regions: list[str] = Field(default_factory=list)
    products: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)


class ColumnCatalogResponse(BaseModel):
    """
    Columns available as chart axes: numeric ones for values, text ones for groups.
    """

    numeric: list[str] = Field(default_factory=list)
    text: list[str] = Field(default_factory=list)


class ColumnAggregationResponse(BaseModel):
    x_column: str
    y_column: str
    groups: list[GroupTotalResponse] = Field(default_factory=list)
