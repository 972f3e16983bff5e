"""
app/services/insight_summary.py

Statistical summary handed to the external insight generator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from app.domain.dataset import FilterState, GroupTotal, MetricsSummary


@dataclass(frozen=True)
class InsightSummary:
    text: str
    data: dict[str, Any]


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _group_lines(groups: Sequence[GroupTotal]) -> list[str]:
    return [f"- {group.key}: {_money(group.total)} ({group.share:.1f}%)" for group in groups]


def build_insight_summary(
    *,
    metrics: MetricsSummary,
    filter_state: FilterState,
) -> InsightSummary:
    """
    Describe the filtered dataset as text and as a JSON-safe dict.
    """

    date_range = (
        {
            "start": metrics.date_range.start.isoformat(),
            "end": metrics.date_range.end.isoformat(),
        }
        if metrics.date_range is not None
        else None
    )
    applied_filters = filter_state.describe()

    data: dict[str, Any] = {
        "total_records": metrics.record_count,
        "total_sales": metrics.total_sales,
        "date_range": date_range,
        "growth_rate": round(metrics.growth_rate, 1),
        "regional_performance": [
            {"region": g.key, "total": g.total, "percentage": round(g.share, 1)}
            for g in metrics.sales_by_region
        ],
        "product_performance": [
            {"product": g.key, "total": g.total, "percentage": round(g.share, 1)}
            for g in metrics.sales_by_product
        ],
        "applied_filters": applied_filters,
    }

    range_text = f"{date_range['start']} to {date_range['end']}" if date_range else "n/a"
    lines = [
        "DATASET OVERVIEW:",
        f"- Total Records: {metrics.record_count:,}",
        f"- Total Sales: {_money(metrics.total_sales)}",
        f"- Date Range: {range_text}",
        f"- Growth Rate: {metrics.growth_rate:.1f}% (period-over-period)",
        "",
        "REGIONAL PERFORMANCE:",
        *_group_lines(metrics.sales_by_region),
        "",
        "PRODUCT PERFORMANCE:",
        *_group_lines(metrics.sales_by_product),
        "",
        "APPLIED FILTERS:",
        f"- Date Range: {applied_filters['date_range']}",
        f"- Regions: {applied_filters['regions']}",
        f"- Products: {applied_filters['products']}",
        f"- Categories: {applied_filters['categories']}",
    ]
    return InsightSummary(text="\n".join(lines), data=data)
