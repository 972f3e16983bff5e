"""
app/services/report_export_service.py

Report assembly and JSON/CSV serialisation for the filtered dataset.

The report object is built only from already-normalized records and their
metrics; PDF rendering and e-mail delivery consume the same object
downstream.

CSV layout
----------
A ``Metric,Value`` summary block, one blank line, then the raw filtered
records. Raw columns are the union of all record keys in first-seen order;
``None`` is written as an empty cell.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Sequence

from app.config import get_export_settings
from app.domain.dataset import CanonicalRecord, GroupTotal, MetricsSummary
from llm_synthesis.schema import InsightReport


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _collect_fields(rows: list[dict[str, Any]]) -> list[str]:
    """
    Union all keys across rows while preserving first-seen insertion order.
    """
    seen: dict[str, None] = {}
    for row in rows:
        for k in row:
            seen.setdefault(k, None)
    return list(seen)


def _group_dict(group: GroupTotal | None) -> dict[str, Any] | None:
    if group is None:
        return None
    return {"name": group.key, "sales": group.total}


def metrics_to_dict(metrics: MetricsSummary) -> dict[str, Any]:
    return {
        "total_sales": metrics.total_sales,
        "average_daily_sales": metrics.average_daily_sales,
        "growth_rate": metrics.growth_rate,
        "record_count": metrics.record_count,
        "unique_products": metrics.unique_products,
        "dataset_share": metrics.dataset_share,
        "date_range": (
            {
                "start": metrics.date_range.start.isoformat(),
                "end": metrics.date_range.end.isoformat(),
            }
            if metrics.date_range is not None
            else None
        ),
        "sales_by_region": [
            {"key": g.key, "total": g.total, "share": g.share} for g in metrics.sales_by_region
        ],
        "sales_by_product": [
            {"key": g.key, "total": g.total, "share": g.share} for g in metrics.sales_by_product
        ],
        "sales_by_category": [
            {"key": g.key, "total": g.total, "share": g.share} for g in metrics.sales_by_category
        ],
        "daily_sales": [{"date": day, "sales": total} for day, total in metrics.daily_sales],
    }


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ReportExportService:
    """
    Builds the report object and serialises it to JSON or CSV.
    """

    def __init__(self, *, raw_row_limit: int = 1000) -> None:
        self._raw_row_limit = max(1, raw_row_limit)

    def build_report(
        self,
        *,
        records: Sequence[CanonicalRecord],
        metrics: MetricsSummary,
        insights: InsightReport | None = None,
        generated_at: datetime | None = None,
    ) -> dict[str, Any]:
        generated = generated_at or datetime.now(tz=timezone.utc)
        metrics_payload = metrics_to_dict(metrics)
        return {
            "summary": {
                "report_generated": generated.isoformat(),
                "date_range": metrics_payload["date_range"],
                "total_records": metrics.record_count,
                "total_sales": metrics.total_sales,
                "average_daily_sales": metrics.average_daily_sales,
                "growth_rate": metrics.growth_rate,
                "top_region": _group_dict(metrics.top_region),
                "top_product": _group_dict(metrics.top_product),
            },
            "metrics": metrics_payload,
            "insights": insights.model_dump() if insights is not None else None,
            "raw_data": [record.to_dict() for record in records[: self._raw_row_limit]],
            "regional_breakdown": [
                {"region": g.key, "sales": g.total} for g in metrics.sales_by_region
            ],
            "product_breakdown": [
                {"product": g.key, "sales": g.total} for g in metrics.sales_by_product
            ],
        }

    @staticmethod
    def to_json(report: dict[str, Any]) -> str:
        return json.dumps(report, indent=2, default=str)

    @staticmethod
    def to_csv(report: dict[str, Any]) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\r\n")
        summary = report["summary"]
        date_range = summary.get("date_range") or {}
        top_region = summary.get("top_region") or {}
        top_product = summary.get("top_product") or {}

        writer.writerow(["Metric", "Value"])
        writer.writerow(["Report Generated", summary["report_generated"]])
        writer.writerow(["Start Date", date_range.get("start", "")])
        writer.writerow(["End Date", date_range.get("end", "")])
        writer.writerow(["Total Records", summary["total_records"]])
        writer.writerow(["Total Sales", f"{summary['total_sales']:.2f}"])
        writer.writerow(["Average Daily Sales", f"{summary['average_daily_sales']:.2f}"])
        writer.writerow(["Growth Rate (%)", f"{summary['growth_rate']:.2f}"])
        writer.writerow(["Top Region", top_region.get("name", "")])
        writer.writerow(["Top Product", top_product.get("name", "")])
        writer.writerow([])

        rows: list[dict[str, Any]] = report["raw_data"]
        fields = _collect_fields(rows)
        dict_writer = csv.DictWriter(
            buf,
            fieldnames=fields,
            extrasaction="ignore",
            restval="",
            lineterminator="\r\n",
        )
        dict_writer.writeheader()
        for row in rows:
            dict_writer.writerow({k: ("" if v is None else v) for k, v in row.items()})
        return buf.getvalue()


@lru_cache(maxsize=1)
def get_report_export_service() -> ReportExportService:
    return ReportExportService(raw_row_limit=get_export_settings().raw_row_limit)
