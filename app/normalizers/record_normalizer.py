"""
app/normalizers/record_normalizer.py

Applies a FieldMapping to raw rows, producing complete canonical records.

Coercion problems are absorbed here: a bad date becomes the run date, an
unusable sales cell falls back to the first numeric column and then to the
configured filler, and blank text cells take their role default.
"""

from __future__ import annotations

import logging
import math
import random
import re
from datetime import date
from typing import Any, Sequence

from app.config import SalesFallbackMode
from app.domain.dataset import CanonicalRecord, FieldMapping, RawRow, RawScalar
from app.parsers.date_parser import parse_calendar_date

logger = logging.getLogger(__name__)

DEFAULT_REGION = "Unknown Region"
DEFAULT_CATEGORY = "General"
PRODUCT_LABEL_TEMPLATE = "Product {index}"

_NUMERIC_NOISE_RE = re.compile(r"[\s,$€£¥]")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return str(value).strip() == ""


def coerce_number(value: RawScalar) -> float | None:
    """
    Coerce a raw cell into a finite float, or return None.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None

    cleaned = _NUMERIC_NOISE_RE.sub("", str(value))
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def stringify(value: RawScalar) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class RecordNormalizer:
    """
    Converts raw rows into CanonicalRecord objects, one per row, in order.

    Parameters
    ----------
    fallback_mode:
        Filler policy for rows with no usable sales value.
    random_fallback_max:
        Upper bound (exclusive) of the random filler.
    rng:
        Random source for the random filler; injectable for reproducibility.
    """

    def __init__(
        self,
        *,
        fallback_mode: SalesFallbackMode = SalesFallbackMode.RANDOM,
        random_fallback_max: float = 10000.0,
        rng: random.Random | None = None,
    ) -> None:
        self._fallback_mode = fallback_mode
        self._random_fallback_max = max(0.0, random_fallback_max)
        self._rng = rng or random.Random()

    def normalize(
        self,
        rows: Sequence[RawRow],
        mapping: FieldMapping,
        *,
        today: date | None = None,
    ) -> list[CanonicalRecord]:
        """
        Normalize every row of *rows* with *mapping*.

        *today* is the date used for missing or unparsable dates; it is
        fixed once per run so every fallback date in a file is identical.
        """

        run_date = (today or date.today()).isoformat()
        records = [
            self._normalize_row(row=row, index=index, mapping=mapping, run_date=run_date)
            for index, row in enumerate(rows)
        ]
        logger.debug("Normalized %d rows with mapping %s", len(records), mapping.role_to_source())
        return records

    def _normalize_row(
        self,
        *,
        row: RawRow,
        index: int,
        mapping: FieldMapping,
        run_date: str,
    ) -> CanonicalRecord:
        return CanonicalRecord(
            date=self._coerce_date(row, mapping.date, run_date),
            sales=self._coerce_sales(row, mapping, index),
            region=self._coerce_text(row, mapping.region, DEFAULT_REGION),
            product=self._coerce_text(
                row,
                mapping.product,
                PRODUCT_LABEL_TEMPLATE.format(index=index + 1),
            ),
            category=self._coerce_text(row, mapping.category, DEFAULT_CATEGORY),
            extra=dict(row),
        )

    @staticmethod
    def _coerce_date(row: RawRow, column: str | None, run_date: str) -> str:
        if column is None:
            return run_date
        parsed = parse_calendar_date(row.get(column))
        return parsed.isoformat() if parsed is not None else run_date

    def _coerce_sales(self, row: RawRow, mapping: FieldMapping, index: int) -> float:
        for column in (mapping.sales, mapping.sales_fallback):
            if column is None:
                continue
            number = coerce_number(row.get(column))
            if number is not None:
                return number

        logger.debug("Row %d has no usable sales value; applying %s filler", index + 1, self._fallback_mode.value)
        if self._fallback_mode is SalesFallbackMode.ZERO:
            return 0.0
        return self._rng.random() * self._random_fallback_max

    @staticmethod
    def _coerce_text(row: RawRow, column: str | None, default: str) -> str:
        if column is None:
            return default
        value = row.get(column)
        if is_blank(value):
            return default
        return stringify(value)
