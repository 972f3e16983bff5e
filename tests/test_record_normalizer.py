"""
tests/test_record_normalizer.py

Pytest unit tests for RecordNormalizer.

Coverage
--------
- Canonical records for mapped columns
- Date fallback to the fixed run date
- Sales fallback chain (mapped column, first numeric column, filler)
- Random filler reproducibility with an injected RNG
- Role defaults for unmapped or blank text columns
- Original columns preserved in ``extra``
"""

from __future__ import annotations

import random
from datetime import date

import pytest

from app.config import SalesFallbackMode
from app.domain.dataset import FieldMapping
from app.normalizers.record_normalizer import (
    DEFAULT_CATEGORY,
    DEFAULT_REGION,
    RecordNormalizer,
    coerce_number,
)

RUN_DATE = date(2024, 5, 1)


@pytest.fixture()
def zero_normalizer() -> RecordNormalizer:
    return RecordNormalizer(fallback_mode=SalesFallbackMode.ZERO)


# ---------------------------------------------------------------------------
# coerce_number
# ---------------------------------------------------------------------------


class TestCoerceNumber:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (100, 100.0),
            (2.5, 2.5),
            ("100", 100.0),
            ("$1,200.50", 1200.5),
            (" 3 ", 3.0),
            ("€ 45", 45.0),
            (0, 0.0),
        ],
    )
    def test_usable_values(self, raw, expected) -> None:
        assert coerce_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "nan", "inf", float("nan"), True])
    def test_unusable_values(self, raw) -> None:
        assert coerce_number(raw) is None

    def test_int_too_large_for_float(self) -> None:
        assert coerce_number(10**400) is None


# ---------------------------------------------------------------------------
# RecordNormalizer
# ---------------------------------------------------------------------------


class TestRecordNormalizer:
    def test_normalizes_mapped_rows(self, zero_normalizer: RecordNormalizer) -> None:
        rows = [
            {"Date": "2024-01-01", "Revenue": "100", "Region": "EU"},
            {"Date": "2024-01-02", "Revenue": "200", "Region": "US"},
        ]
        mapping = FieldMapping(date="Date", sales="Revenue", region="Region", sales_fallback="Revenue")

        records = zero_normalizer.normalize(rows, mapping, today=RUN_DATE)

        assert [r.to_dict() for r in records] == [
            {
                "Date": "2024-01-01",
                "Revenue": "100",
                "Region": "EU",
                "date": "2024-01-01",
                "sales": 100.0,
                "region": "EU",
                "product": "Product 1",
                "category": DEFAULT_CATEGORY,
            },
            {
                "Date": "2024-01-02",
                "Revenue": "200",
                "Region": "US",
                "date": "2024-01-02",
                "sales": 200.0,
                "region": "US",
                "product": "Product 2",
                "category": DEFAULT_CATEGORY,
            },
        ]

    def test_one_record_per_row_in_order(self, zero_normalizer: RecordNormalizer) -> None:
        rows = [{"n": i} for i in range(5)]

        records = zero_normalizer.normalize(rows, FieldMapping(sales="n"), today=RUN_DATE)

        assert [r.sales for r in records] == [0.0, 1.0, 2.0, 3.0, 4.0]

    def test_unparsable_and_missing_dates_use_run_date(self, zero_normalizer: RecordNormalizer) -> None:
        rows = [{"When": "not a date"}, {"When": None}, {"When": 20240101}, {"When": "1/15/2024"}]

        records = zero_normalizer.normalize(rows, FieldMapping(date="When"), today=RUN_DATE)

        assert [r.date for r in records] == ["2024-05-01", "2024-05-01", "2024-05-01", "2024-01-15"]

    def test_unmapped_date_uses_run_date(self, zero_normalizer: RecordNormalizer) -> None:
        records = zero_normalizer.normalize([{"x": 1}], FieldMapping(), today=RUN_DATE)

        assert records[0].date == "2024-05-01"

    def test_sales_falls_back_to_first_numeric_column(self, zero_normalizer: RecordNormalizer) -> None:
        rows = [{"Units": 3, "Revenue": "n/a"}]
        mapping = FieldMapping(sales="Revenue", sales_fallback="Units")

        records = zero_normalizer.normalize(rows, mapping, today=RUN_DATE)

        assert records[0].sales == 3.0

    def test_oversized_sales_cell_takes_fallback(self, zero_normalizer: RecordNormalizer) -> None:
        rows = [{"Units": 4, "Revenue": int("9" * 400)}]
        mapping = FieldMapping(sales="Revenue", sales_fallback="Units")

        records = zero_normalizer.normalize(rows, mapping, today=RUN_DATE)

        assert records[0].sales == 4.0

    def test_zero_sales_is_kept(self) -> None:
        normalizer = RecordNormalizer(fallback_mode=SalesFallbackMode.RANDOM, rng=random.Random(1))

        records = normalizer.normalize([{"Revenue": 0}], FieldMapping(sales="Revenue"), today=RUN_DATE)

        assert records[0].sales == 0.0

    def test_zero_mode_filler(self, zero_normalizer: RecordNormalizer) -> None:
        records = zero_normalizer.normalize([{"Revenue": None}], FieldMapping(sales="Revenue"), today=RUN_DATE)

        assert records[0].sales == 0.0

    def test_random_filler_uses_injected_rng(self) -> None:
        normalizer = RecordNormalizer(
            fallback_mode=SalesFallbackMode.RANDOM,
            random_fallback_max=10000.0,
            rng=random.Random(7),
        )
        expected = random.Random(7).random() * 10000.0

        records = normalizer.normalize([{"Region": "EU"}], FieldMapping(region="Region"), today=RUN_DATE)

        assert records[0].sales == pytest.approx(expected)
        assert 0.0 <= records[0].sales < 10000.0

    def test_text_defaults(self, zero_normalizer: RecordNormalizer) -> None:
        rows = [
            {"Region": "", "Product": None, "Category": "  "},
            {"Region": "EU", "Product": 101.0, "Category": "Hardware"},
        ]
        mapping = FieldMapping(region="Region", product="Product", category="Category")

        records = zero_normalizer.normalize(rows, mapping, today=RUN_DATE)

        assert (records[0].region, records[0].product, records[0].category) == (
            DEFAULT_REGION,
            "Product 1",
            DEFAULT_CATEGORY,
        )
        assert (records[1].region, records[1].product, records[1].category) == ("EU", "101", "Hardware")

    def test_every_record_is_complete(self, zero_normalizer: RecordNormalizer) -> None:
        records = zero_normalizer.normalize([{}, {}], FieldMapping(), today=RUN_DATE)

        for record in records:
            assert record.date and record.region and record.product and record.category
            assert isinstance(record.sales, float)

    def test_extra_keeps_original_columns(self, zero_normalizer: RecordNormalizer) -> None:
        row = {"Revenue": "5", "Notes": "rush order"}

        (record,) = zero_normalizer.normalize([row], FieldMapping(sales="Revenue"), today=RUN_DATE)

        assert record.extra == row
        assert record.to_dict()["Notes"] == "rush order"
