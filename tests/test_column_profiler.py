"""
tests/test_column_profiler.py

Pytest unit tests for ColumnProfiler and first-sample type inference.
"""

from __future__ import annotations

import pytest

from app.domain.dataset import ColumnType
from app.domain.errors import EmptyDatasetError
from app.profilers.column_profiler import ColumnProfiler, infer_column_type


@pytest.fixture()
def profiler() -> ColumnProfiler:
    return ColumnProfiler()


class TestInferColumnType:
    @pytest.mark.parametrize("value", [100, 2.5, "100", "-3.25"])
    def test_numbers(self, value) -> None:
        assert infer_column_type(value) is ColumnType.NUMBER

    @pytest.mark.parametrize("value", ["2024-01-01", "1/5/2024", "12-31-2023", "March 3, 2024"])
    def test_dates(self, value) -> None:
        assert infer_column_type(value) is ColumnType.DATE

    @pytest.mark.parametrize("value", ["EU", "Widget", "N/A"])
    def test_strings(self, value) -> None:
        assert infer_column_type(value) is ColumnType.STRING

    def test_booleans_are_not_numbers(self) -> None:
        assert infer_column_type(True) is ColumnType.STRING


class TestColumnProfiler:
    def test_one_profile_per_column_in_order(self, profiler: ColumnProfiler) -> None:
        rows = [{"Date": "2024-01-01", "Revenue": 100, "Region": "EU"}]

        profiles = profiler.profile(rows)

        assert [p.name for p in profiles] == ["Date", "Revenue", "Region"]
        assert [p.inferred_type for p in profiles] == [
            ColumnType.DATE,
            ColumnType.NUMBER,
            ColumnType.STRING,
        ]

    def test_type_comes_from_first_non_null_sample(self, profiler: ColumnProfiler) -> None:
        rows = [{"Amount": None}, {"Amount": 12}, {"Amount": "n/a"}]

        (profile,) = profiler.profile(rows)

        assert profile.inferred_type is ColumnType.NUMBER
        assert profile.sample_values == (12, "n/a")

    def test_all_null_column_is_string_without_samples(self, profiler: ColumnProfiler) -> None:
        (profile,) = profiler.profile([{"Notes": None}, {"Notes": None}])

        assert profile.inferred_type is ColumnType.STRING
        assert profile.sample_values == ()

    def test_samples_are_capped(self) -> None:
        rows = [{"n": i} for i in range(50)]

        (profile,) = ColumnProfiler(sample_scan_limit=10, sample_size=5).profile(rows)

        assert profile.sample_values == (0, 1, 2, 3, 4)

    def test_empty_input_raises(self, profiler: ColumnProfiler) -> None:
        with pytest.raises(EmptyDatasetError):
            profiler.profile([])

    def test_to_dict(self, profiler: ColumnProfiler) -> None:
        (profile,) = profiler.profile([{"Revenue": 5}])

        assert profile.to_dict() == {"name": "Revenue", "type": "number", "samples": [5]}
