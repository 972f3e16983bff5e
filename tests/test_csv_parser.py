from __future__ import annotations

import io
import unittest

from app.domain.errors import CsvParseError
from app.parsers.csv_parser import CSVParser, coerce_cell


class TestCoerceCell(unittest.TestCase):
    def test_blank_cells_become_none(self) -> None:
        self.assertIsNone(coerce_cell(""))
        self.assertIsNone(coerce_cell("   "))

    def test_numeric_cells_are_typed(self) -> None:
        self.assertEqual(coerce_cell("42"), 42)
        self.assertIsInstance(coerce_cell("42"), int)
        self.assertEqual(coerce_cell("-3.5"), -3.5)
        self.assertEqual(coerce_cell("1e3"), 1000.0)

    def test_integer_beyond_digit_limit_stays_text(self) -> None:
        raw = "9" * 5000

        self.assertEqual(coerce_cell(raw), raw)

    def test_text_and_dates_stay_strings(self) -> None:
        self.assertEqual(coerce_cell("EU"), "EU")
        self.assertEqual(coerce_cell("2024-01-01"), "2024-01-01")
        self.assertEqual(coerce_cell("$1,200"), "$1,200")


class TestCSVParser(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = CSVParser()

    def test_parses_rows_keyed_by_header(self) -> None:
        result = self.parser.parse_text("Date,Revenue,Region\n2024-01-01,100,EU\n2024-01-02,200.5,US\n")

        self.assertEqual(result.headers, ("Date", "Revenue", "Region"))
        self.assertEqual(
            result.rows,
            [
                {"Date": "2024-01-01", "Revenue": 100, "Region": "EU"},
                {"Date": "2024-01-02", "Revenue": 200.5, "Region": "US"},
            ],
        )
        self.assertEqual(result.parse_errors, [])

    def test_skips_blank_lines(self) -> None:
        result = self.parser.parse_text("a,b\n1,2\n\n3,4\n,\n")

        self.assertEqual(len(result.rows), 2)
        self.assertEqual(result.parse_errors, [])

    def test_reports_row_shape_errors(self) -> None:
        result = self.parser.parse_text("a,b,c\n1,2\n1,2,3,4\n")

        self.assertEqual(len(result.parse_errors), 2)
        self.assertIn("Row 1: Too few fields", result.parse_errors[0])
        self.assertIn("Row 2: Too many fields", result.parse_errors[1])
        self.assertEqual(result.rows[0], {"a": 1, "b": 2, "c": None})

    def test_duplicate_headers_get_suffixes(self) -> None:
        result = self.parser.parse_text("Sales,Sales,Sales\n1,2,3\n")

        self.assertEqual(result.headers, ("Sales", "Sales_1", "Sales_2"))
        self.assertEqual(result.rows[0], {"Sales": 1, "Sales_1": 2, "Sales_2": 3})

    def test_generated_header_names_do_not_collide(self) -> None:
        result = self.parser.parse_text("a,a,a_1\n1,2,3\n")

        self.assertEqual(result.headers, ("a", "a_1", "a_1_1"))
        self.assertEqual(result.rows[0], {"a": 1, "a_1": 2, "a_1_1": 3})

    def test_quoted_fields_keep_commas(self) -> None:
        result = self.parser.parse_text('Product,Amount\n"Widget, large",10\n')

        self.assertEqual(result.rows[0]["Product"], "Widget, large")

    def test_missing_header_raises(self) -> None:
        with self.assertRaises(CsvParseError):
            self.parser.parse_text("")

    def test_header_only_file_has_no_rows(self) -> None:
        result = self.parser.parse_text("Date,Revenue\n")

        self.assertEqual(result.headers, ("Date", "Revenue"))
        self.assertEqual(result.rows, [])

    def test_binary_stream_with_bom(self) -> None:
        stream = io.BytesIO("\ufeffDate,Revenue\n2024-01-01,5\n".encode("utf-8"))

        result = self.parser.parse(stream)

        self.assertEqual(result.headers, ("Date", "Revenue"))
        self.assertEqual(result.rows[0]["Revenue"], 5)

    def test_non_utf8_stream_raises(self) -> None:
        stream = io.BytesIO(b"Region\n\xff\xfe\xfa\n")

        with self.assertRaises(CsvParseError):
            self.parser.parse(stream)


if __name__ == "__main__":
    unittest.main()
