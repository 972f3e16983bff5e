"""
app/parsers/csv_parser.py

Header-aware CSV parsing with dynamic typing of cell values.

The parser never rejects a file on its own. Shape problems are collected
into ``ParseResult.parse_errors`` and the ingestion service decides what to
do with them.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from typing import BinaryIO

from app.domain.dataset import RawScalar
from app.domain.errors import CsvParseError

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
_INT_RE = re.compile(r"^\s*-?\d+\s*$")


@dataclass(frozen=True)
class ParseResult:
    headers: tuple[str, ...]
    rows: list[dict[str, RawScalar]] = field(default_factory=list)
    parse_errors: list[str] = field(default_factory=list)


def coerce_cell(raw: str) -> RawScalar:
    """
    Convert one raw CSV cell into ``None``, ``int``, ``float`` or ``str``.
    """

    if raw.strip() == "":
        return None
    if _INT_RE.match(raw):
        try:
            return int(raw)
        except ValueError:
            # beyond the interpreter's integer digit limit
            return raw
    if _NUMBER_RE.match(raw):
        return float(raw)
    return raw


def _dedupe_headers(headers: list[str]) -> tuple[str, ...]:
    used: set[str] = set()
    result: list[str] = []
    for header in headers:
        base = header.strip()
        name = base
        suffix = 0
        while name in used:
            suffix += 1
            name = f"{base}_{suffix}"
        used.add(name)
        result.append(name)
    return tuple(result)


class CSVParser:
    """
    Parses an uploaded CSV stream into raw rows keyed by header.
    """

    def parse(self, stream: BinaryIO) -> ParseResult:
        """
        Read *stream* fully and return rows plus collected parse errors.

        Raises:
            CsvParseError: When the stream is not UTF-8 or has no header row.
        """

        text_stream: io.TextIOWrapper | None = None
        try:
            text_stream = io.TextIOWrapper(stream, encoding="utf-8-sig", newline="")
            return self._parse_text(text_stream)
        except UnicodeDecodeError as exc:
            raise CsvParseError("CSV must be UTF-8 encoded.") from exc
        finally:
            if text_stream is not None:
                try:
                    text_stream.detach()
                except ValueError:
                    pass

    def parse_text(self, text: str) -> ParseResult:
        return self._parse_text(io.StringIO(text, newline=""))

    def _parse_text(self, text_stream: io.TextIOBase) -> ParseResult:
        reader = csv.reader(text_stream, strict=True)
        parse_errors: list[str] = []

        try:
            header_row = next(reader, None)
        except csv.Error as exc:
            raise CsvParseError(f"Invalid CSV format: {exc}") from exc

        if header_row is None or all(cell.strip() == "" for cell in header_row):
            raise CsvParseError("CSV header row is missing.")

        headers = _dedupe_headers(header_row)
        expected = len(headers)
        rows: list[dict[str, RawScalar]] = []

        row_number = 0
        while True:
            try:
                cells = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                parse_errors.append(f"Row {row_number + 1}: {exc}")
                break

            if all(cell.strip() == "" for cell in cells):
                continue

            row_number += 1
            if len(cells) < expected:
                parse_errors.append(
                    f"Row {row_number}: Too few fields: expected {expected} fields but parsed {len(cells)}"
                )
            elif len(cells) > expected:
                parse_errors.append(
                    f"Row {row_number}: Too many fields: expected {expected} fields but parsed {len(cells)}"
                )

            row: dict[str, RawScalar] = {}
            for index, header in enumerate(headers):
                row[header] = coerce_cell(cells[index]) if index < len(cells) else None
            rows.append(row)

        logger.debug(
            "Parsed CSV headers=%d rows=%d parse_errors=%d",
            expected,
            len(rows),
            len(parse_errors),
        )
        return ParseResult(headers=headers, rows=rows, parse_errors=parse_errors)
