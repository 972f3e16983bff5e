"""
app/parsers package marker.
"""

from app.parsers.csv_parser import CSVParser, ParseResult, coerce_cell
from app.parsers.date_parser import looks_like_date, parse_calendar_date

__all__ = [
    "CSVParser",
    "ParseResult",
    "coerce_cell",
    "looks_like_date",
    "parse_calendar_date",
]
