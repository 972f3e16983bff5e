"""
app/domain/errors.py

Whole-file ingestion errors. Per-row coercion problems are never raised.
"""

from __future__ import annotations


class DatasetIngestionError(ValueError):
    """
    Base class for errors that reject an entire upload.
    """


class CsvParseError(DatasetIngestionError):
    """
    Raised when the CSV cannot be parsed or the parser reports errors.
    """


class EmptyDatasetError(DatasetIngestionError):
    """
    Raised when the upload yields zero data rows.
    """
