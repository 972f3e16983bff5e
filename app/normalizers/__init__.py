"""
app/normalizers package marker.
"""

from app.normalizers.record_normalizer import RecordNormalizer

__all__ = [
    "RecordNormalizer",
]
