"""
app/mappers package marker.
"""

from app.mappers.field_mapper import DEFAULT_ROLE_KEYWORDS, FieldMapper

__all__ = [
    "DEFAULT_ROLE_KEYWORDS",
    "FieldMapper",
]
