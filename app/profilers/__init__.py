"""
app/profilers package marker.
"""

from app.profilers.column_profiler import ColumnProfiler, infer_column_type

__all__ = [
    "ColumnProfiler",
    "infer_column_type",
]
