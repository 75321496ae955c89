"""
Utility functions for TABLEFORGE services
"""

from .column_type_normalization import normalize_column_type, resolve_column_type

__all__ = ["normalize_column_type", "resolve_column_type"]
