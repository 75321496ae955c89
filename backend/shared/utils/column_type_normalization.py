"""
Column type normalization (domain-neutral).

Normalizes server-provided column type labels into the canonical tags understood by the
validators and the schema parser.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from shared.models.common import ColumnType


def normalize_column_type(type_value: Any) -> str:
    """
    Normalize a raw column type label.

    Absent/empty labels become "string". Other labels are lower-cased and kept as-is,
    including ones outside the canonical set (they parse through the string branch).
    """
    if type_value is None:
        return ColumnType.STRING.value
    t = str(type_value).strip()
    if not t:
        return ColumnType.STRING.value
    return t.lower()


def resolve_column_type(type_value: Any) -> ColumnType:
    """Normalize a raw label and return the parsing branch it selects."""
    return ColumnType.from_label(normalize_column_type(type_value))


def normalize_schema_map(raw_schema: Mapping[str, Any]) -> Dict[str, str]:
    """Normalize every label of a raw column->type map, preserving column order."""
    return {str(column): normalize_column_type(label) for column, label in raw_schema.items()}
