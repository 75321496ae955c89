"""
Bulk-save reconciler.

Derives the transmit copy of the working rows for a full-table replace: rows without an
identifier receive maxId+1, maxId+2, ... in row order, and tables on the exclusion list have
the identifier field removed. The input rows are never mutated.
"""

from __future__ import annotations

import copy
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from shared.models.common import Row, is_blank
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

DEFAULT_ID_FIELD = "id"
DEFAULT_TABLES_WITHOUT_ID = ("employees",)


def coerce_identifier(value: Any) -> float:
    """Numeric value of an identifier; missing, boolean and non-numeric values count as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def max_identifier(rows: Iterable[Mapping[str, Any]], id_field: str = DEFAULT_ID_FIELD) -> int:
    """Largest identifier (floored), never below 0."""
    highest = 0.0
    for row in rows:
        highest = max(highest, coerce_identifier(row.get(id_field)))
    return math.floor(highest)


def assign_missing_identifiers(rows: Sequence[Mapping[str, Any]], id_field: str = DEFAULT_ID_FIELD) -> List[Row]:
    """Copy of rows with blank identifiers filled in row order."""
    prepared = [copy.deepcopy(dict(row)) for row in rows]
    next_id = max_identifier(prepared, id_field)
    assigned = 0
    for row in prepared:
        if is_blank(row.get(id_field)):
            next_id += 1
            row[id_field] = next_id
            assigned += 1
    if assigned:
        logger.info(f"Assigned {assigned} new identifiers (last={next_id})")
    return prepared


def prepare_bulk_replace_payload(
    rows: Sequence[Mapping[str, Any]],
    table_name: str,
    *,
    id_field: str = DEFAULT_ID_FIELD,
    tables_without_id: Optional[Iterable[str]] = None,
) -> List[Row]:
    """
    Build the transmit-ready row sequence for a bulk replace.

    Args:
        rows: Working rows (left untouched)
        table_name: Target table
        id_field: Identifier column
        tables_without_id: Tables whose server-side schema has no identifier column

    Returns:
        New list of new row dicts
    """
    excluded = set(DEFAULT_TABLES_WITHOUT_ID if tables_without_id is None else tables_without_id)
    prepared = assign_missing_identifiers(rows, id_field)
    if table_name in excluded:
        for row in prepared:
            row.pop(id_field, None)
        logger.debug(f"Stripped '{id_field}' from {len(prepared)} rows for table '{table_name}'")
    return prepared
