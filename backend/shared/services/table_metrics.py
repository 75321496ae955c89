"""
Table aggregates shown in the editor toolbar.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from shared.models.common import is_blank
from shared.models.table_data import MonthTotal
from shared.utils.app_logger import get_logger
from shared.validators.date_validator import parse_datetime_text

logger = get_logger(__name__)


def find_column(row: Mapping[str, Any], fragment: str) -> Optional[str]:
    """First key of row containing fragment, case-insensitively."""
    fragment = fragment.lower()
    return next((key for key in row.keys() if fragment in key.lower()), None)


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        parsed = parse_datetime_text(value)
        return _as_date(parsed) if parsed else None
    return None


def _as_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def calculate_month_total(
    rows: Iterable[Mapping[str, Any]], reference: Optional[date] = None
) -> MonthTotal:
    """
    Sum the first *amount* column over rows whose first *date* column falls in the
    reference month (today, UTC, by default).

    Rows missing either column, or with a blank, unparseable or non-numeric value, are skipped.
    """
    reference = reference or datetime.now(timezone.utc).date()
    total = 0.0
    counted = 0

    for row in rows:
        date_column = find_column(row, "date")
        amount_column = find_column(row, "amount")
        if not date_column or not amount_column:
            continue
        if is_blank(row[date_column]) or is_blank(row[amount_column]):
            continue

        day = _as_date(row[date_column])
        if day is None or (day.year, day.month) != (reference.year, reference.month):
            continue
        amount = _as_amount(row[amount_column])
        if amount is None:
            continue
        total += amount
        counted += 1

    logger.info(f"Month total {reference.year}-{reference.month:02d}: {total} over {counted} rows")
    return MonthTotal(year=reference.year, month=reference.month, total=total, rows_counted=counted)
