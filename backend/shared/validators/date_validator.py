"""
Date and DateTime validators for TABLEFORGE
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from ..models.common import ColumnType
from .base_validator import BaseValidator, ValidationResult

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Non-ISO layouts accepted for datetime columns, tried in order after ISO-8601
DATETIME_LAYOUTS = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


def parse_datetime_text(text: str) -> Optional[datetime]:
    """Parse a date-time string, returning None when no known layout matches."""
    s = text.strip()
    if not s:
        return None
    iso = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass
    for layout in DATETIME_LAYOUTS:
        try:
            return datetime.strptime(s, layout)
        except ValueError:
            continue
    return None


def to_iso_timestamp(value: datetime) -> str:
    """Render a datetime as a UTC ISO-8601 timestamp with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


class DateValidator(BaseValidator):
    """Validator for calendar dates in YYYY-MM-DD form"""

    type_name = ColumnType.DATE.value

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate date value"""
        if value is None:
            return self.null_result(self.type_name)

        if isinstance(value, datetime):
            parsed = value.date().isoformat()
        elif isinstance(value, date):
            parsed = value.isoformat()
        elif isinstance(value, str):
            if not _DATE_PATTERN.fullmatch(value):
                return self.type_mismatch(self.type_name, value)
            try:
                parsed = date.fromisoformat(value).isoformat()
            except ValueError:
                return ValidationResult(
                    is_valid=False,
                    message=f"invalid {self.type_name}: {value}",
                    metadata={"type": self.type_name},
                )
        else:
            return self.type_mismatch(self.type_name, value)

        return ValidationResult(
            is_valid=True,
            message="Date validation passed",
            normalized_value=parsed,
            metadata={"type": self.type_name, "format": "YYYY-MM-DD"},
        )

    def normalize(self, value: Any) -> Any:
        """Normalize date objects to YYYY-MM-DD"""
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return value

    def get_supported_types(self) -> List[str]:
        """Get supported types"""
        return [ColumnType.DATE.value]


class DateTimeValidator(BaseValidator):
    """Validator for date-time values, normalized to ISO-8601 UTC timestamps"""

    type_name = ColumnType.DATETIME.value

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate datetime value"""
        if value is None:
            return self.null_result(self.type_name)

        if isinstance(value, datetime):
            parsed_dt = value
        elif isinstance(value, date):
            parsed_dt = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
        elif isinstance(value, str):
            parsed_dt = parse_datetime_text(value)
            if parsed_dt is None:
                return ValidationResult(
                    is_valid=False,
                    message=f"expected {self.type_name}, got unparseable string",
                    metadata={"type": self.type_name, "observed": "string"},
                )
        else:
            return self.type_mismatch(self.type_name, value)

        return ValidationResult(
            is_valid=True,
            message="DateTime validation passed",
            normalized_value=to_iso_timestamp(parsed_dt),
            metadata={"type": self.type_name, "format": "ISO-8601"},
        )

    def normalize(self, value: Any) -> Any:
        """Normalize datetime objects to ISO-8601 timestamps"""
        if isinstance(value, datetime):
            return to_iso_timestamp(value)
        return value

    def get_supported_types(self) -> List[str]:
        """Get supported types"""
        return [ColumnType.DATETIME.value]
