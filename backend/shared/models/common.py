"""
Common data types and enums for TABLEFORGE
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union
import logging

logger = logging.getLogger(__name__)

# A cell is null, a scalar, or (for json columns) an arbitrary JSON document.
JsonDocument = Union[Dict[str, Any], List[Any]]
CellValue = Union[None, bool, int, float, str, JsonDocument]
Row = Dict[str, CellValue]


class ColumnType(Enum):
    """Canonical column type tags"""

    INTEGER = "integer"
    BIGINT = "bigint"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    JSON = "json"
    STRING = "string"

    @classmethod
    def values(cls) -> List[str]:
        """All canonical tag values"""
        return [member.value for member in cls]

    @classmethod
    def from_label(cls, label: Optional[str]) -> "ColumnType":
        """
        Resolve a (normalized) label to its parsing branch.

        Labels outside the canonical set use the string branch.
        """
        if not label:
            return cls.STRING
        try:
            return cls(label)
        except ValueError:
            return cls.STRING

    @classmethod
    def is_numeric(cls, column_type: "ColumnType") -> bool:
        """Check if column type is numeric"""
        return column_type in {cls.INTEGER, cls.BIGINT, cls.FLOAT}

    @classmethod
    def is_temporal(cls, column_type: "ColumnType") -> bool:
        """Check if column type is a date or datetime"""
        return column_type in {cls.DATE, cls.DATETIME}


def describe_kind(value: Any) -> str:
    """
    Name the run-time kind of a value using JSON vocabulary.

    bool is checked before int because bool is a subclass of int.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (date, datetime)):
        return "date"
    return type(value).__name__


def is_blank(value: Any) -> bool:
    """True for null and empty-string cells"""
    return value is None or value == ""
