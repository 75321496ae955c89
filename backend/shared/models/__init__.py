"""
Shared model definitions for TABLEFORGE
"""

from .common import CellValue, ColumnType, Row, describe_kind, is_blank
from .responses import ApiResponse
from .table_data import (
    BulkReplaceRequest,
    BulkReplaceResponse,
    ColumnTypeInferenceResult,
    MonthTotal,
    ParsedTable,
    ReconciliationReport,
    RowValidationOutcome,
    TableDataResponse,
    TableInfo,
    TableSessionSnapshot,
)

__all__ = [
    # response envelope
    "ApiResponse",
    # common models
    "CellValue",
    "ColumnType",
    "Row",
    "describe_kind",
    "is_blank",
    # table data models
    "BulkReplaceRequest",
    "BulkReplaceResponse",
    "ColumnTypeInferenceResult",
    "MonthTotal",
    "ParsedTable",
    "ReconciliationReport",
    "RowValidationOutcome",
    "TableDataResponse",
    "TableInfo",
    "TableSessionSnapshot",
]
