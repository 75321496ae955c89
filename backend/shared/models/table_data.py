"""
Table data models.

Goal: represent a fetched table (schema row + raw rows), its per-row validation report, and the
outcomes of grid operations in one standard format shared by the engine and the editor service.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TableInfo(BaseModel):
    """Catalogue entry returned by the table listing endpoint."""

    table_name: str
    description: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class TableDataResponse(BaseModel):
    """Raw fetch envelope: data is [SchemaMap, *rows] or plain rows."""

    status: Optional[str] = None
    table_name: Optional[str] = None
    data: List[Any] = Field(default_factory=list)
    total_count: Optional[int] = None
    limit: Optional[int] = None
    offset: Optional[int] = None

    model_config = ConfigDict(extra="ignore")


class RowValidationOutcome(BaseModel):
    """Validation result for one raw row (1-based index)."""

    row: int = Field(..., ge=1, description="1-based row index within the data rows")
    is_valid: bool
    errors: List[str] = Field(default_factory=list, description='"<column>: <reason>" entries')
    parsed_row: Optional[Dict[str, Any]] = Field(
        default=None, description="Parsed row; failed columns are null. None for non-object rows"
    )


class ParsedTable(BaseModel):
    """Parsed rows plus the full validation report."""

    table_name: Optional[str] = None
    column_schema: Dict[str, str] = Field(default_factory=dict)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    outcomes: List[RowValidationOutcome] = Field(default_factory=list)

    @property
    def invalid_outcomes(self) -> List[RowValidationOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.is_valid]

    @property
    def error_count(self) -> int:
        return sum(len(outcome.errors) for outcome in self.outcomes)


class ColumnTypeInferenceResult(BaseModel):
    """Inferred type for one column."""

    column_name: str
    type: str = Field(..., description="Canonical column type tag")
    non_empty_count: int = Field(default=0, ge=0)
    reason: str = ""


class ReconciliationReport(BaseModel):
    """Outcome of a paste or bulk-entry operation."""

    operation: Literal["paste", "bulk"]
    success: bool
    applied_cells: int = 0
    line_count: int = 0
    truncated_cells: int = 0
    rows_added: int = 0
    error: Optional[str] = None

    def summary(self) -> str:
        """User-facing notification text"""
        if not self.success:
            return self.error or "Operation failed."
        if self.operation == "bulk":
            text = f"Added {self.rows_added} rows."
        else:
            text = f"Pasted {self.applied_cells} cells across {self.line_count} rows."
        if self.truncated_cells > 0:
            text += f" {self.truncated_cells} cells were truncated."
        return text


class BulkReplaceRequest(BaseModel):
    """Full-table replace payload."""

    table_name: str
    data: List[Dict[str, Any]] = Field(default_factory=list)


class BulkReplaceResponse(BaseModel):
    """Full-table replace result."""

    success: bool = True
    message: str = ""
    details: Any = None

    model_config = ConfigDict(extra="ignore")


class TableSessionSnapshot(BaseModel):
    """Current state of an edit session for re-render."""

    session_id: str
    table_name: str
    columns: List[str] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    column_schema: Dict[str, str] = Field(default_factory=dict)
    validation: List[RowValidationOutcome] = Field(default_factory=list)
    is_dirty: bool = False
    load_error: Optional[str] = None


class MonthTotal(BaseModel):
    """Sum of the amount column over one calendar month."""

    year: int
    month: int = Field(..., ge=1, le=12)
    total: float = 0.0
    rows_counted: int = 0
