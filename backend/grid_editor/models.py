"""
Grid Editor Service Models
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class OpenSessionRequest(BaseModel):
    """Open an edit session on a table"""
    table_name: str = Field(..., min_length=1, description="Remote table name")
    schema_source: Optional[Literal["first_row", "infer"]] = Field(
        default=None, description="Override the configured schema source"
    )
    inference_mode: Optional[Literal["heuristic", "sniff"]] = Field(
        default=None, description="Inference mode for the infer source"
    )


class CellUpdateRequest(BaseModel):
    """Single cell edit"""
    row: int = Field(..., ge=0, description="0-based row index")
    column: str
    value: Any = None
    input_format: Optional[Literal["text", "number", "alphanumeric"]] = Field(
        default=None, description="Check typed input before writing"
    )


class AddRowsRequest(BaseModel):
    count: int = Field(default=1, ge=1)


class AddColumnRequest(BaseModel):
    name: str


class RenameColumnRequest(BaseModel):
    new_name: str


class PasteRequest(BaseModel):
    """Clipboard paste anchored at a target cell"""
    text: str
    start_row: int = Field(default=0, description="0-based target row")
    start_column: str


class BulkEntryRequest(BaseModel):
    """Typed block of rows appended after the last row"""
    text: str
