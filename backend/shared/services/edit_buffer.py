"""
🔥 THINK ULTRA! Edit buffer and edit session

EditBuffer is the mutable working copy of a table. Every row exposes the same column key set
after any structural operation. A buffer without columns is empty, and every operation on it
is a no-op that returns an empty result.

TableEditSession owns one table: its immutable column schema, the validation report from the
load, the committed snapshot and the working buffer. Edits only ever touch the working buffer.
"""

from __future__ import annotations

import copy
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from shared.exceptions.table import ColumnOperationError, RowOperationError
from shared.models.common import CellValue, Row
from shared.models.table_data import RowValidationOutcome, TableSessionSnapshot
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

# (row index, column, value)
CellWrite = Tuple[int, str, CellValue]


def derive_columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """First-row key order, followed by keys that only appear in later rows."""
    columns: List[str] = []
    seen = set()
    for row in rows:
        for key in row.keys():
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


class EditBuffer:
    """Ordered, mutable row sequence with a canonical column ordering."""

    def __init__(
        self,
        rows: Optional[Iterable[Mapping[str, Any]]] = None,
        columns: Optional[Sequence[str]] = None,
        empty_value: CellValue = "",
    ):
        self.empty_value = empty_value
        self._rows: List[Row] = [copy.deepcopy(dict(row)) for row in (rows or [])]
        self._columns: List[str] = list(columns) if columns is not None else derive_columns(self._rows)

        # Every row carries every column
        for row in self._rows:
            for column in self._columns:
                row.setdefault(column, empty_value)

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> List[Row]:
        return self._rows

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def is_empty(self) -> bool:
        return not self._columns

    def _blank_row(self) -> Row:
        return {column: self.empty_value for column in self._columns}

    def _check_row_index(self, index: int) -> None:
        if index < 0 or index >= len(self._rows):
            raise RowOperationError(f"Row index {index} out of range (0..{len(self._rows) - 1})", row=index)

    def _check_column(self, column: str) -> None:
        if column not in self._columns:
            raise ColumnOperationError(f"Unknown column: {column}", column=column)

    # Cell edits

    def update_cell(self, row_index: int, column: str, value: CellValue) -> Optional[Row]:
        """Write one cell; returns the updated row."""
        if self.is_empty:
            return None
        self._check_row_index(row_index)
        self._check_column(column)
        self._rows[row_index][column] = value
        return self._rows[row_index]

    # Row operations

    def add_row(self) -> Optional[Row]:
        """Append one row with every current column set to the empty value."""
        added = self.add_rows(1)
        return added[0] if added else None

    def add_rows(self, count: int) -> List[Row]:
        """Append count blank rows as a single batch."""
        if self.is_empty or count <= 0:
            return []
        new_rows = [self._blank_row() for _ in range(count)]
        self._rows.extend(new_rows)
        return new_rows

    def delete_row(self, index: int) -> Optional[Row]:
        """Remove row index, shifting later rows down; returns the removed row."""
        if self.is_empty or not self._rows:
            return None
        self._check_row_index(index)
        return self._rows.pop(index)

    # Column operations

    def add_column(self, name: str) -> List[str]:
        """Append a column to the ordering and back-fill every row with the empty value."""
        if self.is_empty:
            return []
        name = (name or "").strip()
        if not name:
            raise ColumnOperationError("Column name must not be blank")
        if name in self._columns:
            raise ColumnOperationError(f"Column already exists: {name}", column=name)

        self._columns.append(name)
        for row in self._rows:
            row[name] = self.empty_value
        return self.columns

    def rename_column(self, old_name: str, new_name: str) -> List[str]:
        """
        Rename a column in every row, preserving values and position.

        Renaming to the same name is a no-op.
        """
        if self.is_empty:
            return []
        self._check_column(old_name)
        new_name = (new_name or "").strip()
        if not new_name:
            raise ColumnOperationError("Column name must not be blank", column=old_name)
        if new_name == old_name:
            return self.columns
        if new_name in self._columns:
            raise ColumnOperationError(f"Column already exists: {new_name}", column=new_name)

        position = self._columns.index(old_name)
        self._columns[position] = new_name
        # Rebuild each row so key order follows the column ordering
        self._rows = [
            {(new_name if key == old_name else key): value for key, value in row.items()}
            for row in self._rows
        ]
        return self.columns

    # Reconciliation

    def expand_and_write(self, required_length: int, writes: Iterable[CellWrite]) -> int:
        """
        Grow the buffer to required_length rows and apply every write in one step.

        Returns:
            Number of cells written
        """
        if self.is_empty:
            return 0
        writes = list(writes)
        for row_index, column, _ in writes:
            if row_index < 0 or row_index >= max(required_length, len(self._rows)):
                raise RowOperationError(f"Write targets row {row_index} beyond the expanded buffer", row=row_index)
            self._check_column(column)

        shortfall = required_length - len(self._rows)
        if shortfall > 0:
            self.add_rows(shortfall)
        for row_index, column, value in writes:
            self._rows[row_index][column] = value
        return len(writes)

    def snapshot(self) -> List[Row]:
        """Deep copy of the rows."""
        return copy.deepcopy(self._rows)


class TableEditSession:
    """One open table: committed snapshot plus working buffer."""

    def __init__(
        self,
        table_name: str,
        rows: Optional[Sequence[Mapping[str, Any]]] = None,
        column_schema: Optional[Mapping[str, str]] = None,
        validation: Optional[Sequence[RowValidationOutcome]] = None,
        *,
        session_id: Optional[str] = None,
        empty_value: CellValue = "",
        load_error: Optional[str] = None,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.table_name = table_name
        self.load_error = load_error
        self._column_schema: Dict[str, str] = dict(column_schema or {})
        self.validation: List[RowValidationOutcome] = list(validation or [])

        rows = list(rows or [])
        columns = derive_columns(rows) if rows else list(self._column_schema)
        self.buffer = EditBuffer(rows, columns=columns, empty_value=empty_value)
        self._original_rows: List[Row] = self.buffer.snapshot()
        self._original_columns: List[str] = self.buffer.columns

    @property
    def column_schema(self) -> Dict[str, str]:
        """Schema derived at load time; structural edits never change it."""
        return dict(self._column_schema)

    @property
    def original_rows(self) -> List[Row]:
        return copy.deepcopy(self._original_rows)

    @property
    def is_dirty(self) -> bool:
        return self.buffer.rows != self._original_rows or self.buffer.columns != self._original_columns

    def reset(self) -> List[Row]:
        """Discard all buffer mutations and restore the committed snapshot."""
        self.buffer = EditBuffer(
            copy.deepcopy(self._original_rows),
            columns=self._original_columns,
            empty_value=self.buffer.empty_value,
        )
        logger.info(f"Session {self.session_id} reset to committed snapshot ({len(self.buffer)} rows)")
        return self.buffer.rows

    def commit(self) -> List[Row]:
        """Promote the working buffer to the committed snapshot."""
        self._original_rows = self.buffer.snapshot()
        self._original_columns = self.buffer.columns
        logger.info(f"Session {self.session_id} committed ({len(self._original_rows)} rows)")
        return self.original_rows

    def to_snapshot(self) -> TableSessionSnapshot:
        return TableSessionSnapshot(
            session_id=self.session_id,
            table_name=self.table_name,
            columns=self.buffer.columns,
            rows=self.buffer.snapshot(),
            column_schema=self.column_schema,
            validation=self.validation,
            is_dirty=self.is_dirty,
            load_error=self.load_error,
        )
