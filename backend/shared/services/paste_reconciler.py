"""
Paste/bulk reconciliation.

Maps pasted or typed delimited text onto the edit buffer grid. Every cell write is resolved
up front and applied together with any row growth through EditBuffer.expand_and_write, so the
buffer is never observed half-expanded. Failures are returned as a failed report and leave the
buffer untouched.
"""

from __future__ import annotations

from typing import List, Optional

from shared.exceptions.table import ReconciliationError
from shared.models.table_data import ReconciliationReport
from shared.services.delimited_text import parse_block
from shared.services.edit_buffer import CellWrite, EditBuffer
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_LINES = 500


class PasteReconciler:
    """Applies PasteBlocks to an EditBuffer."""

    def __init__(self, max_lines: Optional[int] = DEFAULT_MAX_LINES):
        self.max_lines = max_lines

    def apply_paste(
        self, buffer: EditBuffer, text: str, start_row: int, start_column: str
    ) -> ReconciliationReport:
        """
        Paste text with its top-left cell at (start_row, start_column).

        Rows are appended as needed; cells past the last column are counted as truncated.
        """
        try:
            if buffer.is_empty:
                raise ReconciliationError("Table has no columns to paste into.")
            columns = buffer.columns
            if start_column not in columns:
                raise ReconciliationError(f"Unknown start column: {start_column}")
            if start_row < 0:
                raise ReconciliationError(f"Invalid start row: {start_row}")

            block = parse_block(text, max_lines=self.max_lines)
        except ReconciliationError as e:
            logger.warning(f"Paste aborted: {e.message}")
            return ReconciliationReport(operation="paste", success=False, error=e.message)

        start_index = columns.index(start_column)
        writes: List[CellWrite] = []
        truncated = 0
        for offset, cells in enumerate(block.lines):
            for cell_index, cell in enumerate(cells):
                column_index = start_index + cell_index
                if column_index < len(columns):
                    writes.append((start_row + offset, columns[column_index], cell))
                else:
                    truncated += 1

        rows_before = len(buffer)
        applied = buffer.expand_and_write(start_row + block.line_count, writes)

        report = ReconciliationReport(
            operation="paste",
            success=True,
            applied_cells=applied,
            line_count=block.line_count,
            truncated_cells=truncated,
            rows_added=len(buffer) - rows_before,
        )
        logger.info(report.summary())
        return report

    def apply_bulk_rows(self, buffer: EditBuffer, text: str) -> ReconciliationReport:
        """
        Append one row per line after the current last row.

        Missing trailing cells take the empty value; extra cells are counted as truncated.
        """
        try:
            if buffer.is_empty:
                raise ReconciliationError("Table has no columns to add rows to.")
            block = parse_block(text, max_lines=self.max_lines)
        except ReconciliationError as e:
            logger.warning(f"Bulk entry aborted: {e.message}")
            return ReconciliationReport(operation="bulk", success=False, error=e.message)

        columns = buffer.columns
        start = len(buffer)
        writes: List[CellWrite] = []
        truncated = 0
        for offset, cells in enumerate(block.lines):
            for column_index, column in enumerate(columns):
                value = cells[column_index] if column_index < len(cells) else buffer.empty_value
                writes.append((start + offset, column, value))
            truncated += max(0, len(cells) - len(columns))

        applied = buffer.expand_and_write(start + block.line_count, writes)

        report = ReconciliationReport(
            operation="bulk",
            success=True,
            applied_cells=applied,
            line_count=block.line_count,
            truncated_cells=truncated,
            rows_added=block.line_count,
        )
        logger.info(report.summary())
        return report
