"""
Delimited text decomposition for pasted and bulk-entered blocks.

The delimiter is sniffed from the first line only (tab if present, else comma) and applied to
every line. Quoted fields are not unescaped: one leading and one trailing double quote are
stripped from each trimmed cell, and a delimiter inside quotes still splits the cell.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from shared.exceptions.table import ReconciliationError

TAB = "\t"
COMMA = ","

_LINE_BREAK = re.compile(r"\r?\n")

NO_VALID_DATA = "No valid data found to paste."


@dataclass(frozen=True)
class PasteBlock:
    """Text block decomposed into lines of trimmed, quote-stripped cells."""

    delimiter: str
    lines: List[List[str]] = field(default_factory=list)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def cell_count(self) -> int:
        return sum(len(cells) for cells in self.lines)


def split_lines(text: Optional[str]) -> List[str]:
    """Split into lines, discarding blank ones."""
    if not text:
        return []
    return [line for line in _LINE_BREAK.split(text) if line.strip()]


def detect_delimiter(first_line: str) -> str:
    return TAB if TAB in first_line else COMMA


def clean_cell(cell: str) -> str:
    """Trim, then strip one leading and one trailing double quote."""
    cell = cell.strip()
    if cell.startswith('"'):
        cell = cell[1:]
    if cell.endswith('"'):
        cell = cell[:-1]
    return cell


def split_cells(line: str, delimiter: str) -> List[str]:
    return [clean_cell(cell) for cell in line.split(delimiter)]


def parse_block(text: Optional[str], *, max_lines: Optional[int] = None) -> PasteBlock:
    """
    Decompose text into a PasteBlock.

    Raises:
        ReconciliationError: no non-blank lines, or more than max_lines lines
    """
    lines = split_lines(text)
    if not lines:
        raise ReconciliationError(NO_VALID_DATA)
    if max_lines is not None and len(lines) > max_lines:
        raise ReconciliationError(
            f"You can paste up to {max_lines} rows at once.",
            details={"line_count": len(lines), "max_lines": max_lines},
        )

    delimiter = detect_delimiter(lines[0])
    return PasteBlock(delimiter=delimiter, lines=[split_cells(line, delimiter) for line in lines])
