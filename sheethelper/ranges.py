"""
sheethelper/ranges.py — Whole-sheet ranges, wrap text and column auto-size.
"""
from __future__ import annotations

from copy import copy
from typing import List, Optional

from openpyxl.worksheet.worksheet import Worksheet

from .parsing import col_index_to_letters, col_letters_to_index, range_bounds


def get_range_all(ws: Worksheet, col_offset: int = 1) -> str:
    """
    Range from the column offset on row 1 to the sheet's highest column
    and row, e.g. 'B1:F20'.
    """
    return (
        f"{col_index_to_letters(col_offset)}1:"
        f"{col_index_to_letters(ws.max_column)}{ws.max_row}"
    )


def set_wrap_text(ws: Worksheet, rng: str, value: bool = True) -> int:
    """
    Set alignment.wrap_text on every cell in rng, keeping the rest of each
    cell's alignment. Returns the number of cells styled.
    """
    min_col, min_row, max_col, max_row = range_bounds(rng)
    count = 0
    for row_cells in ws.iter_rows(min_row=min_row, max_row=max_row, min_col=min_col, max_col=max_col):
        for cell in row_cells:
            alignment = copy(cell.alignment)
            alignment.wrap_text = value
            cell.alignment = alignment
            count += 1
    return count


def set_auto_size(
    ws: Worksheet,
    col_start: Optional[str] = None,
    col_end: Optional[str] = None,
    value: bool = True,
    col_offset: int = 1,
) -> List[str]:
    """
    Flag columns col_start..col_end (inclusive, letters) as auto-sized.
    Missing bounds fall back to the column offset and the highest column.
    Returns the column letters touched.
    """
    start = col_letters_to_index(col_start) if col_start else col_offset
    end = col_letters_to_index(col_end) if col_end else ws.max_column
    lo, hi = (start, end) if start <= end else (end, start)

    touched = []
    for n in range(lo, hi + 1):
        letter = col_index_to_letters(n)
        ws.column_dimensions[letter].auto_size = value
        touched.append(letter)
    return touched
