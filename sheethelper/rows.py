"""
sheethelper/rows.py — Row insertion with merge spans, skips and key maps.

Each add_row call writes exactly one new row (ctx.row_offset + 1), starting
at ctx.col_offset. The column cursor is shared by every cell in the row and
only ever moves right:

  Scalar           write, then advance one column.
  Spanned          write at the cursor (top-left of the cell).
                   If merged, merge cursor..cursor+col_span-1 across
                   row..row+row_span-1 and move the cursor onto the merge's
                   last column. Then advance by skip. The skip advance is
                   applied on top of the merge advance.

Critical rule: None values never create cells. Writing None through
ws.cell(value=None) still registers a cell and inflates ws.max_row /
ws.max_column, which would skew get_rows and the range helpers. A None
written over an existing cell clears it.

Cells covered by an earlier merge (openpyxl MergedCell) are passed over;
the cursor still advances across them.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List

from openpyxl.cell.cell import MergedCell
from openpyxl.worksheet.worksheet import Worksheet

from .errors import AppError, BAD_SPEC
from .models import Cell, Scalar, Spanned, to_cell
from .parsing import col_index_to_letters, coordinate, range_string
from .state import KeyMaps, SheetContext

logger = logging.getLogger(__name__)


def _write(ws: Worksheet, col: int, row: int, value: Any) -> None:
    existing = ws._cells.get((row, col))
    if isinstance(existing, MergedCell):
        # covered by a merge; only the range's top-left cell holds a value
        logger.debug("Skipped %s inside a merged range", coordinate(col, row))
        return
    if value is None:
        if existing is not None:
            existing.value = None
        return
    try:
        ws.cell(row=row, column=col, value=value)
    except (TypeError, ValueError) as e:
        raise AppError(
            BAD_SPEC,
            f"Cannot write value to {coordinate(col, row)}: {e}",
            {"coordinate": coordinate(col, row)},
        ) from e


def _place_spanned(ws: Worksheet, keys: KeyMaps, cell: Spanned, col: int, row: int) -> int:
    """Write one Spanned cell at (col, row). Returns the cursor for the next cell."""
    _write(ws, col, row, cell.value)

    start_col = col
    merged = None
    if cell.is_merged:
        col = col + cell.col_span - 1
        merged = range_string(start_col, row, col, row + cell.row_span - 1)
        ws.merge_cells(merged)
        logger.debug("Merged %s", merged)

    if cell.key is not None:
        column = col_index_to_letters(start_col)
        top_left = f"{column}{row}"
        if merged is not None:
            rng = merged
        elif cell.skip > 1:
            rng = f"{top_left}:{col_index_to_letters(col + cell.skip - 1)}{row}"
        else:
            rng = f"{top_left}:{top_left}"
        keys.record(cell.key, top_left, column, row, rng)
        logger.debug("Key %r -> %s", cell.key, rng)

    return col + cell.skip


def add_row(ctx: SheetContext, cells: Iterable[Any]) -> int:
    """
    Append one row to the active sheet of ctx. Returns the 1-based row written.

    cells may mix bare values, Scalar/Spanned objects and option mappings
    ({"value", "col", "row", "skip", "key"}). All items are validated before
    anything is written, so a bad descriptor leaves the sheet untouched.
    A value openpyxl cannot store (a nested list, say) raises BAD_SPEC at
    that cell; earlier cells of the row stay written.
    """
    if isinstance(cells, (str, bytes, Mapping)) or cells is None:
        raise AppError(BAD_SPEC, f"A row must be a sequence of cells (got {type(cells).__name__})")

    ws = ctx.require_sheet()
    parsed: List[Cell] = [to_cell(item) for item in cells]

    col = ctx.col_offset
    ctx.row_offset += 1
    row = ctx.row_offset

    for cell in parsed:
        match cell:
            case Spanned():
                col = _place_spanned(ws, ctx.keys, cell, col, row)
            case Scalar(value=value):
                _write(ws, col, row, value)
                col += 1

    logger.debug("Wrote row %d (%d cells) on %r", row, len(parsed), ws.title)
    return row


def add_rows(ctx: SheetContext, rows: Iterable[Iterable[Any]]) -> int:
    """
    Append rows in order. Fail-fast: the first failing row stops the batch
    and its error propagates; rows already written stay written.
    Returns the number of rows written.
    """
    count = 0
    for cells in rows:
        add_row(ctx, cells)
        count += 1
    return count
