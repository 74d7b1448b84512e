"""
sheethelper/state.py — Per-session cursor and key-map bookkeeping.

A SheetContext holds everything one logical spreadsheet session needs:
  - the active Workbook and Worksheet,
  - the row offset (last row written; the next add_row writes row_offset + 1),
  - the column offset (1-based column every add_row starts from),
  - the four key maps filled by add_row.

Invariant: key maps describe the active sheet only. Selecting a sheet
resets the cursor to (row 0, column 1) and clears every map.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional, Union

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .errors import AppError, BAD_SPEC, INVALID_STATE

logger = logging.getLogger(__name__)


SheetRef = Union[Worksheet, int, str]


@dataclass
class KeyMaps:
    coordinates: Dict[Hashable, str] = field(default_factory=dict)
    columns: Dict[Hashable, str] = field(default_factory=dict)
    rows: Dict[Hashable, int] = field(default_factory=dict)
    ranges: Dict[Hashable, str] = field(default_factory=dict)

    def record(self, key: Hashable, coordinate: str, column: str, row: int, rng: str) -> None:
        self.coordinates[key] = coordinate
        self.columns[key] = column
        self.rows[key] = row
        self.ranges[key] = rng

    def clear(self) -> None:
        self.coordinates.clear()
        self.columns.clear()
        self.rows.clear()
        self.ranges.clear()

    def __len__(self) -> int:
        return len(self.coordinates)


def lookup(mapping: Dict[Hashable, Any], key: Optional[Hashable] = None) -> Any:
    """
    key given -> the mapped value, or None when the key was never recorded.
    key None  -> a copy of the whole mapping.
    """
    if key is None:
        return dict(mapping)
    return mapping.get(key)


def _as_int(value: Any, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise AppError(BAD_SPEC, f"{what} must be a number (got {value!r})")


@dataclass
class SheetContext:
    workbook: Optional[Workbook] = None
    sheet: Optional[Worksheet] = None
    row_offset: int = 0
    col_offset: int = 1           # A1 => 1
    keys: KeyMaps = field(default_factory=KeyMaps)

    # ---------- Cursor ----------

    def reset_sheet(self) -> None:
        """Drop the active sheet and rewind the cursor. Key maps are left alone."""
        self.sheet = None
        self.row_offset = 0
        self.col_offset = 1

    def set_row_offset(self, n: Any = 0) -> None:
        n = _as_int(n, "Row offset")
        if n < 0:
            raise AppError(BAD_SPEC, f"Row offset must be >= 0 (got {n})")
        self.row_offset = n

    def set_column_offset(self, n: Any = 1) -> None:
        n = _as_int(n, "Column offset")
        if n < 1:
            raise AppError(BAD_SPEC, f"Column offset must be >= 1 (got {n})")
        self.col_offset = n

    # ---------- Document / sheet selection ----------

    def set_workbook(self, wb: Workbook) -> None:
        self.workbook = wb
        self.reset_sheet()
        self.keys.clear()

    def require_workbook(self) -> Workbook:
        if self.workbook is None:
            raise AppError(INVALID_STATE, "No spreadsheet is set")
        return self.workbook

    def set_sheet(self, sheet: SheetRef = 0, title: Optional[str] = None) -> Worksheet:
        """
        Select the active sheet by Worksheet, 0-based index or title.

        An index past the last sheet creates sheets up to and including it.
        A title that does not exist yet creates a sheet with that title.
        """
        ws = self._resolve_sheet(sheet)

        self.reset_sheet()
        self.keys.clear()
        self.sheet = ws

        if title:
            try:
                ws.title = title
            except ValueError as e:
                raise AppError(BAD_SPEC, f"Bad sheet title: {title!r}", {"reason": str(e)}) from e

        logger.debug("Active sheet set to %r", ws.title)
        return ws

    def _resolve_sheet(self, sheet: SheetRef) -> Worksheet:
        if isinstance(sheet, Worksheet):
            if self.workbook is None:
                self.workbook = sheet.parent
            if sheet.parent is self.workbook:
                self.workbook.active = sheet
            return sheet

        wb = self.workbook
        if wb is None:
            raise AppError(
                INVALID_STATE,
                "Invalid or empty spreadsheet for setting sheet",
                {"sheet": sheet},
            )

        if isinstance(sheet, int) and not isinstance(sheet, bool) and sheet >= 0:
            while len(wb.worksheets) <= sheet:
                created = wb.create_sheet()
                logger.debug("Created sheet %r", created.title)
            ws = wb.worksheets[sheet]
            wb.active = ws
            return ws

        if isinstance(sheet, str) and sheet:
            if sheet in wb.sheetnames:
                ws = wb[sheet]
            else:
                ws = wb.create_sheet(title=sheet)
                logger.debug("Created sheet %r", ws.title)
            wb.active = ws
            return ws

        raise AppError(
            INVALID_STATE,
            "Invalid sheet reference for setting sheet",
            {"sheet": sheet},
        )

    def require_sheet(self) -> Worksheet:
        """
        Return the active sheet, selecting sheet 0 when a workbook is set
        but no sheet has been chosen yet.
        """
        if self.sheet is not None:
            return self.sheet
        if self.workbook is None:
            raise AppError(INVALID_STATE, "Invalid or empty spreadsheet sheet")
        return self.set_sheet(0)
