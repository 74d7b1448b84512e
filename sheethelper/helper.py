"""
sheethelper/helper.py — Chainable spreadsheet builder.

    new_spreadsheet() \
        .add_row(["ID", "Name", "Email"]) \
        .add_rows([
            ["1", "Nick", "nick@example.com"],
            ["2", "Eric", "eric@example.com"],
        ]) \
        .save("people.xlsx")

Each SpreadsheetHelper owns its own SheetContext, so two helpers never
share a cursor, an active sheet or key maps.
"""
from __future__ import annotations

import os
from typing import Any, BinaryIO, Hashable, Iterable, List, Optional, Tuple, Union

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .errors import AppError, BAD_SPEC
from .io import load_document
from .models import ReadOptions
from .ranges import get_range_all, set_auto_size, set_wrap_text
from .reader import get_rows
from .rows import add_row, add_rows
from .settings import Settings, load_settings
from .state import SheetContext, SheetRef, lookup
from .writer import Destination, output_filename, save_document


Source = Union[Workbook, str, "os.PathLike[str]", None]


class SpreadsheetHelper:
    def __init__(self, spreadsheet: Source = None, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        self.context = SheetContext()
        self.set_spreadsheet(spreadsheet)

    # ---------- Document ----------

    def set_spreadsheet(self, spreadsheet: Source = None) -> "SpreadsheetHelper":
        """
        Use an existing Workbook, load one from a file path, or start a
        fresh Workbook when spreadsheet is None. Sheet state and key maps
        are reset.
        """
        if isinstance(spreadsheet, Workbook):
            wb = spreadsheet
        elif isinstance(spreadsheet, (str, os.PathLike)):
            wb = load_document(os.fspath(spreadsheet))
        elif spreadsheet is None:
            wb = Workbook()
        else:
            raise AppError(
                BAD_SPEC,
                f"Expected a Workbook or a file path (got {type(spreadsheet).__name__})",
            )
        self.context.set_workbook(wb)
        return self

    def get_spreadsheet(self) -> Optional[Workbook]:
        return self.context.workbook

    # ---------- Sheet & cursor ----------

    def reset_sheet(self) -> "SpreadsheetHelper":
        self.context.reset_sheet()
        return self

    def set_sheet(self, sheet: SheetRef = 0, title: Optional[str] = None) -> "SpreadsheetHelper":
        self.context.set_sheet(sheet, title)
        return self

    def get_sheet(self) -> Optional[Worksheet]:
        return self.context.sheet

    def set_row_offset(self, n: Any = 0) -> "SpreadsheetHelper":
        self.context.set_row_offset(n)
        return self

    def get_row_offset(self) -> int:
        return self.context.row_offset

    def set_column_offset(self, n: Any = 1) -> "SpreadsheetHelper":
        self.context.set_column_offset(n)
        return self

    def get_column_offset(self) -> int:
        return self.context.col_offset

    # ---------- Rows ----------

    def add_row(self, cells: Iterable[Any]) -> "SpreadsheetHelper":
        add_row(self.context, cells)
        return self

    def add_rows(self, rows: Iterable[Iterable[Any]]) -> "SpreadsheetHelper":
        add_rows(self.context, rows)
        return self

    def get_rows(
        self,
        to_string: bool = True,
        row: Optional[int] = None,
        column: Optional[int] = None,
        timestamp: bool = True,
        timestamp_format: Union[str, bool, None] = None,
    ) -> List[List[Any]]:
        """
        Read the active sheet back as rows of values.

        timestamp_format None uses the configured default pattern;
        False or "" keeps date cells as epoch seconds. Patterns are
        strftime, e.g. "%Y-%m-%d".
        """
        ws = self.context.require_sheet()
        if timestamp_format is None:
            timestamp_format = self.settings.timestamp_format
        options = ReadOptions(
            row=row,
            column=column,
            timestamp=timestamp,
            timestamp_format=timestamp_format,
        )
        return get_rows(ws, to_string, options)

    # ---------- Key maps ----------

    def get_coordinate_map(self, key: Optional[Hashable] = None):
        return lookup(self.context.keys.coordinates, key)

    def get_column_map(self, key: Optional[Hashable] = None):
        return lookup(self.context.keys.columns, key)

    def get_row_map(self, key: Optional[Hashable] = None):
        return lookup(self.context.keys.rows, key)

    def get_range_map(self, key: Optional[Hashable] = None):
        return lookup(self.context.keys.ranges, key)

    # ---------- Ranges & styles ----------

    def get_range_all(self) -> str:
        ws = self.context.require_sheet()
        return get_range_all(ws, self.context.col_offset)

    def set_wrap_text(self, rng: Optional[str] = None, value: bool = True) -> "SpreadsheetHelper":
        ws = self.context.require_sheet()
        set_wrap_text(ws, rng or get_range_all(ws, self.context.col_offset), value)
        return self

    def set_auto_size(
        self,
        col_start: Optional[str] = None,
        col_end: Optional[str] = None,
        value: bool = True,
    ) -> "SpreadsheetHelper":
        ws = self.context.require_sheet()
        set_auto_size(ws, col_start, col_end, value, col_offset=self.context.col_offset)
        return self

    # ---------- Output ----------

    def save(self, destination: Destination, fmt: Optional[str] = None) -> "SpreadsheetHelper":
        wb = self.context.require_workbook()
        sheet = self.context.sheet
        if sheet is not None and sheet.parent is not wb:
            sheet = None
        save_document(wb, destination, fmt or self.settings.default_format, sheet)
        return self

    def output(
        self,
        destination: BinaryIO,
        filename: Optional[str] = None,
        fmt: Optional[str] = None,
    ) -> Tuple[str, str]:
        """
        Write the document to destination and return the
        (download filename, content type) pair for the caller's transport.
        """
        fmt = fmt or self.settings.default_format
        self.save(destination, fmt)
        return output_filename(filename or self.settings.default_filename, fmt)


def new_spreadsheet(spreadsheet: Source = None, settings: Optional[Settings] = None) -> SpreadsheetHelper:
    return SpreadsheetHelper(spreadsheet, settings)
