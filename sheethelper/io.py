"""
sheethelper/io.py — Load a spreadsheet file into an openpyxl Workbook.
"""
from __future__ import annotations

import csv
import logging
import os
from typing import Any, Callable, Dict, List

from openpyxl import Workbook, load_workbook

from .errors import AppError, FILE_LOCKED, SOURCE_READ_FAILED, UNSUPPORTED_FORMAT

logger = logging.getLogger(__name__)


def is_occupied(value: Any) -> bool:
    """
    Single occupancy definition for cells copied into a workbook.
    """
    if value is None:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def load_csv(path: str) -> List[List[Any]]:
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        return [list(row) for row in reader]


def rows_to_workbook(rows: List[List[Any]], title: str = "Sheet1") -> Workbook:
    """Copy a table into the first sheet of a fresh Workbook, skipping blank cells."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for r, row in enumerate(rows, 1):
        for c, value in enumerate(row, 1):
            if is_occupied(value):
                ws.cell(row=r, column=c, value=value)
    return wb


def _load_xlsx(path: str) -> Workbook:
    return load_workbook(path)


def _load_csv_workbook(path: str) -> Workbook:
    return rows_to_workbook(load_csv(path))


READER_EXTENSIONS: Dict[str, Callable[[str], Workbook]] = {
    ".xlsx": _load_xlsx,
    ".xlsm": _load_xlsx,
    ".csv": _load_csv_workbook,
}


def load_document(path: str) -> Workbook:
    """Load XLSX or CSV into a Workbook. Raises AppError on failure."""
    ext = os.path.splitext(path)[1].lower()
    loader = READER_EXTENSIONS.get(ext)
    if loader is None:
        raise AppError(
            UNSUPPORTED_FORMAT,
            f"No reader for {ext or 'files without an extension'}",
            {"path": path, "format": ext},
        )
    try:
        wb = loader(path)
    except PermissionError as e:
        raise AppError(
            FILE_LOCKED,
            f"Spreadsheet file is locked: {path}",
            {"path": path},
        ) from e
    except AppError:
        raise
    except Exception as e:
        raise AppError(
            SOURCE_READ_FAILED,
            f"Failed to read spreadsheet: {e}",
            {"path": path},
        ) from e

    logger.info("Loaded %s (%d sheets)", path, len(wb.sheetnames))
    return wb
