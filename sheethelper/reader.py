"""
sheethelper/reader.py — Bulk read-back of a sheet into a dense 2D list.

Rows 1..last_row and columns 1..last_col are read inclusive; cells that
were never written come back as None ("" when coercing to strings).

Date handling: a cell counts as a date when openpyxl reports cell.is_date
(a datetime value, or a number under a date/time number format). Its
value is turned into Unix epoch seconds, naive datetimes being read as
UTC, and optionally formatted with strftime.
"""
from __future__ import annotations

import datetime as dt
from typing import Any, List, Optional, Union

from openpyxl.utils.datetime import WINDOWS_EPOCH, from_excel
from openpyxl.worksheet.worksheet import Worksheet

from .models import ReadOptions

_UNIX_EPOCH = dt.date(1970, 1, 1)


def to_timestamp(value: Any, epoch: dt.datetime = WINDOWS_EPOCH) -> Optional[int]:
    """
    Convert a date-like cell value to epoch seconds.

    Accepts datetime, date, time (placed on 1970-01-01), timedelta
    (elapsed-time formats) and Excel serial numbers. Returns None for
    anything else so the caller can keep the raw value.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            value = from_excel(value, epoch)
        except (OverflowError, ValueError):
            return None

    if isinstance(value, dt.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=dt.timezone.utc)
        return int(value.timestamp())
    if isinstance(value, dt.date):
        return to_timestamp(dt.datetime.combine(value, dt.time()))
    if isinstance(value, dt.time):
        return to_timestamp(dt.datetime.combine(_UNIX_EPOCH, value))
    if isinstance(value, dt.timedelta):
        return int(value.total_seconds())
    return None


def format_timestamp(ts: int, fmt: str) -> str:
    return dt.datetime.fromtimestamp(ts, tz=dt.timezone.utc).strftime(fmt)


def _convert_date(value: Any, epoch: dt.datetime, fmt: Union[str, bool, None]) -> Any:
    ts = to_timestamp(value, epoch)
    if ts is None:
        return value
    if fmt:
        return format_timestamp(ts, fmt)
    return ts


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def get_rows(
    ws: Worksheet,
    coerce_to_string: bool = True,
    options: Optional[ReadOptions] = None,
) -> List[List[Any]]:
    """
    Read the sheet from A1 to (last_col, last_row) as rows of values.

    last_row / last_col default to ws.max_row / ws.max_column and can be
    overridden with options.row / options.column.

    options.timestamp_format is a strftime pattern such as "%Y-%m-%d"; a
    pattern without % directives (e.g. "Y-m-d") comes back verbatim.
    """
    opts = options or ReadOptions()
    last_row = opts.row or ws.max_row
    last_col = opts.column or ws.max_column
    epoch = getattr(ws.parent, "epoch", WINDOWS_EPOCH)

    data: List[List[Any]] = []
    for row_cells in ws.iter_rows(min_row=1, max_row=last_row, min_col=1, max_col=last_col):
        row: List[Any] = []
        for cell in row_cells:
            value = cell.value
            if opts.timestamp and value is not None and getattr(cell, "is_date", False):
                value = _convert_date(value, epoch, opts.timestamp_format)
            if coerce_to_string:
                value = _stringify(value)
            row.append(value)
        data.append(row)

    return data
