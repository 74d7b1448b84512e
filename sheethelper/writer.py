"""
sheethelper/writer.py — Format registry and document output.

Formats are named the way callers pass them ("Xlsx", "Csv", ...). The
registry carries the file extension and MIME type for every known
format; only Xlsx, Csv and Html have a writer. Csv and Html render the
active sheet only.
"""
from __future__ import annotations

import csv
import io
import logging
import os
from html import escape as html_escape
from typing import Any, BinaryIO, Dict, Optional, Set, Tuple, Union

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .errors import AppError, FILE_LOCKED, SAVE_FAILED, UNSUPPORTED_FORMAT
from .models import WriterFormat

logger = logging.getLogger(__name__)


WRITER_FORMATS: Dict[str, WriterFormat] = {
    "Ods": WriterFormat(".ods", "application/vnd.oasis.opendocument.spreadsheet"),
    "Xlsx": WriterFormat(".xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    "Xls": WriterFormat(".xls", "application/vnd.ms-excel"),
    "Html": WriterFormat(".html", "text/html"),
    "Csv": WriterFormat(".csv", "text/csv"),
}

FALLBACK_CONTENT_TYPE = "application/octet-stream"

Destination = Union[str, "os.PathLike[str]", BinaryIO]


def canonical_format(fmt: str) -> Optional[str]:
    """'xlsx' -> 'Xlsx'. None when the name is not registered."""
    wanted = (fmt or "").strip().lower()
    for name in WRITER_FORMATS:
        if name.lower() == wanted:
            return name
    return None


def resolve_format(fmt: str) -> Optional[WriterFormat]:
    name = canonical_format(fmt)
    return WRITER_FORMATS[name] if name else None


def output_filename(filename: str, fmt: str) -> Tuple[str, str]:
    """
    Return (filename + extension, content type) for a download of fmt.
    Unknown formats get no extension and the octet-stream content type.
    """
    info = resolve_format(fmt)
    if info is None:
        return filename, FALLBACK_CONTENT_TYPE
    return f"{filename}{info.extension}", info.content_type


# ── Renderers ─────────────────────────────────────────────────────────────────

def _text(value: Any) -> str:
    return "" if value is None else str(value)


def render_csv(ws: Worksheet) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    for row in ws.iter_rows(values_only=True):
        writer.writerow([_text(v) for v in row])
    return buf.getvalue()


def _merge_layout(ws: Worksheet) -> Tuple[Dict[Tuple[int, int], Tuple[int, int]], Set[Tuple[int, int]]]:
    """
    anchors: (row, col) of each merge's top-left -> (rowspan, colspan)
    covered: every other (row, col) inside a merge
    """
    anchors: Dict[Tuple[int, int], Tuple[int, int]] = {}
    covered: Set[Tuple[int, int]] = set()
    for rng in ws.merged_cells.ranges:
        anchors[(rng.min_row, rng.min_col)] = (
            rng.max_row - rng.min_row + 1,
            rng.max_col - rng.min_col + 1,
        )
        for r in range(rng.min_row, rng.max_row + 1):
            for c in range(rng.min_col, rng.max_col + 1):
                if (r, c) != (rng.min_row, rng.min_col):
                    covered.add((r, c))
    return anchors, covered


def render_html(ws: Worksheet) -> str:
    anchors, covered = _merge_layout(ws)

    parts = [
        "<!doctype html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{html_escape(ws.title)}</title>",
        "</head>",
        "<body>",
        "<table>",
    ]
    for row_cells in ws.iter_rows(min_row=1, max_row=ws.max_row, min_col=1, max_col=ws.max_column):
        cells = []
        for cell in row_cells:
            pos = (cell.row, cell.column)
            if pos in covered:
                continue
            attrs = ""
            if pos in anchors:
                rowspan, colspan = anchors[pos]
                if rowspan > 1:
                    attrs += f' rowspan="{rowspan}"'
                if colspan > 1:
                    attrs += f' colspan="{colspan}"'
            cells.append(f"<td{attrs}>{html_escape(_text(cell.value))}</td>")
        parts.append("<tr>" + "".join(cells) + "</tr>")
    parts.extend(["</table>", "</body>", "</html>"])
    return "\n".join(parts) + "\n"


# ── Save ──────────────────────────────────────────────────────────────────────

def _write_bytes(destination: Destination, payload: bytes) -> None:
    if hasattr(destination, "write"):
        destination.write(payload)
        return
    with open(destination, "wb") as f:
        f.write(payload)


def save_document(
    wb: Workbook,
    destination: Destination,
    fmt: str = "Xlsx",
    sheet: Optional[Worksheet] = None,
) -> str:
    """
    Write wb to a path or binary stream in the given format.
    Csv and Html render sheet, or the active sheet when sheet is None.
    Returns the canonical format name used.
    """
    name = canonical_format(fmt)
    if name not in ("Xlsx", "Csv", "Html"):
        raise AppError(
            UNSUPPORTED_FORMAT,
            f"No writer for format {fmt!r}",
            {"format": fmt},
        )

    ws = sheet if sheet is not None else wb.active
    path = None if hasattr(destination, "write") else os.fspath(destination)
    try:
        if name == "Xlsx":
            wb.save(destination)
        elif name == "Csv":
            _write_bytes(destination, render_csv(ws).encode("utf-8"))
        else:
            _write_bytes(destination, render_html(ws).encode("utf-8"))
    except PermissionError as e:
        raise AppError(
            FILE_LOCKED,
            f"Destination file is open in another program: {path}",
            {"path": path},
        ) from e
    except OSError as e:
        raise AppError(
            SAVE_FAILED,
            str(e),
            {"path": path, "format": name},
        ) from e

    logger.info("Saved %s document to %s", name, path or "stream")
    return name
