"""
sheethelper/parsing.py — Column letters, coordinates and range strings.

Columns are 1-based everywhere: 1 <-> "A", 26 <-> "Z", 27 <-> "AA".
The letter form is bijective base-26 (no zero digit).
"""
from __future__ import annotations

import re
from typing import Tuple

from openpyxl.utils.cell import range_boundaries

from .errors import AppError, BAD_SPEC


_COL_RE = re.compile(r"^[A-Z]+$")


def col_letters_to_index(col: str) -> int:
    """
    Convert Excel column letters to 1-based index (A->1, Z->26, AA->27).
    """
    s = (col or "").strip().upper()
    if not s or not _COL_RE.match(s):
        raise AppError(BAD_SPEC, f"Bad column: {col!r}")
    n = 0
    for ch in s:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n


def col_index_to_letters(n: int) -> str:
    """
    Convert 1-based index to Excel column letters (1->A).
    """
    if n <= 0:
        raise AppError(BAD_SPEC, f"Bad column index: {n}")
    out = []
    x = n
    while x:
        x, rem = divmod(x - 1, 26)
        out.append(chr(ord("A") + rem))
    return "".join(reversed(out))


def coordinate(col: int, row: int) -> str:
    """(3, 7) -> 'C7'"""
    return f"{col_index_to_letters(col)}{row}"


def range_string(col_start: int, row_start: int, col_end: int, row_end: int) -> str:
    return f"{coordinate(col_start, row_start)}:{coordinate(col_end, row_end)}"


def range_bounds(rng: str) -> Tuple[int, int, int, int]:
    """
    Parse 'A1:C3' (or a single 'B2') into (min_col, min_row, max_col, max_row).
    Whole-column / whole-row ranges are rejected; they have no finite bounds.
    """
    try:
        bounds = range_boundaries((rng or "").strip().upper())
    except (TypeError, ValueError) as e:
        raise AppError(BAD_SPEC, f"Bad range: {rng!r}") from e
    if any(b is None for b in bounds):
        raise AppError(BAD_SPEC, f"Range must name both rows and columns: {rng!r}")
    return bounds
