from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AppError(Exception):
    """
    Error with a short code and structured details.
    Raised by every sheethelper module; callers branch on .code.
    """
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"


# ── Error codes (keep stable for tests and callers) ───────────────────────────

INVALID_STATE      = "INVALID_STATE"
BAD_SPEC           = "BAD_SPEC"
UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
SOURCE_READ_FAILED = "SOURCE_READ_FAILED"
FILE_LOCKED        = "FILE_LOCKED"
SAVE_FAILED        = "SAVE_FAILED"


# ── Friendly message lookup ───────────────────────────────────────────────────

def friendly_message(e: AppError) -> str:
    """
    Return a plain-English one-liner suitable for showing to an end user.
    """
    code = e.code
    msg  = e.message or ""

    fname = ""
    if e.details and "path" in e.details:
        fname = f" ({os.path.basename(str(e.details['path']))})"

    if code == INVALID_STATE:
        return f"No spreadsheet is open. Create or load a spreadsheet first.\n({msg})"

    if code == FILE_LOCKED:
        return f"File is open in another program{fname}. Close it and try again."

    if code == SAVE_FAILED:
        return f"Could not save the spreadsheet{fname}. Check that the path is valid and the folder exists."

    if code == SOURCE_READ_FAILED:
        if "no such file" in msg.lower() or "not found" in msg.lower():
            return "Spreadsheet file not found. Check that the file path is correct."
        return f"Could not read the spreadsheet{fname}. Check that it is a valid XLSX or CSV.\n({msg})"

    if code == UNSUPPORTED_FORMAT:
        fmt = (e.details or {}).get("format", "")
        if fmt:
            return f"The {fmt} format is not supported here. Use Xlsx, Csv or Html."
        return f"Unsupported spreadsheet format.\n({msg})"

    if code == BAD_SPEC:
        if "column" in msg.lower():
            return f"Invalid column. Use letters like A, B, AA or numbers starting at 1.\n({msg})"
        if "range" in msg.lower():
            return f"Invalid cell range. Use a form like A1:C3.\n({msg})"
        return f"Invalid setting, please check the cell data.\n({msg})"

    clean = msg.splitlines()[0] if msg else "An unexpected error occurred."
    return clean
