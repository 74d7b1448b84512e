"""
test_friendly_errors.py — Tests for friendly_message() in sheethelper.errors.
"""
from __future__ import annotations

from sheethelper.errors import (
    AppError,
    friendly_message,
    BAD_SPEC,
    FILE_LOCKED,
    INVALID_STATE,
    SAVE_FAILED,
    SOURCE_READ_FAILED,
    UNSUPPORTED_FORMAT,
)


def test_invalid_state_message_mentions_spreadsheet():
    msg = friendly_message(AppError(INVALID_STATE, "No spreadsheet is set"))
    assert "spreadsheet" in msg.lower()


def test_file_locked_message_mentions_program():
    e = AppError(FILE_LOCKED, "File is locked", {"path": "C:/data/output.xlsx"})
    msg = friendly_message(e)
    assert "open in another program" in msg
    assert "output.xlsx" in msg


def test_file_locked_message_no_path():
    msg = friendly_message(AppError(FILE_LOCKED, "File is locked"))
    assert "open in another program" in msg


def test_save_failed_message_names_file():
    e = AppError(SAVE_FAILED, "disk full", {"path": "/tmp/out.xlsx"})
    msg = friendly_message(e)
    assert "save" in msg.lower()
    assert "out.xlsx" in msg


def test_source_read_not_found():
    msg = friendly_message(AppError(SOURCE_READ_FAILED, "No such file or directory"))
    assert "not found" in msg.lower()


def test_source_read_generic():
    msg = friendly_message(AppError(SOURCE_READ_FAILED, "bad zip"))
    assert "bad zip" in msg


def test_unsupported_format_names_format():
    msg = friendly_message(AppError(UNSUPPORTED_FORMAT, "No writer", {"format": "Ods"}))
    assert "Ods" in msg


def test_bad_spec_column_and_range_hints():
    assert "column" in friendly_message(AppError(BAD_SPEC, "Bad column: '1'")).lower()
    assert "A1:C3" in friendly_message(AppError(BAD_SPEC, "Bad range: 'x'"))


def test_unknown_code_uses_first_line_only():
    msg = friendly_message(AppError("OTHER", "first line\nTraceback..."))
    assert msg == "first line"


def test_unknown_code_empty_message():
    assert friendly_message(AppError("OTHER", "")) == "An unexpected error occurred."
