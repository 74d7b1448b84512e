import os
from tempfile import TemporaryDirectory

import pytest
from openpyxl import Workbook

from sheethelper.errors import AppError, SOURCE_READ_FAILED, UNSUPPORTED_FORMAT
from sheethelper.io import is_occupied, load_csv, load_document, rows_to_workbook


def test_is_occupied():
    assert not is_occupied(None)
    assert not is_occupied("")
    assert is_occupied(" ")
    assert is_occupied(0)
    assert is_occupied("text")


def test_rows_to_workbook_skips_blank_cells():
    wb = rows_to_workbook([["a", "", "c"], ["d"]])
    ws = wb.active
    assert ws.title == "Sheet1"
    assert ws["A1"].value == "a"
    assert ws["B1"].value is None
    assert ws["C1"].value == "c"
    assert ws["A2"].value == "d"


def test_load_csv_and_document():
    with TemporaryDirectory() as td:
        path = os.path.join(td, "in.csv")
        with open(path, "w", newline="", encoding="utf-8") as f:
            f.write("ID,Name\n1,Nick\n")
        assert load_csv(path) == [["ID", "Name"], ["1", "Nick"]]
        ws = load_document(path).active
        assert ws["B2"].value == "Nick"


def test_load_xlsx_document():
    with TemporaryDirectory() as td:
        path = os.path.join(td, "in.xlsx")
        wb = Workbook()
        wb.active["A1"] = "hello"
        wb.create_sheet("Two")
        wb.save(path)
        loaded = load_document(path)
        assert loaded.sheetnames == ["Sheet", "Two"]
        assert loaded.active["A1"].value == "hello"


def test_load_unknown_extension():
    with pytest.raises(AppError) as ei:
        load_document("report.pdf")
    assert ei.value.code == UNSUPPORTED_FORMAT


def test_load_missing_file():
    with TemporaryDirectory() as td:
        with pytest.raises(AppError) as ei:
            load_document(os.path.join(td, "missing.xlsx"))
        assert ei.value.code == SOURCE_READ_FAILED
        assert ei.value.details["path"].endswith("missing.xlsx")
