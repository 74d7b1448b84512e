"""
test_rows.py — add_row / add_rows: cursor movement, merges, skips, key maps.
"""
from __future__ import annotations

import pytest
from openpyxl import Workbook

from sheethelper.errors import AppError, BAD_SPEC, INVALID_STATE
from sheethelper.models import Scalar, Spanned
from sheethelper.rows import add_row, add_rows
from sheethelper.state import SheetContext


def _ctx() -> SheetContext:
    ctx = SheetContext()
    ctx.set_workbook(Workbook())
    return ctx


def _merged(ws):
    return sorted(str(r) for r in ws.merged_cells.ranges)


# ══════════════════════════════════════════════════════════════════════════════
# SCALARS
# ══════════════════════════════════════════════════════════════════════════════

def test_scalars_fill_left_to_right():
    ctx = _ctx()
    row = add_row(ctx, ["ID", "Name", 3])
    ws = ctx.sheet
    assert row == 1
    assert ws["A1"].value == "ID"
    assert ws["B1"].value == "Name"
    assert ws["C1"].value == 3


def test_each_call_writes_next_row_from_column_offset():
    ctx = _ctx()
    add_row(ctx, ["a", "b"])
    ctx.set_column_offset(3)
    add_row(ctx, ["c"])
    ws = ctx.sheet
    assert ws["C2"].value == "c"
    assert ctx.row_offset == 2


def test_row_offset_setter_moves_next_row():
    ctx = _ctx()
    ctx.set_row_offset(9)
    add_row(ctx, ["x"])
    assert ctx.sheet["A10"].value == "x"


def test_none_is_not_written_but_advances():
    ctx = _ctx()
    add_row(ctx, [None, "b"])
    ws = ctx.sheet
    assert ws["B1"].value == "b"
    assert ws.max_column == 2


def test_empty_row_still_advances_row():
    ctx = _ctx()
    add_row(ctx, [])
    add_row(ctx, ["x"])
    assert ctx.sheet["A2"].value == "x"


def test_first_row_selects_sheet_zero():
    ctx = _ctx()
    ctx.workbook.create_sheet("Second")
    add_row(ctx, ["x"])
    assert ctx.sheet is ctx.workbook.worksheets[0]


def test_add_row_without_document():
    with pytest.raises(AppError) as ei:
        add_row(SheetContext(), ["x"])
    assert ei.value.code == INVALID_STATE


@pytest.mark.parametrize("bad", ["abc", {"value": 1}, None])
def test_row_must_be_a_sequence(bad):
    with pytest.raises(AppError) as ei:
        add_row(_ctx(), bad)
    assert ei.value.code == BAD_SPEC


# ══════════════════════════════════════════════════════════════════════════════
# KEYS, MERGES AND SKIPS
# ══════════════════════════════════════════════════════════════════════════════

def test_single_key_on_fresh_sheet():
    ctx = _ctx()
    add_row(ctx, [{"value": "X", "key": "k1"}])
    keys = ctx.keys
    assert keys.coordinates["k1"] == "A1"
    assert keys.ranges["k1"] == "A1:A1"
    assert keys.rows["k1"] == 1
    assert keys.columns["k1"] == "A"
    assert _merged(ctx.sheet) == []


def test_col_span_merges_and_next_row_restarts_at_offset():
    ctx = _ctx()
    add_row(ctx, [{"value": "H", "col": 2, "key": "hdr"}])
    add_row(ctx, ["a", "b"])
    ws = ctx.sheet
    assert _merged(ws) == ["A1:B1"]
    assert ctx.keys.ranges["hdr"] == "A1:B1"
    assert ctx.keys.coordinates["hdr"] == "A1"
    assert ctx.keys.columns["hdr"] == "A"
    assert ws["A2"].value == "a"
    assert ws["B2"].value == "b"


def test_cursor_continues_after_merge_end():
    ctx = _ctx()
    add_row(ctx, ["x", {"value": "H", "col": 3, "key": "h"}, "y"])
    ws = ctx.sheet
    assert _merged(ws) == ["B1:D1"]
    assert ctx.keys.coordinates["h"] == "B1"
    assert ctx.keys.columns["h"] == "B"
    assert ws["E1"].value == "y"


def test_skip_range_and_cursor():
    ctx = _ctx()
    add_row(ctx, ["a", "b", {"value": "c", "skip": 3, "key": "k"}, "d"])
    ws = ctx.sheet
    assert ws["A1"].value == "a"
    assert ws["B1"].value == "b"
    assert ws["C1"].value == "c"
    assert ctx.keys.ranges["k"] == "C1:E1"
    assert ctx.keys.coordinates["k"] == "C1"
    assert ws["D1"].value is None
    assert ws["F1"].value == "d"


def test_skip_compounds_with_merge():
    ctx = _ctx()
    add_row(ctx, [{"value": "H", "col": 2, "skip": 2, "key": "h"}, "x"])
    ws = ctx.sheet
    assert ctx.keys.ranges["h"] == "A1:B1"
    assert ws["C1"].value is None
    assert ws["D1"].value == "x"


def test_row_span_merge_downwards():
    ctx = _ctx()
    add_row(ctx, [{"value": "T", "row": 2, "key": "t"}, "x"])
    add_row(ctx, [None, "y"])
    ws = ctx.sheet
    assert _merged(ws) == ["A1:A2"]
    assert ctx.keys.ranges["t"] == "A1:A2"
    assert ctx.keys.rows["t"] == 1
    assert ws["B1"].value == "x"
    assert ws["B2"].value == "y"


def test_cells_under_a_merge_are_passed_over():
    ctx = _ctx()
    add_row(ctx, ["a", {"value": "T", "row": 2}, "c"])
    add_row(ctx, ["d", "", "f"])
    ws = ctx.sheet
    assert _merged(ws) == ["B1:B2"]
    assert ws["A2"].value == "d"
    assert ws["B1"].value == "T"
    assert ws["B2"].value is None
    assert ws["C2"].value == "f"
    assert ctx.row_offset == 2


def test_value_under_a_merge_does_not_shift_the_row():
    ctx = _ctx()
    add_row(ctx, [{"value": "T", "row": 2}])
    add_row(ctx, ["inside", "x"])
    ws = ctx.sheet
    assert ws["A1"].value == "T"
    assert ws["A2"].value is None
    assert ws["B2"].value == "x"


def test_rewriting_a_row_clears_none_cells():
    ctx = _ctx()
    add_row(ctx, ["old", "old", {"value": "old", "key": "k"}])
    ctx.set_row_offset(0)
    add_row(ctx, ["new", None, {"key": "k"}])
    ws = ctx.sheet
    assert ws["A1"].value == "new"
    assert ws["B1"].value is None
    assert ws["C1"].value is None
    assert ctx.keys.coordinates["k"] == "C1"


def test_none_on_fresh_row_creates_no_cells():
    ctx = _ctx()
    add_row(ctx, ["a"])
    add_row(ctx, [None, None, None])
    ws = ctx.sheet
    assert ws.max_row == 1
    assert ws.max_column == 1


def test_block_merge_key_uses_start_column():
    ctx = _ctx()
    ctx.set_column_offset(2)
    add_row(ctx, [{"value": "Box", "col": 2, "row": 3, "key": "box"}])
    assert ctx.keys.ranges["box"] == "B1:C3"
    assert ctx.keys.coordinates["box"] == "B1"
    assert ctx.keys.columns["box"] == "B"
    assert ctx.keys.rows["box"] == 1


def test_cell_objects_and_integer_keys():
    ctx = _ctx()
    add_row(ctx, [Scalar("a"), Spanned(value="b", key=0)])
    assert ctx.sheet["B1"].value == "b"
    assert ctx.keys.coordinates[0] == "B1"


def test_key_overwritten_by_later_row():
    ctx = _ctx()
    add_row(ctx, [{"value": 1, "key": "k"}])
    add_row(ctx, ["x", {"value": 2, "key": "k"}])
    assert ctx.keys.coordinates["k"] == "B2"


def test_bad_descriptor_leaves_sheet_untouched():
    ctx = _ctx()
    with pytest.raises(AppError):
        add_row(ctx, ["a", {"value": "b", "col": 0}])
    assert ctx.sheet["A1"].value is None
    assert ctx.row_offset == 0


def test_unwritable_value_rejected():
    with pytest.raises(AppError) as ei:
        add_row(_ctx(), [["nested", "list"]])
    assert ei.value.code == BAD_SPEC


# ══════════════════════════════════════════════════════════════════════════════
# add_rows
# ══════════════════════════════════════════════════════════════════════════════

def test_add_rows_in_order():
    ctx = _ctx()
    count = add_rows(ctx, [["1", "Nick"], ["2", "Eric"]])
    ws = ctx.sheet
    assert count == 2
    assert ws["B1"].value == "Nick"
    assert ws["B2"].value == "Eric"


def test_add_rows_accepts_generator():
    ctx = _ctx()
    add_rows(ctx, ([i] for i in range(3)))
    assert ctx.sheet["A3"].value == 2


def test_add_rows_fail_fast():
    ctx = _ctx()
    with pytest.raises(AppError) as ei:
        add_rows(ctx, [["a"], "not a row", ["c"]])
    assert ei.value.code == BAD_SPEC
    ws = ctx.sheet
    assert ws["A1"].value == "a"
    assert ws["A2"].value is None
    assert ctx.row_offset == 1


def test_add_rows_without_document():
    with pytest.raises(AppError) as ei:
        add_rows(SheetContext(), [["a"], ["b"]])
    assert ei.value.code == INVALID_STATE
