from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, Hashable, Optional, Union

from .errors import AppError, BAD_SPEC
from .settings import DEFAULT_TIMESTAMP_FORMAT


# ---- Row cell descriptors ----

@dataclass(frozen=True)
class Scalar:
    """A plain value written to one cell; the column cursor advances by one."""
    value: Any


@dataclass(frozen=True)
class Spanned:
    """
    A cell with layout options.
    col_span / row_span > 1 merges the cell rightwards / downwards.
    skip is how many columns the cursor advances after the cell.
    key registers the cell's location for later lookup.
    """
    value: Any = None
    col_span: int = 1
    row_span: int = 1
    skip: int = 1
    key: Optional[Hashable] = None

    def __post_init__(self) -> None:
        for name in ("col_span", "row_span", "skip"):
            n = getattr(self, name)
            if isinstance(n, bool) or not isinstance(n, int) or n < 1:
                raise AppError(BAD_SPEC, f"{name} must be an integer >= 1 (got {n!r})")

    @property
    def is_merged(self) -> bool:
        return self.col_span > 1 or self.row_span > 1


Cell = Union[Scalar, Spanned]


def _opt_int(data: Mapping[str, Any], name: str) -> int:
    raw = data.get(name)
    if raw is None:
        return 1
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise AppError(BAD_SPEC, f"Cell option {name!r} must be a number (got {raw!r})")


def to_cell(descriptor: Any) -> Cell:
    """
    Normalize one row item into a Scalar or Spanned cell.

    Mappings use the short option names accepted by add_row:
      {"value": ..., "col": 2, "row": 1, "skip": 1, "key": "total"}
    Anything that is not a mapping (or already a Cell) is a Scalar.
    """
    if isinstance(descriptor, (Scalar, Spanned)):
        return descriptor
    if isinstance(descriptor, Mapping):
        return Spanned(
            value=descriptor.get("value"),
            col_span=_opt_int(descriptor, "col"),
            row_span=_opt_int(descriptor, "row"),
            skip=_opt_int(descriptor, "skip"),
            key=descriptor.get("key"),
        )
    return Scalar(descriptor)


# ---- Read-back options ----

@dataclass
class ReadOptions:
    """
    Options for reader.get_rows.
    row / column override the last row / column read (None = sheet's highest).
    timestamp_format False (or "") leaves date cells as epoch seconds.
    """
    row: Optional[int] = None
    column: Optional[int] = None
    timestamp: bool = True
    timestamp_format: Union[str, bool, None] = DEFAULT_TIMESTAMP_FORMAT


# ---- Writer format registry entry ----

@dataclass(frozen=True)
class WriterFormat:
    extension: str
    content_type: str
