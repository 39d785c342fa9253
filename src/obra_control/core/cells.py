"""Spreadsheet cell values.

The external workbook decoder hands over rows of raw Python values (floats,
strings, datetimes, NaN, None ...). Everything downstream works on the tagged
union defined here instead of probing raw values at each call site:

- NumberCell: a numeric cell (ints and numpy scalars are widened to float)
- TextCell: a non-blank text cell
- DateCell: a native date/datetime cell
- EmptyCell: None, NaN/NaT or blank text
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, List, Sequence, Union

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class NumberCell:
    value: float


@dataclass(frozen=True)
class TextCell:
    text: str


@dataclass(frozen=True)
class DateCell:
    value: date


@dataclass(frozen=True)
class EmptyCell:
    pass


Cell = Union[NumberCell, TextCell, DateCell, EmptyCell]
Row = Sequence[Cell]

EMPTY = EmptyCell()


def to_cell(raw: Any) -> Cell:
    """Convert one decoded raw value into a Cell."""
    if isinstance(raw, (NumberCell, TextCell, DateCell, EmptyCell)):
        return raw
    if raw is None:
        return EMPTY
    if pd.api.types.is_scalar(raw) and not isinstance(raw, str) and pd.isna(raw):
        return EMPTY
    if isinstance(raw, (bool, np.bool_)):
        return TextCell(str(bool(raw)))
    if isinstance(raw, datetime):
        return DateCell(raw.date())
    if isinstance(raw, date):
        return DateCell(raw)
    if isinstance(raw, (int, float, np.integer, np.floating)):
        return NumberCell(float(raw))
    text = str(raw)
    if not text.strip():
        return EMPTY
    return TextCell(text)


def to_row(raw_row: Iterable[Any], width: int = 0) -> List[Cell]:
    """Convert a raw row, padding with empty cells up to `width`."""
    cells = [to_cell(v) for v in (raw_row or [])]
    if len(cells) < width:
        cells.extend([EMPTY] * (width - len(cells)))
    return cells


def to_rows(raw_rows: Iterable[Iterable[Any]]) -> List[List[Cell]]:
    """Convert decoded rows into a fixed-width table of cells."""
    rows = [list(r) if r is not None else [] for r in raw_rows]
    width = max((len(r) for r in rows), default=0)
    return [to_row(r, width) for r in rows]


def is_empty(cell: Cell) -> bool:
    return isinstance(cell, EmptyCell)


def cell_text(cell: Cell) -> str:
    """Render a cell as trimmed text.

    Integral numbers render without a decimal part so that a numeric code
    cell such as 1.0 reads as "1".
    """
    if isinstance(cell, EmptyCell):
        return ""
    if isinstance(cell, TextCell):
        return cell.text.strip()
    if isinstance(cell, NumberCell):
        v = cell.value
        if math.isfinite(v) and v.is_integer():
            return str(int(v))
        return repr(v)
    if isinstance(cell, DateCell):
        return cell.value.isoformat()
    raise TypeError(f"Unsupported cell: {cell!r}")


__all__ = [
    "Cell",
    "Row",
    "NumberCell",
    "TextCell",
    "DateCell",
    "EmptyCell",
    "EMPTY",
    "to_cell",
    "to_row",
    "to_rows",
    "is_empty",
    "cell_text",
]
