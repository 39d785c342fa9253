"""Date recognition for spreadsheet cells."""

from __future__ import annotations

import math
import re
from datetime import date, timedelta
from typing import Any, Optional

from .cells import DateCell, EmptyCell, NumberCell, TextCell, to_cell

_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DMY_RE = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})$")

# Spreadsheet serials count days from 1899-12-30 (1899-12-31 below the
# phantom 1900-02-29).
_SERIAL_EPOCH = date(1899, 12, 30)
_SERIAL_EPOCH_EARLY = date(1899, 12, 31)
_SERIAL_MAX = 2958465  # 9999-12-31


def to_date(value: Any) -> Optional[date]:
    """Recognize a date in a cell or raw value.

    Accepts native dates, spreadsheet serial numbers, ``YYYY-MM-DD`` and
    ``DD/MM/YYYY`` / ``DD-MM-YYYY`` text. Anything else returns None.
    """
    cell = to_cell(value)
    if isinstance(cell, DateCell):
        return cell.value
    if isinstance(cell, NumberCell):
        return _from_serial(cell.value)
    if isinstance(cell, TextCell):
        return _from_text(cell.text.strip())
    if isinstance(cell, EmptyCell):
        return None
    raise TypeError(f"Unsupported cell: {cell!r}")


def to_iso_date(value: Any) -> Optional[str]:
    d = to_date(value)
    return d.isoformat() if d is not None else None


def _from_serial(serial: float) -> Optional[date]:
    if not math.isfinite(serial):
        return None
    days = int(serial)
    if days < 1 or days > _SERIAL_MAX:
        return None
    epoch = _SERIAL_EPOCH if days >= 61 else _SERIAL_EPOCH_EARLY
    return epoch + timedelta(days=days)


def _from_text(s: str) -> Optional[date]:
    if _ISO_RE.match(s):
        try:
            return date.fromisoformat(s)
        except ValueError:
            return None
    m = _DMY_RE.match(s)
    if m:
        day, month, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
        try:
            return date(year, month, day)
        except ValueError:
            return None
    return None


__all__ = ["to_date", "to_iso_date"]
