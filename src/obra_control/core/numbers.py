"""Numeric parsing and rounding helpers.

Rounding works on the shortest decimal representation of a float (its repr),
so 1.005 rounds to 1.01 even though the binary value sits slightly below it.
"""

from __future__ import annotations

import math
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Optional

from .cells import DateCell, EmptyCell, NumberCell, TextCell, to_cell

# Money precision sentinel: truncate to whole thousands.
MONEY_THOUSANDS = -3


def parse_number(value: Any) -> Optional[float]:
    """Parse a cell or raw value into a finite float.

    Text accepts Colombian-style separators: "1.234,56" and "1234,56" both
    read as 1234.56. Returns None for empty, non-numeric or non-finite input.
    """
    cell = to_cell(value)
    if isinstance(cell, NumberCell):
        return cell.value if math.isfinite(cell.value) else None
    if isinstance(cell, (EmptyCell, DateCell)):
        return None
    if isinstance(cell, TextCell):
        return _parse_number_text(cell.text)
    raise TypeError(f"Unsupported cell: {cell!r}")


def _parse_number_text(text: str) -> Optional[float]:
    s = text.strip()
    if not s or "_" in s:
        return None
    has_comma = "," in s
    has_dot = "." in s
    if has_comma and has_dot:
        s = s.replace(".", "").replace(",", ".", 1)
    elif has_comma:
        s = s.replace(",", ".", 1)
    try:
        n = float(s)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def round_by_decimals(value: Any, decimals: int) -> Optional[float]:
    """Round half away from zero at `decimals` digits.

    `MONEY_THOUSANDS` truncates toward zero to whole thousands instead
    (1249999 -> 1249000).

    Examples:
        >>> round_by_decimals(1.005, 2)
        1.01
        >>> round_by_decimals(1249999, MONEY_THOUSANDS)
        1249000.0
    """
    if value is None:
        return None
    try:
        x = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(x):
        return None
    d = Decimal(repr(x))
    with localcontext() as ctx:
        # Enough digits for the integer part plus the kept decimals.
        ctx.prec = max(60, d.adjusted() + abs(int(decimals)) + 2)
        if decimals == MONEY_THOUSANDS:
            return float((d / 1000).to_integral_value(rounding=ROUND_DOWN) * 1000)
        quantum = Decimal(1).scaleb(-int(decimals))
        return float(d.quantize(quantum, rounding=ROUND_HALF_UP))


def decimals_count(value: Any) -> int:
    """Number of fractional digits in the shortest representation of a number."""
    if value is None:
        return 0
    try:
        x = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(x):
        return 0
    exponent = Decimal(repr(x)).normalize().as_tuple().exponent
    return max(0, -int(exponent))


__all__ = [
    "MONEY_THOUSANDS",
    "parse_number",
    "round_by_decimals",
    "decimals_count",
]
