"""Planned cost curve parser.

Two sheet layouts are recognised, tried in order:

- Long: the header has a date column and a cost column; each data row with a
  recognisable date and a numeric cost contributes one (date, cost) pair.
- Wide: the header cells themselves are dates (a schedule export); every
  numeric cell below a date header is summed into that date.

Both layouts feed the same aggregation: costs are summed per date, dates are
sorted and the curve holds the running cumulative cost.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from tqdm import tqdm

from obra_control.core.cells import Cell, DateCell, Row, TextCell, to_rows
from obra_control.core.dates import to_date
from obra_control.core.models import PlannedCurvePoint
from obra_control.core.numbers import parse_number
from ..vocabulary import DEFAULT_VOCABULARY, Vocabulary
from ._common import find_column, find_header_row, header_texts, pick_cell


logger = logging.getLogger(__name__)

EMPTY_SHEET_WARNING = "Empty sheet."
NO_HEADER_WARNING = "No header row found."


def accumulate_points(points: Iterable[Tuple[date, float]]) -> List[PlannedCurvePoint]:
    """Sum costs per date, sort by date and return the running cumulative curve."""
    by_date: Dict[date, float] = {}
    for point_date, cost in points:
        by_date[point_date] = by_date.get(point_date, 0.0) + cost
    curve: List[PlannedCurvePoint] = []
    accum = 0.0
    for point_date in sorted(by_date):
        accum += by_date[point_date]
        curve.append(PlannedCurvePoint(date=point_date, planned_cost_accum=accum))
    return curve


def _is_date_label(cell: Cell) -> bool:
    """Date-valued or date-looking text cell (numbers are not counted)."""
    if isinstance(cell, DateCell):
        return True
    return isinstance(cell, TextCell) and to_date(cell) is not None


def _long_points(
    data_rows: Sequence[Row], date_col: int, cost_col: int, show_progress: bool
) -> List[Tuple[date, float]]:
    points: List[Tuple[date, float]] = []
    for row in tqdm(data_rows, desc=f"{'Parsing planned curve':<31}", disable=not show_progress):
        cost = parse_number(pick_cell(row, cost_col))
        if cost is None:
            continue
        point_date = to_date(pick_cell(row, date_col))
        if point_date is None:
            continue
        points.append((point_date, cost))
    return points


def _wide_points(
    data_rows: Sequence[Row], date_cols: List[Tuple[int, date]], show_progress: bool
) -> List[Tuple[date, float]]:
    sums: Dict[date, float] = {d: 0.0 for _, d in date_cols}
    for row in tqdm(data_rows, desc=f"{'Parsing planned curve':<31}", disable=not show_progress):
        for i, col_date in date_cols:
            value = parse_number(pick_cell(row, i))
            if value is None:
                continue
            sums[col_date] += value
    return list(sums.items())


def parse_planned_rows(
    rows: Sequence[Sequence[Any]],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    *,
    show_progress: bool = False,
) -> Tuple[List[PlannedCurvePoint], List[str]]:
    """Parse a decoded planned-cost sheet into a cumulative curve.

    Args:
        rows: Decoded rows, one sequence of raw cell values per spreadsheet row.
        vocabulary: Header keywords and date/cost column synonyms.
        show_progress: Display a tqdm progress bar.

    Returns:
        curve: Cumulative planned cost per date, ascending.
        warnings: Non-fatal problems (an empty curve always has one).
    """
    table = to_rows(rows)
    if not table:
        logger.warning(EMPTY_SHEET_WARNING)
        return [], [EMPTY_SHEET_WARNING]

    planned = vocabulary.planned
    header_vocab = replace(
        vocabulary.header,
        keywords=tuple(vocabulary.header.keywords) + planned.date_columns + planned.cost_columns,
    )
    header_idx = find_header_row(table, header_vocab, extra_hit=_is_date_label)
    if header_idx < 0:
        logger.warning(NO_HEADER_WARNING)
        return [], [NO_HEADER_WARNING]

    header_row = table[header_idx]
    header = header_texts(header_row)
    data_rows = table[header_idx + 1 :]
    date_col = find_column(header, planned.date_columns)
    cost_col = find_column(header, planned.cost_columns)

    if date_col >= 0 and cost_col >= 0:
        logger.info("Planned sheet: long layout (date col %d, cost col %d)", date_col, cost_col)
        points = _long_points(data_rows, date_col, cost_col, show_progress)
    else:
        date_cols: List[Tuple[int, date]] = []
        for i, cell in enumerate(header_row):
            col_date = to_date(cell)
            if col_date is not None:
                date_cols.append((i, col_date))
        if len(date_cols) < planned.min_date_columns:
            msg = (
                "Could not detect date/cost columns. Use a sheet with 'Fecha' and 'Costo' "
                "columns, or a schedule export with dates as column headers."
            )
            logger.warning(msg)
            return [], [msg]
        logger.info("Planned sheet: wide layout (%d date columns)", len(date_cols))
        points = _wide_points(data_rows, date_cols, show_progress)

    curve = accumulate_points(points)
    logger.info("Planned curve: %d point(s) loaded", len(curve))
    return curve, []


__all__ = ["EMPTY_SHEET_WARNING", "NO_HEADER_WARNING", "accumulate_points", "parse_planned_rows"]
