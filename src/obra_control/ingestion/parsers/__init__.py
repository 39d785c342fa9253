"""Spreadsheet row parsers for budgets and planned cost curves.

Public API:
 - classify_row
 - parse_budget_rows
 - parse_planned_rows
 - find_header_row, map_columns (header heuristics)
"""

from ._common import find_column, find_header_row, map_columns
from .budget_table import parse_budget_rows
from .classifier import classify_row
from .planned_curve import accumulate_points, parse_planned_rows

__all__ = [
    "classify_row",
    "parse_budget_rows",
    "parse_planned_rows",
    "accumulate_points",
    "find_header_row",
    "find_column",
    "map_columns",
]
