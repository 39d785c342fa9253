"""Valuation: revision overlay, contract/executed values, suspensions, finance and series.

Public API:
    effective_value: Item quantity/price after a list of revisions
    contract_value, executed_values, executed_percent: Money figures
    shift_date: Planned-date alignment for contract suspensions
    accumulated_as_of, finance_percent: Disbursement figures
    planned_vs_executed_series, finance_vs_executed_series: Comparison curves
"""

from .engine import (
    ExecutedValues,
    Money,
    contract_value,
    executed_percent,
    executed_values,
    latest_report,
    previous_report,
    report_rows,
)
from .finance import accumulated_as_of, finance_percent
from .frames import budget_frame
from .overlay import EffectiveValue, effective_value, effective_values_by_revision
from .series import (
    Series,
    SeriesPoint,
    finance_vs_executed_series,
    planned_vs_executed_series,
    project_kpis,
    series_frame,
)
from .suspensions import shift_date, suspended_days_before

__all__ = [
    "EffectiveValue",
    "effective_value",
    "effective_values_by_revision",
    "Money",
    "ExecutedValues",
    "contract_value",
    "executed_values",
    "executed_percent",
    "latest_report",
    "previous_report",
    "report_rows",
    "accumulated_as_of",
    "finance_percent",
    "budget_frame",
    "shift_date",
    "suspended_days_before",
    "Series",
    "SeriesPoint",
    "planned_vs_executed_series",
    "finance_vs_executed_series",
    "series_frame",
    "project_kpis",
]
