"""Comparison series for progress charts.

Two series sets are produced, both as fractions of the contract value:

- planned vs executed: cumulative planned cost per (optionally
  suspension-shifted) planned date, and executed value per report cutoff;
- finance vs executed: disbursed amount and executed value per report cutoff.

Each builder returns None when there is nothing meaningful to compare
(no reports, no planned curve, or a contract value that is not positive).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from obra_control.core.models import Project
from obra_control.core.settings import Settings
from .engine import contract_value, executed_percent, latest_report
from .finance import accumulated_as_of, finance_percent
from .suspensions import shift_date

PLANNED = "planned"
EXECUTED = "executed"
FINANCE = "finance"


@dataclass(frozen=True)
class SeriesPoint:
    date: date
    value: float


@dataclass
class Series:
    name: str
    points: List[SeriesPoint] = field(default_factory=list)


def _executed_series(project: Project, settings: Settings) -> Series:
    points = []
    for report in project.sorted_reports():
        pct = executed_percent(project, report, settings)
        points.append(SeriesPoint(report.cutoff_date, pct if pct is not None else 0.0))
    return Series(EXECUTED, points)


def planned_vs_executed_series(project: Project, settings: Settings) -> Optional[List[Series]]:
    curve = sorted(project.planned.curve, key=lambda p: p.date)
    if not curve or not project.reports:
        return None
    contract = contract_value(project, settings).value
    if contract <= 0:
        return None

    planned = Series(PLANNED)
    for point in curve:
        when = shift_date(point.date, project) if settings.shift_planned_by_suspensions else point.date
        planned.points.append(SeriesPoint(when, point.planned_cost_accum / contract))
    return [planned, _executed_series(project, settings)]


def finance_vs_executed_series(project: Project, settings: Settings) -> Optional[List[Series]]:
    if not project.reports:
        return None
    contract = contract_value(project, settings).value
    if contract <= 0:
        return None

    finance = Series(
        FINANCE,
        [
            SeriesPoint(r.cutoff_date, accumulated_as_of(project, settings, r.cutoff_date) / contract)
            for r in project.sorted_reports()
        ],
    )
    return [finance, _executed_series(project, settings)]


def series_frame(series: Optional[List[Series]]) -> pd.DataFrame:
    """Long-format frame with columns ``series``, ``date``, ``value``."""
    records = [
        {"series": s.name, "date": p.date.isoformat(), "value": p.value}
        for s in series or []
        for p in s.points
    ]
    return pd.DataFrame(records, columns=["series", "date", "value"])


# ===================== MARK: KPIs =========================================


def project_kpis(project: Project, settings: Settings) -> Dict[str, object]:
    """Headline figures: contract value, last report, executed and financial fractions."""
    contract = contract_value(project, settings)
    last = latest_report(project)
    kpis: Dict[str, object] = {
        "contract_value": contract.value,
        "currency": contract.currency,
        "last_report": None,
        "executed_percent": None,
        "finance_percent": None,
    }
    if last is not None:
        kpis["last_report"] = f"{last.label or 'Report'} · {last.cutoff_date.isoformat()}"
        kpis["executed_percent"] = executed_percent(project, last, settings)
        kpis["finance_percent"] = finance_percent(project, settings, last.cutoff_date)
    return kpis


__all__ = [
    "PLANNED",
    "EXECUTED",
    "FINANCE",
    "SeriesPoint",
    "Series",
    "planned_vs_executed_series",
    "finance_vs_executed_series",
    "series_frame",
    "project_kpis",
]
