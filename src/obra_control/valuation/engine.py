"""Contract and executed values of a project.

All money results are rounded with the project-independent `Settings` passed
in by the caller.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from obra_control.core.enums import ItemType
from obra_control.core.models import BudgetItem, Project, Report
from obra_control.core.numbers import round_by_decimals
from obra_control.core.settings import Settings
from .overlay import effective_value

logger = logging.getLogger(__name__)

CONTRACT_TOTAL_MARKER = "valor total"


@dataclass(frozen=True)
class Money:
    value: float
    currency: str


@dataclass(frozen=True)
class ExecutedValues:
    """Executed value of one report: cumulative to date and for its period only."""

    accumulated_value: float
    period_value: float
    currency: str


def _round_money(value: float, settings: Settings) -> float:
    rounded = round_by_decimals(value, settings.money_decimals)
    return rounded if rounded is not None else 0.0


# ===================== MARK: Contract value ===============================


def explicit_total_item(project: Project) -> Optional[BudgetItem]:
    """First TOTAL row labelled "valor total" that carries a finite, non-zero total.

    A label-only row (empty total cell) is parsed with a total of 0 and is
    skipped, so the summed budget applies.
    """
    for item in project.budget.items:
        if (
            item.type == ItemType.TOTAL
            and CONTRACT_TOTAL_MARKER in item.description.lower()
            and math.isfinite(item.total)
            and item.total != 0
        ):
            return item
    return None


def summed_contract_value(project: Project) -> float:
    """Unrounded sum of effective ITEM values plus AIU and LUMP totals.

    SUBTOTAL, CAP, SUB, TEXT and TOTAL rows never contribute.
    """
    revisions = project.budget.revisions
    total = 0.0
    for item in project.budget.items:
        if item.type == ItemType.ITEM:
            total += effective_value(item, revisions).total
        elif item.type in (ItemType.AIU, ItemType.LUMP):
            total += item.total if math.isfinite(item.total) else 0.0
    return total


def contract_value(project: Project, settings: Settings) -> Money:
    """Contract value of the project.

    An explicit "VALOR TOTAL" row wins over the summed budget. The two are
    not reconciled; see the ``contract_total_consistency`` validation check.
    """
    total_item = explicit_total_item(project)
    if total_item is not None:
        logger.debug("Contract value taken from explicit total row %r", total_item.description)
        return Money(_round_money(total_item.total, settings), project.currency)
    return Money(_round_money(summed_contract_value(project), settings), project.currency)


# ===================== MARK: Executed value ===============================


def previous_report(project: Project, report: Report) -> Optional[Report]:
    """Report with the latest cutoff strictly before `report`'s cutoff."""
    earlier = [r for r in project.reports if r.cutoff_date < report.cutoff_date]
    if not earlier:
        return None
    return max(earlier, key=lambda r: r.cutoff_date)


def executed_values(project: Project, report: Report, settings: Settings) -> ExecutedValues:
    prev = previous_report(project, report)
    revisions = project.budget.revisions
    accumulated = 0.0
    period = 0.0
    for item in project.budget.items_of_type(ItemType.ITEM):
        price = effective_value(item, revisions).unit_price
        accum_qty = report.quantity_for(item.code_norm)
        prev_qty = prev.quantity_for(item.code_norm) if prev is not None else 0.0
        accumulated += accum_qty * price
        period += (accum_qty - prev_qty) * price
    return ExecutedValues(
        accumulated_value=_round_money(accumulated, settings),
        period_value=_round_money(period, settings),
        currency=project.currency,
    )


def executed_percent(project: Project, report: Report, settings: Settings) -> Optional[float]:
    """Executed fraction of the contract value, None when the contract value is not positive."""
    contract = contract_value(project, settings).value
    if contract <= 0:
        return None
    return executed_values(project, report, settings).accumulated_value / contract


# ===================== MARK: Report views =================================


def latest_report(project: Project) -> Optional[Report]:
    reports = project.sorted_reports()
    return reports[-1] if reports else None


def report_rows(project: Project, report: Report, settings: Settings) -> List[Dict[str, object]]:
    """Per-item executed figures of a report (ITEM rows only)."""
    prev = previous_report(project, report)
    revisions = project.budget.revisions
    rows: List[Dict[str, object]] = []
    for item in project.budget.items_of_type(ItemType.ITEM):
        eff = effective_value(item, revisions)
        accum_qty = report.quantity_for(item.code_norm)
        prev_qty = prev.quantity_for(item.code_norm) if prev is not None else 0.0
        rows.append(
            {
                "code": item.code_norm,
                "description": item.description,
                "unit": item.unit,
                "contract_quantity": eff.quantity,
                "unit_price": eff.unit_price,
                "previous_quantity": prev_qty,
                "period_quantity": accum_qty - prev_qty,
                "accumulated_quantity": accum_qty,
                "accumulated_value": _round_money(accum_qty * eff.unit_price, settings),
            }
        )
    return rows


__all__ = [
    "CONTRACT_TOTAL_MARKER",
    "Money",
    "ExecutedValues",
    "explicit_total_item",
    "summed_contract_value",
    "contract_value",
    "previous_report",
    "executed_values",
    "executed_percent",
    "latest_report",
    "report_rows",
]
