"""Mutations of the Project aggregate.

Every function takes the project it changes and mutates it in place; callers
persist the project afterwards. Parsed imports replace the budget items or the
planned curve as one unit.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, List, Optional, Sequence, Tuple

from obra_control.core.codes import normalize_code
from obra_control.core.enums import FinanceEventType, ItemType
from obra_control.core.models import (
    DEFAULT_PROJECT_NAME,
    Change,
    FinanceEvent,
    Project,
    Report,
    Revision,
    Suspension,
    default_contract_terms,
    new_id,
)
from obra_control.core.numbers import round_by_decimals
from obra_control.core.settings import Settings
from obra_control.ingestion.parsers import parse_budget_rows, parse_planned_rows
from obra_control.ingestion.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from obra_control.valuation.engine import previous_report

logger = logging.getLogger(__name__)


def new_project(name: Optional[str] = None, today: Optional[date] = None) -> Project:
    """Create an empty project with default contract terms (COP, today + 180 days)."""
    project = Project(
        id=new_id("proj"),
        name=name or DEFAULT_PROJECT_NAME,
        contract=default_contract_terms(today),
    )
    logger.info("Created project %s (%s)", project.id, project.name)
    return project


# ===================== MARK: Imports ======================================


def import_budget(
    project: Project,
    rows: Sequence[Sequence[Any]],
    settings: Settings,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    *,
    show_progress: bool = False,
) -> Tuple[int, List[str]]:
    """Parse budget rows and replace the project's items; revisions are kept.

    An empty parse leaves the existing items untouched.

    Returns:
        Number of items loaded and the parser warnings.
    """
    items, warnings = parse_budget_rows(rows, settings, vocabulary, show_progress=show_progress)
    if not items:
        logger.warning("Budget import produced no items; project %s left unchanged", project.id)
        return 0, warnings
    project.budget.items = items
    logger.info("Budget of %s replaced with %d item(s)", project.id, len(items))
    return len(items), warnings


def import_planned(
    project: Project,
    rows: Sequence[Sequence[Any]],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    *,
    show_progress: bool = False,
) -> Tuple[int, List[str]]:
    """Parse a planned-cost sheet and replace the project's planned curve.

    An empty parse leaves the existing curve untouched.
    """
    curve, warnings = parse_planned_rows(rows, vocabulary, show_progress=show_progress)
    if not curve:
        return 0, warnings
    project.planned.curve = curve
    return len(curve), warnings


# ===================== MARK: Revisions ====================================


def add_revision(
    project: Project, name: Optional[str] = None, effective_date: Optional[date] = None
) -> Revision:
    revisions = project.budget.revisions
    revision = Revision(
        id=new_id("rev"),
        name=name or f"MOD {len(revisions) + 1}",
        effective_date=effective_date,
    )
    revisions.append(revision)
    logger.info("Added revision %r to %s", revision.name, project.id)
    return revision


def find_revision(project: Project, revision_ref: str) -> Revision:
    """Look up a revision by id or name."""
    for revision in project.budget.revisions:
        if revision_ref in (revision.id, revision.name):
            return revision
    raise KeyError(f"Revision not found: {revision_ref}")


def set_revision_change(
    project: Project,
    revision_ref: str,
    code: str,
    quantity: Optional[float] = None,
    unit_price: Optional[float] = None,
) -> Change:
    """Set (or replace) the change a revision makes to one item code."""
    if quantity is None and unit_price is None:
        raise ValueError("A change needs a quantity, a unit price or both")
    revision = find_revision(project, revision_ref)
    change = Change(code_norm=normalize_code(code), quantity=quantity, unit_price=unit_price)
    revision.set_change(change)
    return change


# ===================== MARK: Reports ======================================


def find_report(project: Project, report_id: str) -> Report:
    for report in project.reports:
        if report.id == report_id:
            return report
    raise KeyError(f"Report not found: {report_id}")


def create_report(
    project: Project,
    cutoff_date: date,
    label: str = "",
    period_start: Optional[date] = None,
    notes: str = "",
) -> Report:
    """Create a progress report seeded from the latest earlier report.

    The cumulative map gets one entry per ITEM code, copied from the report
    with the latest cutoff before `cutoff_date` (0 when there is none).

    Raises:
        ValueError: The budget has no ITEM rows.
    """
    item_codes = [it.code_norm for it in project.budget.items_of_type(ItemType.ITEM)]
    if not item_codes:
        raise ValueError("Load a budget with at least one ITEM row before creating reports")

    report = Report(
        id=new_id("rep", cutoff_date.strftime("%Y%m%d")),
        cutoff_date=cutoff_date,
        label=label or cutoff_date.isoformat(),
        period_start=period_start,
        period_end=cutoff_date,
        notes=notes,
    )
    prev = previous_report(project, report)
    report.quantities = {
        code: prev.quantity_for(code) if prev is not None else 0.0 for code in item_codes
    }
    project.reports.append(report)
    logger.info(
        "Created report %s (%s)%s",
        report.id,
        report.label,
        f", seeded from {prev.id}" if prev is not None else "",
    )
    return report


def delete_report(project: Project, report_id: str) -> Report:
    """Remove a report; other reports are not touched."""
    report = find_report(project, report_id)
    project.reports.remove(report)
    return report


def set_report_quantity(project: Project, report_id: str, code: str, quantity: float) -> None:
    """Set the cumulative quantity of one code in a report."""
    report = find_report(project, report_id)
    report.quantities[normalize_code(code)] = float(quantity)


# ===================== MARK: Suspensions and finance ======================


def add_suspension(
    project: Project, start: Optional[date], end: Optional[date], reason: str = ""
) -> Suspension:
    suspension = Suspension(start=start, end=end, reason=reason)
    project.suspensions.append(suspension)
    return suspension


def remove_suspension(project: Project, index: int) -> Suspension:
    if not 0 <= index < len(project.suspensions):
        raise IndexError(f"No suspension at position {index}")
    return project.suspensions.pop(index)


def add_finance_event(
    project: Project,
    event_date: date,
    amount: float,
    event_type: FinanceEventType = FinanceEventType.PAYMENT,
    note: str = "",
) -> FinanceEvent:
    """Record a disbursement; events stay sorted by date."""
    event = FinanceEvent(date=event_date, type=event_type, amount=float(amount), note=note)
    project.finance.events.append(event)
    project.finance.events.sort(key=lambda e: e.date)
    return event


def delete_last_finance_event(project: Project) -> Optional[FinanceEvent]:
    """Remove the most recent event; None when there are no events."""
    if not project.finance.events:
        return None
    return project.finance.events.pop()


# ===================== MARK: Budget maintenance ===========================


def normalize_budget_quantities(project: Project, settings: Settings) -> int:
    """Round ITEM base quantities to the configured precision.

    Returns:
        Number of items whose quantity changed.
    """
    changed = 0
    items = []
    for item in project.budget.items:
        if item.type == ItemType.ITEM:
            rounded = round_by_decimals(item.quantity, settings.qty_decimals)
            if rounded is not None and rounded != item.quantity:
                item = replace(item, quantity=rounded)
                changed += 1
        items.append(item)
    project.budget.items = items
    logger.info("Normalized %d quantity(ies) to %d decimals", changed, settings.qty_decimals)
    return changed


__all__ = [
    "new_project",
    "import_budget",
    "import_planned",
    "add_revision",
    "find_revision",
    "set_revision_change",
    "find_report",
    "create_report",
    "delete_report",
    "set_report_quantity",
    "add_suspension",
    "remove_suspension",
    "add_finance_event",
    "delete_last_finance_event",
    "normalize_budget_quantities",
]
