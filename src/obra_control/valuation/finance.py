"""Disbursement totals (advances and payments) against the contract value."""

from __future__ import annotations

from datetime import date
from typing import Optional

from obra_control.core.models import Project
from obra_control.core.numbers import round_by_decimals
from obra_control.core.settings import Settings
from .engine import contract_value


def accumulated_as_of(project: Project, settings: Settings, cutoff: Optional[date] = None) -> float:
    """Sum of event amounts dated on or before `cutoff` (all events when omitted)."""
    total = sum(
        event.amount
        for event in project.finance.events
        if cutoff is None or event.date <= cutoff
    )
    rounded = round_by_decimals(total, settings.money_decimals)
    return rounded if rounded is not None else 0.0


def finance_percent(
    project: Project, settings: Settings, cutoff: Optional[date] = None
) -> Optional[float]:
    contract = contract_value(project, settings).value
    if contract <= 0:
        return None
    return accumulated_as_of(project, settings, cutoff) / contract


__all__ = ["accumulated_as_of", "finance_percent"]
