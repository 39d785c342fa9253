"""Executed exceeds contract check: cumulative quantity above the effective contract quantity."""

from __future__ import annotations

from typing import List

from obra_control.core.enums import ItemType
from obra_control.core.models import Project
from obra_control.core.settings import Settings
from obra_control.valuation.overlay import effective_value
from ..config import QUANTITY_ABS_TOL, get_severity
from ..models import CheckResult

CHECK_ID = "executed_exceeds_contract"


class ExecutedExceedsContractCheck:
    def validate(self, project: Project, settings: Settings) -> List[CheckResult]:
        revisions = project.budget.revisions
        contract_qty = {
            it.code_norm: effective_value(it, revisions).quantity
            for it in project.budget.items_of_type(ItemType.ITEM)
        }
        messages = []
        for report in project.sorted_reports():
            for code, limit in contract_qty.items():
                executed = report.quantity_for(code)
                if executed > limit + QUANTITY_ABS_TOL:
                    messages.append(
                        f"Report '{report.label}' ({report.cutoff_date.isoformat()}): "
                        f"item {code} executed {executed:g} of contracted {limit:g}"
                    )
        return [CheckResult.from_messages(CHECK_ID, get_severity(CHECK_ID), messages)]

    def applies_to(self, settings: Settings) -> bool:
        return True
