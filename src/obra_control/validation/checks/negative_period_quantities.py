"""Negative period quantities check.

Report quantities are cumulative, so a report holding less than the previous
report for the same code implies negative progress in its period.
"""

from __future__ import annotations

from typing import List

from obra_control.core.enums import ItemType
from obra_control.core.models import Project
from obra_control.core.settings import Settings
from obra_control.valuation.engine import previous_report
from ..config import QUANTITY_ABS_TOL, get_severity
from ..models import CheckResult

CHECK_ID = "negative_period_quantities"


class NegativePeriodQuantitiesCheck:
    def validate(self, project: Project, settings: Settings) -> List[CheckResult]:
        codes = [it.code_norm for it in project.budget.items_of_type(ItemType.ITEM)]
        messages = []
        for report in project.sorted_reports():
            prev = previous_report(project, report)
            if prev is None:
                continue
            for code in codes:
                period = report.quantity_for(code) - prev.quantity_for(code)
                if period < -QUANTITY_ABS_TOL:
                    messages.append(
                        f"Report '{report.label}' ({report.cutoff_date.isoformat()}): "
                        f"item {code} period quantity {period:g}"
                    )
        return [CheckResult.from_messages(CHECK_ID, get_severity(CHECK_ID), messages)]

    def applies_to(self, settings: Settings) -> bool:
        return True
