"""Contract total consistency check.

When the budget carries an explicit "VALOR TOTAL" row, that value is used as
the contract value and the summed budget is ignored. This check reports when
the two disagree so the user can decide which one is right.
"""

from __future__ import annotations

from typing import List

from obra_control.core.models import Project
from obra_control.core.numbers import round_by_decimals
from obra_control.core.settings import Settings
from obra_control.valuation.engine import explicit_total_item, summed_contract_value
from ..config import CONTRACT_TOTAL_ABS_TOL, get_severity
from ..models import CheckResult

CHECK_ID = "contract_total_consistency"


class ContractTotalConsistencyCheck:
    """Compare the explicit total row with the summed budget."""

    def validate(self, project: Project, settings: Settings) -> List[CheckResult]:
        messages = []
        total_item = explicit_total_item(project)
        if total_item is not None:
            explicit = round_by_decimals(total_item.total, settings.money_decimals) or 0.0
            summed = round_by_decimals(summed_contract_value(project), settings.money_decimals) or 0.0
            diff = explicit - summed
            if abs(diff) > CONTRACT_TOTAL_ABS_TOL:
                messages.append(
                    f"Explicit total row '{total_item.description}': {explicit:,.2f}, "
                    f"summed budget: {summed:,.2f}, diff {diff:,.2f} "
                    f"(tolerance {CONTRACT_TOTAL_ABS_TOL})"
                )
        return [CheckResult.from_messages(CHECK_ID, get_severity(CHECK_ID), messages)]

    def applies_to(self, settings: Settings) -> bool:
        return True
