"""Quantity precision check: ITEM quantities with more decimals than configured."""

from __future__ import annotations

from typing import List

from obra_control.core.enums import ItemType
from obra_control.core.models import Project
from obra_control.core.numbers import decimals_count
from obra_control.core.settings import Settings
from ..config import get_severity
from ..models import CheckResult

CHECK_ID = "quantity_precision"


class QuantityPrecisionCheck:
    def validate(self, project: Project, settings: Settings) -> List[CheckResult]:
        messages = [
            f"Item {it.code_norm} quantity {it.quantity!r} has {decimals_count(it.quantity)} "
            f"decimals (expected at most {settings.qty_decimals})"
            for it in project.budget.items_of_type(ItemType.ITEM)
            if decimals_count(it.quantity) > settings.qty_decimals
        ]
        return [CheckResult.from_messages(CHECK_ID, get_severity(CHECK_ID), messages)]

    def applies_to(self, settings: Settings) -> bool:
        """Only runs when over-precision highlighting is enabled."""
        return settings.highlight_extra_qty
