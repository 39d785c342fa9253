"""Duplicate item codes check.

Revisions and report quantities address items by normalized code, so two
ITEM rows sharing a code cannot be told apart.
"""

from __future__ import annotations

from collections import Counter
from typing import List

from obra_control.core.enums import ItemType
from obra_control.core.models import Project
from obra_control.core.settings import Settings
from ..config import get_severity
from ..models import CheckResult

CHECK_ID = "duplicate_item_codes"


class DuplicateItemCodesCheck:
    def validate(self, project: Project, settings: Settings) -> List[CheckResult]:
        counts = Counter(it.code_norm for it in project.budget.items_of_type(ItemType.ITEM))
        messages = [
            f"Code '{code}' appears on {n} ITEM rows"
            for code, n in sorted(counts.items())
            if n > 1
        ]
        return [CheckResult.from_messages(CHECK_ID, get_severity(CHECK_ID), messages)]

    def applies_to(self, settings: Settings) -> bool:
        return True
