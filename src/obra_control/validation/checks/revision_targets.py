"""Revision targets check: changes addressing codes that are not ITEM rows.

Such changes never affect any value; usually the code was mistyped or the
budget was re-imported with different codes.
"""

from __future__ import annotations

from typing import List

from obra_control.core.enums import ItemType
from obra_control.core.models import Project
from obra_control.core.settings import Settings
from ..config import get_severity
from ..models import CheckResult

CHECK_ID = "revision_targets"


class RevisionTargetsCheck:
    def validate(self, project: Project, settings: Settings) -> List[CheckResult]:
        item_codes = {it.code_norm for it in project.budget.items_of_type(ItemType.ITEM)}
        messages = []
        for revision in project.budget.revisions:
            for change in revision.changes:
                if change.code_norm not in item_codes:
                    messages.append(
                        f"Revision '{revision.name}' changes unknown item code '{change.code_norm}'"
                    )
        return [CheckResult.from_messages(CHECK_ID, get_severity(CHECK_ID), messages)]

    def applies_to(self, settings: Settings) -> bool:
        return True
