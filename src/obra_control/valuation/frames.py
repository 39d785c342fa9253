"""pandas views of a project's budget."""

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from obra_control.core.enums import ItemType
from obra_control.core.models import Project
from .overlay import effective_value, effective_values_by_revision


def budget_frame(project: Project) -> pd.DataFrame:
    """One row per budget item with base values, per-revision totals and effective values.

    Revisions flagged ``show`` get a ``total_<name>`` column holding the item
    total as of that revision (prefix fold). Non-ITEM rows keep their stored
    total in every column.
    """
    revisions = project.budget.revisions
    shown = [(i, rev) for i, rev in enumerate(revisions) if rev.show]
    records: List[Dict[str, Any]] = []
    for item in project.budget.items:
        record: Dict[str, Any] = {
            "code": item.code,
            "code_norm": item.code_norm,
            "type": item.type.value,
            "level": item.level,
            "description": item.description,
            "unit": item.unit,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total": item.total,
        }
        if item.type == ItemType.ITEM:
            steps = effective_values_by_revision(item, revisions)
            for i, rev in shown:
                record[f"total_{rev.name}"] = steps[i].total
            eff = effective_value(item, revisions)
            record.update(
                effective_quantity=eff.quantity,
                effective_unit_price=eff.unit_price,
                effective_total=eff.total,
            )
        else:
            for _, rev in shown:
                record[f"total_{rev.name}"] = item.total
            record.update(
                effective_quantity=item.quantity,
                effective_unit_price=item.unit_price,
                effective_total=item.total,
            )
        records.append(record)
    return pd.DataFrame.from_records(records)


__all__ = ["budget_frame"]
