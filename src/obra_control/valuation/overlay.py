"""Revision overlay.

The effective value of an item is a left fold over the revision list: start
from the base quantity and unit price, then let each revision that has a
change for the item override the fields it sets. Evaluating "as of revision N"
is the same fold over ``revisions[:N]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from itertools import accumulate
from typing import List, Optional, Sequence

from obra_control.core.models import BudgetItem, Revision


@dataclass(frozen=True)
class EffectiveValue:
    quantity: float
    unit_price: float
    total: float

    @classmethod
    def of(cls, quantity: float, unit_price: float) -> "EffectiveValue":
        return cls(quantity=quantity, unit_price=unit_price, total=quantity * unit_price)


def base_value(item: BudgetItem) -> EffectiveValue:
    return EffectiveValue.of(item.quantity, item.unit_price)


def apply_revision(value: EffectiveValue, revision: Revision, code_norm: str) -> EffectiveValue:
    """Apply one revision's change for `code_norm` (no-op without a change)."""
    change = revision.change_for(code_norm)
    if change is None:
        return value
    quantity = change.quantity if change.quantity is not None else value.quantity
    unit_price = change.unit_price if change.unit_price is not None else value.unit_price
    return EffectiveValue.of(quantity, unit_price)


def effective_value(
    item: BudgetItem, revisions: Sequence[Revision], upto: Optional[int] = None
) -> EffectiveValue:
    """Effective quantity, unit price and total of an item.

    Args:
        item: Budget item.
        revisions: Revisions in stored (creation) order.
        upto: Only apply the first `upto` revisions.
    """
    applied = revisions if upto is None else revisions[:upto]
    return reduce(
        lambda acc, rev: apply_revision(acc, rev, item.code_norm),
        applied,
        base_value(item),
    )


def effective_values_by_revision(
    item: BudgetItem, revisions: Sequence[Revision]
) -> List[EffectiveValue]:
    """Running effective value after each revision (one entry per revision)."""
    steps = accumulate(
        revisions,
        lambda acc, rev: apply_revision(acc, rev, item.code_norm),
        initial=base_value(item),
    )
    return list(steps)[1:]


__all__ = [
    "EffectiveValue",
    "base_value",
    "apply_revision",
    "effective_value",
    "effective_values_by_revision",
]
